"""
LIMIT/OFFSET paging shared by PostgreSQL, SQLite and MySQL.
"""
from sqldao.strategy.base import PagingStrategy


class LimitOffsetStrategy(PagingStrategy):
    """Pages with `LIMIT m OFFSET n`.
    """

    def apply_paging(self, sql, params, criteria):
        """Append LIMIT/OFFSET binding the page size, then the row start.
        """
        if criteria.is_null_paging:
            return sql
        total = self.bind(params, 'P_ROW_TOTAL', criteria.size)
        start = self.bind(params, 'P_ROW_START', criteria.mysql_offset)
        return f'{sql} LIMIT {total} OFFSET {start}'
