"""
SQL Server-specific strategy implementation.

SQL Server 2012+ pages with `OFFSET n ROWS FETCH NEXT m ROWS ONLY`, which
is only legal after an ORDER BY. pyodbc uses `?` markers.
"""
import logging

import sqlalchemy as sa

from sqldao.strategy.base import PagingStrategy, register_strategy

logger = logging.getLogger(__name__)

DEFAULT_ODBC_DRIVER = 'ODBC Driver 18 for SQL Server'


@register_strategy('mssql')
class SQLServerStrategy(PagingStrategy):
    """SQL Server-specific operations"""

    paramstyle = 'qmark'

    @property
    def dialect_name(self) -> str:
        return 'mssql'

    def apply_paging(self, sql, params, criteria):
        """Append OFFSET/FETCH binding the row start, then the page size.
        """
        if criteria.is_null_paging:
            return sql
        start = self.bind(params, 'P_ROW_START', criteria.mssql_offset)
        total = self.bind(params, 'P_ROW_TOTAL', criteria.size)
        return f'{sql} OFFSET {start} ROWS FETCH NEXT {total} ROWS ONLY'

    def build_connection_url(self, options):
        query = {'driver': options.driver or DEFAULT_ODBC_DRIVER}
        if options.timeout:
            query['timeout'] = str(options.timeout)
        if options.appname:
            query['app'] = options.appname
        return sa.URL.create(
            drivername='mssql+pyodbc',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port or None,
            database=options.database,
            query=query
        )

    @classmethod
    def get_required_options(cls):
        return ['hostname', 'username', 'password', 'database']
