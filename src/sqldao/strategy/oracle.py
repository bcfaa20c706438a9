"""
Oracle-specific strategy implementation.

Oracle pages by numbering rows with ROWNUM over an already ordered
subquery and filtering on that number. ROWNUM is assigned as rows are
produced, so the number is exposed as the `RN` column of an inner query
and both page edges are applied outside it.

python-oracledb binds positional values to numbered markers (`:1`, `:2`).
"""
import logging

import sqlalchemy as sa

from sqldao.strategy.base import PagingStrategy, register_strategy

logger = logging.getLogger(__name__)


@register_strategy('oracle')
class OracleStrategy(PagingStrategy):
    """Oracle-specific operations"""

    paramstyle = 'numeric'

    @property
    def dialect_name(self) -> str:
        return 'oracle'

    def apply_paging(self, sql, params, criteria):
        """Number the ordered rows and keep those inside the page.

        Binds the exclusive lower edge (rows already shown), then the
        inclusive upper edge.
        """
        if criteria.is_null_paging:
            return sql
        start = self.bind(params, 'P_ROW_START', criteria.row_start)
        end = self.bind(params, 'P_ROW_END', criteria.oracle_row_end)
        return (f'SELECT T.* FROM (SELECT ROWNUM AS RN, T.* FROM ({sql}) T) T'
                f' WHERE T.RN > {start} AND T.RN <= {end}')

    def build_connection_url(self, options):
        return sa.URL.create(
            drivername='oracle+oracledb',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port or 1521,
            query={'service_name': options.database}
        )

    @classmethod
    def get_required_options(cls):
        return ['hostname', 'username', 'password', 'database']
