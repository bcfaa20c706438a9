"""
SQLite-specific strategy implementation.
"""
import decimal
import sqlite3

import sqlalchemy as sa

from sqldao.strategy.base import register_strategy
from sqldao.strategy.limit import LimitOffsetStrategy


@register_strategy('sqlite')
class SQLiteStrategy(LimitOffsetStrategy):
    """SQLite-specific operations"""

    paramstyle = 'qmark'

    @property
    def dialect_name(self) -> str:
        return 'sqlite'

    def build_connection_url(self, options):
        return sa.URL.create(drivername='sqlite', database=options.database)

    def get_engine_kwargs(self, options):
        connect_args = {
            'detect_types': sqlite3.PARSE_DECLTYPES | sqlite3.PARSE_COLNAMES
        }
        if options.timeout:
            connect_args['timeout'] = options.timeout
        return {'connect_args': connect_args}

    def register_type_adapters(self):
        """Bind Decimal values as their exact text form.

        Column affinity stores numeric text in NUMERIC and REAL columns as a
        number.
        """
        sqlite3.register_adapter(decimal.Decimal, str)

    @classmethod
    def get_required_options(cls):
        return ['database']
