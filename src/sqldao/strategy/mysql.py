"""
MySQL-specific strategy implementation.
"""
import sqlalchemy as sa

from sqldao.strategy.base import register_strategy
from sqldao.strategy.limit import LimitOffsetStrategy


@register_strategy('mysql')
class MySQLStrategy(LimitOffsetStrategy):
    """MySQL-specific operations"""

    paramstyle = 'format'

    @property
    def dialect_name(self) -> str:
        return 'mysql'

    def build_connection_url(self, options):
        query = {}
        if options.timeout:
            query['connect_timeout'] = str(options.timeout)

        return sa.URL.create(
            drivername='mysql+pymysql',
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
