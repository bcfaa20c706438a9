"""
PostgreSQL-specific strategy implementation.

psycopg uses the `format` paramstyle, so `?` markers become `%s` and
literal percent signs are doubled before execution.
"""
import sqlalchemy as sa

from sqldao.strategy.base import register_strategy
from sqldao.strategy.limit import LimitOffsetStrategy


@register_strategy('postgresql')
class PostgresStrategy(LimitOffsetStrategy):
    """PostgreSQL-specific operations"""

    paramstyle = 'format'

    @property
    def dialect_name(self) -> str:
        return 'postgresql'

    def build_connection_url(self, options):
        query = {}
        if options.timeout:
            query['connect_timeout'] = str(options.timeout)
        if options.appname:
            query['application_name'] = options.appname

        return sa.URL.create(
            drivername='postgresql+psycopg',
            username=options.username,
            password=options.password,
            host=options.hostname,
            port=options.port or None,
            database=options.database,
            query=query
        )

    @classmethod
    def get_required_options(cls):
        return ['hostname', 'username', 'password', 'database', 'port']
