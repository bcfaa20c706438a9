from dataclasses import dataclass

from libb import ConfigOptions, scriptname

from sqldao.exceptions import ConfigurationError
from sqldao.strategy import get_available_dialects, get_strategy_class
from sqldao.strategy import is_supported_dialect

__all__ = [
    'DaoOptions',
]


@dataclass
class DaoOptions(ConfigOptions):
    """Options

    supported driver names: `postgresql`, `sqlite`, `mssql`, `oracle`, `mysql`

    Connection pooling options:
    - use_pool: Whether to use connection pooling (default: False)
    - pool_max_connections: Maximum connections in pool (default: 5)
    - pool_max_idle_time: Maximum seconds a connection can be idle (default: 300)
    - pool_wait_timeout: Maximum seconds to wait for a connection (default: 30)

    Row mapping options:
    - date_format, datetime_format, time_format: strptime formats used when
      a text column is mapped onto a date, datetime or time property. When
      unset, text is parsed as ISO 8601.
    """
    drivername: str = 'postgresql'
    hostname: str = None
    username: str = None
    password: str = None
    database: str = None
    port: int = 0
    timeout: int = 0
    appname: str = None
    driver: str = None
    # Connection pooling parameters
    use_pool: bool = False
    pool_max_connections: int = 5
    pool_max_idle_time: int = 300
    pool_wait_timeout: int = 30
    # Row mapping parameters
    date_format: str = None
    datetime_format: str = None
    time_format: str = None

    def __post_init__(self):
        if not is_supported_dialect(self.drivername):
            available = get_available_dialects()
            raise ConfigurationError(f'drivername must be one of: {available}')
        self.appname = self.appname or scriptname() or 'python_console'
        strategy_cls = get_strategy_class(self.drivername)
        strategy_cls.validate_options(self)
