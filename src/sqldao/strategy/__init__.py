"""
Strategy factory for dialect-specific paging.
"""
from functools import lru_cache

from sqldao.exceptions import ConfigurationError
from sqldao.strategy.base import _STRATEGY_REGISTRY
from sqldao.strategy.base import PagingStrategy as PagingStrategy
from sqldao.strategy.base import register_strategy as register_strategy
from sqldao.strategy.mysql import MySQLStrategy as MySQLStrategy
from sqldao.strategy.oracle import OracleStrategy as OracleStrategy
from sqldao.strategy.postgres import PostgresStrategy as PostgresStrategy
from sqldao.strategy.sqlite import SQLiteStrategy as SQLiteStrategy
from sqldao.strategy.sqlserver import SQLServerStrategy as SQLServerStrategy
from sqldao.utils import get_dialect_name


def _validate_dialect(dialect: str) -> None:
    """Raise ConfigurationError if dialect is not registered."""
    if dialect not in _STRATEGY_REGISTRY:
        available = list(_STRATEGY_REGISTRY.keys())
        raise ConfigurationError(f'Unsupported dialect: {dialect}. Available: {available}')


@lru_cache(maxsize=8)
def _get_strategy(dialect: str) -> PagingStrategy:
    """Get cached strategy instance for a dialect."""
    _validate_dialect(dialect)
    return _STRATEGY_REGISTRY[dialect]()


def get_strategy(dialect: str) -> PagingStrategy:
    """Get strategy instance for a dialect name.
    """
    return _get_strategy(dialect)


def get_db_strategy(obj) -> PagingStrategy:
    """Get strategy for an engine or connection."""
    return _get_strategy(get_dialect_name(obj))


def get_available_dialects() -> list[str]:
    """Return list of registered dialect names."""
    return list(_STRATEGY_REGISTRY.keys())


def is_supported_dialect(dialect: str) -> bool:
    """Check if a dialect is supported."""
    return dialect in _STRATEGY_REGISTRY


def get_strategy_class(dialect: str) -> type[PagingStrategy]:
    """Get the strategy class for a dialect without instantiating."""
    _validate_dialect(dialect)
    return _STRATEGY_REGISTRY[dialect]
