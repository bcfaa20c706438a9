"""
Base strategy interface for dialect-specific behaviour.

Each database product expresses a row window ("skip N, take M") and a
positional parameter marker differently. A strategy encapsulates those
differences together with how an engine URL is built for the dialect, so
the DAO can page any query through one consistent interface.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa

from sqldao.exceptions import ConfigurationError
from sqldao.params import ParameterKind
from sqldao.sql import standardize_placeholders

if TYPE_CHECKING:
    from sqldao.criteria import Criteria
    from sqldao.options import DaoOptions
    from sqldao.params import Parameter

# Registry of dialect name -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict[str, type['PagingStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    The dialect name is SQLAlchemy's (`engine.dialect.name`).

    Usage:
        @register_strategy('mssql')
        class SQLServerStrategy(PagingStrategy):
            ...
    """
    def decorator(cls: type['PagingStrategy']) -> type['PagingStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class PagingStrategy(ABC):
    """Base class for dialect-specific paging and parameter handling.
    """

    #: DB-API paramstyle of the dialect's default driver
    paramstyle: str = 'qmark'

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the dialect identifier (e.g., 'mssql', 'oracle')."""

    @abstractmethod
    def apply_paging(self, sql: str, params: 'Parameter', criteria: 'Criteria') -> str:
        """Append the row window for the criteria's page to an ordered query.

        Args:
            sql: Wrapped and ordered SELECT (see `build_paging_sql`)
            params: Parameter the window values are appended to
            criteria: Page request; must carry both page and size

        Returns
            SQL limited to the requested page
        """

    @abstractmethod
    def build_connection_url(self, options: 'DaoOptions') -> sa.URL:
        """Build the SQLAlchemy URL for this dialect.

        Args:
            options: DaoOptions containing connection parameters
        """

    @classmethod
    @abstractmethod
    def get_required_options(cls) -> list[str]:
        """Return list of required option field names for this dialect.
        """

    @classmethod
    def validate_options(cls, options: 'DaoOptions') -> None:
        """Validate options for this dialect.

        Raises
            ConfigurationError: If any required field is None or 0
        """
        for field in cls.get_required_options():
            if not getattr(options, field):
                raise ConfigurationError(f'field {field} cannot be None or 0')

    def get_engine_kwargs(self, options: 'DaoOptions') -> dict[str, Any]:
        """Return extra create_engine kwargs for this dialect."""
        return {}

    def register_type_adapters(self) -> None:
        """Register dialect-specific DB-API type adapters.
        """

    def standardize_sql(self, sql: str) -> str:
        """Convert `?` markers to this dialect's driver paramstyle."""
        return standardize_placeholders(sql, self.paramstyle)

    @staticmethod
    def bind(params: 'Parameter', name: str, value: int) -> str:
        """Append one window value and return the marker that references it.
        """
        if params.kind is ParameterKind.NAMED:
            params.add(name, value)
            return f':{name}'
        params.add(value)
        return '?'
