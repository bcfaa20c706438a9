"""
DAO-specific exception classes.

Errors raised by the driver (syntax, constraint, connectivity) are never
wrapped; they reach the caller as the SQLAlchemy exception the execution
raised. The tuples at the bottom group those classes for `except` clauses.
"""
import sqlalchemy.exc as sa_exc


class DatabaseError(Exception):
    """Base class for all sqldao errors.
    """


class ConfigurationError(DatabaseError, ValueError):
    """Missing or invalid setup, detected before any query runs.
    """


class ParameterVariantError(DatabaseError, TypeError):
    """An export was requested from the wrong parameter variant.

    Raised when a positional-only export is called on a named parameter
    or the other way around. This is a programming error.
    """


class QueryError(DatabaseError):
    """Error in building a query.
    """


class TypeConversionError(DatabaseError):
    """A column value could not be converted to the declared property type.
    """


class MappingError(DatabaseError):
    """A result row could not be mapped onto the target record type.
    """


DbConnectionError = (
    sa_exc.OperationalError,
    sa_exc.InterfaceError,
    sa_exc.DisconnectionError,
    )

IntegrityError = (
    sa_exc.IntegrityError,
    )

ProgrammingError = (
    sa_exc.ProgrammingError,
    sa_exc.DatabaseError,
    QueryError,
    )
