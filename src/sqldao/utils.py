"""Low-level connection utilities with no internal dependencies.

These utilities work with SQLAlchemy engines and connections as well as
raw DBAPI connections, and import nothing from other sqldao modules.
"""
import logging
from typing import Any

logger = logging.getLogger(__name__)


def get_dialect_name(obj: Any) -> str:
    """Get dialect name for a database engine or connection.
    """
    if hasattr(obj, 'dialect'):
        dialect = obj.dialect
        if isinstance(dialect, str):
            return dialect.lower()
        return str(dialect.name).lower()

    if hasattr(obj, 'engine') and hasattr(obj.engine, 'dialect'):
        return str(obj.engine.dialect.name).lower()

    type_name = f'{type(obj).__module__}.{type(obj).__name__}'
    if 'psycopg' in type_name:
        return 'postgresql'
    if 'sqlite3' in type_name:
        return 'sqlite'
    if 'pyodbc' in type_name:
        return 'mssql'
    if 'oracledb' in type_name:
        return 'oracle'

    raise AttributeError(f'Cannot determine dialect for {type(obj)}')


def close_quietly(resource: Any) -> None:
    """Close a resource, logging instead of raising on failure.
    """
    if resource is None:
        return
    try:
        resource.close()
    except Exception as e:
        logger.error(f'Error closing {type(resource).__name__}: {e}')
