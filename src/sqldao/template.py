"""
Statement execution over a SQLAlchemy engine.

`SqlTemplate` is the only place SQL reaches the driver. It takes a
statement written with `?` or `:NAME` placeholders plus the matching
`Parameter` and submits it in the form that variant needs:

- positional values go through `Connection.exec_driver_sql` after `?` is
  converted to the driver's paramstyle
- named values go through `Connection.execute(text(...))` as typed bind
  parameters

Reads use `engine.connect()`, writes `engine.begin()`; the connection is
released on every exit path.
"""
import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

import sqlalchemy as sa
from sqlalchemy.engine import Connection, CursorResult, Engine

from sqldao.params import Parameter, ParameterKind
from sqldao.sql import escape_colons_in_literals, named_placeholders
from sqldao.strategy import PagingStrategy, get_db_strategy

__all__ = [
    'SqlTemplate',
    'dumpsql',
]

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _describe(params: Parameter | None) -> Any:
    return params.describe() if params is not None else None


def dumpsql(func):
    """Decorator for logging SQL statements, their parameters and timing."""
    @wraps(func)
    def wrapper(self, sql: str, params: Parameter | None, *args: Any, **kwargs: Any):
        start = time.time()
        logger.debug(f'SQL:\n{sql}\nparams: {_describe(params)}')
        try:
            return func(self, sql, params, *args, **kwargs)
        except Exception:
            logger.error(f'Error with query:\nSQL:\n{sql}\nparams: {_describe(params)}')
            raise
        finally:
            elapsed = time.time() - start
            logger.debug(f'Query time: {elapsed:.4f}s')
    return wrapper


class SqlTemplate:
    """Runs statements and hands each result to a caller-supplied extractor.
    """

    def __init__(self, engine: Engine, strategy: PagingStrategy | None = None) -> None:
        self.engine = engine
        self.strategy = strategy or get_db_strategy(engine)
        self.strategy.register_type_adapters()

    def _execute(self, conn: Connection, sql: str, params: Parameter | None) -> CursorResult:
        if params is not None and params.kind is ParameterKind.NAMED:
            names = set(named_placeholders(sql))
            binds = [bp for bp in params.to_sql_parameter() if bp.key in names]
            unused = [bp.key for bp in params.to_sql_parameter() if bp.key not in names]
            if unused:
                logger.debug(f'Parameters not referenced by statement: {unused}')
            return conn.execute(sa.text(escape_colons_in_literals(sql)).bindparams(*binds))

        if params is None or not len(params):
            return conn.exec_driver_sql(sql)

        values = tuple(params.to_array_parameter())
        return conn.exec_driver_sql(self.strategy.standardize_sql(sql), values)

    @dumpsql
    def query(self, sql: str, params: Parameter | None,
              extractor: Callable[[CursorResult], T]) -> T:
        """Run a read statement and return what the extractor builds from it.
        """
        with self.engine.connect() as conn:
            result = self._execute(conn, sql, params)
            try:
                return extractor(result)
            finally:
                result.close()

    @dumpsql
    def update(self, sql: str, params: Parameter | None) -> int:
        """Run a write statement in its own transaction.

        Returns
            Affected row count as reported by the driver
        """
        with self.engine.begin() as conn:
            result = self._execute(conn, sql, params)
            logger.debug(f'Affected rows: {result.rowcount}')
            return result.rowcount
