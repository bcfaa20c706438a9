"""
Data access object base classes.

`SqlDao` composes parameters, paging rewrites, statement execution and
row mapping into query operations. Subclasses choose how a page window is
written by implementing `set_paging_option`, usually by delegating to one
of the ready-made `set_mssql_paging`, `set_oracle_paging` or
`set_limit_paging`. `StrategyDao` picks the window style from the engine's
dialect.

Usage:
    class EmployeeDao(StrategyDao):
        def find_by_dept(self, dept, criteria):
            params = NameParameter({'P_DEPT': dept})
            sql = 'SELECT * FROM EMPLOYEE WHERE DEPT = :P_DEPT'
            return self.query_with_paging(sql, params, criteria, Employee)
"""
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from numbers import Number
from typing import Any, TypeVar

import sqlalchemy.exc as sa_exc
from sqlalchemy.engine import Connection, CursorResult, Engine

from sqldao import sql as sqlutil
from sqldao.convert import ValueConverter, to_decimal
from sqldao.criteria import Criteria
from sqldao.exceptions import ConfigurationError, QueryError
from sqldao.mapper import BeanMapper
from sqldao.options import DaoOptions
from sqldao.paging import Paging
from sqldao.params import IndexParameter, Parameter
from sqldao.strategy import get_strategy
from sqldao.template import SqlTemplate
from sqldao.types import columns_from_result
from sqldao.utils import close_quietly, get_dialect_name

__all__ = [
    'SqlDao',
    'StrategyDao',
]

logger = logging.getLogger(__name__)

T = TypeVar('T')


def _single_row(result: CursorResult) -> Any:
    rows = result.fetchmany(2)
    if not rows:
        return None
    if len(rows) > 1:
        raise QueryError('Expected at most one row, got more')
    return rows[0]


class SqlDao(ABC):
    """Query operations over one engine.

    Parameters may be None for statements without placeholders. Single-row queries
    return None when nothing matches.
    """

    def __init__(self, engine: Engine, options: DaoOptions | None = None) -> None:
        if engine is None:
            raise ConfigurationError(f'{type(self).__name__} requires an engine')
        self.engine = engine
        self.options = options
        self.template = SqlTemplate(engine)
        self.converter = ValueConverter.from_options(options)

    @abstractmethod
    def set_paging_option(self, sql: str, params: Parameter, criteria: Criteria) -> str:
        """Append the row window for the criteria's page to an ordered query.

        Extra window values are bound into `params`.
        """

    def set_mssql_paging(self, sql: str, params: Parameter, criteria: Criteria) -> str:
        return get_strategy('mssql').apply_paging(sql, params, criteria)

    def set_oracle_paging(self, sql: str, params: Parameter, criteria: Criteria) -> str:
        return get_strategy('oracle').apply_paging(sql, params, criteria)

    def set_limit_paging(self, sql: str, params: Parameter, criteria: Criteria) -> str:
        return get_strategy('mysql').apply_paging(sql, params, criteria)

    def _log_target(self, clazz: type | None) -> None:
        logger.debug(f'Result type: {clazz.__name__ if clazz else "attrdict"}')

    # SQL -> records

    def query_to_list(self, sql: str, params: Parameter | None = None,
                      clazz: type[T] | None = None) -> list[T]:
        """Map every row onto `clazz` (attrdict rows when None).
        """
        self._log_target(clazz)
        mapper = BeanMapper(clazz, self.converter)
        return self.template.query(sql, params, mapper.map_result)

    def query_to_bean(self, sql: str, params: Parameter | None = None,
                      clazz: type[T] | None = None) -> T | None:
        """Map the single row onto `clazz`.

        Returns None for no rows and raises QueryError for more than one.
        """
        self._log_target(clazz)
        mapper = BeanMapper(clazz, self.converter)

        def extract(result):
            columns = columns_from_result(result)
            row = _single_row(result)
            return mapper.map_row(row, columns) if row is not None else None

        return self.template.query(sql, params, extract)

    def query_to_object(self, sql: str, params: Parameter | None = None,
                        type_: type[T] | None = None) -> T | None:
        """First column of the single row, converted to `type_` when given.
        """
        self._log_target(type_)

        def extract(result):
            row = _single_row(result)
            if row is None:
                return None
            if type_ is None:
                return row[0]
            return self.converter.convert(row[0], type_)

        return self.template.query(sql, params, extract)

    def query_to_number(self, sql: str, params: Parameter | None = None) -> Number | None:
        """Numeric scalar; text and other values come back as Decimal.
        """
        value = self.query_to_object(sql, params)
        if value is None or isinstance(value, Number):
            return value
        return to_decimal(value)

    def query(self, sql: str, params: Parameter | None,
              extractor: Callable[[CursorResult], T]) -> T:
        """Hand the open result to a caller-supplied extractor.
        """
        return self.template.query(sql, params, extractor)

    # Paging

    def query_with_paging(self, sql: str, params: Parameter | None,
                          criteria: Criteria | None, clazz: type[T] | None = None) -> Paging[T]:
        """Count the rows of `sql`, then fetch the page `criteria` asks for.

        The count runs before any window value is bound into `params`.
        """
        params = params if params is not None else IndexParameter()
        paging = Paging(criteria=criteria)
        paging.total_elements = self.count_for_paging(sql, params)

        if criteria is None:
            paging.items = self.query_to_list(sql, params, clazz)
        elif paging.total_elements:
            paging.items = self.query_to_paging(sql, params, criteria, clazz)

        paging.calculate_total_page()
        logger.debug(f'Page {paging.page_no} of {paging.total_pages}: '
                     f'{paging.item_size} of {paging.total_elements} rows')
        return paging

    def query_to_paging(self, sql: str, params: Parameter | None,
                        criteria: Criteria, clazz: type[T] | None = None) -> list[T]:
        """Rows of one page, ordered as `criteria` asks.
        """
        params = params if params is not None else IndexParameter()
        page_sql = sqlutil.build_paging_sql(sql, criteria)
        page_sql = self.set_paging_option(page_sql, params, criteria)
        return self.query_to_list(page_sql, params, clazz)

    def count_for_paging(self, sql: str, params: Parameter | None = None) -> int:
        value = self.query_to_number(sqlutil.build_count_sql(sql), params)
        if value is None:
            return 0
        return int(value)

    # Updates

    def execute(self, sql: str, params: Parameter | Any = None, *values: Any) -> int:
        """Run an insert, update or delete and return the affected row count.

        `params` is either a Parameter or the first of the positional values.
        """
        if not isinstance(params, Parameter):
            params = IndexParameter(*values) if params is None else IndexParameter(params, *values)
        return self.template.update(sql, params)

    # SQL helpers

    def create_where_in(self, items: Any, params: Parameter, prefix: str | None = 'IN') -> str:
        return sqlutil.create_where_in(items, params, prefix)

    def create_number_where_in(self, *items: Number | None) -> str:
        return sqlutil.create_number_where_in(*items)

    def sql_like_contain(self, value: str | None) -> str | None:
        return sqlutil.sql_like_contain(value)

    def sql_like_start(self, value: str | None) -> str | None:
        return sqlutil.sql_like_start(value)

    def sql_like_end(self, value: str | None) -> str | None:
        return sqlutil.sql_like_end(value)

    # Connection helpers

    @property
    def dialect(self) -> str:
        return get_dialect_name(self.engine)

    def is_oracle(self) -> bool:
        return self.dialect == 'oracle'

    def is_mssql(self) -> bool:
        return self.dialect == 'mssql'

    def is_mysql(self) -> bool:
        return self.dialect == 'mysql'

    def get_connection(self) -> Connection | None:
        """Open a connection the caller must close, or None when that fails.
        """
        try:
            return self.engine.connect()
        except sa_exc.SQLAlchemyError as e:
            logger.error(f'get_connection: {e}')
            return None

    def close_resource(self, *resources: Any) -> None:
        """Close resources in the order given, logging failures.
        """
        for resource in resources:
            close_quietly(resource)


class StrategyDao(SqlDao):
    """DAO whose page window follows the engine's dialect.
    """

    def set_paging_option(self, sql: str, params: Parameter, criteria: Criteria) -> str:
        return self.template.strategy.apply_paging(sql, params, criteria)
