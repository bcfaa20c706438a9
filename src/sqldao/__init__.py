"""
Data access layer with dialect-aware paging for PostgreSQL, SQLite, MySQL,
SQL Server and Oracle.

Statements are written with `?` or `:NAME` placeholders and bound through
an `IndexParameter` or a `NameParameter`. A DAO subclass runs them, maps
rows onto record classes and pages results with `Criteria`.
"""
__version__ = '0.1.0'

from sqldao.connection import create_engine, dispose_all_engines
from sqldao.convert import TemporalConverter, ValueConverter
from sqldao.criteria import Criteria
from sqldao.dao import SqlDao, StrategyDao
from sqldao.exceptions import ConfigurationError, DatabaseError
from sqldao.exceptions import DbConnectionError, IntegrityError, MappingError
from sqldao.exceptions import ParameterVariantError, ProgrammingError
from sqldao.exceptions import QueryError, TypeConversionError
from sqldao.mapper import BeanMapper, PropertySetter
from sqldao.options import DaoOptions
from sqldao.paging import Paging
from sqldao.params import IndexParameter, NameParameter, Parameter
from sqldao.params import ParameterValue, ParamTypes
from sqldao.strategy import get_strategy
from sqldao.template import SqlTemplate
from sqldao.types import Column
