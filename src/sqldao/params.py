"""
Statement parameters.

A statement is bound either positionally or by name, never both:

- `IndexParameter` collects values for `?` placeholders, in order.
- `NameParameter` collects values for `:NAME` placeholders.

Both share one set of exports. Each export checks the variant in a single
place and raises `ParameterVariantError` when called on the wrong one, so a
named parameter can never be silently bound as a positional array.

Usage:
    params = NameParameter()
    params.add('P_STATUS', 'A')
    params.add('P_FROM', start, ParamTypes.DATE)
    params.to_map_parameter()   # {'P_STATUS': 'A', 'P_FROM': start}
"""
from collections.abc import Collection
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar

import sqlalchemy as sa
from sqlalchemy.sql.elements import BindParameter
from sqlalchemy.types import NullType, TypeEngine

from sqldao.exceptions import ParameterVariantError
from sqldao.types import TypeConverter

__all__ = [
    'ParamTypes',
    'ParameterValue',
    'ParameterKind',
    'Parameter',
    'IndexParameter',
    'NameParameter',
]


class ParamTypes(Enum):
    """Explicit wire types, valued with their JDBC type codes."""
    VARCHAR = 12
    CHAR = 1
    NUMERIC = 2
    DECIMAL = 3
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    BOOLEAN = 16
    DATE = 91
    TIMESTAMP = 93
    BLOB = 2004
    CLOB = 2005
    NULL = 0
    OTHER = 1111
    REF_CURSOR = 2012
    CURSOR = -10

    @classmethod
    def from_value(cls, value: int) -> 'ParamTypes':
        """Look up a type by code, falling back to OTHER."""
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER

    @property
    def sa_type(self) -> TypeEngine:
        """SQLAlchemy type used when binding a value of this wire type."""
        return _SA_TYPES.get(self, NullType)()


_SA_TYPES: dict[ParamTypes, type[TypeEngine]] = {
    ParamTypes.VARCHAR: sa.String,
    ParamTypes.CHAR: sa.CHAR,
    ParamTypes.NUMERIC: sa.Numeric,
    ParamTypes.DECIMAL: sa.DECIMAL,
    ParamTypes.INTEGER: sa.Integer,
    ParamTypes.BIGINT: sa.BigInteger,
    ParamTypes.FLOAT: sa.Float,
    ParamTypes.BOOLEAN: sa.Boolean,
    ParamTypes.DATE: sa.Date,
    ParamTypes.TIMESTAMP: sa.DateTime,
    ParamTypes.BLOB: sa.LargeBinary,
    ParamTypes.CLOB: sa.Text,
}


@dataclass(frozen=True, slots=True)
class ParameterValue:
    """A bound value with an optional explicit wire type.

    The type is advisory: without it the driver infers the type from the
    value itself.
    """
    value: Any
    type: ParamTypes | None = None

    @property
    def is_null(self) -> bool:
        return self.value is None

    @property
    def is_type_not_null(self) -> bool:
        return self.type is not None

    @property
    def is_collection(self) -> bool:
        return isinstance(self.value, Collection) and not isinstance(self.value, str | bytes)

    @property
    def collection(self) -> list[Any]:
        """The value as a list when it is a collection, else empty."""
        if self.is_collection:
            return list(self.value)
        return []

    def __repr__(self) -> str:
        return f'[value={self.value!r}, type={self.type.name if self.type else None}]'


class ParameterKind(Enum):
    INDEXED = auto()
    NAMED = auto()


class Parameter:
    """Shared contract of the two parameter variants.

    Only `IndexParameter` and `NameParameter` derive from this class.
    """
    kind: ClassVar[ParameterKind]

    def _require(self, kind: ParameterKind, export: str) -> None:
        if self.kind is not kind:
            raise ParameterVariantError(
                f'{export}() is not supported by {type(self).__name__}')

    def clear(self) -> None:
        self._params.clear()

    def __len__(self) -> int:
        return len(self._params)

    def to_array_parameter(self) -> list[Any]:
        """Values in binding order, for `?` placeholders."""
        self._require(ParameterKind.INDEXED, 'to_array_parameter')
        return [TypeConverter.convert_value(p.value) for p in self._params]

    def to_map_parameter(self) -> dict[str, Any]:
        """Name to value mapping, for `:NAME` placeholders."""
        self._require(ParameterKind.NAMED, 'to_map_parameter')
        return {name: TypeConverter.convert_value(p.value)
                for name, p in self._params.items()}

    def to_sql_parameter(self) -> list[BindParameter]:
        """Bind parameters carrying the explicit wire type where one was given."""
        self._require(ParameterKind.NAMED, 'to_sql_parameter')
        binds = []
        for name, p in self._params.items():
            value = TypeConverter.convert_value(p.value)
            if p.is_type_not_null:
                binds.append(sa.bindparam(name, value, type_=p.type.sa_type))
            else:
                binds.append(sa.bindparam(name, value))
        return binds

    def describe(self) -> list[Any] | dict[str, Any]:
        """Loggable view of the bound values."""
        if self.kind is ParameterKind.NAMED:
            return self.to_map_parameter()
        return self.to_array_parameter()


class IndexParameter(Parameter):
    """Positional parameter: values bind to `?` placeholders in order.
    """
    kind = ParameterKind.INDEXED

    def __init__(self, *values: Any) -> None:
        self._params: list[ParameterValue] = []
        for value in values:
            self.add(value)

    def add(self, value: Any, type: ParamTypes | None = None) -> None:
        self._params.append(ParameterValue(value, type))

    @property
    def params(self) -> list[ParameterValue]:
        return self._params

    def __repr__(self) -> str:
        return f'IndexParameter {self._params}'


class NameParameter(Parameter):
    """Named parameter: values bind to `:NAME` placeholders.

    Adding a name twice keeps the last value.
    """
    kind = ParameterKind.NAMED

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self._params: dict[str, ParameterValue] = {}
        for name, value in (values or {}).items():
            self.add(name, value)

    def add(self, name: str, value: Any, type: ParamTypes | None = None) -> None:
        self._params[name] = ParameterValue(value, type)

    @property
    def params(self) -> dict[str, ParameterValue]:
        return self._params

    def __contains__(self, name: str) -> bool:
        return name in self._params

    def __repr__(self) -> str:
        return f'NameParameter {self._params}'
