"""
Row to record mapping.

`BeanMapper` turns result rows into instances of a record class. Columns
are matched to the class's writable properties by name, ignoring case:

- dataclass fields and annotated class attributes
- properties that define a setter

The column-to-property match is made once, on the first row, and reused
for every following row of the same result. Discovering the writable
properties of a class is cached process-wide.

Usage:
    @dataclass
    class Employee:
        emp_no: int
        name: str
        salary: Decimal | None = None

    mapper = BeanMapper(Employee, ValueConverter())
    employees = mapper.map_result(result)
"""
import dataclasses
import inspect
import logging
import types
from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar, Union, get_args
from typing import get_origin, get_type_hints

from libb import attrdict

from sqldao.cache import cacheable_type
from sqldao.convert import ValueConverter
from sqldao.exceptions import MappingError
from sqldao.types import Column, columns_from_result

__all__ = [
    'PropertySetter',
    'writable_properties',
    'nullable_required_fields',
    'BeanMapper',
]

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclasses.dataclass(frozen=True, slots=True)
class PropertySetter:
    """A writable property: its name and declared concrete type.
    """
    name: str
    type: type | None

    def set(self, obj: Any, value: Any) -> None:
        setattr(obj, self.name, value)


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin not in {Union, types.UnionType}:
        return annotation

    all_args = get_args(annotation)
    args = [arg for arg in all_args if arg is not type(None)]
    if len(args) == 1 and len(all_args) == 2:
        return args[0]
    return annotation


def _allows_none(annotation: Any) -> bool:
    if annotation is None or annotation is type(None) or annotation is Any:
        return True
    if get_origin(annotation) in {Union, types.UnionType}:
        return type(None) in get_args(annotation)
    return False


@cacheable_type('nullable_required_fields')
def nullable_required_fields(cls: type) -> frozenset[str]:
    """Init fields of a dataclass with no default whose annotation admits None.

    A row that leaves such a field unset still builds the record, with the
    field set to None.
    """
    if not dataclasses.is_dataclass(cls):
        return frozenset()
    hints = _type_hints(cls)
    return frozenset(
        f.name for f in dataclasses.fields(cls)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
        and _allows_none(hints.get(f.name, f.type)))


def resolve_property_type(annotation: Any) -> type | None:
    """Concrete class behind an annotation, or None.

    `X | None` resolves to X and `list[int]` to list. Unions of several
    types, `Any` and type variables do not resolve.
    """
    annotation = _unwrap_optional(annotation)
    if annotation is Any:
        return None
    if isinstance(annotation, type):
        return annotation
    origin = get_origin(annotation)
    if isinstance(origin, type) and origin is not types.UnionType:
        return origin
    return None


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return get_type_hints(obj)
    except (NameError, TypeError) as e:
        logger.warning(f'Cannot resolve annotations of {obj!r}, unresolved properties will not be mapped: {e}')
        return dict(getattr(obj, '__annotations__', {}))


def _property_type(prop: property) -> Any:
    if prop.fget is not None:
        hint = _type_hints(prop.fget).get('return')
        if hint is not None:
            return hint
    value_hints = [hint for name, hint in _type_hints(prop.fset).items() if name != 'return']
    return value_hints[0] if value_hints else None


@cacheable_type('writable_properties')
def writable_properties(cls: type) -> dict[str, PropertySetter]:
    """Writable properties of a class keyed by uppercased name.
    """
    setters: dict[str, PropertySetter] = {}

    hints = _type_hints(cls)
    if dataclasses.is_dataclass(cls):
        for field in dataclasses.fields(cls):
            hint = hints.get(field.name, field.type)
            setters[field.name.upper()] = PropertySetter(field.name, resolve_property_type(hint))

    for name, hint in hints.items():
        if name.startswith('_') or name.upper() in setters:
            continue
        if get_origin(hint) is ClassVar or hint is ClassVar:
            continue
        setters[name.upper()] = PropertySetter(name, resolve_property_type(hint))

    for name, member in inspect.getmembers(cls, lambda m: isinstance(m, property)):
        if member.fset is None or name.startswith('_'):
            continue
        setters[name.upper()] = PropertySetter(name, resolve_property_type(_property_type(member)))

    return setters


class BeanMapper(Generic[T]):
    """Maps rows onto instances of `clazz`.

    With `clazz=None` each row becomes an attrdict keyed by column name.
    A mapper belongs to a single result: its column list and setter cache
    are fixed by the first row it sees.
    """

    def __init__(self, clazz: type[T] | None, converter: ValueConverter | None = None) -> None:
        self.clazz = clazz
        self.converter = converter or ValueConverter()
        self._columns: list[Column] | None = None
        self._setters: dict[str, PropertySetter] | None = None
        self._nullable: frozenset[str] = frozenset()

    def _prepare(self, columns: Sequence[Column]) -> None:
        if self._columns is not None:
            return
        self._columns = list(columns)
        self._setters = {}
        if self.clazz is None:
            return

        self._nullable = nullable_required_fields(self.clazz)
        properties = writable_properties(self.clazz)
        for column in self._columns:
            setter = properties.get(column.key)
            if setter is None or setter.type is None:
                logger.debug(f'No writable property for column {column.name} on {self.clazz.__name__}')
                continue
            self._setters[column.key] = setter
        logger.debug(f'Mapped columns {list(self._setters)} onto {self.clazz.__name__}')

    def _instantiate(self, values: dict[PropertySetter, Any]) -> T:
        try:
            if dataclasses.is_dataclass(self.clazz):
                init_names = {f.name for f in dataclasses.fields(self.clazz) if f.init}
                kwargs = dict.fromkeys(self._nullable)
                kwargs.update({s.name: v for s, v in values.items() if s.name in init_names})
                obj = self.clazz(**kwargs)
                rest = {s: v for s, v in values.items() if s.name not in init_names}
            else:
                obj = self.clazz()
                rest = values
            for setter, value in rest.items():
                setter.set(obj, value)
        except Exception as e:
            raise MappingError(f'Cannot build {self.clazz.__name__} from row: {e}') from e
        return obj

    def map_row(self, row: Sequence[Any], columns: Sequence[Column]) -> T:
        """Map one row whose values are ordered like `columns`.
        """
        self._prepare(columns)

        if self.clazz is None:
            return attrdict(zip(Column.get_names(self._columns), row))

        values: dict[PropertySetter, Any] = {}
        for column, value in zip(self._columns, row):
            setter = self._setters.get(column.key)
            if setter is None or value is None:
                continue
            values[setter] = self.converter.convert(value, setter.type)
        return self._instantiate(values)

    def map_result(self, result: Any) -> list[T]:
        """Map every remaining row of a SQLAlchemy result.
        """
        columns = columns_from_result(result)
        return [self.map_row(row, columns) for row in result]
