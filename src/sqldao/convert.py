"""
Column value conversion (Database -> Python direction).

When a column value does not already have the type a record property
declares, `ValueConverter.convert` coerces it with a fixed table:

- textual targets take the value's string form (large objects are read first)
- int, float and Decimal targets go through the numeric converters
- date, datetime and time targets go through `TemporalConverter`
- bytes targets read large objects and buffers into a byte string

A large object mapped onto any other target is read into bytes or str.
Every other value passes through unchanged. Failures raise
`TypeConversionError`.
"""
import datetime
import decimal
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import dateutil.parser

from sqldao.exceptions import TypeConversionError

if TYPE_CHECKING:
    from sqldao.options import DaoOptions

logger = logging.getLogger(__name__)

_CONVERSION_ERRORS = (ValueError, TypeError, ArithmeticError, decimal.InvalidOperation)

_isoparser = dateutil.parser.isoparser()


def _fail(value: Any, target: type, err: Exception) -> TypeConversionError:
    return TypeConversionError(
        f'Cannot convert {type(value).__name__} {value!r} to {target.__name__}: {err}')


# Large objects

def is_lob(value: Any) -> bool:
    """Driver large-object handles expose a blocking `read()`."""
    return callable(getattr(value, 'read', None))


def read_lob(value: Any) -> bytes | str:
    """Read a large object or buffer completely.

    BLOBs read as bytes, CLOBs as str.
    """
    if is_lob(value):
        return value.read()
    if isinstance(value, memoryview | bytearray):
        return bytes(value)
    return value


def to_bytes(value: Any) -> bytes:
    data = read_lob(value)
    if isinstance(data, str):
        return data.encode('utf-8')
    if isinstance(data, bytes):
        return data
    raise _fail(value, bytes, TypeError('not a binary value'))


def to_string(value: Any) -> str:
    data = read_lob(value)
    if isinstance(data, bytes):
        try:
            return data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise _fail(value, str, e) from e
    return str(data)


# Numbers

def to_decimal(value: Any) -> decimal.Decimal:
    """Exact decimal of the value's string form.

    A float converts through `str`, so 12.3 becomes Decimal('12.3'), not
    the binary expansion.
    """
    try:
        if isinstance(value, decimal.Decimal):
            return value
        if isinstance(value, bool):
            return decimal.Decimal(int(value))
        if isinstance(value, str):
            return decimal.Decimal(value.strip())
        return decimal.Decimal(str(value))
    except _CONVERSION_ERRORS as e:
        raise _fail(value, decimal.Decimal, e) from e


def to_int(value: Any) -> int:
    """Integer value, truncating any fraction."""
    try:
        if isinstance(value, str):
            return int(decimal.Decimal(value.strip()))
        return int(value)
    except _CONVERSION_ERRORS as e:
        raise _fail(value, int, e) from e


def to_float(value: Any) -> float:
    try:
        if isinstance(value, str):
            return float(value.strip())
        return float(value)
    except _CONVERSION_ERRORS as e:
        raise _fail(value, float, e) from e


# Dates and times

class TemporalConverter:
    """Date, datetime and time conversion with configurable text formats.

    Formats are strptime patterns. A format left as None parses text as
    ISO 8601.
    """

    def __init__(self, date_format: str | None = None,
                 datetime_format: str | None = None,
                 time_format: str | None = None) -> None:
        self.date_format = date_format
        self.datetime_format = datetime_format
        self.time_format = time_format

    def _parse(self, text: str, fmt: str | None) -> datetime.datetime:
        text = text.strip()
        if fmt:
            return datetime.datetime.strptime(text, fmt)
        return _isoparser.isoparse(text)

    def to_date(self, value: Any) -> datetime.date:
        try:
            if isinstance(value, datetime.datetime):
                return value.date()
            if isinstance(value, datetime.date):
                return value
            if isinstance(value, str):
                return self._parse(value, self.date_format).date()
        except _CONVERSION_ERRORS as e:
            raise _fail(value, datetime.date, e) from e
        raise _fail(value, datetime.date, TypeError('unsupported source type'))

    def to_datetime(self, value: Any) -> datetime.datetime:
        try:
            if isinstance(value, datetime.datetime):
                return value
            if isinstance(value, datetime.date):
                return datetime.datetime.combine(value, datetime.time.min)
            if isinstance(value, str):
                return self._parse(value, self.datetime_format)
        except _CONVERSION_ERRORS as e:
            raise _fail(value, datetime.datetime, e) from e
        raise _fail(value, datetime.datetime, TypeError('unsupported source type'))

    def to_time(self, value: Any) -> datetime.time:
        try:
            if isinstance(value, datetime.datetime):
                return value.time()
            if isinstance(value, datetime.time):
                return value
            if isinstance(value, datetime.timedelta):
                # MySQL TIME columns arrive as a duration since midnight
                return (datetime.datetime.min + value).time()
            if isinstance(value, str):
                if self.time_format:
                    return datetime.datetime.strptime(value.strip(), self.time_format).time()
                return _isoparser.parse_isotime(value.strip())
        except _CONVERSION_ERRORS as e:
            raise _fail(value, datetime.time, e) from e
        raise _fail(value, datetime.time, TypeError('unsupported source type'))


class ValueConverter:
    """Conversion table keyed by the declared target type.
    """

    def __init__(self, temporal: TemporalConverter | None = None) -> None:
        self.temporal = temporal or TemporalConverter()
        self._converters: dict[type, Callable[[Any], Any]] = {
            int: to_int,
            float: to_float,
            decimal.Decimal: to_decimal,
            datetime.datetime: self.temporal.to_datetime,
            datetime.date: self.temporal.to_date,
            datetime.time: self.temporal.to_time,
            bytes: to_bytes,
        }

    @classmethod
    def from_options(cls, options: 'DaoOptions | None') -> 'ValueConverter':
        if options is None:
            return cls()
        return cls(TemporalConverter(options.date_format,
                                     options.datetime_format,
                                     options.time_format))

    def convert(self, value: Any, target: type) -> Any:
        """Coerce a non-null column value to the target type.
        """
        if value is None or type(value) is target:
            return value
        if issubclass(target, str):
            return to_string(value)
        converter = self._converters.get(target)
        if converter is not None:
            return converter(value)
        if is_lob(value) or isinstance(value, memoryview | bytearray):
            return read_lob(value)
        return value
