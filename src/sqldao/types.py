"""
Consolidated type handling for DAO operations.

This module provides:
- TypeConverter: Convert Python values to driver-compatible parameter values
- Column: Column metadata from cursor descriptions
"""
import datetime
import logging
import math
from typing import Any, Self

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

NUMPY_FLOAT_TYPES = (np.floating,)
NUMPY_INT_TYPES = (np.integer, np.unsignedinteger)


# Type Converter - Handles Python -> Database value conversion

def _convert_numpy_value(val: Any) -> float | int | bool | datetime.datetime | None:
    """Convert NumPy scalar to Python type."""
    if isinstance(val, np.floating) and np.isnan(val):
        return None

    if isinstance(val, np.datetime64):
        if np.isnat(val):
            return None
        return pd.Timestamp(val).to_pydatetime()

    return val.item()


class TypeConverter:
    """Parameter conversion applied to every bound value before execution.

    Handles NumPy scalars, pandas missing-value markers and non-finite floats.
    Strings are passed through untouched.
    """

    @staticmethod
    def convert_value(value: Any) -> Any:
        """Convert a single value to a driver-compatible format."""
        if value is None:
            return None

        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None

        if value is pd.NaT or value is pd.NA:
            return None

        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()

        if isinstance(value, (*NUMPY_FLOAT_TYPES, *NUMPY_INT_TYPES, np.bool_, np.datetime64)):
            return _convert_numpy_value(value)

        return value


# Column - Metadata from cursor descriptions

class Column:
    """Result column metadata."""

    def __init__(self, name: str, type_code: Any) -> None:
        self.name = name
        self.type_code = type_code

    @classmethod
    def from_cursor_description(cls, description_item: Any) -> Self:
        """Create a Column from one PEP-249 cursor description entry."""
        name = description_item[0]
        type_code = description_item[1] if len(description_item) > 1 else None
        return cls(name, type_code)

    @property
    def key(self) -> str:
        """Uppercased name used for case-insensitive lookups."""
        return self.name.upper()

    def __repr__(self) -> str:
        return f'Column(name={self.name!r}, type_code={self.type_code!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return (self.name, self.type_code) == (other.name, other.type_code)

    def __hash__(self) -> int:
        return hash((self.name, repr(self.type_code)))

    @staticmethod
    def get_names(columns: list[Self]) -> list[str]:
        return [col.name for col in columns]


def columns_from_cursor_description(description: Any) -> list[Column]:
    """Create Column objects from a cursor description."""
    if description is None:
        return []
    return [Column.from_cursor_description(desc) for desc in description]


def columns_from_result(result: Any) -> list[Column]:
    """Create Column objects for a SQLAlchemy result.

    Reads the DB-API cursor description while the cursor is still open and
    falls back to the result keys (no type codes) when it is not available.
    """
    cursor = getattr(result, 'cursor', None)
    description = getattr(cursor, 'description', None)
    if description:
        return columns_from_cursor_description(description)
    return [Column(name, None) for name in result.keys()]
