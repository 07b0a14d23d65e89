"""Field values.

Query results may contain nulls, the line protocol may not. The two contexts
use different unions over the same variant classes:

* ``LineField``: ``FieldInt | FieldFloat | FieldString | FieldBool``
* ``QueryField``: ``LineField | FieldNull``

``FieldNull`` is not a member of ``LineField``, so anything typed as a line
field cannot hold a null. Converting from the query side goes through
``to_line_field`` which raises ``NullFieldError`` for nulls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union
import math
import numbers

from .exceptions import NullFieldError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class FieldInt:
    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"FieldInt expects an int, got {type(self.value).__name__}")
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"{self.value} is out of the signed 64-bit range")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class FieldFloat:
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise TypeError(f"FieldFloat expects a float, got {type(self.value).__name__}")
        object.__setattr__(self, "value", float(self.value))

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class FieldString:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"FieldString expects a str, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FieldBool:
    value: bool

    def __post_init__(self) -> None:
        if not isinstance(self.value, bool):
            raise TypeError(f"FieldBool expects a bool, got {type(self.value).__name__}")

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class FieldNull:
    """Missing value in a query result."""

    @property
    def value(self) -> None:
        return None

    def __str__(self) -> str:
        return "null"


LineField = Union[FieldInt, FieldFloat, FieldString, FieldBool]
QueryField = Union[FieldInt, FieldFloat, FieldString, FieldBool, FieldNull]

LINE_FIELD_TYPES = (FieldInt, FieldFloat, FieldString, FieldBool)


def is_line_field(value: Any) -> bool:
    return isinstance(value, LINE_FIELD_TYPES)


def to_line_field(field: QueryField) -> LineField:
    """Narrow a query field to a line field. Nulls raise ``NullFieldError``."""
    if isinstance(field, FieldNull):
        raise NullFieldError("A null field value cannot be written")
    if not is_line_field(field):
        raise TypeError(f"Not a field value: {field!r}")
    return field


def line_field(value: Any) -> LineField:
    """Coerce a plain Python value into a field value for writing."""
    if value is None or isinstance(value, FieldNull):
        raise NullFieldError("A null field value cannot be written")
    if is_line_field(value):
        field = value
    elif isinstance(value, bool):
        return FieldBool(value)
    elif isinstance(value, numbers.Integral):
        return FieldInt(int(value))
    elif isinstance(value, numbers.Real):
        field = FieldFloat(float(value))
    elif isinstance(value, str):
        return FieldString(value)
    else:
        raise TypeError(f"Unsupported field value type: {type(value).__name__}")
    if isinstance(field, FieldFloat) and not math.isfinite(field.value):
        raise ValueError(f"{field.value} cannot be written as a field value")
    return field
