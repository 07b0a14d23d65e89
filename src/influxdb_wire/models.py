"""Data models for influxdb_wire."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Union
import math

import pandas as pd

from .exceptions import IdentifierError, NullFieldError
from .fields import FieldFloat, FieldNull, LineField, is_line_field, line_field


def make_identifier(kind: str, text: str) -> str:
    """Validate ``text`` as an identifier of the given kind and return it unchanged."""
    if not isinstance(text, str):
        raise IdentifierError(f"{kind} should be a string, got {type(text).__name__}")
    if not text:
        raise IdentifierError(f"{kind} should never be empty")
    if "\n" in text:
        raise IdentifierError(f"{kind} should not contain a new line")
    return text


@dataclass(frozen=True, order=True)
class _Identifier:
    kind: ClassVar[str] = "Identifier"

    name: str

    def __post_init__(self) -> None:
        make_identifier(self.kind, self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Database(_Identifier):
    """Database name."""

    kind = "Database"


class Measurement(_Identifier):
    """Measurement name."""

    kind = "Measurement"


class Key(_Identifier):
    """Tag key, tag value or field key."""

    kind = "Key"


def _coerce(cls, value: Union[str, _Identifier]):
    if isinstance(value, cls):
        return value
    if isinstance(value, _Identifier):
        value = value.name
    return cls(value)


@dataclass(frozen=True)
class Point:
    """One data point for the line protocol.

    ``time`` is any value accepted by ``influxdb_wire.timestamp.to_nanoseconds``
    or ``None`` to let the server assign the arrival time.
    """

    measurement: Measurement
    fields: Dict[Key, LineField]
    tags: Dict[Key, Key] = field(default_factory=dict)
    time: Optional[Any] = None

    def __post_init__(self) -> None:
        if not isinstance(self.measurement, Measurement):
            raise TypeError("measurement must be a Measurement")
        if not self.fields:
            raise ValueError("a point needs at least one field")
        for key, value in self.fields.items():
            if not isinstance(key, Key):
                raise TypeError(f"field key {key!r} must be a Key")
            if not is_line_field(value):
                if value is None or isinstance(value, FieldNull):
                    raise NullFieldError(f"field {key.name!r} is null")
                raise TypeError(f"field {key.name!r} is not a line field: {value!r}")
            if isinstance(value, FieldFloat) and not math.isfinite(value.value):
                raise ValueError(f"field {key.name!r} is {value.value}, which cannot be written")
        for key, value in self.tags.items():
            if not isinstance(key, Key) or not isinstance(value, Key):
                raise TypeError(f"tag {key!r}={value!r} must be made of Keys")

    @classmethod
    def create(
        cls,
        measurement: Union[str, Measurement],
        fields: Mapping[Union[str, Key], Any],
        tags: Optional[Mapping[Union[str, Key], Union[str, Key]]] = None,
        time: Optional[Any] = None,
    ) -> "Point":
        """Build a point from plain Python values."""
        return cls(
            measurement=_coerce(Measurement, measurement),
            fields={_coerce(Key, k): line_field(v) for k, v in fields.items()},
            tags={_coerce(Key, k): _coerce(Key, v) for k, v in (tags or {}).items()},
            time=time,
        )


@dataclass(frozen=True)
class WriteResult:
    """Result of a write operation."""

    success: bool
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None


def points_from_dataframe(
    df: pd.DataFrame,
    measurement: Union[str, Measurement],
    tag_columns: Optional[List[str]] = None,
    field_columns: Optional[List[str]] = None,
    time_column: Optional[str] = "time",
) -> List[Point]:
    """Convert dataframe rows to points.

    Missing field cells (None/NaN) are left out of the point; rows without any
    remaining field are skipped.
    """
    tag_columns = tag_columns or []
    if time_column is not None and time_column not in df.columns:
        raise ValueError("time_column must exist in dataframe")
    excluded = set(tag_columns) | {time_column}
    fields = field_columns or [c for c in df.columns if c not in excluded]

    points: List[Point] = []
    for row in df.to_dict(orient="records"):
        values = {k: _plain(row[k]) for k in fields}
        values = {k: v for k, v in values.items() if not _missing(v)}
        if not values:
            continue
        tags = {k: str(row[k]) for k in tag_columns if not _missing(_plain(row[k]))}
        time = row[time_column] if time_column is not None else None
        points.append(Point.create(measurement, values, tags=tags, time=time))
    return points


def _plain(value: Any) -> Any:
    # numpy scalars -> Python scalars
    if hasattr(value, "item") and not isinstance(value, (str, bytes)):
        try:
            return value.item()
        except (TypeError, ValueError):
            return value
    return value


def _missing(value: Any) -> bool:
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    return isinstance(value, float) and math.isnan(value)
