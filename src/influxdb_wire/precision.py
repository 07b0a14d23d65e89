"""Time precisions.

``WritePrecision`` covers the precisions accepted by ``/write`` and by the
rounding functions in ``influxdb_wire.timestamp``. ``QueryPrecision`` adds
``RFC3339``, the human readable format that only ``/query`` understands.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict

_SCALE_NS: Dict[str, int] = {
    "n": 1,
    "u": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
    "rfc3339": 1,
}

_PANDAS_UNITS: Dict[str, str] = {
    "n": "ns",
    "u": "us",
    "ms": "ms",
    "s": "s",
    "m": "m",
    "h": "h",
}


class _PrecisionMixin:
    @property
    def wire_name(self) -> str:
        """Name sent in the ``precision``/``epoch`` request parameter."""
        return self.value

    @property
    def scale_ns(self) -> int:
        """Length of one unit in nanoseconds."""
        return _SCALE_NS[self.value]

    @property
    def scale(self) -> float:
        """Length of one unit in seconds."""
        return self.scale_ns / 1_000_000_000

    @property
    def pandas_unit(self) -> str:
        return _PANDAS_UNITS.get(self.value, "ns")


class WritePrecision(_PrecisionMixin, Enum):
    NANOSECOND = "n"
    MICROSECOND = "u"
    MILLISECOND = "ms"
    SECOND = "s"
    MINUTE = "m"
    HOUR = "h"


class QueryPrecision(_PrecisionMixin, Enum):
    NANOSECOND = "n"
    MICROSECOND = "u"
    MILLISECOND = "ms"
    SECOND = "s"
    MINUTE = "m"
    HOUR = "h"
    RFC3339 = "rfc3339"

    @classmethod
    def from_write(cls, precision: WritePrecision) -> "QueryPrecision":
        return cls(precision.value)

    def to_write(self) -> WritePrecision:
        if self is QueryPrecision.RFC3339:
            raise ValueError("rfc3339 is only valid for queries")
        return WritePrecision(self.value)


def parse_write_precision(name: str) -> WritePrecision:
    try:
        return WritePrecision(name.strip())
    except ValueError:
        valid = ", ".join(p.value for p in WritePrecision)
        raise ValueError(f"Unknown write precision '{name}'. Valid: {valid}") from None


def parse_query_precision(name: str) -> QueryPrecision:
    try:
        return QueryPrecision(name.strip())
    except ValueError:
        valid = ", ".join(p.value for p in QueryPrecision)
        raise ValueError(f"Unknown query precision '{name}'. Valid: {valid}") from None
