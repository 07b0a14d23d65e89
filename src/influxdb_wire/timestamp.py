"""Timestamp scaling and rounding.

Every supported time value is first converted to an exact integer number of
nanoseconds (since the Unix epoch for points in time, since zero for
durations). Scaling and rounding then run in integer arithmetic and round
half to even, so ``scale_to`` and ``round_to`` never suffer from binary
floating point error.

>>> scale_to(WritePrecision.MILLISECOND, timedelta(seconds=123, microseconds=123457))
123123
>>> round_to(WritePrecision.SECOND, TimeSpec(123, 123456789))
123000000000
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import singledispatch
from typing import Any, NamedTuple
import time as _time

import pandas as pd

from .precision import WritePrecision

NS_PER_SECOND = 1_000_000_000
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class TimeSpec(NamedTuple):
    """Monotonic clock reading split into seconds and nanoseconds."""

    sec: int
    nsec: int

    @classmethod
    def monotonic(cls) -> "TimeSpec":
        sec, nsec = divmod(_time.monotonic_ns(), NS_PER_SECOND)
        return cls(sec, nsec)

    def to_seconds(self) -> float:
        return self.sec + self.nsec / NS_PER_SECOND


@singledispatch
def to_nanoseconds(value: Any) -> int:
    """Convert a time value to integer nanoseconds."""
    raise TypeError(f"Unsupported time type: {type(value).__name__}")


@to_nanoseconds.register
def _(value: int) -> int:
    if isinstance(value, bool):
        raise TypeError("bool is not a timestamp")
    return value


@to_nanoseconds.register
def _(value: timedelta) -> int:
    return (value.days * 86_400 + value.seconds) * NS_PER_SECOND + value.microseconds * 1_000


@to_nanoseconds.register
def _(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return to_nanoseconds(value - EPOCH)


@to_nanoseconds.register
def _(value: TimeSpec) -> int:
    return value.sec * NS_PER_SECOND + value.nsec


@to_nanoseconds.register
def _(value: pd.Timestamp) -> int:
    if value.tzinfo is None:
        value = value.tz_localize("UTC")
    return int(value.value)


@to_nanoseconds.register
def _(value: pd.Timedelta) -> int:
    return int(value.value)


def _div_round_half_even(numerator: int, denominator: int) -> int:
    quotient, remainder = divmod(numerator, denominator)
    twice = 2 * remainder
    if twice > denominator or (twice == denominator and quotient % 2 == 1):
        quotient += 1
    return quotient


def round_at(scale_ns: int, nanoseconds: int) -> int:
    """Round ``nanoseconds`` to the nearest multiple of ``scale_ns``."""
    return _div_round_half_even(nanoseconds, scale_ns) * scale_ns


def scale_to(precision: WritePrecision, value: Any) -> int:
    """Number of ``precision`` units in ``value``."""
    return _div_round_half_even(to_nanoseconds(value), _write_precision(precision).scale_ns)


def round_to(precision: WritePrecision, value: Any) -> int:
    """Snap ``value`` to the ``precision`` grid, expressed in nanoseconds."""
    return round_at(_write_precision(precision).scale_ns, to_nanoseconds(value))


def _write_precision(precision: WritePrecision) -> WritePrecision:
    if not isinstance(precision, WritePrecision):
        raise TypeError(f"Expected a WritePrecision, got {precision!r}")
    return precision


def format_rfc3339(value: Any) -> str:
    """Format a point in time as RFC3339 in UTC with nanosecond precision."""
    total = to_nanoseconds(value)
    text = pd.Timestamp(total, unit="ns", tz="UTC").strftime("%Y-%m-%dT%H:%M:%S")
    nanos = total % NS_PER_SECOND
    if nanos:
        text += "." + f"{nanos:09d}".rstrip("0")
    return text + "Z"


def parse_rfc3339(text: str) -> pd.Timestamp:
    """Parse an RFC3339 timestamp as returned by ``/query``."""
    return pd.Timestamp(pd.to_datetime(text, utc=True))
