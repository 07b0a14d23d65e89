"""InfluxQL query strings and safe formatting.

Queries are opaque to this library. ``format_query`` fills ``{}`` placeholders
with quoted identifiers and literals so that values cannot break out of the
statement:

>>> format_query("SELECT * FROM {} WHERE host = {}", Measurement("cpu"), "server01")
Query('SELECT * FROM "cpu" WHERE host = \\'server01\\'')
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union
import math

from .models import Database, Key, Measurement, _Identifier
from .timestamp import format_rfc3339


class Query(str):
    """An InfluxQL statement."""

    def __repr__(self) -> str:
        return f"Query({str.__repr__(self)})"


def quote_identifier(name: Union[str, _Identifier]) -> str:
    text = str(name)
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def quote_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def format_value(value: Any) -> str:
    """Render one placeholder argument as InfluxQL."""
    if isinstance(value, _Identifier):
        return quote_identifier(value)
    if isinstance(value, Query):
        return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"{value} cannot be used in a query")
        return repr(value)
    if isinstance(value, str):
        return quote_string(value)
    if isinstance(value, datetime):
        return quote_string(format_rfc3339(value))
    if isinstance(value, timedelta):
        return _format_duration(value)
    raise TypeError(f"Unsupported query argument type: {type(value).__name__}")


def format_query(template: str, *args: Any) -> Query:
    """Fill ``{}`` placeholders in ``template`` with rendered ``args``.

    The template follows ``str.format`` rules, so literal braces (for example
    a regex quantifier) are written doubled: ``/^a{{2}}$/`` becomes ``/^a{2}$/``.
    """
    return Query(template.format(*[format_value(a) for a in args]))


def format_database(template: str, *args: Any) -> Database:
    return Database(template.format(*args))


def format_measurement(template: str, *args: Any) -> Measurement:
    return Measurement(template.format(*args))


def format_key(template: str, *args: Any) -> Key:
    return Key(template.format(*args))


def build_influxql_query(
    measurement: Union[str, Measurement],
    fields: List[Union[str, Key]],
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tags: Optional[Dict[str, str]] = None,
    interval: Optional[str] = None,
    aggregation: Optional[str] = None,
    timezone: Optional[str] = None,
) -> Query:
    field_exprs = _field_exprs(fields, aggregation)
    query = f"SELECT {', '.join(field_exprs)} FROM {quote_identifier(measurement)}"
    conditions = []
    if start is not None:
        conditions.append(f"time >= {format_value(start)}")
    if end is not None:
        conditions.append(f"time < {format_value(end)}")
    if tags:
        conditions.append(_tags_condition(tags))
    if conditions:
        query += " WHERE " + " AND ".join(conditions)
    if aggregation and interval:
        query += f" GROUP BY time({interval})"
    if timezone:
        query += f" TZ({quote_string(timezone)})"
    return Query(query)


def _field_exprs(fields: List[Union[str, Key]], aggregation: Optional[str]) -> List[str]:
    if not fields:
        raise ValueError("fields must contain at least one field name")
    if not aggregation:
        return [quote_identifier(f) for f in fields]
    return [f"{aggregation}({quote_identifier(f)})" for f in fields]


def _tags_condition(tags: Dict[str, str]) -> str:
    return " AND ".join(
        [f"{quote_identifier(k)} = {quote_string(str(v))}" for k, v in sorted(tags.items())]
    )


def _format_duration(value: timedelta) -> str:
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    for unit, size in (("w", 604_800_000_000), ("d", 86_400_000_000), ("h", 3_600_000_000),
                       ("m", 60_000_000), ("s", 1_000_000), ("ms", 1_000)):
        if micros % size == 0:
            return f"{micros // size}{unit}"
    return f"{micros}u"
