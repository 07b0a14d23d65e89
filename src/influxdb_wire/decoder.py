"""Decoding of ``/query`` responses.

A response looks like::

    {"results": [{"statement_id": 0,
                  "series": [{"name": "cpu",
                              "tags": {"host": "a"},
                              "columns": ["time", "value"],
                              "values": [[1500000000, 0.64]]}]}]}

Column types are not declared, so each cell is inferred on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Union
import json

import pandas as pd

from .exceptions import ClientError, UnexpectedResponse
from .fields import (
    INT64_MAX,
    INT64_MIN,
    FieldBool,
    FieldFloat,
    FieldInt,
    FieldNull,
    FieldString,
    QueryField,
)
from .precision import QueryPrecision

Row = Dict[str, QueryField]


@dataclass(frozen=True)
class Series:
    name: Optional[str]
    columns: List[str]
    rows: List[Row]
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StatementResult:
    statement_id: int
    series: List[Series]
    partial: bool = False


@dataclass(frozen=True)
class QueryResult:
    statements: List[StatementResult]

    @property
    def series(self) -> List[Series]:
        return [s for statement in self.statements for s in statement.series]

    def rows(self) -> List[Row]:
        return [row for s in self.series for row in s.rows]

    def to_dataframe(self, precision: QueryPrecision = QueryPrecision.RFC3339) -> pd.DataFrame:
        """Flatten all series into one dataframe with tags as extra columns."""
        records: List[Dict[str, Any]] = []
        for s in self.series:
            for row in s.rows:
                record = {k: v.value for k, v in row.items()}
                record.update(s.tags)
                records.append(record)
        df = pd.DataFrame(records)
        if "time" in df.columns:
            if precision is QueryPrecision.RFC3339:
                df["time"] = pd.to_datetime(df["time"], utc=True)
            else:
                df["time"] = pd.to_datetime(df["time"], unit=precision.pandas_unit, utc=True)
            df = _move_time_first(df)
        return df


def decode_value(value: Any) -> QueryField:
    """Infer the field type of one untyped cell."""
    if value is None:
        return FieldNull()
    if isinstance(value, bool):
        return FieldBool(value)
    if isinstance(value, int):
        if INT64_MIN <= value <= INT64_MAX:
            return FieldInt(value)
        return FieldFloat(float(value))
    if isinstance(value, (float, Decimal)):
        if _is_integral(value) and INT64_MIN <= int(value) <= INT64_MAX:
            return FieldInt(int(value))
        return FieldFloat(float(value))
    if isinstance(value, str):
        return FieldString(value)
    raise TypeError(f"Cannot decode {type(value).__name__} as a field value")


def _is_integral(value: Union[float, Decimal]) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return value.is_integer()


def parse_query_response(
    payload: Union[bytes, str, Mapping[str, Any]],
    request: Optional[Any] = None,
) -> QueryResult:
    """Decode a ``/query`` response body.

    Raises ``ClientError`` when the server reports a query error and
    ``UnexpectedResponse`` when the body does not have the expected shape.
    """
    raw = _raw_bytes(payload)
    if isinstance(payload, Mapping):
        body: Any = payload
    else:
        try:
            body = json.loads(payload, parse_float=Decimal)
        except ValueError as exc:
            raise UnexpectedResponse(f"Invalid JSON: {exc}", request, raw) from exc

    if not isinstance(body, Mapping):
        raise UnexpectedResponse("Response is not a JSON object", request, raw)
    if "error" in body:
        raise ClientError(str(body["error"]), request)
    results = body.get("results")
    if not isinstance(results, list):
        raise UnexpectedResponse("Response has no 'results' list", request, raw)

    statements = []
    for index, result in enumerate(results):
        if not isinstance(result, Mapping):
            raise UnexpectedResponse("Statement result is not an object", request, raw)
        if "error" in result:
            raise ClientError(str(result["error"]), request)
        series = [_parse_series(s, request, raw) for s in result.get("series", [])]
        statements.append(
            StatementResult(
                statement_id=int(result.get("statement_id", index)),
                series=series,
                partial=bool(result.get("partial", False)),
            )
        )
    return QueryResult(statements=statements)


def _parse_series(series: Any, request: Optional[Any], raw: bytes) -> Series:
    if not isinstance(series, Mapping):
        raise UnexpectedResponse("Series is not an object", request, raw)
    columns = series.get("columns")
    if not isinstance(columns, list) or not all(isinstance(c, str) for c in columns):
        raise UnexpectedResponse("Series has no valid 'columns' list", request, raw)
    values = series.get("values", [])
    if not isinstance(values, list):
        raise UnexpectedResponse("Series 'values' is not a list", request, raw)

    rows: List[Row] = []
    for values_row in values:
        if not isinstance(values_row, list):
            raise UnexpectedResponse("Row is not a list", request, raw)
        if len(values_row) != len(columns):
            raise UnexpectedResponse(
                f"Row has {len(values_row)} values for {len(columns)} columns",
                request,
                raw,
            )
        try:
            rows.append({c: decode_value(v) for c, v in zip(columns, values_row)})
        except (TypeError, ValueError) as exc:
            raise UnexpectedResponse(str(exc), request, raw) from exc

    tags = series.get("tags") or {}
    if not isinstance(tags, Mapping):
        raise UnexpectedResponse("Series 'tags' is not an object", request, raw)
    return Series(
        name=series.get("name"),
        columns=list(columns),
        rows=rows,
        tags={str(k): "" if v is None else str(v) for k, v in tags.items()},
    )


def _raw_bytes(payload: Union[bytes, str, Mapping[str, Any]]) -> bytes:
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    try:
        return json.dumps(payload, default=str).encode("utf-8")
    except (TypeError, ValueError):
        return b""


def _move_time_first(df: pd.DataFrame) -> pd.DataFrame:
    cols = list(df.columns)
    if cols and cols[0] != "time" and "time" in cols:
        cols = ["time"] + [c for c in cols if c != "time"]
        return df.reindex(columns=cols)
    return df
