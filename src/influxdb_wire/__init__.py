"""influxdb_wire package."""

from .client import InfluxDBClient
from .config import ClientConfig, Credentials, Server, config_from_env, load_env, resolve_config
from .decoder import QueryResult, Series, StatementResult, decode_value, parse_query_response
from .exceptions import (
    ClientError,
    IdentifierError,
    InfluxDBError,
    NullFieldError,
    ServerError,
    TransportError,
    UnexpectedResponse,
    UnsafeOperationError,
)
from .fields import (
    FieldBool,
    FieldFloat,
    FieldInt,
    FieldNull,
    FieldString,
    LineField,
    QueryField,
    line_field,
    to_line_field,
)
from .line_protocol import encode_line, encode_lines, parse_line, parse_lines
from .models import Database, Key, Measurement, Point, WriteResult, make_identifier
from .precision import QueryPrecision, WritePrecision
from .query import Query, format_database, format_key, format_measurement, format_query
from .timestamp import TimeSpec, round_to, scale_to
from .udp import InfluxDBUdpWriter

__all__ = [
    "InfluxDBClient",
    "InfluxDBUdpWriter",
    "ClientConfig",
    "Credentials",
    "Server",
    "config_from_env",
    "load_env",
    "resolve_config",
    "QueryResult",
    "Series",
    "StatementResult",
    "decode_value",
    "parse_query_response",
    "InfluxDBError",
    "ServerError",
    "ClientError",
    "UnexpectedResponse",
    "TransportError",
    "UnsafeOperationError",
    "IdentifierError",
    "NullFieldError",
    "FieldInt",
    "FieldFloat",
    "FieldString",
    "FieldBool",
    "FieldNull",
    "LineField",
    "QueryField",
    "line_field",
    "to_line_field",
    "encode_line",
    "encode_lines",
    "parse_line",
    "parse_lines",
    "Database",
    "Measurement",
    "Key",
    "Point",
    "WriteResult",
    "make_identifier",
    "QueryPrecision",
    "WritePrecision",
    "Query",
    "format_query",
    "format_database",
    "format_measurement",
    "format_key",
    "TimeSpec",
    "round_to",
    "scale_to",
]
