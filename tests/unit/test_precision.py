from __future__ import annotations

import pytest

from influxdb_wire.precision import (
    QueryPrecision,
    WritePrecision,
    parse_query_precision,
    parse_write_precision,
)


def test_wire_names_and_scales() -> None:
    expected = {
        WritePrecision.NANOSECOND: ("n", 1e-9),
        WritePrecision.MICROSECOND: ("u", 1e-6),
        WritePrecision.MILLISECOND: ("ms", 1e-3),
        WritePrecision.SECOND: ("s", 1.0),
        WritePrecision.MINUTE: ("m", 60.0),
        WritePrecision.HOUR: ("h", 3600.0),
    }
    for precision, (name, scale) in expected.items():
        assert precision.wire_name == name
        assert precision.scale == pytest.approx(scale)


def test_rfc3339_exists_only_for_queries() -> None:
    assert QueryPrecision.RFC3339.wire_name == "rfc3339"
    assert QueryPrecision.RFC3339.scale == pytest.approx(1e-9)
    assert "RFC3339" not in WritePrecision.__members__
    with pytest.raises(ValueError):
        WritePrecision("rfc3339")
    with pytest.raises(ValueError):
        QueryPrecision.RFC3339.to_write()


def test_write_precision_widens_to_query_precision() -> None:
    for precision in WritePrecision:
        widened = QueryPrecision.from_write(precision)
        assert widened.wire_name == precision.wire_name
        assert widened.to_write() is precision


def test_parse_precision_names() -> None:
    assert parse_write_precision("ms") is WritePrecision.MILLISECOND
    assert parse_query_precision(" rfc3339 ") is QueryPrecision.RFC3339
    with pytest.raises(ValueError, match="Unknown write precision"):
        parse_write_precision("rfc3339")
    with pytest.raises(ValueError, match="Unknown query precision"):
        parse_query_precision("fortnight")
