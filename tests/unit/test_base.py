from datetime import UTC, datetime

import pandas as pd
import pytest

from influxdb_wire.base import InfluxDBWriterBase
from influxdb_wire.exceptions import ServerError, UnsafeOperationError
from influxdb_wire.models import Point
from influxdb_wire.precision import WritePrecision


class DummyWriter(InfluxDBWriterBase):
    def __init__(self, allow_write=True, precision=WritePrecision.NANOSECOND):
        super().__init__(transport="dummy", precision=precision, allow_write=allow_write)
        self.sent = []
        self.close_calls = 0

    def _send_lines(self, payload, precision):
        self.sent.append((payload, precision))

    def close(self):
        self.close_calls += 1


def test_write_points_encodes_batches():
    writer = DummyWriter()
    points = [Point.create("m", {"value": i}, time=i) for i in range(5)]

    result = writer.write_points(points, batch_size=2)

    assert result.success is True
    assert result.details == {"points": 5, "batch_size": 2, "batches": 3}
    assert [payload for payload, _ in writer.sent] == [
        b"m value=0i 0\nm value=1i 1",
        b"m value=2i 2\nm value=3i 3",
        b"m value=4i 4",
    ]


class FailingWriter(DummyWriter):
    def __init__(self, fail_on_batch):
        super().__init__()
        self.fail_on_batch = fail_on_batch

    def _send_lines(self, payload, precision):
        if len(self.sent) + 1 == self.fail_on_batch:
            raise ServerError("write failed")
        super()._send_lines(payload, precision)


def test_failed_batch_reports_points_already_sent(caplog):
    writer = FailingWriter(fail_on_batch=2)
    points = [Point.create("m", {"value": i}, time=i) for i in range(5)]

    with caplog.at_level("ERROR", logger="influxdb_wire.base.dummy"):
        with pytest.raises(ServerError) as excinfo:
            writer.write_points(points, batch_size=2)

    assert excinfo.value.points_sent == 2
    assert len(writer.sent) == 1
    assert "after 2 of 5 points were sent" in caplog.text


def test_first_batch_failure_reports_nothing_sent():
    writer = FailingWriter(fail_on_batch=1)
    with pytest.raises(ServerError) as excinfo:
        writer.write_points([Point.create("m", {"value": 1})])
    assert excinfo.value.points_sent == 0


def test_write_points_accepts_generators_and_empty_input():
    writer = DummyWriter()
    result = writer.write_points(p for p in [])
    assert result.details["batches"] == 0
    assert writer.sent == []


def test_write_points_rejects_bad_batch_size():
    with pytest.raises(ValueError, match="batch_size"):
        DummyWriter().write_points([Point.create("m", {"v": 1})], batch_size=0)


def test_precision_override_per_call():
    writer = DummyWriter(precision=WritePrecision.SECOND)
    writer.write_points([Point.create("m", {"v": 1}, time=5_000_000_000)])
    writer.write_points([Point.create("m", {"v": 1}, time=5_000_000_000)], precision=WritePrecision.MILLISECOND)

    assert writer.sent == [
        (b"m v=1i 5", WritePrecision.SECOND),
        (b"m v=1i 5000", WritePrecision.MILLISECOND),
    ]


def test_write_dataframe_batching():
    writer = DummyWriter(precision=WritePrecision.SECOND)
    t0 = datetime(2026, 2, 1, tzinfo=UTC)
    df = pd.DataFrame(
        {
            "time": [t0, t0, t0],
            "value": [1.0, 2.0, 3.0],
            "sensor": ["a", "a", "b"],
        }
    )

    result = writer.write_dataframe(
        df,
        measurement="temperature",
        tag_columns=["sensor"],
        field_columns=["value"],
        batch_size=2,
    )

    assert result.details["batches"] == 2
    assert writer.sent[1][0] == b"temperature,sensor=b value=3.0 1769904000"


def test_write_guard_blocks_when_disabled():
    writer = DummyWriter(allow_write=False)
    with pytest.raises(UnsafeOperationError, match="INFLUXDB_ALLOW_WRITE"):
        writer.write_points([Point.create("m", {"v": 1})])
    with pytest.raises(UnsafeOperationError):
        writer.write_dataframe(pd.DataFrame({"time": [0], "v": [1]}), measurement="m")
    assert writer.sent == []


def test_context_manager_closes_and_repr():
    writer = DummyWriter(allow_write=False)
    with writer as inside:
        assert inside is writer
    assert writer.close_calls == 1
    assert repr(writer) == "DummyWriter(dummy, n, read_only)"
