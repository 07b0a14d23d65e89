from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest

from influxdb_wire.decoder import parse_query_response
from influxdb_wire.fields import FieldBool
from influxdb_wire.models import Key
from influxdb_wire.precision import QueryPrecision


def _load_script(module_name: str, relative_path: str):
    root = Path(__file__).resolve().parents[2]
    script_path = root / relative_path
    spec = importlib.util.spec_from_file_location(module_name, script_path)
    module = importlib.util.module_from_spec(spec)
    assert spec is not None and spec.loader is not None
    spec.loader.exec_module(module)
    return module


class FakeClient:
    base_url = "http://h:8086"
    database = "db"

    def __init__(self, ping_ok: bool = True) -> None:
        self.ping_ok = ping_ok
        self.closed = False
        self.queries = []
        self.written = []

    def ping(self):
        return self.ping_ok

    def write_points(self, points):
        self.written.extend(points)

        class _Result:
            details = {"points": len(points)}

        return _Result()

    def query(self, query, precision):
        self.queries.append((str(query), precision))
        time = "2026-02-01T00:00:00Z" if precision is QueryPrecision.RFC3339 else 1769904000
        return parse_query_response(
            {"results": [{"series": [{"name": "m", "columns": ["time", "v"], "values": [[time, 1]]}]}]}
        )

    def close(self):
        self.closed = True


def test_smoke_requires_database(monkeypatch) -> None:
    smoke = _load_script("smoke_read_for_test_db", "scripts/smoke_read.py")
    monkeypatch.delenv("INFLUXDB_DB", raising=False)
    monkeypatch.setattr("influxdb_wire.config.load_dotenv", lambda: False)
    with pytest.raises(ValueError, match="INFLUXDB_DB"):
        smoke._client_from_env()


def test_smoke_run_queries_measurement_and_closes() -> None:
    smoke = _load_script("smoke_read_for_test_run", "scripts/smoke_read.py")
    fake = FakeClient()

    rc = smoke._run_with_client(fake, "cpu", QueryPrecision.RFC3339, write_probe=False)

    assert rc == 0
    assert fake.closed is True
    assert fake.queries == [('SELECT * FROM "cpu" ORDER BY time DESC LIMIT 3', QueryPrecision.RFC3339)]
    assert fake.written == []


def test_smoke_write_probe_targets_probe_measurement() -> None:
    smoke = _load_script("smoke_read_for_test_probe", "scripts/smoke_read.py")
    fake = FakeClient()

    rc = smoke._run_with_client(fake, None, QueryPrecision.SECOND, write_probe=True)

    assert rc == 0
    assert len(fake.written) == 1
    assert fake.written[0].fields[Key("ok")] == FieldBool(True)
    assert smoke.PROBE_MEASUREMENT in fake.queries[0][0]


def test_smoke_failed_ping_returns_error_code() -> None:
    smoke = _load_script("smoke_read_for_test_ping", "scripts/smoke_read.py")
    fake = FakeClient(ping_ok=False)

    assert smoke._run_with_client(fake, None, QueryPrecision.RFC3339, write_probe=False) == 1
    assert fake.closed is True
    assert fake.queries == []
