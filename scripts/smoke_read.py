"""Local smoke test for influxdb-wire.

Usage:
    py scripts/smoke_read.py
    py scripts/smoke_read.py --measurement cpu --precision s
    py scripts/smoke_read.py --write-probe
"""

from __future__ import annotations

import argparse
import sys

from influxdb_wire import InfluxDBClient, Point, config_from_env
from influxdb_wire.models import Measurement
from influxdb_wire.precision import QueryPrecision, parse_query_precision
from influxdb_wire.query import format_query
from influxdb_wire.timestamp import TimeSpec

PROBE_MEASUREMENT = "influxdb_wire_smoke"


def _client_from_env() -> InfluxDBClient:
    cfg = config_from_env()
    if not cfg.database:
        raise ValueError("INFLUXDB_DB is required for the smoke test")
    return InfluxDBClient.from_config(cfg)


def _probe_point() -> Point:
    return Point.create(
        PROBE_MEASUREMENT,
        {"monotonic_s": TimeSpec.monotonic().to_seconds(), "ok": True},
        tags={"source": "smoke_read"},
    )


def _run_with_client(
    client: InfluxDBClient,
    measurement: str | None,
    precision: QueryPrecision,
    write_probe: bool,
) -> int:
    try:
        if not client.ping():
            print("ping failed", file=sys.stderr)
            return 1
        print(f"server={client.base_url} database={client.database}")

        if write_probe:
            result = client.write_points([_probe_point()])
            print(f"probe write: {result.details}")
            measurement = measurement or PROBE_MEASUREMENT

        if measurement:
            query = format_query("SELECT * FROM {} ORDER BY time DESC LIMIT 3", Measurement(measurement))
        else:
            query = format_query("SHOW MEASUREMENTS LIMIT 10")
        result = client.query(query, precision=precision)
        print(f"query: {query}")
        print(f"series: {len(result.series)} rows: {len(result.rows())}")
        df = result.to_dataframe(precision)
        if not df.empty:
            print(df.head(3).to_string(index=False))
    finally:
        client.close()

    return 0


def run(measurement: str | None = None, precision: str = "rfc3339", write_probe: bool = False) -> int:
    client = _client_from_env()
    return _run_with_client(client, measurement, parse_query_precision(precision), write_probe)


def main() -> int:
    parser = argparse.ArgumentParser(description="Run smoke checks for influxdb-wire")
    parser.add_argument("--measurement", type=str, help="Measurement to sample")
    parser.add_argument("--precision", type=str, default="rfc3339", help="Result time precision")
    parser.add_argument(
        "--write-probe",
        action="store_true",
        help="Write one probe point first (needs INFLUXDB_ALLOW_WRITE=true)",
    )
    args = parser.parse_args()
    try:
        return run(args.measurement, args.precision, args.write_probe)
    except Exception as exc:
        print(f"Smoke test failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
