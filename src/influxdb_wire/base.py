"""Abstract base writer for influxdb_wire."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional
import logging

import pandas as pd

from .exceptions import InfluxDBError, UnsafeOperationError
from .line_protocol import encode_lines
from .models import Point, WriteResult, points_from_dataframe
from .precision import WritePrecision


class InfluxDBWriterBase(ABC):
    """Encodes points as line protocol and hands batches to a transport."""

    def __init__(
        self,
        transport: str,
        precision: WritePrecision = WritePrecision.NANOSECOND,
        allow_write: bool = False,
    ) -> None:
        self.transport = transport
        self.precision = precision
        self._allow_write = allow_write
        self.logger = logging.getLogger(f"{__name__}.{transport}")

    # -------------------- Connection management --------------------

    def close(self) -> None:
        """Release transport resources."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    # -------------------- Write methods (protected) --------------------

    @abstractmethod
    def _send_lines(self, payload: bytes, precision: WritePrecision) -> None:
        """Deliver one newline-joined batch of encoded points."""

    def write_points(
        self,
        points: Iterable[Point],
        precision: Optional[WritePrecision] = None,
        batch_size: Optional[int] = None,
    ) -> WriteResult:
        """Send ``points`` in batches of ``batch_size`` (one batch if None).

        Batches are not transactional. If a batch fails, earlier batches stay
        written and the raised error carries ``points_sent``.
        """
        self._ensure_writes_allowed("write_points")
        if batch_size is not None and batch_size <= 0:
            raise ValueError("batch_size must be greater than zero")
        precision = precision or self.precision
        points = list(points)
        chunks = _chunk_points(points, batch_size)
        sent = 0
        for chunk in chunks:
            payload = encode_lines(chunk, precision).encode("utf-8")
            self.logger.debug("Writing %d points (%d bytes)", len(chunk), len(payload))
            try:
                self._send_lines(payload, precision)
            except InfluxDBError as exc:
                self.logger.error(
                    "Write failed after %d of %d points were sent: %s", sent, len(points), exc
                )
                exc.points_sent = sent
                raise
            sent += len(chunk)
        return WriteResult(
            success=True,
            details={"points": len(points), "batch_size": batch_size, "batches": len(chunks)},
        )

    def write_dataframe(
        self,
        df: pd.DataFrame,
        measurement: str,
        tag_columns: Optional[List[str]] = None,
        field_columns: Optional[List[str]] = None,
        time_column: str = "time",
        precision: Optional[WritePrecision] = None,
        batch_size: Optional[int] = None,
    ) -> WriteResult:
        self._ensure_writes_allowed("write_dataframe")
        points = points_from_dataframe(
            df,
            measurement,
            tag_columns=tag_columns,
            field_columns=field_columns,
            time_column=time_column,
        )
        return self.write_points(points, precision=precision, batch_size=batch_size)

    def _ensure_writes_allowed(self, op: str) -> None:
        if not self._allow_write:
            raise UnsafeOperationError(
                f"{op} blocked. Set INFLUXDB_ALLOW_WRITE=true or allow_write=True in config."
            )

    def __repr__(self) -> str:
        writes = "writes_enabled" if self._allow_write else "read_only"
        return f"{type(self).__name__}({self.transport}, {self.precision.wire_name}, {writes})"


def _chunk_points(points: List[Point], batch_size: Optional[int]) -> List[List[Point]]:
    if not points:
        return []
    if not batch_size:
        return [points]
    return [points[i : i + batch_size] for i in range(0, len(points), batch_size)]
