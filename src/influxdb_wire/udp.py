"""UDP writer.

The UDP listener has no per-request precision; it is part of the server
configuration, so the writer is bound to one precision for its lifetime.
Nothing is read back, so delivery is not confirmed.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union
import socket

from .base import InfluxDBWriterBase
from .config import ClientConfig, resolve_config
from .exceptions import TransportError
from .precision import WritePrecision


class InfluxDBUdpWriter(InfluxDBWriterBase):
    def __init__(
        self,
        host: str = "localhost",
        port: int = 8089,
        precision: WritePrecision = WritePrecision.NANOSECOND,
        allow_write: bool = False,
        sock: Optional[socket.socket] = None,
    ) -> None:
        super().__init__(transport="udp", precision=precision, allow_write=allow_write)
        self.address = (host, port)
        self._socket = sock or socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

    @classmethod
    def from_config(
        cls,
        config: Union[ClientConfig, Mapping[str, Any]],
        sock: Optional[socket.socket] = None,
    ) -> "InfluxDBUdpWriter":
        """Build a writer for the UDP listener on the configured server host."""
        cfg = resolve_config(config)
        return cls(
            host=cfg.server.host,
            port=cfg.udp_port,
            precision=cfg.precision,
            allow_write=cfg.allow_write,
            sock=sock,
        )

    def write_points(self, points, precision=None, batch_size=None):
        if precision is not None and precision is not self.precision:
            raise ValueError(
                f"UDP writer is bound to precision '{self.precision.wire_name}'"
            )
        return super().write_points(points, batch_size=batch_size)

    def _send_lines(self, payload: bytes, precision: WritePrecision) -> None:
        try:
            self._socket.sendto(payload, self.address)
        except OSError as exc:
            raise TransportError(exc) from exc

    def close(self) -> None:
        self._socket.close()
