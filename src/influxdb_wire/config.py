"""Configuration loading for influxdb_wire."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
import os

from dotenv import load_dotenv

from .precision import WritePrecision, parse_write_precision


def load_env() -> None:
    """Load environment variables from a .env file if present."""
    load_dotenv()


def _get_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Server:
    host: str = "localhost"
    port: int = 8086
    ssl: bool = False

    @property
    def base_url(self) -> str:
        scheme = "https" if self.ssl else "http"
        return f"{scheme}://{self.host}:{self.port}"


DEFAULT_SERVER = Server()


@dataclass(frozen=True)
class Credentials:
    user: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ClientConfig:
    server: Server = DEFAULT_SERVER
    credentials: Optional[Credentials] = None
    database: Optional[str] = None
    retention_policy: Optional[str] = None
    precision: WritePrecision = WritePrecision.NANOSECOND
    verify_ssl: bool = False
    timeout: float = 30.0
    udp_port: int = 8089
    allow_write: bool = False


def _credentials(user: Optional[str], password: Optional[str]) -> Optional[Credentials]:
    if not user:
        return None
    return Credentials(user=user, password=password or "")


def config_from_env() -> ClientConfig:
    load_env()
    return ClientConfig(
        server=Server(
            host=os.getenv("INFLUXDB_HOST", "localhost"),
            port=int(os.getenv("INFLUXDB_PORT", "8086")),
            ssl=_get_bool(os.getenv("INFLUXDB_SSL"), False),
        ),
        credentials=_credentials(
            os.getenv("INFLUXDB_USER"),
            os.getenv("INFLUXDB_PASSWORD", os.getenv("INFLUXDB_PWD")),
        ),
        database=os.getenv("INFLUXDB_DB") or None,
        retention_policy=os.getenv("INFLUXDB_RP") or None,
        precision=parse_write_precision(os.getenv("INFLUXDB_PRECISION", "n")),
        verify_ssl=_get_bool(os.getenv("INFLUXDB_VERIFY_SSL"), False),
        timeout=float(os.getenv("INFLUXDB_TIMEOUT", "30")),
        udp_port=int(os.getenv("INFLUXDB_UDP_PORT", "8089")),
        allow_write=_get_bool(os.getenv("INFLUXDB_ALLOW_WRITE"), False),
    )


def _dict_get(d: Mapping[str, Any], key: str, fallback: Any = None) -> Any:
    if key in d:
        return d[key]
    return fallback


def resolve_config(config: ClientConfig | Mapping[str, Any]) -> ClientConfig:
    if isinstance(config, ClientConfig):
        return config
    precision = _dict_get(config, "precision", WritePrecision.NANOSECOND)
    if isinstance(precision, str):
        precision = parse_write_precision(precision)
    return ClientConfig(
        server=Server(
            host=_dict_get(config, "host", "localhost"),
            port=int(_dict_get(config, "port", 8086)),
            ssl=bool(_dict_get(config, "ssl", False)),
        ),
        credentials=_credentials(
            _dict_get(config, "username", _dict_get(config, "user")),
            _dict_get(config, "password", _dict_get(config, "pwd")),
        ),
        database=_dict_get(config, "database"),
        retention_policy=_dict_get(config, "retention_policy"),
        precision=precision,
        verify_ssl=bool(_dict_get(config, "verify_ssl", False)),
        timeout=float(_dict_get(config, "timeout", 30.0)),
        udp_port=int(_dict_get(config, "udp_port", 8089)),
        allow_write=bool(_dict_get(config, "allow_write", False)),
    )
