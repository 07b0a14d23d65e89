"""HTTP client for the InfluxDB 1.x ``/query`` and ``/write`` endpoints."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union
import logging

import requests

from .base import InfluxDBWriterBase
from .config import ClientConfig, Credentials, Server, resolve_config
from .decoder import QueryResult, parse_query_response
from .exceptions import ClientError, ServerError, TransportError, UnexpectedResponse
from .models import Database
from .precision import QueryPrecision, WritePrecision
from .query import Query

logger = logging.getLogger(__name__)


class InfluxDBClient(InfluxDBWriterBase):
    """Query and write over HTTP(S)."""

    def __init__(
        self,
        server: Optional[Server] = None,
        credentials: Optional[Credentials] = None,
        database: Optional[Union[str, Database]] = None,
        retention_policy: Optional[str] = None,
        precision: WritePrecision = WritePrecision.NANOSECOND,
        verify_ssl: bool = False,
        timeout: float = 30.0,
        allow_write: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(transport="http", precision=precision, allow_write=allow_write)
        self.server = server or Server()
        self.credentials = credentials
        self.database = Database(database) if isinstance(database, str) else database
        self.retention_policy = retention_policy
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(
        cls,
        config: Union[ClientConfig, Mapping[str, Any]],
        session: Optional[requests.Session] = None,
    ) -> "InfluxDBClient":
        cfg = resolve_config(config)
        return cls(
            server=cfg.server,
            credentials=cfg.credentials,
            database=cfg.database,
            retention_policy=cfg.retention_policy,
            precision=cfg.precision,
            verify_ssl=cfg.verify_ssl,
            timeout=cfg.timeout,
            allow_write=cfg.allow_write,
            session=session,
        )

    @property
    def base_url(self) -> str:
        return self.server.base_url

    def close(self) -> None:
        self._session.close()

    def ping(self) -> bool:
        try:
            response = self._session.get(
                f"{self.base_url}/ping", timeout=self.timeout, verify=self.verify_ssl
            )
        except requests.RequestException as exc:
            logger.debug("Ping failed: %s", exc)
            return False
        return response.status_code == 204

    # -------------------- Query --------------------

    def query(
        self,
        query: Union[str, Query],
        database: Optional[Union[str, Database]] = None,
        precision: QueryPrecision = QueryPrecision.RFC3339,
        method: str = "GET",
    ) -> QueryResult:
        """Run an InfluxQL query and decode the result.

        ``POST`` is required for statements that modify data (``SELECT INTO``,
        ``DELETE`` ...).
        """
        params = self._auth_params()
        params["q"] = str(query)
        db = database or self.database
        if db is not None:
            params["db"] = str(db)
        if precision is not QueryPrecision.RFC3339:
            params["epoch"] = precision.wire_name
        logger.debug("InfluxQL query: %s", query)

        response = self._request(method, "/query", params=params)
        return parse_query_response(response.content, request=response.request)

    # -------------------- Write --------------------

    def _send_lines(self, payload: bytes, precision: WritePrecision) -> None:
        if self.database is None:
            raise ValueError("database is required for writes")
        params = self._auth_params()
        params["db"] = str(self.database)
        params["precision"] = precision.wire_name
        if self.retention_policy:
            params["rp"] = self.retention_policy
        self._request("POST", "/write", params=params, data=payload)

    # -------------------- Helpers --------------------

    def _auth_params(self) -> Dict[str, str]:
        if self.credentials is None:
            return {}
        return {"u": self.credentials.user, "p": self.credentials.password}

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, str],
        data: Optional[bytes] = None,
    ) -> requests.Response:
        try:
            response = self._session.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                data=data,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.RequestException as exc:
            raise TransportError(exc) from exc

        status = response.status_code
        if 500 <= status:
            raise ServerError(_error_message(response))
        if 400 <= status:
            raise ClientError(_error_message(response), response.request)
        if not 200 <= status < 300:
            raise UnexpectedResponse(
                f"Unexpected status code {status}", response.request, response.content
            )
        return response


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and "error" in body:
        return str(body["error"])
    return f"{response.status_code} {response.reason}: {response.text}".strip()
