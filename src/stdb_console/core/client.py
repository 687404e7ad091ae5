"""SpacetimeDB HTTP client for stdb-console.

Wraps a synchronous httpx client with bearer-token auth, request tracing,
and exception mapping to the StdbConsoleError hierarchy. Public methods
follow the API's own failure style: SQL and management calls return
result objects with `success`/`error`, lookups return an empty value.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import sentry_sdk
import structlog

from stdb_console.core.exceptions import InputError, NetworkError, TimeoutError
from stdb_console.core.models import (
    CreateDatabaseResult,
    DatabaseInfo,
    PublishResult,
    QueryResult,
    TableInfo,
)
from stdb_console.core.sql import (
    build_delete_sql,
    build_insert_sql,
    build_select_sql,
    build_update_sql,
)

if TYPE_CHECKING:
    from stdb_console.core.config import ResolvedConfig

# Probed in order by connect(); servers differ in which they expose.
PROBE_ENDPOINTS = ("/databases", "/v1/databases", "/status", "/health")
DATABASE_LIST_ENDPOINTS = ("/databases", "/v1/databases")

_JSON_HEADERS = {"Content-Type": "application/json"}

_MISSING_DATABASE = {
    "Query": "Database name is required to execute queries",
    "Insert": "Database name is required for insert operations",
    "Update": "Database name is required for update operations",
    "Delete": "Database name is required for delete operations",
}


def _database_names(data: Any) -> list[str]:
    """Accept a bare list or {"databases": [...]} of names or objects."""
    if isinstance(data, dict):
        data = data.get("databases")
    if not isinstance(data, list):
        return []
    names: list[str] = []
    for db in data:
        if isinstance(db, str):
            names.append(db)
        elif isinstance(db, dict):
            name = db.get("name") or db.get("identity")
            if name:
                names.append(str(name))
    return names


class StdbClient:
    """Synchronous SpacetimeDB HTTP API client using httpx."""

    def __init__(
        self,
        config: ResolvedConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.base_url = config.base_url
        self._transport = transport
        self._http: httpx.Client | None = None

    def __enter__(self) -> StdbClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def _client(self) -> httpx.Client:
        if self._http is not None and not self._http.is_closed:
            return self._http

        headers: dict[str, str] = {}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        self._http = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.config.timeout,
            transport=self._transport,
        )
        return self._http

    def _database(self, database: str | None) -> str | None:
        return database or self.config.database

    def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        files: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send one request. Transport failures raise NetworkError/TimeoutError."""
        log = structlog.get_logger()
        http = self._client()
        headers = None if files else _JSON_HEADERS

        log.debug("request", method=method, url=f"{self.base_url}{endpoint}")
        with sentry_sdk.start_span(
            op="http.client", description=f"{method} {endpoint}"
        ) as span:
            start_time = time.monotonic()
            try:
                response = http.request(
                    method, endpoint, json=json, files=files, headers=headers
                )
            except httpx.TimeoutException as e:
                span.set_status("deadline_exceeded")
                log.error("request timeout", method=method, endpoint=endpoint)
                msg = (
                    f"Request to {self.base_url}{endpoint} timed out"
                    f" after {self.config.timeout}s"
                )
                raise TimeoutError(msg) from e
            except httpx.RequestError as e:
                span.set_status("unavailable")
                log.error(
                    "request failed", method=method, endpoint=endpoint, error=str(e)
                )
                msg = f"Request to {self.base_url}{endpoint} failed: {e}"
                raise NetworkError(msg) from e

            duration_ms = (time.monotonic() - start_time) * 1000
            span.set_data("status_code", response.status_code)
            span.set_data("duration_ms", duration_ms)
            log.debug(
                "response",
                status=response.status_code,
                reason=response.reason_phrase,
                duration_ms=f"{duration_ms:.1f}",
            )
            return response

    def connect(self) -> bool:
        """Probe the server; True when any known endpoint answers 2xx."""
        log = structlog.get_logger()
        log.info("connecting", base_url=self.base_url)
        for endpoint in PROBE_ENDPOINTS:
            try:
                response = self._request("GET", endpoint)
            except NetworkError as e:
                log.debug("probe failed", endpoint=endpoint, error=e.message)
                continue
            if response.is_success:
                log.info("connected", endpoint=endpoint)
                return True
        return False

    def get_tables(self, database: str | None = None) -> list[TableInfo]:
        db_name = self._database(database)
        if not db_name:
            msg = "Database name is required to fetch tables"
            raise InputError(msg)

        log = structlog.get_logger()
        try:
            response = self._request("GET", f"/database/{db_name}/schema")
            if not response.is_success:
                log.error("failed to fetch schema", reason=response.reason_phrase)
                return []
            data = response.json()
            return [TableInfo.model_validate(t) for t in data.get("tables") or []]
        except (NetworkError, ValueError, AttributeError) as e:
            log.error("failed to fetch tables", error=str(e))
            return []

    def _run_sql(
        self,
        database: str | None,
        sql: str,
        params: list[Any] | None,
        action: str,
    ) -> QueryResult:
        """POST a statement; non-2xx becomes "<action> failed: <reason>"."""
        db_name = self._database(database)
        if not db_name:
            return QueryResult(success=False, error=_MISSING_DATABASE[action])

        body: dict[str, Any] = {"query": sql}
        if params is not None:
            body["params"] = params
        try:
            response = self._request("POST", f"/database/{db_name}/sql", json=body)
            if not response.is_success:
                return QueryResult(
                    success=False,
                    error=f"{action} failed: {response.reason_phrase}",
                )
            return self._sql_result(response.json(), action)
        except (NetworkError, ValueError, AttributeError) as e:
            message = e.message if isinstance(e, NetworkError) else str(e)
            return QueryResult(success=False, error=message)

    @staticmethod
    def _sql_result(result: dict[str, Any], action: str) -> QueryResult:
        affected = result.get("rowsAffected")
        if action == "Query":
            return QueryResult(
                success=True, data=result.get("rows") or [], rows_affected=affected
            )
        default = 1 if action == "Insert" else 0
        return QueryResult(success=True, rows_affected=affected or default)

    def query(self, sql: str, database: str | None = None) -> QueryResult:
        return self._run_sql(database, sql, None, "Query")

    def get_table_data(
        self,
        table: str,
        database: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> QueryResult:
        """One page of rows via SELECT * ... LIMIT/OFFSET.

        Raises InputError for a non-positive limit or negative offset.
        """
        if limit < 1 or offset < 0:
            msg = f"Invalid page: limit={limit}, offset={offset}"
            raise InputError(msg)
        try:
            sql = build_select_sql(table, limit, offset)
        except InputError as e:
            return QueryResult(success=False, error=e.message)
        return self.query(sql, database)

    def insert_data(
        self, table: str, data: dict[str, Any], database: str | None = None
    ) -> QueryResult:
        try:
            sql, params = build_insert_sql(table, data)
        except InputError as e:
            return QueryResult(success=False, error=e.message)
        return self._run_sql(database, sql, params, "Insert")

    def update_data(
        self,
        table: str,
        data: dict[str, Any],
        where: dict[str, Any],
        database: str | None = None,
    ) -> QueryResult:
        try:
            sql, params = build_update_sql(table, data, where)
        except InputError as e:
            return QueryResult(success=False, error=e.message)
        return self._run_sql(database, sql, params, "Update")

    def delete_data(
        self, table: str, where: dict[str, Any], database: str | None = None
    ) -> QueryResult:
        try:
            sql, params = build_delete_sql(table, where)
        except InputError as e:
            return QueryResult(success=False, error=e.message)
        return self._run_sql(database, sql, params, "Delete")

    def list_databases(self) -> list[str]:
        log = structlog.get_logger()
        for endpoint in DATABASE_LIST_ENDPOINTS:
            try:
                response = self._request("GET", endpoint)
                if response.is_success:
                    return _database_names(response.json())
            except (NetworkError, ValueError) as e:
                log.debug("database listing failed", endpoint=endpoint, error=str(e))
                continue
        log.error("all database listing endpoints failed")
        return []

    def create_database(self, name: str) -> CreateDatabaseResult:
        try:
            response = self._request("POST", f"/v1/database/{name}", json={})
            if not response.is_success:
                return CreateDatabaseResult(
                    success=False,
                    error=(
                        f"Failed to create database: {response.reason_phrase}"
                        f" - {response.text}"
                    ),
                )
            result = response.json()
            return CreateDatabaseResult(
                success=True,
                database=DatabaseInfo(
                    identity=result.get("identity"),
                    name=name,
                    owner_identity=result.get("owner_identity") or "",
                    host_type=result.get("host_type") or "unknown",
                ),
            )
        except (NetworkError, ValueError, AttributeError) as e:
            message = e.message if isinstance(e, NetworkError) else str(e)
            return CreateDatabaseResult(success=False, error=message)

    def publish_module(
        self,
        database: str,
        module: Path | bytes,
        filename: str | None = None,
    ) -> PublishResult:
        """Upload a compiled .wasm module as multipart field `wasm_module`."""
        if isinstance(module, Path):
            content = module.read_bytes()
            filename = filename or module.name
        else:
            content = module
        files = {
            "wasm_module": (filename or "module.wasm", content, "application/wasm")
        }

        try:
            response = self._request("POST", f"/v1/database/{database}", files=files)
            if not response.is_success:
                return PublishResult(
                    success=False,
                    error=(
                        f"Failed to publish module: {response.reason_phrase}"
                        f" - {response.text}"
                    ),
                )
            result = response.json()
            return PublishResult(
                success=True,
                database_identity=result.get("identity"),
                database_name=database,
            )
        except (NetworkError, ValueError, AttributeError) as e:
            message = e.message if isinstance(e, NetworkError) else str(e)
            return PublishResult(success=False, error=message)

    def get_database_info(self, name_or_identity: str) -> DatabaseInfo | None:
        log = structlog.get_logger()
        try:
            response = self._request("GET", f"/v1/database/{name_or_identity}")
            if not response.is_success:
                log.error(
                    "failed to fetch database info",
                    database=name_or_identity,
                    reason=response.reason_phrase,
                )
                return None
            data = response.json()
            return DatabaseInfo(
                identity=data.get("identity"),
                name=data.get("name") or name_or_identity,
                owner_identity=data.get("owner_identity") or "",
                host_type=data.get("host_type") or "unknown",
            )
        except (NetworkError, ValueError, AttributeError) as e:
            log.error("failed to fetch database info", error=str(e))
            return None

    def delete_database(self, name_or_identity: str) -> bool:
        log = structlog.get_logger()
        try:
            response = self._request("DELETE", f"/v1/database/{name_or_identity}")
        except NetworkError as e:
            log.error("failed to delete database", error=e.message)
            return False
        return response.is_success

    def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._http is not None:
            self._http.close()
            self._http = None

