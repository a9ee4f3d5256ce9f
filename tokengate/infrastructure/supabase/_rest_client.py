"""Thin Supabase PostgREST client (no supabase-py).

Uses the PostgREST HTTP API directly: GET/POST/PATCH/HEAD on
/rest/v1/<table> with `column=op.value` filters, and POST /rest/v1/rpc/<fn>
for aggregation functions. All HTTP calls use httpx.AsyncClient so they do
not block the event loop. Failures are raised as infrastructure exceptions
(see tokengate.infrastructure.exceptions); nothing is retried.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import httpx

from tokengate.infrastructure.exceptions import (
    StoreAuthorizationError,
    StoreConstraintError,
    StoreUnavailableError,
)
from tokengate.shared.utils.datetime import to_iso

_REST_PATH = "/rest/v1"


def _encode_filter_value(value: Any) -> str:
    """Render a Python value the way PostgREST expects it in a filter."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return to_iso(value)
    return str(value)


def _encode_body(row: dict[str, Any]) -> dict[str, Any]:
    """JSON-encode datetimes in a request body."""
    out: dict[str, Any] = {}
    for key, value in row.items():
        out[key] = to_iso(value) if isinstance(value, datetime) else value
    return out


def _error_text(resp: httpx.Response) -> str:
    """Best-effort backend error message for logs (PostgREST returns {code, message, details})."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:300]
    if isinstance(body, dict):
        return " ".join(str(body[k]) for k in ("code", "message", "details") if body.get(k))
    return str(body)[:300]


def _parse_content_range_total(header: str | None) -> int:
    """Return the total from a Content-Range header such as '0-9/42' or '*/0'."""
    if not header or "/" not in header:
        return 0
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else 0


async def _request_async(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    operation: str,
    resource: str,
    headers: dict[str, str],
    params: list[tuple[str, str]] | None = None,
    body: Any = None,
) -> httpx.Response:
    """Perform one store request and map failures to infrastructure exceptions."""
    try:
        resp = await client.request(method, url, headers=headers, params=params, json=body)
    except httpx.HTTPError as exc:
        raise StoreUnavailableError(operation, None, type(exc).__name__) from exc
    if resp.status_code in (401, 403):
        raise StoreAuthorizationError(operation, resp.status_code, _error_text(resp))
    if resp.status_code == 409:
        raise StoreConstraintError(resource, operation, _error_text(resp))
    if resp.status_code >= 400:
        raise StoreUnavailableError(operation, resp.status_code, _error_text(resp))
    return resp


class TableQuery:
    """Fluent query builder for one table; filters run on the server.

    Builders mutate and return self, so create one per call via
    SupabaseRESTClient.table().
    """

    def __init__(self, client: SupabaseRESTClient, table: str) -> None:
        self._client = client
        self._table = table
        self._select = "*"
        self._filters: list[tuple[str, str]] = []
        self._order: str | None = None
        self._limit: int | None = None
        self._offset: int | None = None

    @property
    def _url(self) -> str:
        return f"{self._client.rest_url}/{self._table}"

    def select(self, columns: str) -> TableQuery:
        self._select = columns
        return self

    def _filter(self, column: str, op: str, value: Any) -> TableQuery:
        self._filters.append((column, f"{op}.{_encode_filter_value(value)}"))
        return self

    def eq(self, column: str, value: Any) -> TableQuery:
        return self._filter(column, "eq", value)

    def is_(self, column: str, value: bool | None) -> TableQuery:
        return self._filter(column, "is", value)

    def not_is(self, column: str, value: bool | None) -> TableQuery:
        return self._filter(column, "not.is", value)

    def gte(self, column: str, value: Any) -> TableQuery:
        return self._filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> TableQuery:
        return self._filter(column, "lt", value)

    def order(self, column: str, descending: bool = False) -> TableQuery:
        self._order = f"{column}.{'desc' if descending else 'asc'}"
        return self

    def limit(self, n: int) -> TableQuery:
        self._limit = n
        return self

    def offset(self, n: int) -> TableQuery:
        self._offset = n
        return self

    def _params(self, *, with_select: bool = True) -> list[tuple[str, str]]:
        params: list[tuple[str, str]] = []
        if with_select:
            params.append(("select", self._select))
        params.extend(self._filters)
        if self._order:
            params.append(("order", self._order))
        if self._limit is not None:
            params.append(("limit", str(self._limit)))
        if self._offset:
            params.append(("offset", str(self._offset)))
        return params

    async def execute(self) -> list[dict[str, Any]]:
        """GET matching rows."""
        resp = await _request_async(
            self._client.http,
            "GET",
            self._url,
            operation=f"select {self._table}",
            resource=self._table,
            headers=self._client.headers(),
            params=self._params(),
        )
        data = resp.json()
        return data if isinstance(data, list) else []

    async def first(self) -> dict[str, Any] | None:
        """GET the first matching row, or None."""
        self._limit = 1
        rows = await self.execute()
        return rows[0] if rows else None

    async def count(self) -> int:
        """Exact row count for the filters (HEAD with Prefer: count=exact)."""
        resp = await _request_async(
            self._client.http,
            "HEAD",
            self._url,
            operation=f"count {self._table}",
            resource=self._table,
            headers=self._client.headers(prefer="count=exact"),
            params=self._params(),
        )
        return _parse_content_range_total(resp.headers.get("content-range"))

    async def insert(self, row: dict[str, Any]) -> dict[str, Any]:
        """POST one row and return it as stored (defaults filled in by the store)."""
        resp = await _request_async(
            self._client.http,
            "POST",
            self._url,
            operation=f"insert {self._table}",
            resource=self._table,
            headers=self._client.headers(prefer="return=representation"),
            params=[("select", self._select)],
            body=_encode_body(row),
        )
        rows = resp.json()
        if not rows:
            raise StoreUnavailableError(f"insert {self._table}", resp.status_code, "empty representation")
        return rows[0]

    async def update(self, patch: dict[str, Any]) -> list[dict[str, Any]]:
        """PATCH every row matching the filters; return the updated rows.

        The filters are evaluated atomically with the write, so a filter on
        the current value (e.g. is_used=is.false) acts as compare-and-set:
        an empty result means no row matched.
        """
        if not self._filters:
            raise ValueError("Refusing to update without filters")
        resp = await _request_async(
            self._client.http,
            "PATCH",
            self._url,
            operation=f"update {self._table}",
            resource=self._table,
            headers=self._client.headers(prefer="return=representation"),
            params=self._params(),
            body=_encode_body(patch),
        )
        data = resp.json() if resp.content else []
        return data if isinstance(data, list) else []


class SupabaseRESTClient:
    """Lightweight Supabase client over REST: PostgREST tables, RPC, and edge function URLs."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.rest_url = f"{self.base_url}{_REST_PATH}"
        self._api_key = api_key
        self.http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self.http.aclose()

    def headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def table(self, name: str) -> TableQuery:
        return TableQuery(self, name)

    async def rpc(self, function: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """Call a store function (POST /rest/v1/rpc/<function>) and return its rows."""
        resp = await _request_async(
            self.http,
            "POST",
            f"{self.rest_url}/rpc/{function}",
            operation=f"rpc {function}",
            resource=function,
            headers=self.headers(),
            body=params,
        )
        data = resp.json() if resp.content else []
        return data if isinstance(data, list) else [data]
