"""Async client for the Supabase REST (PostgREST) interface."""

from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any, Mapping, Optional

import aiohttp

from .logger import get_logger

if TYPE_CHECKING:
    from .realtime import RealtimeChannel

logger = get_logger()

REST_PREFIX = "/rest/v1"
_CONTENT_RANGE_TOTAL = re.compile(r"/(\d+|\*)$")


class StoreError(Exception):
    """A store request failed or was rejected."""

    def __init__(self, message: str, *, status: Optional[int] = None, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.code = code


def _filter_params(
    eq: Optional[Mapping[str, Any]] = None,
    ilike: Optional[Mapping[str, Any]] = None,
) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    for column, value in (eq or {}).items():
        params.append((column, f"eq.{value}"))
    for column, value in (ilike or {}).items():
        params.append((column, f"ilike.{value}"))
    return params


class StoreGateway:
    """Thin row-level client over one shared HTTP session.

    Filters are passed as ``eq={"column": value}`` / ``ilike={...}`` and
    translated to PostgREST query operators.
    """

    def __init__(self, url: str, service_key: str, *, timeout: float = 15.0) -> None:
        self.url = url.rstrip("/")
        self.service_key = service_key
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
        }

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError("Store session not initialized.")
        return self._session

    async def connect(self) -> None:
        if self._session is None:
            self._session = aiohttp.ClientSession(headers=self.headers, timeout=self.timeout)
            logger.info("Store session opened for %s", self.url)

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[list[tuple[str, str]]] = None,
        payload: Any = None,
        prefer: Optional[str] = None,
    ) -> tuple[Any, Mapping[str, str]]:
        headers = {"Prefer": prefer} if prefer else None
        url = f"{self.url}{REST_PREFIX}/{path}"
        try:
            async with self.session.request(
                method, url, params=params, json=payload, headers=headers
            ) as response:
                if response.status >= 400:
                    await self._raise_for_response(response, method, path)
                if method == "HEAD" or response.status == 204:
                    return None, response.headers
                text = await response.text()
                if not text:
                    return None, response.headers
                return json.loads(text), response.headers
        except aiohttp.ClientError as exc:
            raise StoreError(f"{method} {path} failed: {exc}") from exc

    async def _raise_for_response(self, response: aiohttp.ClientResponse, method: str, path: str) -> None:
        message = response.reason or "request failed"
        code = None
        try:
            body = await response.json(content_type=None)
        except (ValueError, aiohttp.ContentTypeError):
            body = None
        if isinstance(body, dict):
            message = body.get("message") or message
            code = body.get("code")
        raise StoreError(f"{method} {path} -> {response.status}: {message}", status=response.status, code=code)

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Mapping[str, Any]] = None,
        ilike: Optional[Mapping[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        params = [("select", columns), *_filter_params(eq, ilike)]
        if limit is not None:
            params.append(("limit", str(limit)))
        rows, _ = await self._request("GET", table, params=params)
        return rows or []

    async def select_one(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Mapping[str, Any]] = None,
        ilike: Optional[Mapping[str, Any]] = None,
    ) -> Optional[dict[str, Any]]:
        rows = await self.select(table, columns, eq=eq, ilike=ilike, limit=1)
        return rows[0] if rows else None

    async def count(self, table: str, *, eq: Optional[Mapping[str, Any]] = None) -> int:
        params = [("select", "*"), *_filter_params(eq)]
        _, headers = await self._request("HEAD", table, params=params, prefer="count=exact")
        content_range = headers.get("Content-Range", "")
        match = _CONTENT_RANGE_TOTAL.search(content_range)
        if not match or match.group(1) == "*":
            raise StoreError(f"count on {table} returned no total (Content-Range: {content_range!r})")
        return int(match.group(1))

    async def insert(self, table: str, values: Mapping[str, Any]) -> list[dict[str, Any]]:
        rows, _ = await self._request("POST", table, payload=dict(values), prefer="return=representation")
        return rows or []

    async def upsert(self, table: str, values: Mapping[str, Any]) -> list[dict[str, Any]]:
        rows, _ = await self._request(
            "POST",
            table,
            payload=dict(values),
            prefer="resolution=merge-duplicates,return=representation",
        )
        return rows or []

    async def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        eq: Optional[Mapping[str, Any]] = None,
        ilike: Optional[Mapping[str, Any]] = None,
    ) -> list[dict[str, Any]]:
        if not eq and not ilike:
            raise ValueError("update requires at least one filter")
        rows, _ = await self._request(
            "PATCH",
            table,
            params=_filter_params(eq, ilike),
            payload=dict(values),
            prefer="return=representation",
        )
        return rows or []

    async def delete(self, table: str, *, eq: Mapping[str, Any]) -> None:
        if not eq:
            raise ValueError("delete requires at least one filter")
        await self._request("DELETE", table, params=_filter_params(eq))

    async def rpc(self, function: str, arguments: Mapping[str, Any]) -> Any:
        result, _ = await self._request("POST", f"rpc/{function}", payload=dict(arguments))
        return result

    def channel(self, name: str) -> RealtimeChannel:
        """Create a realtime channel bound to this gateway's session."""
        from .realtime import RealtimeChannel

        return RealtimeChannel(self, name)
