from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

import httpx
from pydantic_core import to_jsonable_python

DEFAULT_TIMEOUT_SECONDS = 10.0


class SupabaseError(RuntimeError):
    """Raised when a Supabase request fails or returns an unexpected payload."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class StoreWriteError(SupabaseError):
    """Raised when a write is acknowledged but no row comes back."""


def _extract_error_message(response: httpx.Response, default: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"{default} (status {response.status_code})"
    if isinstance(payload, dict):
        for key in ("message", "error_description", "msg", "error"):
            message = payload.get(key)
            if isinstance(message, str) and message:
                return f"{default}: {message}"
    return f"{default} (status {response.status_code})"


def _eq(value: str) -> str:
    return f"eq.{value}"


@dataclass
class SupabaseRestClient:
    """Minimal PostgREST client for one Supabase project."""

    url: Optional[str]
    api_key: Optional[str]
    access_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)

    def _base_url(self) -> str:
        if not self.url or not self.api_key:
            raise SupabaseError("Supabase is not configured (SUPABASE_URL / SUPABASE_ANON_KEY missing).")
        return self.url.rstrip("/")

    def _headers(self, *, prefer: Optional[str] = None) -> dict[str, str]:
        token = self.access_token or self.api_key or ""
        headers = {
            "apikey": self.api_key or "",
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> Any:
        url = f"{self._base_url()}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    url,
                    params=params,
                    json=to_jsonable_python(json) if json is not None else None,
                    headers=self._headers(prefer=prefer),
                )
        except httpx.RequestError as exc:
            raise SupabaseError("Supabase request failed.") from exc

        if response.status_code >= 400:
            raise SupabaseError(
                _extract_error_message(response, "Supabase request failed"),
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise SupabaseError("Supabase returned an unexpected response.") from exc

    def select(
        self,
        table: str,
        *,
        filters: Mapping[str, str],
        order: Optional[str] = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        params = {"select": columns, **{key: _eq(value) for key, value in filters.items()}}
        if order:
            params["order"] = order
        data = self._request("GET", f"/rest/v1/{table}", params=params)
        if not isinstance(data, list):
            raise SupabaseError("Supabase returned an unexpected response.")
        return [row for row in data if isinstance(row, dict)]

    def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        data = self._request(
            "POST",
            f"/rest/v1/{table}",
            params={"select": "*"},
            json=[dict(row)],
            prefer="return=representation",
        )
        rows: Sequence[Any] = data if isinstance(data, list) else []
        if not rows or not isinstance(rows[0], dict):
            raise StoreWriteError("Supabase insert returned no row.")
        return rows[0]

    def update(self, table: str, values: Mapping[str, Any], *, filters: Mapping[str, str]) -> None:
        params = {key: _eq(value) for key, value in filters.items()}
        self._request("PATCH", f"/rest/v1/{table}", params=params, json=dict(values), prefer="return=minimal")

    def delete(self, table: str, *, filters: Mapping[str, str]) -> None:
        params = {key: _eq(value) for key, value in filters.items()}
        self._request("DELETE", f"/rest/v1/{table}", params=params, prefer="return=minimal")


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "StoreWriteError",
    "SupabaseError",
    "SupabaseRestClient",
]
