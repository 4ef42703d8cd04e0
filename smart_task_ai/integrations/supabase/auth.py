from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from smart_task_ai.integrations.supabase.client import (
    DEFAULT_TIMEOUT_SECONDS,
    SupabaseError,
    _extract_error_message,
)
from smart_task_ai.models import AuthSessionData, AuthUser


class AuthError(SupabaseError):
    """Raised when sign-in, sign-up or a session lookup is rejected."""


def parse_user(payload: Mapping[str, Any]) -> AuthUser:
    user_id = payload.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise AuthError("Auth response did not contain a user id.")
    email = payload.get("email")
    return AuthUser(id=user_id, email=email if isinstance(email, str) else "")


def _expires_at(payload: Mapping[str, Any]) -> Optional[int]:
    # GoTrue sends an absolute ``expires_at`` (epoch seconds) next to ``expires_in``.
    expires_at = payload.get("expires_at")
    if isinstance(expires_at, (int, float)) and not isinstance(expires_at, bool):
        return int(expires_at)
    expires_in = payload.get("expires_in")
    if isinstance(expires_in, (int, float)) and not isinstance(expires_in, bool):
        return int(time.time() + expires_in)
    return None


def parse_session(payload: Mapping[str, Any]) -> Optional[AuthSessionData]:
    """Build session data from a GoTrue token response.

    Sign-up with email confirmation enabled returns a bare user without a
    token; that case yields ``None``.
    """

    access_token = payload.get("access_token")
    if not isinstance(access_token, str) or not access_token:
        return None
    raw_user = payload.get("user")
    if not isinstance(raw_user, Mapping):
        raise AuthError("Auth response did not contain a user.")
    refresh_token = payload.get("refresh_token")
    return AuthSessionData(
        access_token=access_token,
        refresh_token=refresh_token if isinstance(refresh_token, str) else None,
        expires_at=_expires_at(payload),
        user=parse_user(raw_user),
    )


@dataclass
class SupabaseAuthClient:
    """GoTrue REST calls used by the session boundary."""

    url: Optional[str]
    api_key: Optional[str]
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    transport: Optional[httpx.BaseTransport] = field(default=None, repr=False)

    def _post(
        self,
        path: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Any:
        return self._send("POST", path, json=json, params=params, access_token=access_token)

    def _send(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Mapping[str, Any]] = None,
        params: Optional[Mapping[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> Any:
        if not self.url or not self.api_key:
            raise AuthError("Supabase is not configured (SUPABASE_URL / SUPABASE_ANON_KEY missing).")
        headers = {"apikey": self.api_key, "Accept": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(
                    method,
                    f"{self.url.rstrip('/')}/auth/v1{path}",
                    json=dict(json) if json is not None else None,
                    params=params,
                    headers=headers,
                )
        except httpx.RequestError as exc:
            raise AuthError("Auth request failed.") from exc

        if response.status_code >= 400:
            raise AuthError(
                _extract_error_message(response, "Auth request failed"),
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise AuthError("Auth service returned an unexpected response.") from exc

    def sign_in_with_password(self, email: str, password: str) -> AuthSessionData:
        payload = self._post(
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = parse_session(payload) if isinstance(payload, Mapping) else None
        if session is None:
            raise AuthError("Sign-in did not return a session.")
        return session

    def sign_up(self, email: str, password: str) -> Optional[AuthSessionData]:
        payload = self._post("/signup", json={"email": email, "password": password})
        if not isinstance(payload, Mapping):
            raise AuthError("Sign-up returned an unexpected response.")
        return parse_session(payload)

    def refresh_session(self, refresh_token: str) -> AuthSessionData:
        payload = self._post(
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        session = parse_session(payload) if isinstance(payload, Mapping) else None
        if session is None:
            raise AuthError("Session refresh did not return a session.")
        return session

    def get_user(self, access_token: str) -> AuthUser:
        payload = self._send("GET", "/user", access_token=access_token)
        if not isinstance(payload, Mapping):
            raise AuthError("User lookup returned an unexpected response.")
        return parse_user(payload)

    def sign_out(self, access_token: str) -> None:
        self._post("/logout", access_token=access_token)


__all__ = ["AuthError", "SupabaseAuthClient", "parse_session", "parse_user"]
