from __future__ import annotations

import json

import httpx
import pytest

from smart_task_ai.integrations.supabase import AuthError, SupabaseAuthClient, parse_session

SESSION_PAYLOAD = {
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "user": {"id": "user-1", "email": "ada@example.com"},
}


def _client(handler) -> SupabaseAuthClient:
    return SupabaseAuthClient(
        url="https://example.supabase.co/",
        api_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


def test_sign_in_uses_password_grant() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=SESSION_PAYLOAD)

    session = _client(handler).sign_in_with_password("ada@example.com", "secret")

    assert session.access_token == "access-1"
    assert session.user.email == "ada@example.com"
    request = seen[0]
    assert request.url.path == "/auth/v1/token"
    assert request.url.params["grant_type"] == "password"
    assert json.loads(request.content) == {"email": "ada@example.com", "password": "secret"}
    assert request.headers["apikey"] == "anon-key"


def test_sign_in_rejection_surfaces_message() -> None:
    client = _client(lambda request: httpx.Response(400, json={"error_description": "Invalid login credentials"}))

    with pytest.raises(AuthError, match="Invalid login credentials"):
        client.sign_in_with_password("ada@example.com", "wrong")


def test_sign_up_requiring_confirmation_returns_none() -> None:
    client = _client(lambda request: httpx.Response(200, json={"id": "user-1", "email": "ada@example.com"}))

    assert client.sign_up("ada@example.com", "secret") is None


def test_get_user_sends_bearer_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "user-1", "email": "ada@example.com"})

    user = _client(handler).get_user("access-1")

    assert user.id == "user-1"
    assert seen[0].method == "GET"
    assert seen[0].headers["Authorization"] == "Bearer access-1"


def test_sign_out_posts_logout() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    _client(handler).sign_out("access-1")

    assert seen[0].url.path == "/auth/v1/logout"


def test_parse_session_requires_user_when_token_present() -> None:
    with pytest.raises(AuthError):
        parse_session({"access_token": "access-1"})

    assert parse_session({"user": {"id": "user-1"}}) is None


def test_unconfigured_client_raises_auth_error() -> None:
    with pytest.raises(AuthError):
        SupabaseAuthClient(url=None, api_key=None).get_user("token")


def test_parse_session_reads_expiry() -> None:
    session = parse_session({**SESSION_PAYLOAD, "expires_at": 1715000000, "expires_in": 3600})

    assert session is not None
    assert session.expires_at == 1715000000


def test_parse_session_derives_expiry_from_lifetime(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("smart_task_ai.integrations.supabase.auth.time.time", lambda: 1000.0)

    session = parse_session({**SESSION_PAYLOAD, "expires_in": 3600})

    assert session is not None
    assert session.expires_at == 4600


def test_refresh_rejection_keeps_status_code() -> None:
    client = _client(lambda request: httpx.Response(400, json={"error_description": "Invalid Refresh Token"}))

    with pytest.raises(AuthError, match="Invalid Refresh Token") as excinfo:
        client.refresh_session("refresh-1")

    assert excinfo.value.status_code == 400
