from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, MutableMapping, Optional, Protocol

from smart_task_ai.constants import SS_AUTH_SESSION
from smart_task_ai.integrations.supabase import AuthError, SupabaseError
from smart_task_ai.models import AuthSessionData, AuthUser

LOGGER = logging.getLogger(__name__)

AuthListener = Callable[[Optional[AuthUser]], None]

REFRESH_MARGIN_SECONDS = 60.0


class AuthProvider(Protocol):
    """External auth service; see ``SupabaseAuthClient``."""

    def sign_in_with_password(self, email: str, password: str) -> AuthSessionData: ...

    def sign_up(self, email: str, password: str) -> Optional[AuthSessionData]: ...

    def refresh_session(self, refresh_token: str) -> AuthSessionData: ...

    def get_user(self, access_token: str) -> AuthUser: ...

    def sign_out(self, access_token: str) -> None: ...


@dataclass
class Subscription:
    """Handle returned by ``AuthSession.init``; disposing it stops notifications."""

    callback: Optional[AuthListener]

    @property
    def active(self) -> bool:
        return self.callback is not None

    def unsubscribe(self) -> None:
        self.callback = None


class AuthSession:
    """Owns the signed-in session and the single change subscription.

    Session tokens live in ``storage`` (Streamlit session state in the app) so
    they survive reruns of the script.
    """

    def __init__(self, provider: AuthProvider, storage: MutableMapping[str, object]) -> None:
        self.provider = provider
        self.storage = storage
        self._subscription: Optional[Subscription] = None

    def _stored(self) -> Optional[AuthSessionData]:
        raw = self.storage.get(SS_AUTH_SESSION)
        if raw is None:
            return None
        if isinstance(raw, AuthSessionData):
            return raw
        return AuthSessionData.model_validate(raw)

    def _store(self, session: Optional[AuthSessionData]) -> None:
        if session is None:
            self.storage.pop(SS_AUTH_SESSION, None)
        else:
            self.storage[SS_AUTH_SESSION] = session.model_dump()

    def _notify(self) -> None:
        if self._subscription is not None and self._subscription.callback is not None:
            self._subscription.callback(self.current())

    def _restore(self) -> None:
        stored = self._stored()
        if stored is None:
            return
        try:
            user = self.provider.get_user(stored.access_token)
            self._store(stored.model_copy(update={"user": user}))
            return
        except SupabaseError as exc:
            LOGGER.info("Stored session rejected: %s", exc)

        if stored.refresh_token:
            try:
                self._store(self.provider.refresh_session(stored.refresh_token))
                return
            except SupabaseError as exc:
                LOGGER.warning("Session refresh failed: %s", exc)
        self._store(None)

    def init(self, on_change: AuthListener) -> Subscription:
        """Restore a persisted session, subscribe ``on_change`` and deliver the current user."""

        if self._subscription is not None:
            self._subscription.unsubscribe()
        self._restore()
        self._subscription = Subscription(callback=on_change)
        self._notify()
        return self._subscription

    def current(self) -> Optional[AuthUser]:
        stored = self._stored()
        return stored.user if stored is not None else None

    @property
    def access_token(self) -> Optional[str]:
        stored = self._stored()
        return stored.access_token if stored is not None else None

    def refresh(self, *, notify: bool = True) -> Optional[AuthUser]:
        """Exchange the refresh token for a new access token.

        When the refresh is rejected the session is dropped and listeners are
        told the user signed out, whatever ``notify`` says.
        """

        stored = self._stored()
        if stored is None:
            return None
        if stored.refresh_token:
            try:
                session = self.provider.refresh_session(stored.refresh_token)
            except SupabaseError as exc:
                LOGGER.warning("Session refresh failed: %s", exc)
            else:
                self._store(session)
                if notify:
                    self._notify()
                return session.user
        self._store(None)
        self._notify()
        return None

    def refresh_if_expiring(self, *, now: Optional[float] = None, margin: float = REFRESH_MARGIN_SECONDS) -> bool:
        """Refresh ahead of expiry; returns True when a refresh was attempted."""

        stored = self._stored()
        if stored is None or stored.expires_at is None:
            return False
        current = time.time() if now is None else now
        if stored.expires_at - margin > current:
            return False
        LOGGER.info("Access token expires at %s, refreshing", stored.expires_at)
        self.refresh(notify=False)
        return True

    def sign_in(self, email: str, password: str) -> AuthUser:
        session = self.provider.sign_in_with_password(email.strip(), password)
        self._store(session)
        self._notify()
        return session.user

    def sign_up(self, email: str, password: str) -> Optional[AuthUser]:
        """Register a user; returns ``None`` when the provider requires email confirmation first."""

        session = self.provider.sign_up(email.strip(), password)
        if session is None:
            return None
        self._store(session)
        self._notify()
        return session.user

    def sign_out(self) -> None:
        token = self.access_token
        if token:
            try:
                self.provider.sign_out(token)
            except SupabaseError as exc:
                LOGGER.warning("Remote sign-out failed: %s", exc)
        self._store(None)
        self._notify()

    def teardown(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None


__all__ = ["REFRESH_MARGIN_SECONDS", "AuthError", "AuthListener", "AuthProvider", "AuthSession", "Subscription"]
