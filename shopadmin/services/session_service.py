# Overview: Session store; owns the bearer token and current user, persisted across restarts.

"""
Session Store

STATES: anonymous -> authenticating -> authenticated, and back to anonymous on
logout or when the backend rejects the token.

PERSISTENCE: {token, user} are written to durable storage under a namespaced
key on every change. hydrate() loads them back and flips is_hydrated exactly
once; nothing should act on session state before that (a token that reads as
None only because storage has not been read yet would trigger a bogus
redirect to login).

CONCURRENCY: concurrent login() calls are not deduplicated; last write wins.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..api_client import APIClient
from ..errors import (
    APIError,
    AuthenticationError,
    AuthenticationRejected,
    SessionNotHydrated,
    describe_error,
)
from ..storage import KeyValueStorage
from .state import StateContainer

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
AUTHENTICATING = "authenticating"
AUTHENTICATED = "authenticated"

ROLES = ("admin", "owner", "customer")


class SessionStore(StateContainer):
    STATE_FIELDS = ("user", "token", "status", "loading", "error", "is_hydrated")
    PERSISTED_FIELDS = ("token", "user")

    def __init__(self, api: APIClient, storage: Optional[KeyValueStorage] = None, storage_key: str = "auth-storage"):
        super().__init__()
        self.api = api
        self.storage = storage
        self.storage_key = storage_key

        self.user: Optional[dict] = None
        self.token: Optional[str] = None
        self.status: str = ANONYMOUS
        self.loading = False
        self.error: Optional[str] = None
        self.is_hydrated = False

    # ------------------------------------------------------------------
    # State + persistence
    # ------------------------------------------------------------------

    def _set(self, **changes) -> None:
        super()._set(**changes)
        if self.is_hydrated and any(k in self.PERSISTED_FIELDS for k in changes):
            self._persist()

    def _persist(self) -> None:
        if self.storage is None:
            return
        if self.token is None and self.user is None:
            self.storage.remove(self.storage_key)
        else:
            self.storage.save(self.storage_key, {"token": self.token, "user": self.user})

    def _clear_credentials(self) -> None:
        self._set(user=None, token=None, status=ANONYMOUS)

    def expire(self) -> None:
        """Drop the session after a store call came back 401."""
        if self.token is None and self.user is None:
            return
        logger.info("Token rejected by the backend; clearing session")
        self._clear_credentials()

    def hydrate(self) -> "SessionStore":
        """
        Load persisted {token, user}. is_hydrated flips True exactly once;
        later calls are no-ops.
        """
        if self.is_hydrated:
            return self

        saved = self.storage.load(self.storage_key) if self.storage is not None else None
        token = user = None
        if isinstance(saved, dict):
            token = saved.get("token") or None
            user = saved.get("user") or None

        if user is not None and token is None:
            # user without token cannot be trusted
            user = None

        status = AUTHENTICATED if (token and user) else ANONYMOUS
        self._set(token=token, user=user, status=status, is_hydrated=True)
        return self

    def require_hydrated(self) -> None:
        if not self.is_hydrated:
            raise SessionNotHydrated("Session state has not been loaded from storage yet")

    def bootstrap(self) -> Optional[dict]:
        """
        App start: hydrate, then re-authenticate when a token survived but the
        user object did not. Returns the current user (or None).
        """
        self.hydrate()
        if self.token and self.user is None:
            return self.login_with_token(self.token)
        return self.user

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def login(self, identifier: str, secret: str) -> dict:
        """
        Authenticate with credentials.

        Returns {"user": ..., "token": ...}. On failure the prior session is
        left untouched and AuthenticationError is raised with the server
        message (or "Login failed").
        """
        previous_status = self.status
        self._set(loading=True, error=None, status=AUTHENTICATING)
        try:
            res = self.api.request("/login", "POST", {"login": identifier, "password": secret})
            user = res.get("user") if isinstance(res, dict) else None
            token = res.get("token") if isinstance(res, dict) else None
            if not user or not token:
                raise AuthenticationError("Invalid login response")
        except APIError as exc:
            msg = describe_error(exc, "Login failed")
            self._set(error=msg, status=previous_status)
            if isinstance(exc, AuthenticationError):
                raise
            raise AuthenticationError(
                msg,
                status_code=exc.status_code,
                server_message=exc.server_message,
                validation_message=exc.validation_message,
                payload=exc.payload,
            ) from exc
        finally:
            self._set(loading=False)

        self._set(user=user, token=token, status=AUTHENTICATED)
        logger.info("Logged in as %s", user.get("email") or user.get("id"))
        return {"user": user, "token": token}

    def login_with_token(self, token: str) -> dict:
        """
        Re-authenticate from a persisted token.

        The token is set speculatively, then /profile is requested with it.
        Any failure clears both token and user before re-raising.
        """
        self._set(loading=True, token=token, status=AUTHENTICATING)
        try:
            res = self.api.request(
                "/profile", "GET",
                headers={"Authorization": f"Bearer {token}"},
            )
            user = res.get("user") if isinstance(res, dict) else None
            if not user:
                raise AuthenticationRejected("Failed to fetch user")
        except Exception as exc:
            self._clear_credentials()
            self._set(error=describe_error(exc, "Failed to fetch user"))
            raise
        finally:
            self._set(loading=False)

        self._set(user=user, status=AUTHENTICATED, error=None)
        return user

    def fetch_profile(self) -> Optional[dict]:
        """Refresh the current user from /profile."""
        if not self.token:
            self._set(error="No token found. Please log in.")
            return None
        try:
            res = self.api.request("/profile", "GET")
        except AuthenticationRejected as exc:
            self._clear_credentials()
            self._set(error=describe_error(exc, "Failed to fetch user"))
            raise
        except APIError as exc:
            self._set(error=describe_error(exc, "Failed to fetch user"))
            raise
        user = res.get("user") if isinstance(res, dict) else None
        if user:
            self._set(user=user)
        return user

    def logout(self) -> None:
        """Best-effort server logout, then unconditional local logout."""
        if self.token:
            try:
                self.api.request(
                    "/logout", "POST",
                    headers={"Authorization": f"Bearer {self.token}"},
                )
            except APIError as exc:
                logger.warning("Server logout failed: %s", exc)
        self._set(user=None, token=None, status=ANONYMOUS, error=None)

    # ------------------------------------------------------------------
    # UI gating helpers (affordance only; the backend enforces access)
    # ------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self.status == AUTHENTICATED and bool(self.token) and self.user is not None

    @property
    def role(self) -> Optional[str]:
        if not self.user:
            return None
        role = self.user.get("role")
        if isinstance(role, dict):
            role = role.get("name")
        return role

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    @property
    def is_admin(self) -> bool:
        return self.has_role("admin")

    def current_token(self) -> Optional[str]:
        """Token provider handed to the HTTP client."""
        return self.token
