# Overview: Users store; admin user management plus the logged-in user's own profile.

from __future__ import annotations

from typing import Optional

from ..envelope import unwrap_entity
from ..errors import APIError, ValidationError
from .resource_store import ResourceStore
from .session_service import ROLES

USER_FIELDS = {"name", "email", "phone", "role", "password", "password_confirmation", "avatar"}


def normalize_user(user):
    """Flatten role objects ({"name": "admin"}) and user_id -> id."""
    if not isinstance(user, dict):
        return user
    role = user.get("role")
    if isinstance(role, dict):
        role = role.get("name")
    return {
        **user,
        "role": role or "customer",
        "id": user.get("id", user.get("user_id")),
    }


class UserStore(ResourceStore):
    """
    Users are listed from /users. An `avatar` upload makes an update
    multipart, sent as POST + _method=PUT.
    """

    base_path = "/users"
    singular = "user"
    plural = "users"
    collection_keys = ("users",)

    STATE_FIELDS = ResourceStore.STATE_FIELDS + ("profile",)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.profile: Optional[dict] = None

    def normalize_record(self, record):
        return normalize_user(record)

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        wire = {k: v for k, v in payload.items() if k in USER_FIELDS}
        if "role" in wire and wire["role"] is not None:
            role = str(wire["role"]).strip().lower()
            if role not in ROLES:
                raise ValidationError(f"role must be one of: {', '.join(ROLES)}")
            wire["role"] = role
        if not partial:
            missing = [f for f in ("name", "email") if not wire.get(f)]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        return wire

    def fetch_profile(self) -> Optional[dict]:
        """The logged-in user's own record from /profile."""
        if not self.token_provider():
            self._set(error="No token found. Please log in.")
            return None

        self._set(loading=True, error=None)
        try:
            res = self.api.request("/profile", "GET")
        except APIError as exc:
            self._fail(exc, "Failed to fetch user", loading=False)
            raise

        user = res.get("user") if isinstance(res, dict) and "user" in res else unwrap_entity(res)
        profile = normalize_user(user)
        self._set(profile=profile, loading=False)
        return profile

    def update_profile(self, payload: dict) -> dict:
        """Update the logged-in user; the users list entry is replaced too."""
        if self.profile is None:
            raise ValidationError("No logged-in user")
        return self.update(self.profile["id"], payload)

    def update(self, record_id, payload: dict) -> dict:
        entity = super().update(record_id, payload)
        if isinstance(self.profile, dict) and self.same_id(self.profile.get("id"), record_id):
            self._set(profile=entity)
        return entity

    def clear(self) -> None:
        super().clear()
        self._set(profile=None)
