# Overview: Item <-> option group assignments; optimistic attach/detach with exact rollback.

from __future__ import annotations

from typing import Callable, Optional

from ..api_client import APIClient
from ..envelope import unwrap_entity
from ..errors import APIError, AuthenticationRequired, ValidationError, describe_error, is_token_expired
from .optimistic import run_optimistic
from .resource_store import NO_TOKEN_MESSAGE
from .sequencing import RequestSequence
from .state import StateContainer


class AssignmentStore(StateContainer):
    """
    Many-to-many link between an item and option groups, keyed by
    (item_id, item_option_group_id). Links are created and deleted on their
    own, independent of the item and group lifecycles.

    State:
    - item:          the item whose groups are shown (when the server sends it)
    - option_groups: groups currently attached to that item
    """

    base_path = "/admin/item-option-group-assignments"

    STATE_FIELDS = ("item", "item_id", "option_groups", "loading", "error")

    def __init__(
        self,
        api: APIClient,
        token_provider: Callable[[], Optional[str]],
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        super().__init__()
        self.api = api
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        self.sequence = RequestSequence()

        self.item: Optional[dict] = None
        self.item_id = None
        self.option_groups: list[dict] = []
        self.loading = False
        self.error: Optional[str] = None

    def _require_token(self) -> None:
        if not self.token_provider():
            self._set(error=NO_TOKEN_MESSAGE)
            raise AuthenticationRequired(NO_TOKEN_MESSAGE)

    def _fail(self, exc: Exception, fallback: str, **changes) -> None:
        self._set(error=describe_error(exc, fallback), **changes)
        if is_token_expired(exc) and self.on_unauthorized is not None:
            self.on_unauthorized()

    def _require_loaded(self, item_id) -> None:
        """Local option_groups describe self.item_id only."""
        if self.item_id is not None and str(self.item_id) != str(item_id):
            raise ValidationError(
                f"Option groups are loaded for item {self.item_id}, not {item_id}"
            )

    @staticmethod
    def _split(payload) -> tuple[Optional[dict], Optional[list]]:
        """
        Server answers with either the item carrying `optionGroups` (or
        `option_groups`), or a bare list of groups.
        """
        entity = unwrap_entity(payload)
        if isinstance(entity, list):
            return None, entity
        if isinstance(entity, dict):
            groups = entity.get("optionGroups", entity.get("option_groups"))
            if isinstance(groups, list):
                return entity, groups
        # a bare assignment record: keep local state as applied
        return None, None

    def _reconcile(self, res) -> dict:
        item, groups = self._split(res)
        changes = {}
        if item is not None:
            changes["item"] = item
        if groups is not None:
            changes["option_groups"] = groups
        return changes

    def fetch_for_item(self, item_id) -> list:
        if not self.token_provider():
            self._set(error=NO_TOKEN_MESSAGE)
            return []

        ticket = self.sequence.next()
        self._set(loading=True, error=None, item_id=item_id)
        try:
            res = self.api.request(self.base_path, "GET", params={"item_id": item_id})
        except APIError as exc:
            if self.sequence.is_current(ticket):
                self._fail(exc, "Failed to fetch option groups", loading=False)
            raise

        item, groups = self._split(res)
        groups = list(groups or [])
        if not self.sequence.is_current(ticket):
            # another item was opened meanwhile
            return groups
        self._set(item=item, option_groups=groups, loading=False)
        return groups

    def is_attached(self, group_id) -> bool:
        return any(str(g.get("id")) == str(group_id) for g in self.option_groups)

    def assign_option_group(self, item_id, group: dict) -> Optional[dict]:
        """
        Attach `group` to the item. The group shows up locally at once; on
        failure option_groups (and item) return to exactly what they were.
        """
        self._require_token()
        self._require_loaded(item_id)
        group_id = group.get("id")
        if group_id is None:
            raise ValidationError("Option group id is required")
        if self.is_attached(group_id):
            return self.item

        def mutate():
            return {"option_groups": [*self.option_groups, group], "error": None}

        def call():
            return self.api.request(
                self.base_path, "POST",
                {"item_id": item_id, "item_option_group_id": group_id},
            )

        try:
            run_optimistic(self, ("item", "option_groups"), mutate, call, self._reconcile)
        except APIError as exc:
            self._fail(exc, "Failed to assign option group")
            raise
        return self.item

    def remove_option_group(self, item_id, group_id) -> None:
        """Detach a group; restored locally if the server refuses."""
        self._require_token()
        self._require_loaded(item_id)

        def mutate():
            return {
                "option_groups": [g for g in self.option_groups if str(g.get("id")) != str(group_id)],
                "error": None,
            }

        def call():
            return self.api.request(f"{self.base_path}/{item_id}/{group_id}", "DELETE")

        try:
            run_optimistic(self, ("item", "option_groups"), mutate, call, self._reconcile)
        except APIError as exc:
            self._fail(exc, "Failed to remove option group")
            raise

    def clear(self) -> None:
        self.sequence.invalidate()
        self._set(item=None, item_id=None, option_groups=[], loading=False, error=None)
