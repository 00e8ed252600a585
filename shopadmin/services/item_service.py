# Overview: Items store; catalog CRUD with server-side filtering, price conversion and availability toggles.

"""
Items Store

PRICES: callers work with decimal strings ("2.43", "1,5"); the wire always
carries integer cents. `price` is converted with pricing.to_cents, an
explicit `price_cents` must already be an integer amount of cents.

FILTERING: fetch_all forwards query / category_id / sort_by as query-string
parameters and never filters locally, so large catalogs stay server-paged.
"""
from __future__ import annotations

import logging
import threading
import weakref
from typing import Callable, Optional

from ..errors import APIError, ValidationError
from ..envelope import unwrap_entity
from ..pricing import coerce_cents, to_cents
from .optimistic import run_optimistic
from .resource_store import ResourceStore, parse_flag

logger = logging.getLogger(__name__)

ITEM_FIELDS = {
    "shop_id", "category_id", "name", "description", "price_cents",
    "is_available", "display_order", "image_url",
}
SORT_OPTIONS = ("name-asc", "name-desc", "price-asc", "price-desc")


class ItemStore(ResourceStore):
    base_path = "/admin/items"
    singular = "item"
    plural = "items"
    collection_keys = ("items",)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # searches the caller has dropped fall out on their own
        self._searches: "weakref.WeakSet[DebouncedSearch]" = weakref.WeakSet()

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        payload = dict(payload)
        price = payload.pop("price", None)

        wire = {k: v for k, v in payload.items() if k in ITEM_FIELDS}
        if price is not None:
            wire["price_cents"] = to_cents(price)
        elif "price_cents" in wire and wire["price_cents"] is not None:
            wire["price_cents"] = coerce_cents(wire["price_cents"])

        if not partial:
            missing = [f for f in ("category_id", "name", "price_cents") if wire.get(f) in (None, "")]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if wire.get("price_cents") is not None and wire["price_cents"] < 0:
            raise ValidationError("price_cents must be >= 0")

        if "is_available" in wire:
            wire["is_available"] = parse_flag(wire["is_available"])
        return wire

    def fetch_all(
        self,
        params: Optional[dict] = None,
        *,
        query: Optional[str] = None,
        category_id=None,
        sort_by: Optional[str] = None,
    ) -> list:
        """
        Query params:
        - query: substring match on name/description (server side)
        - category_id: restrict to one category
        - sort_by: name-asc | name-desc | price-asc | price-desc
        """
        if sort_by and sort_by not in SORT_OPTIONS:
            raise ValidationError(f"sort_by must be one of: {', '.join(SORT_OPTIONS)}")

        params = dict(params or {})
        if query:
            params["query"] = query.strip()
        if category_id not in (None, ""):
            params["category_id"] = category_id
        if sort_by:
            params["sort_by"] = sort_by
        return super().fetch_all(params or None)

    def toggle_availability(self, record_id) -> dict:
        """
        Flip is_available optimistically; the server's representation replaces
        the local entry on success, the previous records come back on failure.
        """
        self._require_token()
        record = self.find(record_id)
        if record is None:
            raise ValidationError(f"Item {record_id} is not loaded")
        new_value = not parse_flag(record.get("is_available"))

        def mutate():
            return {
                "records": [
                    {**r, "is_available": new_value} if isinstance(r, dict) and self.same_id(r.get("id"), record_id) else r
                    for r in self.records
                ],
                "error": None,
            }

        def call():
            return self._send(self.update_method, self.path_for(record_id), {"is_available": new_value})

        def reconcile(res):
            entity = unwrap_entity(res)
            if not isinstance(entity, dict):
                return None
            return self._replace(record_id, self.normalize_record(entity))

        try:
            res = run_optimistic(self, ("records", "current"), mutate, call, reconcile)
        except APIError as exc:
            self._fail(exc, "Failed to update item")
            raise
        return unwrap_entity(res)

    def debounced_search(self, delay: float = 0.5) -> "DebouncedSearch":
        search = DebouncedSearch(self.fetch_all, delay=delay)
        self._searches.add(search)
        return search

    def cancel_searches(self) -> None:
        for search in list(self._searches):
            search.cancel()


class DebouncedSearch:
    """
    Wait for `delay` seconds of input inactivity before issuing a fetch.

    Each update() cancels the pending timer. Responses that arrive out of
    order are handled by the store's request sequence, not here.
    """

    def __init__(self, fetch: Callable[..., list], delay: float = 0.5):
        self.fetch = fetch
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self.last_error: Optional[Exception] = None

    def update(self, **filters) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire, kwargs=filters)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self, **filters) -> None:
        try:
            self.fetch(**filters)
            self.last_error = None
        except APIError as exc:
            # already published into the store's error field
            logger.warning("Debounced search failed: %s", exc)
            self.last_error = exc

    def flush(self, **filters) -> list:
        """Cancel any pending timer and fetch right away."""
        self.cancel()
        return self.fetch(**filters)

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
