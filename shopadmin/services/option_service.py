# Overview: Options store over /admin/item-options; options belong to an option group.

from __future__ import annotations

from typing import Optional

from ..errors import ValidationError
from ..pricing import coerce_cents, to_cents
from .resource_store import ResourceStore, parse_flag

OPTION_FIELDS = {"item_option_group_id", "name", "price_adjust_cents", "icon", "is_active"}


class OptionStore(ResourceStore):
    """
    `price_adjust` is the UI-facing decimal string, `price_adjust_cents` the
    wire integer. An `icon` upload switches the request to multipart, which
    the backend only reads on POST, so updates go out as POST + _method=PUT.
    """

    base_path = "/admin/item-options"
    singular = "option"
    plural = "options"

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        payload = dict(payload)
        adjust = payload.pop("price_adjust", None)

        wire = {k: v for k, v in payload.items() if k in OPTION_FIELDS}
        if adjust is not None:
            wire["price_adjust_cents"] = to_cents(adjust, field="price_adjust")
        elif wire.get("price_adjust_cents") is not None:
            wire["price_adjust_cents"] = coerce_cents(wire["price_adjust_cents"], field="price_adjust_cents")
        elif not partial:
            wire["price_adjust_cents"] = 0

        if not partial:
            missing = [f for f in ("item_option_group_id", "name") if wire.get(f) in (None, "")]
            if missing:
                raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if "is_active" in wire:
            wire["is_active"] = parse_flag(wire["is_active"])
        elif not partial:
            wire["is_active"] = True
        return wire

    def fetch_all(self, params: Optional[dict] = None, *, item_option_group_id=None) -> list:
        params = dict(params or {})
        if item_option_group_id is not None:
            params["item_option_group_id"] = item_option_group_id
        return super().fetch_all(params or None)

    def for_group(self, group_id) -> list:
        """Locally loaded options of one group."""
        return [
            r for r in self.records
            if isinstance(r, dict) and self.same_id(r.get("item_option_group_id"), group_id)
        ]
