# Overview: Option groups store over /admin/item-option-groups.

from __future__ import annotations

from ..errors import ValidationError
from .resource_store import ResourceStore, parse_flag

GROUP_TYPES = ("select", "radio", "checkbox", "text")
GROUP_FIELDS = {"name", "type", "is_required"}


class OptionGroupStore(ResourceStore):
    """Groups of options (size, toppings...) that can be attached to items."""

    base_path = "/admin/item-option-groups"
    singular = "option group"
    plural = "option groups"

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        wire = {k: v for k, v in payload.items() if k in GROUP_FIELDS}
        if not partial and not wire.get("name"):
            raise ValidationError("Missing required fields: name")

        if "type" in wire or not partial:
            group_type = str(wire.get("type") or "select").strip().lower()
            if group_type not in GROUP_TYPES:
                raise ValidationError(f"type must be one of: {', '.join(GROUP_TYPES)}")
            wire["type"] = group_type

        if "is_required" in wire:
            wire["is_required"] = parse_flag(wire["is_required"])
        elif not partial:
            wire["is_required"] = False
        return wire
