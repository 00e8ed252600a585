# Overview: Categories store over /admin/categories.

from __future__ import annotations

from typing import Optional

from .resource_store import ResourceStore, encode_status

CATEGORY_FIELDS = {"shop_id", "name", "display_order", "status", "image_category"}


class CategoryStore(ResourceStore):
    """
    Canonical schema: {id, shop_id?, name, display_order?, status,
    image_category_url?}. The icon is uploaded as the `image_category` file
    field; the server answers with `image_category_url`.
    """

    base_path = "/admin/categories"
    singular = "category"
    plural = "categories"

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        wire = {k: v for k, v in payload.items() if k in CATEGORY_FIELDS}
        if "status" in wire:
            wire["status"] = encode_status(wire["status"])
        elif not partial:
            wire["status"] = "1"
        return wire

    def fetch_all(self, params: Optional[dict] = None, *, shop_id=None) -> list:
        params = dict(params or {})
        if shop_id is not None:
            params["shop_id"] = shop_id
        return super().fetch_all(params or None)
