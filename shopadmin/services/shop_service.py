# Overview: Shops store; admin CRUD over /admin/shops plus the nearby-shops lookup.

from __future__ import annotations

from typing import Optional

from ..envelope import unwrap_collection
from .resource_store import ResourceStore, encode_status

SHOP_FIELDS = {"name", "location", "status", "latitude", "longitude", "owner_user_id", "image", "image_url"}


class ShopStore(ResourceStore):
    """
    Shops are owned by a user (owner_user_id). Status is "active"/"inactive"
    for callers and "1"/"0" on the wire. An `image` upload switches the
    request to multipart.
    """

    base_path = "/admin/shops"
    singular = "shop"
    plural = "shops"

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        wire = {k: v for k, v in payload.items() if k in SHOP_FIELDS}
        if "status" in wire:
            wire["status"] = encode_status(wire["status"])
        for coord in ("latitude", "longitude"):
            if wire.get(coord) is not None:
                wire[coord] = str(wire[coord])
        return wire

    def fetch_nearby(self, latitude, longitude, radius: Optional[float] = None) -> list:
        """Shops around a point; replaces the local collection like fetch_all."""
        if not self.token_provider():
            self._set(error="No token found. Please log in.")
            return []

        ticket = self.sequence.next()
        self._set(loading=True, error=None)
        params = {"lat": latitude, "lng": longitude, "radius": radius}
        try:
            res = self.api.request(f"{self.base_path}/nearby", "GET", params=params)
        except Exception as exc:
            if self.sequence.is_current(ticket):
                self._fail(exc, "Failed to fetch nearby shops", loading=False)
            raise

        records = unwrap_collection(res)
        if self.sequence.is_current(ticket):
            self._set(records=records, loading=False)
        return records
