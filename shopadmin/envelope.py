# shopadmin/envelope.py
"""
Response envelope normalization.

The backend is inconsistent about nesting: a single entity may come back bare,
under "data", or under "data.data" (paginated resources). Lists may be bare,
under "data", under "data.data", or under a resource-named key ("users").
Every store goes through these two helpers before touching local state.
"""
from __future__ import annotations

from typing import Any


def unwrap_entity(payload: Any) -> Any:
    """Unwrap in priority order: data.data -> data -> bare."""
    if isinstance(payload, dict) and "data" in payload and payload["data"] is not None:
        inner = payload["data"]
        if isinstance(inner, dict) and "data" in inner and inner["data"] is not None:
            return inner["data"]
        return inner
    return payload


def unwrap_collection(payload: Any, *keys: str) -> list:
    """
    Return the list carried by a list response.

    Extra `keys` are resource-named fallbacks tried after "data".
    Anything unrecognizable yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in ("data", *keys):
        value = payload.get(key)
        if isinstance(value, list):
            return value
        if isinstance(value, dict) and isinstance(value.get("data"), list):
            return value["data"]
    return []
