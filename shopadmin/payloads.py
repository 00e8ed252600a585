# shopadmin/payloads.py
"""
Request body shaping.

A payload that carries a file must travel as a multipart form; anything else
is sent as JSON. The backend framework cannot read multipart bodies on a real
PUT/DELETE, so multipart requests for those verbs are sent as POST with a
`_method` form field naming the intended verb.
"""
from __future__ import annotations

import io
import mimetypes
import os
from dataclasses import dataclass, field
from typing import Any

METHOD_OVERRIDE_FIELD = "_method"
OVERRIDABLE_METHODS = {"PUT", "PATCH", "DELETE"}


@dataclass(frozen=True)
class Upload:
    """An in-memory file to send in a multipart body."""
    filename: str
    content: bytes
    content_type: str | None = None

    @classmethod
    def from_path(cls, path: str, content_type: str | None = None) -> "Upload":
        with open(path, "rb") as fh:
            content = fh.read()
        return cls(filename=os.path.basename(path), content=content, content_type=content_type)

    def as_file_tuple(self) -> tuple:
        content_type = (
            self.content_type
            or mimetypes.guess_type(self.filename)[0]
            or "application/octet-stream"
        )
        return (self.filename, self.content, content_type)


@dataclass
class MultipartForm:
    """Form fields plus file parts; the transport picks the boundary."""
    fields: dict[str, str] = field(default_factory=dict)
    files: dict[str, tuple] = field(default_factory=dict)

    def add_field(self, name: str, value: Any) -> None:
        if value is None:
            return
        self.fields[name] = encode_form_value(value)

    def add_file(self, name: str, value: Any) -> None:
        self.files[name] = _file_tuple(name, value)

    def __contains__(self, name: str) -> bool:
        return name in self.fields or name in self.files


def is_file_value(value: Any) -> bool:
    """True for Upload, raw bytes, or an open binary file object."""
    if isinstance(value, (Upload, bytes, bytearray)):
        return True
    if isinstance(value, io.IOBase):
        return True
    return hasattr(value, "read") and callable(value.read)


def has_file(payload: Any) -> bool:
    if isinstance(payload, MultipartForm):
        return True
    if not isinstance(payload, dict):
        return False
    return any(is_file_value(v) for v in payload.values())


def encode_form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _file_tuple(name: str, value: Any) -> tuple:
    if isinstance(value, Upload):
        return value.as_file_tuple()
    if isinstance(value, (bytes, bytearray)):
        return (name, bytes(value), "application/octet-stream")
    filename = os.path.basename(getattr(value, "name", "") or name)
    content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
    return (filename, value, content_type)


def to_multipart(payload: dict) -> MultipartForm:
    """Build a form from a dict; None values are dropped."""
    form = MultipartForm()
    for key, value in payload.items():
        if value is None:
            continue
        if is_file_value(value):
            form.add_file(key, value)
        else:
            form.add_field(key, value)
    return form


def shape_request(method: str, payload: Any) -> tuple[str, Any]:
    """
    Decide the wire verb and body for a logical (method, payload).

    Returns (method, body) where body is a MultipartForm, a JSON-serializable
    object, or None.
    """
    method = method.upper()
    if payload is None:
        return method, None

    if not has_file(payload):
        return method, payload

    form = payload if isinstance(payload, MultipartForm) else to_multipart(payload)
    if method in OVERRIDABLE_METHODS:
        form.fields[METHOD_OVERRIDE_FIELD] = method
        return "POST", form
    return method, form
