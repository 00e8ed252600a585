# Overview: Generic CRUD store; one instance per resource type wraps its REST endpoints.

"""
Resource Store

Every resource store follows the same contract:

- GUARD: mutating calls raise AuthenticationRequired when there is no token,
  before any network traffic. Reads publish "No token found. Please log in."
  and return an empty result instead.
- SHAPING: payloads carrying a file go out as multipart; multipart PUT/DELETE
  travel as POST + `_method` (see payloads.shape_request).
- RECONCILIATION: create appends the server entity, update replaces the entry
  with the server's representation (never a field merge), delete filters by id.
- ENVELOPES: every response is unwrapped with envelope.unwrap_entity /
  unwrap_collection before local state is touched.
- SEQUENCING: list fetches carry a ticket; a response whose ticket is no
  longer the latest is discarded.
- ERRORS: one message is published into `error` (see errors.describe_error)
  and the exception is re-raised. A 401 also fires `on_unauthorized` so the
  session is dropped; a 403 leaves the session alone.

KNOWN LIMITATION: mutating calls are not serialized against each other; a
concurrent update and delete of the same entity ends in whichever response
lands last.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from ..api_client import APIClient
from ..envelope import unwrap_collection, unwrap_entity
from ..errors import AuthenticationRequired, ValidationError, describe_error, is_token_expired
from ..payloads import shape_request
from .sequencing import RequestSequence
from .state import StateContainer

logger = logging.getLogger(__name__)

NO_TOKEN_MESSAGE = "No token found. Please log in."

STATUS_CODES = {"active": "1", "inactive": "0"}


def encode_status(value) -> Optional[str]:
    """active/inactive (or bool/0/1) -> wire "1"/"0"."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else "0"
    text = str(value).strip().lower()
    if text in STATUS_CODES:
        return STATUS_CODES[text]
    if text in ("1", "0"):
        return text
    raise ValidationError(f"Invalid status: {value!r}")


def parse_flag(value) -> bool:
    """Server may answer 1/0, "1"/"0" or booleans."""
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def decode_status(value) -> Optional[str]:
    """Wire 0/1 (int or str) -> active/inactive; unknown values pass through."""
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in ("1", "active", "true"):
        return "active"
    if text in ("0", "inactive", "false"):
        return "inactive"
    return value


class ResourceStore(StateContainer):
    """
    Base class; subclasses set `base_path`, `singular` and `plural`.
    """

    base_path: str = ""
    singular: str = "record"
    plural: str = "records"
    # resource-named fallback keys for list envelopes (e.g. {"users": [...]})
    collection_keys: tuple[str, ...] = ()
    # verb used for updates; multipart PUT is rewritten to POST + _method
    update_method: str = "PUT"

    STATE_FIELDS = ("records", "current", "loading", "error")

    def __init__(
        self,
        api: APIClient,
        token_provider: Callable[[], Optional[str]],
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        super().__init__()
        self.api = api
        self.token_provider = token_provider
        # called when the backend answers 401, i.e. the token is no longer valid
        self.on_unauthorized = on_unauthorized
        self.sequence = RequestSequence()

        self.records: list[dict] = []
        self.current: Optional[dict] = None
        self.loading = False
        self.error: Optional[str] = None

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def prepare_payload(self, payload: dict, *, partial: bool) -> dict:
        """Convert a caller payload into wire fields. Override per resource."""
        return dict(payload)

    def normalize_record(self, record: Any) -> Any:
        """Post-process one server entity. Override per resource."""
        return record

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def path_for(self, record_id=None) -> str:
        if record_id is None:
            return self.base_path
        return f"{self.base_path}/{record_id}"

    def _require_token(self) -> str:
        token = self.token_provider()
        if not token:
            self._set(error=NO_TOKEN_MESSAGE)
            raise AuthenticationRequired(NO_TOKEN_MESSAGE)
        return token

    def _fail(self, exc: Exception, fallback: str, **changes) -> None:
        self._set(error=describe_error(exc, fallback), **changes)
        if is_token_expired(exc) and self.on_unauthorized is not None:
            self.on_unauthorized()

    def _send(self, method: str, path: str, payload: Any = None, **kwargs) -> Any:
        wire_method, body = shape_request(method, payload)
        return self.api.request(path, wire_method, body, **kwargs)

    @staticmethod
    def same_id(a, b) -> bool:
        return a is not None and b is not None and str(a) == str(b)

    def find(self, record_id) -> Optional[dict]:
        for record in self.records:
            if isinstance(record, dict) and self.same_id(record.get("id"), record_id):
                return record
        return None

    def _replace(self, record_id, entity: dict) -> dict:
        """New state with the entry for record_id replaced by entity."""
        records = [
            entity if isinstance(r, dict) and self.same_id(r.get("id"), record_id) else r
            for r in self.records
        ]
        changes = {"records": records}
        if isinstance(self.current, dict) and self.same_id(self.current.get("id"), record_id):
            changes["current"] = entity
        return changes

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_all(self, params: Optional[dict] = None) -> list:
        """Load the collection; stale responses are dropped."""
        if not self.token_provider():
            self._set(error=NO_TOKEN_MESSAGE)
            return []

        ticket = self.sequence.next()
        self._set(loading=True, error=None)
        try:
            res = self.api.request(self.base_path, "GET", params=params)
        except Exception as exc:
            if self.sequence.is_current(ticket):
                self._fail(exc, f"Failed to fetch {self.plural}", loading=False)
            raise

        records = [self.normalize_record(r) for r in unwrap_collection(res, *self.collection_keys)]
        if not self.sequence.is_current(ticket):
            logger.debug("Discarding stale %s response (ticket %s < %s)", self.plural, ticket, self.sequence.latest)
            return records

        self._set(records=records, loading=False)
        return records

    def fetch_by_id(self, record_id) -> Optional[dict]:
        if not self.token_provider():
            self._set(error=NO_TOKEN_MESSAGE)
            return None

        self._set(loading=True, error=None)
        try:
            res = self.api.request(self.path_for(record_id), "GET")
        except Exception as exc:
            self._fail(exc, f"Failed to fetch {self.singular}", loading=False)
            raise

        entity = self.normalize_record(unwrap_entity(res))
        self._set(current=entity, loading=False)
        return entity

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, payload: dict) -> dict:
        self._require_token()
        self._set(loading=True, error=None)
        try:
            wire = self.prepare_payload(payload, partial=False)
            res = self._send("POST", self.base_path, wire)
        except Exception as exc:
            self._fail(exc, f"Failed to create {self.singular}", loading=False)
            raise

        entity = self.normalize_record(unwrap_entity(res))
        if isinstance(entity, dict):
            self._set(records=[*self.records, entity], loading=False)
        else:
            # empty body (e.g. 204): nothing to add until the next fetch
            self._set(loading=False)
        return entity

    def update(self, record_id, payload: dict) -> dict:
        self._require_token()
        self._set(loading=True, error=None)
        try:
            wire = self.prepare_payload(payload, partial=True)
            res = self._send(self.update_method, self.path_for(record_id), wire)
        except Exception as exc:
            self._fail(exc, f"Failed to update {self.singular}", loading=False)
            raise

        entity = self.normalize_record(unwrap_entity(res))
        if isinstance(entity, dict):
            self._set(loading=False, **self._replace(record_id, entity))
        else:
            self._set(loading=False)
        return entity

    def delete(self, record_id) -> None:
        self._require_token()

        self._set(loading=True, error=None)
        try:
            self._send("DELETE", self.path_for(record_id))
        except Exception as exc:
            self._fail(exc, f"Failed to delete {self.singular}", loading=False)
            raise

        changes = {
            "records": [
                r for r in self.records
                if not (isinstance(r, dict) and self.same_id(r.get("id"), record_id))
            ],
            "loading": False,
        }
        if isinstance(self.current, dict) and self.same_id(self.current.get("id"), record_id):
            changes["current"] = None
        self._set(**changes)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def clear(self) -> None:
        self.sequence.invalidate()
        self._set(records=[], current=None, loading=False, error=None)

    def clear_current(self) -> None:
        self._set(current=None)
