# shopadmin/errors.py
"""
Error taxonomy for the console's client layer.

Every failure that leaves the HTTP client wrapper or a store is an APIError.
The instance keeps the pieces a store needs to publish a single human-readable
message:

- message:            transport-level text ("Request failed with status code 500")
- server_message:     the response body's "message" (or "error") field
- validation_message: field errors concatenated, when the server returned a map
- status_code:        HTTP status, None for transport failures
"""
from __future__ import annotations


class APIError(Exception):
    """Base error for anything the client layer surfaces."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        server_message: str | None = None,
        validation_message: str | None = None,
        payload=None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message
        self.validation_message = validation_message
        self.payload = payload

    def __str__(self) -> str:
        return self.validation_message or self.server_message or self.message


class AuthenticationRequired(APIError):
    """Mutating call attempted with no token; never reaches the network."""

    def __init__(self, message: str = "No token found. Please log in."):
        super().__init__(message)


class AuthenticationError(APIError):
    """Login failed."""


class AuthenticationRejected(AuthenticationError):
    """Server rejected a presented token (401/403)."""


class ValidationError(APIError):
    """400/422 from the server, or a local input problem (price, enum)."""


class NotFound(APIError):
    """Entity absent (404)."""


class NetworkError(APIError):
    """Transport failure: timeout, DNS, connection reset."""


class SessionNotHydrated(RuntimeError):
    """Session state read before persisted storage was loaded."""


def describe_error(exc: BaseException, fallback: str) -> str:
    """
    Pick the single message a store publishes into its `error` field.

    Priority: server validation message -> server message -> transport
    message -> operation fallback. Network failures carry only raw socket
    text, so they fall through to the operation fallback.
    """
    if isinstance(exc, NetworkError):
        return fallback
    if isinstance(exc, APIError):
        return exc.validation_message or exc.server_message or exc.message or fallback
    return str(exc) or fallback


def is_token_expired(exc: BaseException) -> bool:
    """A 401 means the token is gone; a 403 only means this user may not."""
    return isinstance(exc, AuthenticationRejected) and exc.status_code == 401
