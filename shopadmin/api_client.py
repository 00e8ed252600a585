# shopadmin/api_client.py
"""
HTTP client wrapper: the single chokepoint for outbound requests.

- resolves paths against the configured base URL
- attaches the bearer token read fresh from the token provider per call
- sends MultipartForm bodies as form + files (no explicit Content-Type, the
  transport sets the boundary) and everything else as JSON
- turns transport failures and non-2xx responses into the error taxonomy
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from .errors import (
    APIError,
    AuthenticationRejected,
    NetworkError,
    NotFound,
    ValidationError,
)
from .payloads import MultipartForm

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Optional[str]]


class APIClient:
    """
    HTTP client wrapper with bearer-token auth.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.Client(timeout=timeout, transport=transport)
        self.token_provider = token_provider

    def _headers(self, body: Any, extra: Optional[Dict] = None) -> Dict:
        """Build request headers with optional auth."""
        headers = {"Accept": "application/json"}
        if body is not None and not isinstance(body, MultipartForm):
            headers["Content-Type"] = "application/json"

        token = self.token_provider() if self.token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        if extra:
            overridden = {k.lower() for k in extra}
            headers = {k: v for k, v in headers.items() if k.lower() not in overridden}
            headers.update(extra)
        return headers

    def url_for(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        *,
        params: Optional[Dict] = None,
        headers: Optional[Dict] = None,
    ) -> Any:
        """
        Issue a request and return the parsed response payload.

        Raises NetworkError on transport failure and an APIError subclass on
        any non-2xx response.
        """
        method = method.upper()
        kwargs: Dict[str, Any] = {
            "headers": self._headers(body, headers),
            "params": _clean_params(params),
        }
        if isinstance(body, MultipartForm):
            kwargs["data"] = body.fields
            if body.files:
                kwargs["files"] = body.files
        elif body is not None:
            kwargs["json"] = body

        logger.debug(
            "%s %s (%s)", method, path,
            "multipart" if isinstance(body, MultipartForm) else "json" if body is not None else "no body",
        )

        try:
            response = self.client.request(method, self.url_for(path), **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, path)
            raise NetworkError("Request timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(str(exc) or "Network error") from exc

        if response.is_error:
            error = error_from_response(response)
            logger.warning("%s %s -> HTTP %s: %s", method, path, response.status_code, error)
            raise error

        return _parse_body(response)

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> Any:
        return self.request(path, "GET", params=params, **kwargs)

    def post(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request(path, "POST", body, **kwargs)

    def put(self, path: str, body: Any = None, **kwargs) -> Any:
        return self.request(path, "PUT", body, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request(path, "DELETE", **kwargs)

    def close(self):
        """Close the HTTP client."""
        self.client.close()


def _clean_params(params: Optional[Dict]) -> Optional[Dict]:
    if not params:
        return None
    cleaned = {k: v for k, v in params.items() if v is not None and v != ""}
    return cleaned or None


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _validation_text(errors: Any) -> Optional[str]:
    """Concatenate a structured {field: [messages]} map into one string."""
    if isinstance(errors, dict):
        messages = []
        for value in errors.values():
            if isinstance(value, (list, tuple)):
                messages.extend(str(m) for m in value if m)
            elif value:
                messages.append(str(value))
        return " ".join(messages) or None
    if isinstance(errors, (list, tuple)):
        return " ".join(str(m) for m in errors if m) or None
    if isinstance(errors, str) and errors:
        return errors
    return None


def error_from_response(response: httpx.Response) -> APIError:
    """Map a non-2xx response onto the error taxonomy."""
    status = response.status_code
    payload = _parse_body(response)

    server_message = None
    validation_message = None
    if isinstance(payload, dict):
        raw = payload.get("message") or payload.get("error")
        server_message = str(raw) if raw else None
        validation_message = _validation_text(payload.get("errors"))

    kwargs = dict(
        status_code=status,
        server_message=server_message,
        validation_message=validation_message,
        payload=payload,
    )
    message = f"Request failed with status code {status}"

    if status in (401, 403):
        return AuthenticationRejected(message, **kwargs)
    if status == 404:
        return NotFound(message, **kwargs)
    if status in (400, 422) or validation_message:
        return ValidationError(message, **kwargs)
    return APIError(message, **kwargs)
