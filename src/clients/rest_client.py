"""
RestClient - authenticated HTTP executor for the venue's REST API.

This module builds signed requests for authenticated endpoints and executes
them with httpx. It is the default RequestExecutor used by the order
services. Retries, rate limiting and connection pooling policy are left to
the caller; one request is one attempt.

Signing scheme:
    path      = "auth/{r|w}/{endpoint}"
    signature = HMAC-SHA384(secret, "/api" + url_path + nonce + body)
    headers   = bfx-nonce, bfx-apikey, bfx-signature
"""

import hashlib
import hmac
import logging
import threading
import time
from typing import Any, Optional

import httpx

from ..models.requests import Permission
from .config import RestConfig

logger = logging.getLogger(__name__)


class RestClientError(Exception):
    """Base class for transport and authentication failures."""


class ConfigurationError(RestClientError):
    """Raised when credentials are missing for an authenticated request."""


class TransportError(RestClientError):
    """Raised when the request could not be delivered (DNS, TLS, timeout...)."""


class APIError(RestClientError):
    """
    Raised when the venue answers with an HTTP error status.

    Attributes:
        status_code: HTTP status code
        code: Venue error code, if the body carried one
        message: Venue error message, or the raw body
    """

    def __init__(self, status_code: int, code: Optional[int], message: str):
        self.status_code = status_code
        self.code = code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message} (code={code})")


class NonceGenerator:
    """Strictly increasing microsecond nonces, safe to share between threads."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> str:
        with self._lock:
            self._last = max(self._last + 1, int(time.time() * 1_000_000))
            return str(self._last)


def _parse_error_body(response: httpx.Response):
    """Extract (code, message) from a ["error", code, "message"] body."""
    try:
        body = response.json()
    except ValueError:
        return None, response.text.strip() or response.reason_phrase

    if isinstance(body, list) and len(body) >= 3 and body[0] == "error":
        return body[1], str(body[2])
    if isinstance(body, dict) and "message" in body:
        return body.get("code"), str(body["message"])
    return None, response.text.strip()


class RestClient:
    """
    Signing HTTP executor for authenticated endpoints.

    Usage:
        with RestClient(RestConfig.from_env()) as client:
            request = client.new_authenticated_request(Permission.READ, "orders")
            raw = client.execute(request)

    Attributes:
        config: Connection settings
    """

    def __init__(
        self,
        config: Optional[RestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            config: Connection settings. Defaults to RestConfig().
            transport: Optional httpx transport (e.g., httpx.MockTransport in tests)
        """
        self.config = config or RestConfig()
        self._nonce = NonceGenerator()
        self._client = httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout,
            transport=transport,
        )

        logger.debug(f"RestClient initialized: {self.config!r}")

    def new_authenticated_request(self, permission: Permission, path: str) -> httpx.Request:
        """Build a signed request with an empty JSON object as body."""
        return self.new_authenticated_request_with_body(permission, path, b"{}")

    def new_authenticated_request_with_body(
        self,
        permission: Permission,
        path: str,
        body: bytes,
    ) -> httpx.Request:
        """
        Build a signed POST request for an authenticated endpoint.

        Args:
            permission: READ maps to auth/r/, WRITE to auth/w/
            path: Endpoint path relative to the permission prefix
            body: JSON body bytes

        Raises:
            ConfigurationError: If the API key or secret is missing
        """
        if not self.config.api_key or not self.config.api_secret:
            raise ConfigurationError("API key and secret are required for authenticated requests")

        auth_path = f"auth/{permission.value}/{path}"
        request = self._client.build_request(
            "POST",
            auth_path,
            content=body,
            headers={"Content-Type": "application/json"},
        )

        nonce = self._nonce.next()
        message = f"/api{request.url.path}{nonce}".encode("utf-8") + body
        signature = hmac.new(
            self.config.api_secret.encode("utf-8"),
            message,
            hashlib.sha384,
        ).hexdigest()

        request.headers["bfx-nonce"] = nonce
        request.headers["bfx-apikey"] = self.config.api_key
        request.headers["bfx-signature"] = signature
        return request

    def execute(self, request: httpx.Request) -> bytes:
        """
        Send a request and return the raw response body.

        Raises:
            TransportError: If the request could not be delivered
            APIError: If the venue responded with status >= 400
        """
        logger.debug(f"{request.method} {request.url}")
        try:
            response = self._client.send(request)
        except httpx.TransportError as e:
            logger.error(f"Request to {request.url.path} failed: {e}")
            raise TransportError(str(e)) from e

        if response.status_code >= 400:
            code, message = _parse_error_body(response)
            logger.error(f"Venue error on {request.url.path}: HTTP {response.status_code} {message}")
            raise APIError(response.status_code, code, message)

        return response.content

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
