"""HTTP transport for the SeeTest Cloud REST API.

Executes one authenticated request per call with ``httpx`` and classifies
failed responses into the ``TransportError`` family before any body
reaches the query engine.

Every call opens and closes its own ``httpx.Client``; the transport holds
only immutable connection settings, so one instance may be shared across
threads.

Usage::

    transport = HttpTransport("https://cloud.example.com", access_token="...")
    body = transport.fetch("/api/v1/devices", HttpMethod.GET)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping

import httpx

from ..core.exceptions import (
    AuthenticationError,
    HTTPStatusError,
    PermissionDeniedError,
    ServerUnreachableError,
)
from ..core.models import HttpMethod

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
STRIPPED_CHARS = ('"', "{", "}")

# Verbs whose parameters travel in the query string; the rest send a form body.
QUERY_STRING_METHODS = frozenset({HttpMethod.GET, HttpMethod.DELETE})


class HttpTransport:
    """Authenticated request executor for the cloud device API.

    Uses a bearer token when ``access_token`` is given, otherwise HTTP
    basic authentication with ``username`` and ``password``.

    Args:
        server_url: Base address of the cloud server.
        access_token: Access key from the cloud user profile.
        username: Cloud username (basic authentication).
        password: Cloud password (basic authentication).
        timeout: Request timeout in seconds, ``None`` to wait forever.
        verify_ssl: Verify the server TLS certificate.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``.

    """

    def __init__(
        self,
        server_url: str,
        access_token: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport with server address and credentials."""
        if not server_url:
            raise ValueError("A cloud server address is required")
        if not access_token and not (username and password):
            raise ValueError("Either an access token or a username and password is required")
        self._server_url = server_url.rstrip("/")
        self._access_token = access_token
        self._username = username
        self._password = password
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def server_url(self) -> str:
        """Return the normalized server address."""
        return self._server_url

    def fetch(
        self,
        path: str,
        method: HttpMethod = HttpMethod.GET,
        params: Mapping[str, str] | None = None,
    ) -> str:
        """Execute one request and return the response body.

        Args:
            path: Resource path below the server address.
            method: HTTP verb.
            params: Query-string parameters for GET/DELETE, form fields
                for POST/PUT.

        Raises:
            ServerUnreachableError: If no response was received.
            AuthenticationError: On HTTP 401.
            PermissionDeniedError: On HTTP 403.
            HTTPStatusError: On any other non-2xx status, including a redirect
                that could not be followed.

        """
        method = HttpMethod(method)
        url = f"{self._server_url}{path}"
        payload = dict(params) if params else None
        self._logger.debug("%s %s", method, url)

        try:
            with self._client() as client:
                if method in QUERY_STRING_METHODS:
                    response = client.request(method, url, params=payload)
                else:
                    response = client.request(method, url, data=payload)
        except httpx.RequestError as exc:
            raise ServerUnreachableError(
                "Verify that you are connected to your organization's network "
                "and that the cloud server address is correct",
                details={"url": url, "error": str(exc) or exc.__class__.__name__},
            ) from exc

        self._logger.debug("%s %s -> %d", method, url, response.status_code)
        return classify_response(response)

    def _client(self) -> httpx.Client:
        headers: dict[str, str] = {}
        auth: httpx.Auth | None = None
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"
        else:
            auth = httpx.BasicAuth(self._username or "", self._password or "")
        return httpx.Client(
            headers=headers,
            auth=auth,
            timeout=self._timeout,
            verify=self._verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )


def classify_response(response: httpx.Response) -> str:
    """Return the body of a 2xx response or raise the matching error.

    Redirects are followed by the client, so a 3xx seen here could not be
    followed and is reported like any other failed status.
    """
    status = response.status_code
    body = response.text

    if status == 401:
        raise AuthenticationError(
            f"Verify your cloud access key or login credentials. Server said: {body}",
            status_code=status,
        )
    if status == 403:
        raise PermissionDeniedError(
            f"This API is not available for the current user role. Server said: {body}",
            status_code=status,
        )
    if not response.is_success:
        raise HTTPStatusError(_error_text(response), status_code=status, body=body)
    return body


def _error_text(response: httpx.Response) -> str:
    """Extract the server's error description from a failed response."""
    body = response.text
    if not body:
        return f"{response.status_code} {response.reason_phrase}".strip()
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return body.strip()

    error: object = None
    if isinstance(payload, dict):
        error = payload.get("data") or payload.get("message")
    if error is None:
        return body.strip()

    text = error if isinstance(error, str) else json.dumps(error)
    for char in STRIPPED_CHARS:
        text = text.replace(char, "")
    return text.strip()
