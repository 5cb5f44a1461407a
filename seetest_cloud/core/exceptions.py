"""Custom exception hierarchy for the SeeTest Cloud client.

All client exceptions inherit from ``CloudAPIError`` so callers can catch
every failure with one clause, or branch on the machine-readable
``kind`` attribute instead of the concrete class.

Exception tree::

    CloudAPIError
    ├── MalformedResponseError
    │   └── NotJsonObjectError
    ├── NoDeviceFoundError
    ├── AmbiguousQueryError
    ├── WrongPlatformError
    └── TransportError
        ├── ServerUnreachableError
        ├── AuthenticationError
        ├── PermissionDeniedError
        └── HTTPStatusError
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Discriminator carried by every ``CloudAPIError``."""

    MALFORMED_RESPONSE = "malformed_response"
    NOT_JSON_OBJECT = "not_json_object"
    NO_DEVICE_FOUND = "no_device_found"
    AMBIGUOUS_QUERY = "ambiguous_query"
    WRONG_PLATFORM = "wrong_platform"
    TRANSPORT_FAILURE = "transport_failure"


class CloudAPIError(Exception):
    """Base exception for all SeeTest Cloud client errors.

    Attributes:
        message: Human-readable error description.
        device_id: Optional device ID the failing call was about.
        details: Optional mapping of additional contextual data.
        kind: Machine-readable error category.

    """

    kind: ClassVar[ErrorKind] = ErrorKind.TRANSPORT_FAILURE

    def __init__(
        self,
        message: str,
        device_id: int | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize with a message, optional device context, and details."""
        self.message = message
        self.device_id = device_id
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional device context."""
        parts: list[str] = []
        if self.device_id is not None:
            parts.append(f"[device {self.device_id}]")
        parts.append(self.message)
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({detail_str})")
        return " ".join(parts)


class MalformedResponseError(CloudAPIError):
    """Raised when a response body is not the JSON shape the client expects.

    Examples:
        - Body is not valid JSON
        - Top-level ``data`` member missing or of the wrong type
        - Device record without an integer ``id``

    """

    kind = ErrorKind.MALFORMED_RESPONSE


class NotJsonObjectError(MalformedResponseError):
    """Raised when an entry of the ``data`` array is not a flat JSON object."""

    kind = ErrorKind.NOT_JSON_OBJECT


class NoDeviceFoundError(CloudAPIError):
    """Raised when a query or ID lookup matches no device.

    The search query or device ID is echoed in ``details``.

    """

    kind = ErrorKind.NO_DEVICE_FOUND


class AmbiguousQueryError(CloudAPIError):
    """Raised when a query that must identify one device matches several.

    Attributes:
        match_count: Number of devices that matched.

    """

    kind = ErrorKind.AMBIGUOUS_QUERY

    def __init__(
        self,
        message: str,
        match_count: int,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize with the number of matching devices."""
        self.match_count = match_count
        super().__init__(message, details=details)


class WrongPlatformError(CloudAPIError):
    """Raised when a platform-specific attribute is requested on another platform.

    Examples:
        - iOS configuration profiles requested for an Android device

    """

    kind = ErrorKind.WRONG_PLATFORM


class TransportError(CloudAPIError):
    """Raised when the HTTP exchange with the cloud server fails.

    Attributes:
        status_code: HTTP status code, or ``None`` if no response arrived.

    """

    kind = ErrorKind.TRANSPORT_FAILURE

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize with an optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message, details=details)


class ServerUnreachableError(TransportError):
    """Raised when the server cannot be reached at all.

    Examples:
        - DNS failure or wrong server address
        - Client not on the organization's network
        - Connection or read timeout

    """


class AuthenticationError(TransportError):
    """Raised on HTTP 401: the access key or credentials were rejected."""


class PermissionDeniedError(TransportError):
    """Raised on HTTP 403: the API is not available for the current user role."""


class HTTPStatusError(TransportError):
    """Raised on any other non-2xx response.

    Attributes:
        body: Raw response body as returned by the server.

    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: str = "",
    ) -> None:
        """Initialize with the status code and the raw response body."""
        self.body = body
        super().__init__(message, status_code=status_code, details={"status": status_code})
