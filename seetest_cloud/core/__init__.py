"""Core module providing the device data model, record parsing, and query engine.

This module contains the foundational components of the client: the
attribute enumeration and immutable device records, the predicate
matcher, the query engine, and the custom exception hierarchy.
"""

from .exceptions import (
    AmbiguousQueryError,
    AuthenticationError,
    CloudAPIError,
    ErrorKind,
    HTTPStatusError,
    MalformedResponseError,
    NoDeviceFoundError,
    NotJsonObjectError,
    PermissionDeniedError,
    ServerUnreachableError,
    TransportError,
    WrongPlatformError,
)
from .models import (
    AttributeKey,
    Category,
    ControlType,
    DeviceOverview,
    DeviceRecord,
    DeviceSummary,
    HttpMethod,
    OSType,
)
from .query_engine import QueryEngine

__all__ = [
    "AmbiguousQueryError",
    "AttributeKey",
    "AuthenticationError",
    "Category",
    "CloudAPIError",
    "ControlType",
    "DeviceOverview",
    "DeviceRecord",
    "DeviceSummary",
    "ErrorKind",
    "HTTPStatusError",
    "HttpMethod",
    "MalformedResponseError",
    "NoDeviceFoundError",
    "NotJsonObjectError",
    "OSType",
    "PermissionDeniedError",
    "QueryEngine",
    "ServerUnreachableError",
    "TransportError",
    "WrongPlatformError",
]
