"""Data models shared by the record parser, matcher, and query engine.

Device attributes arrive from the cloud as a flat JSON object per device.
They are normalized into an immutable ``DeviceRecord`` keyed by the wire
attribute names enumerated in ``AttributeKey``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import IntEnum, StrEnum
from types import MappingProxyType
from typing import NamedTuple

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class AttributeKey(StrEnum):
    """Device attributes returned by the ``/api/v1/devices`` endpoints."""

    ID = "id"
    UDID = "udid"
    IOS_UDID = "iosUdid"
    DEVICE_NAME = "deviceName"
    NOTES = "notes"
    DEVICE_OS = "deviceOs"
    OS_VERSION = "osVersion"
    MODEL = "model"
    MANUFACTURER = "manufacturer"
    CURRENT_USER = "currentUser"
    DEVICE_CATEGORY = "deviceCategory"
    UPTIME = "uptime"
    IS_EMULATOR = "isEmulator"
    PROFILES = "profiles"
    AGENT_NAME = "agentName"
    AGENT_IP = "agentIp"
    AGENT_LOCATION = "agentLocation"
    CURRENT_STATUS = "currentStatus"
    STATUS_TOOLTIP = "statusTooltip"
    LAST_USED_DATE_TIME = "lastUsedDateTime"
    PREVIOUS_STATUS = "previousStatus"
    STATUS_AGE_IN_MINUTES = "statusAgeInMinutes"
    STATUS_MODIFIED_AT = "statusModifiedAt"
    STATUS_MODIFIED_AT_DATE_TIME = "statusModifiedAtDateTime"
    DISPLAY_STATUS = "displayStatus"
    IS_CLEANUP_ENABLED = "isCleanupEnabled"
    DEFAULT_DEVICE_LANGUAGE = "defaultDeviceLanguage"
    DEFAULT_DEVICE_REGION = "defaultDeviceRegion"
    SCREEN_WIDTH = "screenWidth"
    SCREEN_HEIGHT = "screenHeight"
    # List-valued, reported for iOS devices only.
    IOS_CONFIGURATION_PROFILES = "iosConfigurationProfiles"

    @classmethod
    def parse(cls, key: AttributeKey | str) -> AttributeKey:
        """Return the member for *key*, accepting the wire name as a string.

        Raises:
            ValueError: If *key* is not a known attribute.

        """
        if isinstance(key, cls):
            return key
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Unknown device attribute '{key}'. "
                f"Known attributes: {', '.join(m.value for m in cls)}"
            ) from None


class OSType(StrEnum):
    """Device operating system, as reported in ``deviceOs``."""

    ANDROID = "Android"
    IOS = "iOS"


class Category(StrEnum):
    """Device category accepted by the edit-device endpoint."""

    WATCH = "WATCH"
    TABLET = "TABLET"
    PHONE = "PHONE"
    UNKNOWN = "UNKNOWN"


class ControlType(IntEnum):
    """Web-control session type. Sent to the server as its integer value."""

    MANUAL = 0
    VIEW = 1
    AUTOMATION = 2
    DEBUG = 3


class HttpMethod(StrEnum):
    """HTTP verbs used by the device API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


# ---------------------------------------------------------------------------
# Records and projections
# ---------------------------------------------------------------------------

AttributeValue = str | tuple[str, ...] | None


@dataclass(frozen=True)
class DeviceRecord:
    """Immutable attribute map of one device.

    Scalar values are held in their string wire form, list-valued
    attributes as tuples of strings, and JSON ``null`` as ``None``.

    Attributes:
        attributes: Read-only mapping of wire attribute name to value.

    """

    attributes: Mapping[str, AttributeValue]

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def __contains__(self, key: object) -> bool:
        return str(key) in self.attributes

    def __iter__(self) -> Iterator[str]:
        return iter(self.attributes)

    def get(self, key: AttributeKey | str) -> str | None:
        """Return the scalar value of *key*, or ``None`` if absent or null.

        List-valued attributes are joined with ``", "``.
        """
        value = self.attributes.get(str(key))
        if isinstance(value, tuple):
            return ", ".join(value)
        return value

    def get_list(self, key: AttributeKey | str) -> tuple[str, ...] | None:
        """Return a list-valued attribute, or ``None`` if absent or null."""
        value = self.attributes.get(str(key))
        if value is None:
            return None
        if isinstance(value, tuple):
            return value
        return (value,)

    @property
    def device_id(self) -> int:
        """Return the cloud-assigned integer device ID."""
        return int(self.attributes[AttributeKey.ID])


class DeviceSummary(NamedTuple):
    """Five-field device summary used for "available devices" listings.

    Field order defines the presentation sort order.
    """

    agent_location: str
    device_os: str
    device_name: str
    model: str
    device_id: str


class DeviceOverview(NamedTuple):
    """Row of the all-devices overview table."""

    location: str
    device_name: str
    device_os: str
    os_version: str
    status: str
    device_id: str
    udid: str
