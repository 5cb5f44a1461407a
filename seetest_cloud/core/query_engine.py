"""Query engine over the SeeTest Cloud device inventory.

Fetches device records through an injected ``fetch`` collaborator,
filters them with the predicate matcher, and shapes the matches according
to the caller's intent:

- exactly one device (``find_unique``, ``resolve_id``)
- one projected field per matching device (``list_field``)
- a five-field summary per matching device (``list_summaries``)
- fields of one device looked up by ID (``get_field``, ``get_fields``)
- a list-valued field of one device (``get_list_field``)

Each call performs at most one fetch and a single linear scan, and keeps
no state between calls.

Usage::

    engine = QueryEngine(transport.fetch)
    device_id = engine.resolve_id({AttributeKey.UDID: "00008030-001A"})
    names = engine.list_field({"displayStatus": "available"}, AttributeKey.DEVICE_NAME)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence

from .exceptions import AmbiguousQueryError, NoDeviceFoundError, WrongPlatformError
from .matcher import filter_records, normalize_predicate, values_equal
from .models import (
    AttributeKey,
    DeviceOverview,
    DeviceRecord,
    DeviceSummary,
    HttpMethod,
    OSType,
)
from .records import parse_record, parse_records, parse_string_list

logger = logging.getLogger(__name__)

DEVICES_PATH = "/api/v1/devices"

# List-valued attributes the cloud never reports for the given platform.
UNSUPPORTED_PLATFORMS: dict[AttributeKey, OSType] = {
    AttributeKey.IOS_CONFIGURATION_PROFILES: OSType.ANDROID,
}

Fetch = Callable[[str, HttpMethod, Mapping[str, str] | None], str]
Query = Mapping[AttributeKey | str, str] | None


def device_path(device_id: int, *segments: str) -> str:
    """Return the resource path of one device, optionally with sub-resources."""
    path = f"{DEVICES_PATH}/{device_id}"
    if segments:
        path += "/" + "/".join(segments)
    return path


class QueryEngine:
    """Filter and project the device inventory.

    Args:
        fetch: Callable performing one authenticated request and returning
            the raw response body. Transport failures must be raised by
            the callable itself.

    """

    def __init__(self, fetch: Fetch) -> None:
        """Initialize the engine with its fetch collaborator."""
        self._fetch = fetch
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    # -- Collection queries -------------------------------------------------

    def fetch_records(self) -> list[DeviceRecord]:
        """Fetch and parse all devices visible to the current user."""
        return parse_records(self._fetch(DEVICES_PATH, HttpMethod.GET, None))

    def find_unique(self, query: Query, key: AttributeKey | str) -> str:
        """Return *key* of the single device matching *query*.

        The whole inventory is scanned before deciding, so a second match
        is always detected.

        Raises:
            NoDeviceFoundError: If no device matches.
            AmbiguousQueryError: If more than one device matches.

        """
        predicate = normalize_predicate(query)
        key = AttributeKey.parse(key)
        matched = filter_records(self.fetch_records(), predicate)

        if not matched:
            raise NoDeviceFoundError(
                "No device found in the cloud for the search query",
                details={"query": _echo(predicate)},
            )
        if len(matched) > 1:
            raise AmbiguousQueryError(
                f"{len(matched)} devices found in the cloud for the search query; "
                "add more attributes to identify a single device",
                match_count=len(matched),
                details={"query": _echo(predicate)},
            )
        value = matched[0].get(key) or ""
        self._logger.debug("Unique match for %s: %s=%s", _echo(predicate), key, value)
        return value

    def resolve_id(self, query: Query) -> int:
        """Return the device ID of the single device matching *query*."""
        return int(self.find_unique(query, AttributeKey.ID))

    def resolve_id_by_udid(self, udid: str) -> int:
        """Return the device ID for a UDID (Android serial number or iOS UDID)."""
        return self.resolve_id({AttributeKey.UDID: udid})

    def list_field(self, query: Query, key: AttributeKey | str) -> list[str]:
        """Return *key* of every device matching *query*, in inventory order.

        Raises:
            NoDeviceFoundError: If no device matches.

        """
        predicate = normalize_predicate(query)
        key = AttributeKey.parse(key)
        matched = self._require_matches(predicate)
        return [record.get(key) or "" for record in matched]

    def list_all(self, key: AttributeKey | str) -> list[str]:
        """Return *key* of every device in the inventory."""
        return self.list_field(None, key)

    def list_summaries(self, query: Query, sort: bool = False) -> list[DeviceSummary]:
        """Return a ``DeviceSummary`` for every device matching *query*.

        Args:
            query: Attribute filter; ``None`` or empty matches everything.
            sort: Order the summaries by location, OS, name, model and ID
                instead of inventory order.

        Raises:
            NoDeviceFoundError: If no device matches.

        """
        predicate = normalize_predicate(query)
        summaries = [_summarize(record) for record in self._require_matches(predicate)]
        return sorted(summaries) if sort else summaries

    def list_overviews(self) -> list[DeviceOverview]:
        """Return a sorted overview row for every device in the inventory."""
        return sorted(_overview(record) for record in self.fetch_records())

    # -- Single-device queries ----------------------------------------------

    def fetch_device(self, device_id: int) -> DeviceRecord:
        """Fetch one device and confirm the server returned the requested ID.

        Raises:
            NoDeviceFoundError: If the returned record has a different ID.

        """
        record = parse_record(self._fetch(device_path(device_id), HttpMethod.GET, None))
        if record.device_id != device_id:
            raise NoDeviceFoundError(
                "No device found in the cloud for the device ID",
                device_id=device_id,
                details={"returned_id": record.device_id},
            )
        return record

    def get_field(self, device_id: int, key: AttributeKey | str) -> str:
        """Return one attribute of the device with *device_id*."""
        key = AttributeKey.parse(key)
        return self.fetch_device(device_id).get(key) or ""

    def get_fields(
        self,
        device_id: int,
        keys: Sequence[AttributeKey | str],
    ) -> dict[AttributeKey, str]:
        """Return the requested attributes of one device, in requested order."""
        parsed = [AttributeKey.parse(key) for key in keys]
        record = self.fetch_device(device_id)
        return {key: record.get(key) or "" for key in parsed}

    def get_list_field(self, device_id: int, key: AttributeKey | str) -> list[str]:
        """Return a list-valued attribute of one device.

        Raises:
            WrongPlatformError: If the attribute is absent and the device
                runs a platform that never reports it.

        """
        key = AttributeKey.parse(key)
        record = self.fetch_device(device_id)
        values = record.get_list(key)
        if values is not None:
            return list(values)

        unsupported = UNSUPPORTED_PLATFORMS.get(key)
        device_os = record.get(AttributeKey.DEVICE_OS)
        if unsupported is not None and device_os and values_equal(unsupported, device_os):
            raise WrongPlatformError(
                f"'{key}' is not available for {unsupported} devices; "
                f"the entered ID belongs to an {device_os} device",
                device_id=device_id,
                details={"deviceOs": device_os},
            )
        return []

    def get_tags(self, device_id: int) -> list[str]:
        """Return the tags attached to one device."""
        return parse_string_list(self._fetch(device_path(device_id, "tags"), HttpMethod.GET, None))

    # -- Internal helpers ---------------------------------------------------

    def _require_matches(self, predicate: Mapping[AttributeKey, str]) -> list[DeviceRecord]:
        matched = filter_records(self.fetch_records(), predicate)
        if not matched:
            raise NoDeviceFoundError(
                "No device found in the cloud for the search query",
                details={"query": _echo(predicate)},
            )
        self._logger.debug("%d devices matched %s", len(matched), _echo(predicate))
        return matched


def _echo(predicate: Mapping[AttributeKey, str]) -> dict[str, str]:
    return {str(key): value for key, value in predicate.items()}


def _summarize(record: DeviceRecord) -> DeviceSummary:
    return DeviceSummary(*_project(record, (
        AttributeKey.AGENT_LOCATION,
        AttributeKey.DEVICE_OS,
        AttributeKey.DEVICE_NAME,
        AttributeKey.MODEL,
        AttributeKey.ID,
    )))


def _overview(record: DeviceRecord) -> DeviceOverview:
    return DeviceOverview(*_project(record, (
        AttributeKey.AGENT_LOCATION,
        AttributeKey.DEVICE_NAME,
        AttributeKey.DEVICE_OS,
        AttributeKey.OS_VERSION,
        AttributeKey.DISPLAY_STATUS,
        AttributeKey.ID,
        AttributeKey.UDID,
    )))


def _project(record: DeviceRecord, keys: Iterable[AttributeKey]) -> list[str]:
    return [record.get(key) or "" for key in keys]
