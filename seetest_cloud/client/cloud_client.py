"""Public client for managing mobile devices hosted in a SeeTest Cloud.

``CloudAPIClient`` combines the HTTP transport with the query engine and
exposes the device endpoints: inventory queries, per-device lookups,
reservations, tags, web control, reboot and USB reset.

Usage::

    client = CloudAPIClient("https://cloud.example.com", access_token="...")
    names = client.get_available_device_names(location="Bangalore", os_type=OSType.IOS)
    device_id = client.get_device_id("00008030-001A2C3E0E42802E")
    client.reserve_device(device_id, now, start, end)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime
from urllib.parse import quote

from rich.console import Console

from ..core.models import (
    AttributeKey,
    Category,
    ControlType,
    DeviceOverview,
    DeviceSummary,
    HttpMethod,
    OSType,
)
from ..core.query_engine import DEVICES_PATH, QueryEngine, device_path
from ..core.records import parse_response
from ..reporting.device_table import render_overview_table
from ..transport.http_transport import DEFAULT_TIMEOUT, HttpTransport

logger = logging.getLogger(__name__)

ALL_LOCATIONS = "all"
TIMESTAMP_FORMAT = "%Y-%m-%d-%H-%M-%S"


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as the ``YYYY-MM-DD-hh-mm-ss`` string the API expects."""
    return moment.strftime(TIMESTAMP_FORMAT)


class CloudAPIClient:
    """Manage mobile devices hosted in a SeeTest Cloud.

    Args:
        server_url: SeeTest Cloud server address.
        access_token: Access key (user icon -> Get Access Key). Takes
            precedence over username and password.
        username: Cloud username for basic authentication.
        password: Cloud password for basic authentication.
        timeout: Request timeout in seconds.
        verify_ssl: Verify the server TLS certificate.
        transport: Optional pre-built ``HttpTransport``; when given, the
            connection arguments above are ignored.

    """

    def __init__(
        self,
        server_url: str = "",
        access_token: str | None = None,
        username: str | None = None,
        password: str | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        transport: HttpTransport | None = None,
    ) -> None:
        """Initialize the client with connection settings or a transport."""
        self._transport = transport or HttpTransport(
            server_url,
            access_token=access_token,
            username=username,
            password=password,
            timeout=timeout,
            verify_ssl=verify_ssl,
        )
        self._engine = QueryEngine(self._transport.fetch)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def engine(self) -> QueryEngine:
        """Return the query engine bound to this client's transport."""
        return self._engine

    # -- Inventory ------------------------------------------------------------

    def get_all_devices_raw(self) -> str:
        """Return the raw JSON of all devices the user has access to."""
        return self._transport.fetch(DEVICES_PATH, HttpMethod.GET)

    def get_all_devices(
        self,
        expected_key: AttributeKey | str,
        query: Mapping[AttributeKey | str, str] | None = None,
    ) -> list[str]:
        """Return *expected_key* of every device matching *query*.

        Args:
            expected_key: Attribute to project, e.g. ``AttributeKey.DEVICE_NAME``.
            query: Attribute filter such as
                ``{AttributeKey.DEVICE_OS: "iOS", AttributeKey.OS_VERSION: "17.2"}``.

        Raises:
            NoDeviceFoundError: If no device matches.

        """
        return self._engine.list_field(query, expected_key)

    def get_devices_by(
        self,
        input_key: AttributeKey | str,
        value: str,
        expected_key: AttributeKey | str,
    ) -> list[str]:
        """Return *expected_key* of every device whose *input_key* equals *value*."""
        return self._engine.list_field({input_key: value}, expected_key)

    def get_available_device_names(
        self,
        location: str = ALL_LOCATIONS,
        os_type: OSType | None = None,
    ) -> list[str]:
        """Return names of available devices.

        Args:
            location: Agent location, or ``"all"`` for every location.
            os_type: Optional operating system filter.

        """
        query = _status_query(AttributeKey.DISPLAY_STATUS, "available", location, os_type)
        return self._engine.list_field(query, AttributeKey.DEVICE_NAME)

    def get_available_devices_with_details(
        self,
        location: str = ALL_LOCATIONS,
        os_type: OSType | None = None,
    ) -> list[DeviceSummary]:
        """Return sorted summaries (location, OS, name, model, ID) of available devices."""
        query = _status_query(AttributeKey.DISPLAY_STATUS, "available", location, os_type)
        return self._engine.list_summaries(query, sort=True)

    def get_online_device_names(
        self,
        location: str = ALL_LOCATIONS,
        os_type: OSType | None = None,
    ) -> list[str]:
        """Return names of devices connected to the cloud, available or in use."""
        query = _status_query(AttributeKey.CURRENT_STATUS, "online", location, os_type)
        return self._engine.list_field(query, AttributeKey.DEVICE_NAME)

    def get_device_overviews(self) -> list[DeviceOverview]:
        """Return location, name, OS, version, status, ID and UDID of every device."""
        return self._engine.list_overviews()

    def print_devices_overview(self, console: Console | None = None) -> None:
        """Print the device overview table, e.g. to look up a device UDID."""
        (console or Console()).print(render_overview_table(self.get_device_overviews()))

    # -- Single device --------------------------------------------------------

    def get_device_raw(self, device_id: int) -> str:
        """Return the raw JSON of one device. Cloud admin only."""
        return self._transport.fetch(device_path(device_id), HttpMethod.GET)

    def get_device(self, device_id: int, expected_key: AttributeKey | str) -> str:
        """Return one attribute of a device, e.g. its ``displayStatus``."""
        return self._engine.get_field(device_id, expected_key)

    def get_device_fields(
        self,
        device_id: int,
        expected_keys: Sequence[AttributeKey | str],
    ) -> dict[AttributeKey, str]:
        """Return several attributes of a device, keyed in requested order."""
        return self._engine.get_fields(device_id, expected_keys)

    def get_device_id(self, udid: str) -> int:
        """Return the cloud device ID for a UDID (case-insensitive).

        Raises:
            NoDeviceFoundError: If no device has this UDID.
            AmbiguousQueryError: If several devices report this UDID.

        """
        return self._engine.resolve_id_by_udid(udid)

    def get_device_id_by_query(self, query: Mapping[AttributeKey | str, str]) -> int:
        """Return the cloud device ID of the single device matching *query*."""
        return self._engine.resolve_id(query)

    def get_device_tags(self, device_id: int) -> list[str]:
        """Return the tags of a device."""
        return self._engine.get_tags(device_id)

    def get_ios_configuration_profiles(self, device_id: int) -> list[str]:
        """Return the configuration profiles of an iOS device. Cloud admin only.

        Raises:
            WrongPlatformError: If *device_id* belongs to an Android device.

        """
        return self._engine.get_list_field(device_id, AttributeKey.IOS_CONFIGURATION_PROFILES)

    def get_device_reservations(
        self,
        device_id: int,
        client_timestamp: str,
        start: str,
        end: str,
    ) -> str:
        """Return reservations of a device between *start* and *end*. Cloud admin only.

        Timestamps use the ``YYYY-MM-DD-hh-mm-ss`` format, see ``format_timestamp``.
        """
        return self._transport.fetch(
            device_path(device_id, "reservations"),
            HttpMethod.GET,
            {"current_timestamp": client_timestamp, "start": start, "end": end},
        )

    # -- Mutations ------------------------------------------------------------

    def edit_device(
        self,
        device_id: int,
        name: str | None = None,
        notes: str | None = None,
        category: Category | None = None,
    ) -> str:
        """Update name, notes and category of a device. Cloud admin only.

        Fields left as ``None`` keep their current value.
        """
        params: dict[str, str] = {}
        if name is not None:
            params["name"] = name
        if notes is not None:
            params["notes"] = notes
        if category is not None:
            params["category"] = Category(category).value
        self._logger.info("Editing device %d (%s)", device_id, ", ".join(params) or "no changes")
        return self._transport.fetch(device_path(device_id), HttpMethod.POST, params)

    def reserve_device(
        self,
        device_id: int,
        client_timestamp: str,
        start: str,
        end: str,
    ) -> str:
        """Reserve a device for the current user."""
        self._logger.info("Reserving device %d from %s to %s", device_id, start, end)
        return self._transport.fetch(
            device_path(device_id, "reservations", "new"),
            HttpMethod.POST,
            {"clientCurrentTimestamp": client_timestamp, "start": start, "end": end},
        )

    def reserve_multiple_devices(
        self,
        device_ids: Iterable[int],
        client_timestamp: str,
        start: str,
        end: str,
    ) -> str:
        """Reserve several devices for the current user. Cloud admin only."""
        devices_list = ",".join(str(device_id) for device_id in device_ids)
        if not devices_list:
            raise ValueError("At least one device ID is required")
        self._logger.info("Reserving devices %s from %s to %s", devices_list, start, end)
        return self._transport.fetch(
            f"{DEVICES_PATH}/reservations/new",
            HttpMethod.POST,
            {
                "devicesList": devices_list,
                "clientCurrentTimestamp": client_timestamp,
                "start": start,
                "end": end,
            },
        )

    def release_device(self, device_id: int) -> str:
        """Release a device from its current user."""
        self._logger.info("Releasing device %d", device_id)
        return self._transport.fetch(device_path(device_id, "release"), HttpMethod.POST)

    def reboot_device(self, device_id: int) -> str:
        """Reboot a device. Cloud admin only."""
        self._logger.info("Rebooting device %d", device_id)
        return self._transport.fetch(device_path(device_id, "reboot"), HttpMethod.POST)

    def reset_usb_connection(self, device_id: int) -> str:
        """Reset the USB connection of a device. Cloud admin only."""
        self._logger.info("Resetting USB connection of device %d", device_id)
        return self._transport.fetch(device_path(device_id, "resetusb"), HttpMethod.POST)

    def start_web_control(
        self,
        device_id: int,
        control_type: ControlType,
        emulator_instance_name: str | None = None,
    ) -> str:
        """Start a web-control session on a device. Cloud admin only.

        ``ControlType.DEBUG`` requires a grid started by the same user.
        """
        params = {"type": str(int(control_type))}
        if emulator_instance_name:
            params["emulatorInstanceName"] = emulator_instance_name
        self._logger.info("Starting %s web control on device %d", ControlType(control_type).name, device_id)
        return self._transport.fetch(device_path(device_id, "web-control"), HttpMethod.PUT, params)

    def add_device_tag(self, device_id: int, tag: str) -> str:
        """Add a tag to a device.

        Tags may contain letters, digits and underscores and are not case
        sensitive.
        """
        if not tag:
            raise ValueError("Tag should not be empty")
        self._logger.info("Adding tag '%s' to device %d", tag, device_id)
        return self._transport.fetch(device_path(device_id, "tags", quote(tag, safe="")), HttpMethod.PUT)

    def remove_device_tag(self, device_id: int, tag: str) -> str:
        """Remove one tag from a device."""
        if not tag:
            raise ValueError("Tag should not be empty")
        self._logger.info("Removing tag '%s' from device %d", tag, device_id)
        return self._transport.fetch(device_path(device_id, "tags", quote(tag, safe="")), HttpMethod.DELETE)

    def remove_all_tags(self, device_id: int) -> str:
        """Remove every tag from a device."""
        self._logger.info("Removing all tags from device %d", device_id)
        return self._transport.fetch(device_path(device_id, "tags") + "/", HttpMethod.DELETE)

    # -- Helpers --------------------------------------------------------------

    @staticmethod
    def parse_response(response: str, key: str) -> str:
        """Return *key* of a JSON response, e.g. ``"status"`` -> ``"success"``."""
        return parse_response(response, key)


def _status_query(
    status_key: AttributeKey,
    status: str,
    location: str,
    os_type: OSType | None,
) -> dict[AttributeKey, str]:
    query: dict[AttributeKey, str] = {status_key: status}
    if os_type is not None:
        query[AttributeKey.DEVICE_OS] = OSType(os_type).value
    if location.casefold() != ALL_LOCATIONS:
        query[AttributeKey.AGENT_LOCATION] = location
    return query
