"""Conversion of raw device API payloads into ``DeviceRecord`` objects.

Every device endpoint answers with a JSON object whose ``data`` member
holds either an array of device objects (collection endpoints), a single
device object, or an array of plain strings (the tags endpoint).

Usage::

    records = parse_records(fetch("/api/v1/devices", HttpMethod.GET, None))
    record = parse_record(fetch("/api/v1/devices/12", HttpMethod.GET, None))
"""

from __future__ import annotations

import json
import logging
from typing import Any

from .exceptions import MalformedResponseError, NotJsonObjectError
from .models import AttributeKey, AttributeValue, DeviceRecord

logger = logging.getLogger(__name__)

DATA_MEMBER = "data"


def parse_records(raw: str) -> list[DeviceRecord]:
    """Parse a collection payload into records, preserving array order.

    Args:
        raw: Response body of a collection endpoint.

    Returns:
        One ``DeviceRecord`` per entry of the ``data`` array.

    Raises:
        MalformedResponseError: If the body is not JSON, has no ``data``
            array, or a record lacks an integer ``id``.
        NotJsonObjectError: If an array entry is not a flat object.

    """
    data = _load_data(raw)
    if not isinstance(data, list):
        raise MalformedResponseError(
            "Expected 'data' to be an array of devices",
            details={"type": type(data).__name__},
        )
    records = [_to_record(entry, index) for index, entry in enumerate(data)]
    logger.debug("Parsed %d device records", len(records))
    return records


def parse_record(raw: str) -> DeviceRecord:
    """Parse a single-device payload.

    Raises:
        MalformedResponseError: If ``data`` is missing or not an object.

    """
    data = _load_data(raw)
    if not isinstance(data, dict):
        raise MalformedResponseError(
            "Expected 'data' to be a device object",
            details={"type": type(data).__name__},
        )
    return _to_record(data, None)


def parse_string_list(raw: str) -> list[str]:
    """Parse a payload whose ``data`` member is an array of scalars."""
    data = _load_data(raw)
    if not isinstance(data, list):
        raise MalformedResponseError(
            "Expected 'data' to be an array",
            details={"type": type(data).__name__},
        )
    return [_to_text(item) for item in data]


def parse_response(raw: str, key: str) -> str:
    """Return a top-level member of any JSON response as a string.

    Useful for the bodies returned by mutating endpoints, e.g.
    ``parse_response('{"status":"success"}', "status") == "success"``.

    Raises:
        MalformedResponseError: If the body is not a JSON object.
        KeyError: If *key* is not present in the response.

    """
    payload = _load_json(raw)
    if not isinstance(payload, dict):
        raise MalformedResponseError("Response is not a JSON object")
    value = payload[key]
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return _to_text(value)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_json(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError) as exc:
        raise MalformedResponseError(
            "Response is not valid JSON",
            details={"error": str(exc)},
        ) from exc


def _load_data(raw: str) -> Any:
    payload = _load_json(raw)
    if not isinstance(payload, dict) or DATA_MEMBER not in payload:
        raise MalformedResponseError(f"Response has no '{DATA_MEMBER}' member")
    return payload[DATA_MEMBER]


def _to_text(value: Any) -> str:
    """Render a JSON scalar in its wire string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_device_id(value: AttributeValue) -> bool:
    """Return ``True`` for a positive integer in plain decimal digits."""
    return isinstance(value, str) and value.isascii() and value.isdigit() and int(value) > 0


def _to_record(entry: Any, index: int | None) -> DeviceRecord:
    where = {"index": index} if index is not None else {}
    if not isinstance(entry, dict):
        raise NotJsonObjectError(
            "Device entry is not a JSON object",
            details={**where, "type": type(entry).__name__},
        )

    attributes: dict[str, AttributeValue] = {}
    for name, value in entry.items():
        if value is None:
            attributes[name] = None
        elif isinstance(value, list):
            attributes[name] = tuple(_to_text(item) for item in value)
        elif isinstance(value, dict):
            raise NotJsonObjectError(
                "Device entry is not a flat JSON object",
                details={**where, "attribute": name},
            )
        else:
            attributes[name] = _to_text(value)

    raw_id = attributes.get(AttributeKey.ID)
    if not _is_device_id(raw_id):
        raise MalformedResponseError(
            "Device entry has no positive integer 'id'",
            details={**where, "id": raw_id},
        )
    return DeviceRecord(attributes)
