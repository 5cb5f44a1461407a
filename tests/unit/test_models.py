"""Unit tests for the device data model."""

from __future__ import annotations

import pytest

from seetest_cloud.core.models import (
    AttributeKey,
    ControlType,
    DeviceRecord,
    DeviceSummary,
    OSType,
)


class TestAttributeKey:
    """Tests for attribute key parsing."""

    def test_parse_member_returns_member(self) -> None:
        assert AttributeKey.parse(AttributeKey.UDID) is AttributeKey.UDID

    def test_parse_wire_name(self) -> None:
        assert AttributeKey.parse("deviceName") is AttributeKey.DEVICE_NAME

    def test_parse_unknown_key_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown device attribute 'color'"):
            AttributeKey.parse("color")

    def test_parse_is_case_sensitive(self) -> None:
        with pytest.raises(ValueError):
            AttributeKey.parse("DEVICENAME")

    def test_members_compare_equal_to_wire_names(self) -> None:
        assert AttributeKey.AGENT_LOCATION == "agentLocation"
        assert str(AttributeKey.STATUS_AGE_IN_MINUTES) == "statusAgeInMinutes"


class TestEnums:
    """Tests for the API enumerations."""

    def test_control_type_values(self) -> None:
        assert [int(c) for c in ControlType] == [0, 1, 2, 3]

    def test_os_type_wire_values(self) -> None:
        assert OSType.ANDROID == "Android"
        assert OSType.IOS == "iOS"


class TestDeviceRecord:
    """Tests for the immutable device record."""

    @pytest.fixture
    def record(self) -> DeviceRecord:
        return DeviceRecord(
            {
                "id": "7",
                "deviceName": "Pixel 7",
                "notes": None,
                "iosConfigurationProfiles": ("Wi-Fi", "VPN"),
            }
        )

    def test_get_scalar(self, record: DeviceRecord) -> None:
        assert record.get(AttributeKey.DEVICE_NAME) == "Pixel 7"
        assert record.get("deviceName") == "Pixel 7"

    def test_get_missing_and_null(self, record: DeviceRecord) -> None:
        assert record.get(AttributeKey.MODEL) is None
        assert record.get(AttributeKey.NOTES) is None

    def test_get_joins_list_values(self, record: DeviceRecord) -> None:
        assert record.get(AttributeKey.IOS_CONFIGURATION_PROFILES) == "Wi-Fi, VPN"

    def test_get_list(self, record: DeviceRecord) -> None:
        assert record.get_list(AttributeKey.IOS_CONFIGURATION_PROFILES) == ("Wi-Fi", "VPN")
        assert record.get_list(AttributeKey.DEVICE_NAME) == ("Pixel 7",)
        assert record.get_list(AttributeKey.NOTES) is None

    def test_device_id(self, record: DeviceRecord) -> None:
        assert record.device_id == 7

    def test_contains(self, record: DeviceRecord) -> None:
        assert AttributeKey.DEVICE_NAME in record
        assert "model" not in record

    def test_immutability(self, record: DeviceRecord) -> None:
        with pytest.raises(AttributeError):
            record.attributes = {}  # type: ignore[misc]
        with pytest.raises(TypeError):
            record.attributes["deviceName"] = "other"  # type: ignore[index]

    def test_source_mapping_is_copied(self) -> None:
        source = {"id": "1", "deviceName": "A"}
        record = DeviceRecord(source)
        source["deviceName"] = "B"
        assert record.get(AttributeKey.DEVICE_NAME) == "A"


class TestDeviceSummary:
    """Tests for the five-field summary tuple."""

    def test_field_order(self) -> None:
        summary = DeviceSummary("Bangalore", "iOS", "iPhone 12", "iPhone13,2", "2")
        assert tuple(summary) == ("Bangalore", "iOS", "iPhone 12", "iPhone13,2", "2")
        assert summary._fields == (
            "agent_location",
            "device_os",
            "device_name",
            "model",
            "device_id",
        )

    def test_natural_sort_order(self) -> None:
        rows = [
            DeviceSummary("Chennai", "Android", "Pixel 7", "Pixel 7", "3"),
            DeviceSummary("Bangalore", "iOS", "iPhone 12", "iPhone13,2", "2"),
            DeviceSummary("Bangalore", "Android", "Galaxy S21", "SM-G991B", "1"),
        ]
        assert [row.device_id for row in sorted(rows)] == ["1", "2", "3"]
