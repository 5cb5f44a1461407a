"""Shared pytest fixtures for the SeeTest Cloud client test suite.

Provides sample device inventories, JSON payload builders, a recording
stub of the cloud HTTP API, and clients wired to that stub.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from seetest_cloud.client.cloud_client import CloudAPIClient
from seetest_cloud.core.query_engine import QueryEngine
from seetest_cloud.transport.http_transport import HttpTransport

from .stubs import ACCESS_TOKEN, SERVER_URL, CloudStub

# ---------------------------------------------------------------------------
# Sample data fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_devices() -> list[dict[str, Any]]:
    """Inventory of four devices across two locations and both platforms."""
    return [
        {
            "id": 1,
            "udid": "R58M123ABC",
            "deviceName": "Galaxy S21",
            "deviceOs": "Android",
            "osVersion": "13",
            "model": "SM-G991B",
            "manufacturer": "samsung",
            "agentLocation": "Bangalore",
            "displayStatus": "Available",
            "currentStatus": "Online",
            "isEmulator": False,
            "screenWidth": 1080,
        },
        {
            "id": 2,
            "udid": "00008030-001A2C3E0E42802E",
            "deviceName": "iPhone 12",
            "deviceOs": "iOS",
            "osVersion": "17.2",
            "model": "iPhone13,2",
            "manufacturer": "Apple",
            "agentLocation": "Bangalore",
            "displayStatus": "available",
            "currentStatus": "online",
            "isEmulator": False,
            "iosConfigurationProfiles": ["Corp Wi-Fi", "VPN"],
        },
        {
            "id": 3,
            "udid": "R58M999XYZ",
            "deviceName": "Pixel 7",
            "deviceOs": "Android",
            "osVersion": "14",
            "model": "Pixel 7",
            "manufacturer": "Google",
            "agentLocation": "Chennai",
            "displayStatus": "In Use",
            "currentStatus": "online",
            "isEmulator": False,
        },
        {
            "id": 14,
            "udid": "00008101-000A1B2C3D4E",
            "deviceName": "iPad Air",
            "deviceOs": "iOS",
            "osVersion": "16.5",
            "model": "iPad13,1",
            "manufacturer": "Apple",
            "agentLocation": "Chennai",
            "displayStatus": "Offline",
            "currentStatus": "offline",
            "isEmulator": False,
            "iosConfigurationProfiles": None,
        },
    ]


@pytest.fixture
def two_devices() -> list[dict[str, Any]]:
    """Minimal two-device inventory used by the end-to-end scenarios."""
    return [
        {"id": "1", "deviceName": "A", "deviceOs": "Android", "displayStatus": "available"},
        {"id": "2", "deviceName": "B", "deviceOs": "iOS", "displayStatus": "available"},
    ]


@pytest.fixture
def payload() -> Callable[[Any], str]:
    """Build a ``{"data": ...}`` response body."""

    def _build(data: Any) -> str:
        return json.dumps({"status": "SUCCESS", "data": data, "code": "OK"})

    return _build


# ---------------------------------------------------------------------------
# Query engine fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def inventory_fetch(
    sample_devices: list[dict[str, Any]], payload: Callable[[Any], str]
) -> MagicMock:
    """Fetch mock returning the sample inventory for every call."""
    return MagicMock(return_value=payload(sample_devices))


@pytest.fixture
def engine(inventory_fetch: MagicMock) -> QueryEngine:
    """QueryEngine over the sample inventory."""
    return QueryEngine(inventory_fetch)


# ---------------------------------------------------------------------------
# HTTP stub fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cloud_stub() -> CloudStub:
    """Empty cloud stub; tests register the routes they need."""
    return CloudStub()


@pytest.fixture
def transport(cloud_stub: CloudStub) -> HttpTransport:
    """Token-authenticated transport wired to the cloud stub."""
    return HttpTransport(
        SERVER_URL,
        access_token=ACCESS_TOKEN,
        transport=httpx.MockTransport(cloud_stub),
    )


@pytest.fixture
def client(transport: HttpTransport) -> CloudAPIClient:
    """CloudAPIClient wired to the cloud stub."""
    return CloudAPIClient(transport=transport)


# ---------------------------------------------------------------------------
# Pytest configuration
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test against a live cloud")
