"""Unit tests for the device listing tables."""

from __future__ import annotations

import io

from rich.console import Console
from rich.table import Table

from seetest_cloud.core.models import DeviceOverview, DeviceSummary
from seetest_cloud.reporting.device_table import (
    OVERVIEW_COLUMNS,
    SUMMARY_COLUMNS,
    render_overview_table,
    render_summary_table,
    render_value_table,
)


def render(table: Table) -> str:
    buffer = io.StringIO()
    Console(file=buffer, width=200).print(table)
    return buffer.getvalue()


class TestOverviewTable:
    """Tests for the all-devices overview."""

    def test_columns(self) -> None:
        table = render_overview_table([])
        assert tuple(column.header for column in table.columns) == OVERVIEW_COLUMNS
        assert table.row_count == 0

    def test_sorted_by_location_then_name(self) -> None:
        rows = [
            DeviceOverview("Chennai", "Pixel 7", "Android", "14", "In Use", "3", "R58M999XYZ"),
            DeviceOverview("Bangalore", "iPhone 12", "iOS", "17.2", "Available", "2", "0000-2"),
            DeviceOverview("Bangalore", "Galaxy S21", "Android", "13", "Available", "1", "R58M123ABC"),
        ]
        output = render(render_overview_table(rows, title="Devices"))
        assert "Devices" in output
        assert output.index("Galaxy S21") < output.index("iPhone 12") < output.index("Pixel 7")


class TestSummaryTable:
    """Tests for the available-devices summary."""

    def test_columns_and_order(self) -> None:
        rows = [
            DeviceSummary("Bangalore", "iOS", "iPhone 12", "iPhone13,2", "2"),
            DeviceSummary("Bangalore", "Android", "Galaxy S21", "SM-G991B", "1"),
        ]
        table = render_summary_table(rows)
        assert tuple(column.header for column in table.columns) == SUMMARY_COLUMNS
        output = render(table)
        assert output.index("Galaxy S21") < output.index("iPhone 12")


class TestValueTable:
    """Tests for single-column tables."""

    def test_keeps_given_order(self) -> None:
        table = render_value_table("DeviceName", ["Pixel 7", "Galaxy S21"])
        assert table.columns[0].header == "DeviceName"
        assert table.row_count == 2
        output = render(table)
        assert output.index("Pixel 7") < output.index("Galaxy S21")
