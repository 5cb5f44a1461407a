"""Console tables for device listings, rendered with ``rich``.

Usage::

    console.print(render_overview_table(client.get_device_overviews()))
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.table import Table

from ..core.models import DeviceOverview, DeviceSummary

OVERVIEW_COLUMNS = (
    "Location",
    "DeviceName",
    "DeviceOS",
    "OSVersion",
    "CurrentStatus",
    "DeviceID",
    "UDID",
)
SUMMARY_COLUMNS = ("Location", "DeviceOS", "DeviceName", "Model", "DeviceID")


def render_overview_table(rows: Iterable[DeviceOverview], title: str | None = None) -> Table:
    """Build a table of all devices, sorted by location and then name."""
    return _build_table(OVERVIEW_COLUMNS, sorted(rows), title)


def render_summary_table(rows: Iterable[DeviceSummary], title: str | None = None) -> Table:
    """Build a table of device summaries, sorted by location and then OS."""
    return _build_table(SUMMARY_COLUMNS, sorted(rows), title)


def render_value_table(header: str, values: Iterable[str], title: str | None = None) -> Table:
    """Build a single-column table, keeping the given order."""
    return _build_table((header,), [(value,) for value in values], title)


def _build_table(
    columns: tuple[str, ...],
    rows: Iterable[tuple[str, ...]],
    title: str | None,
) -> Table:
    table = Table(title=title, show_lines=False)
    for column in columns:
        table.add_column(column, overflow="fold")
    for row in rows:
        table.add_row(*row)
    return table
