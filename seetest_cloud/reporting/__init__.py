"""Console table rendering for device listings."""

from .device_table import render_overview_table, render_summary_table, render_value_table

__all__ = ["render_overview_table", "render_summary_table", "render_value_table"]
