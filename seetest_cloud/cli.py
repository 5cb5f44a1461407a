"""Command line interface for the SeeTest Cloud client."""

import logging
from datetime import datetime, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from . import __version__
from .client.cloud_client import CloudAPIClient, format_timestamp
from .config.settings import CloudSettings, get_settings
from .core.exceptions import CloudAPIError
from .core.models import AttributeKey, OSType
from .reporting.device_table import (
    render_overview_table,
    render_summary_table,
    render_value_table,
)

app = typer.Typer(
    name="seetest-cloud",
    help="Query and manage mobile devices hosted in a SeeTest Cloud",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


class DeviceStatus(StrEnum):
    """Status filter of the ``devices`` command."""

    ALL = "all"
    AVAILABLE = "available"
    ONLINE = "online"


def configure_logging(level: str) -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _client(ctx: typer.Context) -> CloudAPIClient:
    settings: CloudSettings = ctx.obj
    if not settings.server_url or not settings.has_credentials:
        err_console.print(
            "[red]Set SEETEST_SERVER_URL and SEETEST_ACCESS_TOKEN "
            "(or SEETEST_USERNAME/SEETEST_PASSWORD), or pass --config[/red]"
        )
        raise typer.Exit(2)
    return settings.create_client()


def _fail(exc: Exception) -> typer.Exit:
    err_console.print(f"[red]{escape(str(exc))}[/red]")
    return typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML settings file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Load settings shared by all commands."""
    try:
        settings = CloudSettings.from_yaml(config) if config else get_settings()
    except (FileNotFoundError, ValueError, ValidationError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Invalid settings: {escape(str(exc))}[/red]")
        raise typer.Exit(2) from exc
    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"seetest-cloud {__version__}")


@app.command()
def devices(
    ctx: typer.Context,
    status: DeviceStatus = typer.Option(DeviceStatus.ALL, "--status", "-s", help="Status filter"),
    location: str = typer.Option("all", "--location", "-l", help="Agent location or 'all'"),
    os_type: Optional[OSType] = typer.Option(None, "--os", case_sensitive=False, help="OS filter"),
    details: bool = typer.Option(False, "--details", help="Show location, OS, model and ID"),
) -> None:
    """List devices."""
    client = _client(ctx)
    try:
        if status is DeviceStatus.ALL:
            console.print(render_overview_table(client.get_device_overviews()))
        elif status is DeviceStatus.AVAILABLE and details:
            rows = client.get_available_devices_with_details(location, os_type)
            console.print(render_summary_table(rows))
        elif status is DeviceStatus.AVAILABLE:
            names = client.get_available_device_names(location, os_type)
            console.print(render_value_table("DeviceName", names))
        else:
            names = client.get_online_device_names(location, os_type)
            console.print(render_value_table("DeviceName", names))
    except (CloudAPIError, ValueError) as exc:
        raise _fail(exc) from exc


@app.command("device-id")
def device_id(
    ctx: typer.Context,
    udid: Optional[str] = typer.Option(None, "--udid", help="Device UDID / serial number"),
    query: list[str] = typer.Option([], "--where", "-w", help="attribute=value, repeatable"),
) -> None:
    """Resolve the cloud device ID from a UDID or an attribute query."""
    client = _client(ctx)
    try:
        if udid:
            resolved = client.get_device_id(udid)
        elif query:
            resolved = client.get_device_id_by_query(_parse_query(query))
        else:
            raise ValueError("Pass --udid or at least one --where attribute=value")
    except (CloudAPIError, ValueError) as exc:
        raise _fail(exc) from exc
    console.print(resolved)


@app.command()
def device(
    ctx: typer.Context,
    device_id: int = typer.Argument(..., help="Cloud device ID"),
    keys: list[str] = typer.Option([], "--key", "-k", help="Attribute to show, repeatable"),
) -> None:
    """Show attributes of one device."""
    client = _client(ctx)
    try:
        if keys:
            for key, value in client.get_device_fields(device_id, keys).items():
                console.print(f"{key}: {value}")
        else:
            console.print_json(client.get_device_raw(device_id))
    except (CloudAPIError, ValueError) as exc:
        raise _fail(exc) from exc


@app.command()
def tags(
    ctx: typer.Context,
    device_id: int = typer.Argument(..., help="Cloud device ID"),
) -> None:
    """List the tags of one device."""
    client = _client(ctx)
    try:
        console.print(render_value_table("Tag", client.get_device_tags(device_id)))
    except CloudAPIError as exc:
        raise _fail(exc) from exc


@app.command()
def reserve(
    ctx: typer.Context,
    device_id: int = typer.Argument(..., help="Cloud device ID"),
    minutes: int = typer.Option(30, "--minutes", "-m", help="Reservation length"),
) -> None:
    """Reserve a device starting now."""
    client = _client(ctx)
    now = datetime.now()
    try:
        body = client.reserve_device(
            device_id,
            format_timestamp(now),
            format_timestamp(now),
            format_timestamp(now + timedelta(minutes=minutes)),
        )
    except CloudAPIError as exc:
        raise _fail(exc) from exc
    console.print(body)


@app.command()
def release(
    ctx: typer.Context,
    device_id: int = typer.Argument(..., help="Cloud device ID"),
) -> None:
    """Release a device from its current user."""
    client = _client(ctx)
    try:
        console.print(client.release_device(device_id))
    except CloudAPIError as exc:
        raise _fail(exc) from exc


@app.command()
def reboot(
    ctx: typer.Context,
    device_id: int = typer.Argument(..., help="Cloud device ID"),
) -> None:
    """Reboot a device."""
    client = _client(ctx)
    try:
        console.print(client.reboot_device(device_id))
    except CloudAPIError as exc:
        raise _fail(exc) from exc


def _parse_query(pairs: list[str]) -> dict[AttributeKey, str]:
    query: dict[AttributeKey, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"Expected attribute=value, got '{pair}'")
        query[AttributeKey.parse(key.strip())] = value.strip()
    return query


if __name__ == "__main__":
    app()
