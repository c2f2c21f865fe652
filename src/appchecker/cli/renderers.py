"""Renderers for displaying installed apps in the CLI using Rich."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from appchecker.core.models import UNKNOWN_VERSION, CatalogApp, InstalledApp

console = Console()
err_console = Console(stderr=True)


def format_millis(millis: int) -> str:
    """Render an epoch-millisecond timestamp as UTC, or blank when unset."""
    if not millis:
        return ""
    moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def _version(version_name: str) -> str:
    if version_name == UNKNOWN_VERSION:
        return f"[dim]{UNKNOWN_VERSION}[/dim]"
    return escape(version_name)


def installed_table(apps: Iterable[InstalledApp]) -> Table:
    """Create a table of user-installed apps.

    Args:
        apps: Records from ``getInstalledApps``.

    Returns:
        A Rich Table with one row per app.
    """
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Package", style="bold")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Code", justify="right")
    table.add_column("Installed (UTC)", style="dim")
    table.add_column("Updated (UTC)", style="dim")

    for app in apps:
        table.add_row(
            escape(app.package_name),
            escape(app.app_name),
            _version(app.version_name),
            str(app.version_code),
            format_millis(app.first_install_time),
            format_millis(app.last_update_time),
        )

    return table


def catalog_table(apps: Iterable[CatalogApp]) -> Table:
    """Create a table of all apps with their system flag.

    Args:
        apps: Records from ``getAllInstalledApps``.

    Returns:
        A Rich Table with one row per app.
    """
    table = Table(box=box.MINIMAL_HEAVY_HEAD)
    table.add_column("Package", style="bold")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Code", justify="right")
    table.add_column("Source")

    for app in apps:
        table.add_row(
            escape(app.package_name),
            escape(app.app_name),
            _version(app.version_name),
            str(app.version_code),
            "[yellow]system[/yellow]" if app.is_system_app else "[green]user[/green]",
        )

    return table
