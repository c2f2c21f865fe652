"""CLI entry point for the installed app checker."""

from __future__ import annotations

import asyncio
import dataclasses
import sys
from typing import Optional

import typer
from rich.markup import escape

from appchecker.cli.renderers import catalog_table, console, err_console, installed_table
from appchecker.core.config import CheckerEnv, check_env, discover_env
from appchecker.core.errors import CheckerError, exit_code_for, format_error_message
from appchecker.core.inventory import Inventory
from appchecker.core.logging import configure_logging, get_logger

log = get_logger(__name__)

app = typer.Typer(help="Query the packages installed on an Android device.")


def handle_error(error: Exception) -> int:
    """Report an error and return the matching exit code.

    Args:
        error: The exception to handle.

    Returns:
        An integer exit code.
    """
    if isinstance(error, CheckerError):
        log.error(
            "cli_error",
            error_type=type(error).__name__,
            message=error.message,
            context=error.context,
        )
        err_console.print(f"\n{escape(format_error_message(error))}\n", style="bold red")
    else:
        log.error("unexpected_error", error=str(error), exc_info=True)
        err_console.print(
            f"\n⚠️ Unexpected error occurred: {escape(str(error))}\n", style="bold red"
        )

    return exit_code_for(error)


def _inventory(ctx: typer.Context) -> Inventory:
    env: CheckerEnv = ctx.obj
    return Inventory(env=env)


@app.callback()
def main(
    ctx: typer.Context,
    serial: Optional[str] = typer.Option(
        None, "--serial", "-s", help="Device serial (defaults to ANDROID_SERIAL)"
    ),
    adb: Optional[str] = typer.Option(None, "--adb", help="Path to the adb executable"),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Seconds to wait for each adb call"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
) -> None:
    """Resolve the adb environment shared by every command."""
    configure_logging(
        level="DEBUG" if verbose else "INFO", enable_console=verbose, force=True
    )

    overrides = {
        key: value
        for key, value in (("serial", serial), ("adb", adb), ("timeout", timeout))
        if value is not None
    }
    try:
        ctx.obj = check_env(dataclasses.replace(discover_env(), **overrides))
    except Exception as e:
        sys.exit(handle_error(e))


@app.command()
def check(ctx: typer.Context, package: str) -> None:
    """Exit 0 if PACKAGE is installed, 1 if it is not.

    Args:
        package: Package identifier, e.g. com.android.chrome.
    """
    try:
        installed = asyncio.run(_inventory(ctx).is_app_installed(package))
    except Exception as e:
        sys.exit(handle_error(e))

    if installed:
        console.print(f"[green]{escape(package)}[/green] is installed")
    else:
        console.print(f"[red]{escape(package)}[/red] is not installed")
        raise typer.Exit(code=1)


@app.command()
def apps(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List apps installed by the user (system apps excluded)."""
    try:
        records = asyncio.run(_inventory(ctx).get_installed_apps())
    except Exception as e:
        sys.exit(handle_error(e))

    if as_json:
        console.print_json(data=[r.to_payload() for r in records])
    else:
        console.print(installed_table(records))


@app.command("all")
def all_apps(
    ctx: typer.Context,
    system: Optional[bool] = typer.Option(
        None, "--system/--user", help="Only system apps, or only user apps"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw payload"),
) -> None:
    """List every installed app with its system flag."""
    try:
        records = asyncio.run(_inventory(ctx).get_all_installed_apps())
    except Exception as e:
        sys.exit(handle_error(e))

    if system is not None:
        records = [r for r in records if r.is_system_app is system]

    if as_json:
        console.print_json(data=[r.to_payload() for r in records])
    else:
        console.print(catalog_table(records))


if __name__ == "__main__":
    app()
