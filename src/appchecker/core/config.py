"""Configuration module for the adb environment."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from appchecker.core.errors import ConfigError

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class CheckerEnv:
    """Configuration for talking to a device over adb."""
    adb: str
    serial: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    label_tool: str | None = None
    locale: str | None = None
    device_tz: str = "UTC"


def find_adb(environ: dict[str, str] | None = None) -> str:
    """Locate the adb executable.

    Args:
        environ: Environment mapping to read; defaults to os.environ.

    Returns:
        Path of the adb binary, or the literal "adb" when nothing is found.
    """
    env = os.environ if environ is None else environ

    if explicit := env.get("APPCHECKER_ADB"):
        return explicit

    for var in ("ANDROID_HOME", "ANDROID_SDK_ROOT"):
        sdk = env.get(var)
        if sdk:
            candidate = Path(sdk) / "platform-tools" / "adb"
            if candidate.exists():
                return str(candidate)

    return shutil.which("adb") or "adb"


def device_zone(name: str) -> tzinfo:
    """Resolve the device clock's time zone.

    Raises:
        ConfigError: If the name is not a known IANA zone.
    """
    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise ConfigError(
            "unknown time zone", setting="APPCHECKER_DEVICE_TZ", value=name
        ) from e


def check_env(env: CheckerEnv) -> CheckerEnv:
    """Reject settings no query could run with.

    Raises:
        ConfigError: On a non-positive timeout or an unknown time zone.
    """
    if not env.timeout > 0:
        raise ConfigError(
            "timeout must be a positive number of seconds",
            setting="APPCHECKER_TIMEOUT",
            value=env.timeout,
        )
    device_zone(env.device_tz)
    return env


def discover_env(environ: dict[str, str] | None = None) -> CheckerEnv:
    """Discover the adb environment from environment variables.

    Raises:
        ConfigError: If a variable holds an unusable value.
    """
    env = os.environ if environ is None else environ

    timeout = DEFAULT_TIMEOUT
    if raw := env.get("APPCHECKER_TIMEOUT"):
        try:
            timeout = float(raw)
        except ValueError as e:
            raise ConfigError(
                "timeout must be a number of seconds", setting="APPCHECKER_TIMEOUT", value=raw
            ) from e

    return check_env(
        CheckerEnv(
            adb=find_adb(env),
            serial=env.get("ANDROID_SERIAL") or None,
            timeout=timeout,
            label_tool=env.get("APPCHECKER_AAPT") or None,
            locale=env.get("APPCHECKER_LOCALE") or None,
            device_tz=env.get("APPCHECKER_DEVICE_TZ") or "UTC",
        )
    )
