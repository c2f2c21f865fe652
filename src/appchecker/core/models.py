"""Data models for installed Android packages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Flag, auto
from typing import Any

UNKNOWN_VERSION = "Unknown"


class ApplicationFlags(Flag):
    """Application flags as printed in ``pkgFlags=[...]`` by dumpsys."""

    NONE = 0
    SYSTEM = auto()
    DEBUGGABLE = auto()
    HAS_CODE = auto()
    PERSISTENT = auto()
    FACTORY_TEST = auto()
    ALLOW_TASK_REPARENTING = auto()
    ALLOW_CLEAR_USER_DATA = auto()
    UPDATED_SYSTEM_APP = auto()
    TEST_ONLY = auto()
    VM_SAFE_MODE = auto()
    ALLOW_BACKUP = auto()
    KILL_AFTER_RESTORE = auto()
    RESTORE_ANY_VERSION = auto()
    EXTERNAL_STORAGE = auto()
    LARGE_HEAP = auto()
    STOPPED = auto()
    SUPPORTS_RTL = auto()
    INSTALLED = auto()
    IS_DATA_ONLY = auto()
    FULL_BACKUP_ONLY = auto()
    USES_CLEARTEXT_TRAFFIC = auto()
    EXTRACT_NATIVE_LIBS = auto()
    HARDWARE_ACCELERATED = auto()
    SUSPENDED = auto()
    MULTIARCH = auto()

    @classmethod
    def from_names(cls, names: list[str]) -> "ApplicationFlags":
        """Combine flag names into a single value, ignoring unknown names."""
        flags = cls.NONE
        for name in names:
            member = cls.__members__.get(name.strip().upper())
            if member is not None:
                flags |= member
        return flags


@dataclass(frozen=True)
class PackageInfo:
    """A package as reported by the device's package manager."""

    package_name: str
    version_code: int = 0
    version_name: str | None = None
    label: str | None = None
    flags: ApplicationFlags = ApplicationFlags.NONE
    first_install_time: int = 0
    last_update_time: int = 0
    code_path: str | None = None

    @property
    def is_system(self) -> bool:
        return ApplicationFlags.SYSTEM in self.flags


@dataclass(frozen=True)
class InstalledApp:
    """A non-system app as returned by ``getInstalledApps``."""

    package_name: str
    app_name: str
    version_name: str
    version_code: int
    first_install_time: int
    last_update_time: int

    @classmethod
    def from_info(cls, info: PackageInfo) -> "InstalledApp":
        return cls(
            package_name=info.package_name,
            app_name=display_name(info),
            version_name=version_or_unknown(info.version_name),
            version_code=info.version_code,
            first_install_time=info.first_install_time,
            last_update_time=info.last_update_time,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "packageName": self.package_name,
            "appName": self.app_name,
            "versionName": self.version_name,
            "versionCode": self.version_code,
            "firstInstallTime": self.first_install_time,
            "lastUpdateTime": self.last_update_time,
        }


@dataclass(frozen=True)
class CatalogApp:
    """Any installed app as returned by ``getAllInstalledApps``.

    Unlike InstalledApp this carries the system flag and no timestamps.
    """

    package_name: str
    app_name: str
    version_name: str
    version_code: int
    is_system_app: bool

    @classmethod
    def from_info(cls, info: PackageInfo) -> "CatalogApp":
        return cls(
            package_name=info.package_name,
            app_name=display_name(info),
            version_name=version_or_unknown(info.version_name),
            version_code=info.version_code,
            is_system_app=info.is_system,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "packageName": self.package_name,
            "appName": self.app_name,
            "versionName": self.version_name,
            "versionCode": self.version_code,
            "isSystemApp": self.is_system_app,
        }


def version_or_unknown(version_name: str | None) -> str:
    """Return the version string, or "Unknown" when none was reported."""
    if version_name is None:
        return UNKNOWN_VERSION
    return version_name


def display_name(info: PackageInfo) -> str:
    return info.label or info.package_name
