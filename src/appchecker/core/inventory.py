"""Inventory module answering the installed-package queries."""

from __future__ import annotations

import time
from typing import List, Optional

from appchecker.core.config import CheckerEnv, discover_env
from appchecker.core.logging import get_logger
from appchecker.core.models import CatalogApp, InstalledApp
from appchecker.providers.adb import AdbPackageRegistry
from appchecker.providers.base import PackageRegistry

log = get_logger(__name__)


class Inventory:
    """Installed-package queries over a package registry.

    Every call goes straight to the registry; nothing is kept between calls.
    """

    def __init__(
        self, registry: Optional[PackageRegistry] = None, env: Optional[CheckerEnv] = None
    ) -> None:
        self.registry = registry or AdbPackageRegistry(env or discover_env())

    async def is_app_installed(self, package_name: str) -> bool:
        """Check whether a package is installed.

        Args:
            package_name: Package identifier to look up.

        Returns:
            True if found, False if the registry reports it missing.
        """
        start = time.perf_counter()
        installed = await self.registry.has_package(package_name)
        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "lookup_complete",
            package=package_name,
            installed=installed,
            duration_ms=duration_ms,
        )
        return installed

    async def get_installed_apps(self) -> List[InstalledApp]:
        """List non-system apps in enumeration order.

        Returns:
            One InstalledApp per package without the SYSTEM flag.
        """
        start = time.perf_counter()
        log.info("fetch_installed_apps_start")

        packages = await self.registry.list_packages()
        apps = [InstalledApp.from_info(p) for p in packages if not p.is_system]

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info(
            "fetch_installed_apps_complete",
            count=len(apps),
            skipped_system=len(packages) - len(apps),
            duration_ms=duration_ms,
        )
        return apps

    async def get_all_installed_apps(self) -> List[CatalogApp]:
        """List every app, system ones included, in enumeration order."""
        start = time.perf_counter()
        log.info("fetch_all_apps_start")

        apps = [CatalogApp.from_info(p) for p in await self.registry.list_packages()]

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info("fetch_all_apps_complete", count=len(apps), duration_ms=duration_ms)
        return apps
