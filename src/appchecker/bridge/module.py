"""Callback bridge exposing the inventory queries to a host runtime."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Optional

from appchecker.core.errors import UnknownMethodError, error_payload
from appchecker.core.inventory import Inventory
from appchecker.core.logging import get_logger

log = get_logger(__name__)

Callback = Callable[[Any], None]


class InstalledAppChecker:
    """Bridge module with one completion signal per call.

    Each method runs its query to completion, then invokes exactly one of
    ``callback`` (with the result payload) or ``error_callback`` (with an
    error payload). Without an error callback, failures propagate to the
    caller and ``callback`` is not invoked.

    Example:
        checker = InstalledAppChecker()
        checker.is_app_installed("com.example.app", print)
        checker.dispatch("getAllInstalledApps", callback=print)
    """

    name = "RNInstalledAppChecker"

    METHODS = {
        "isAppInstalled": "is_app_installed",
        "getInstalledApps": "get_installed_apps",
        "getAllInstalledApps": "get_all_installed_apps",
    }

    def __init__(self, inventory: Optional[Inventory] = None) -> None:
        self.inventory = inventory or Inventory()

    @classmethod
    def method_names(cls) -> list[str]:
        return list(cls.METHODS)

    def _complete(
        self,
        method: str,
        query: Callable[[], Awaitable[Any]],
        callback: Callback,
        error_callback: Optional[Callback],
    ) -> None:
        try:
            payload = asyncio.run(query())
        except Exception as e:
            log.error("bridge_call_failed", method=method, error=str(e), exc_info=True)
            if error_callback is None:
                raise
            error_callback(error_payload(e))
            return

        log.debug("bridge_call_complete", method=method)
        callback(payload)

    def is_app_installed(
        self, package_name: str, callback: Callback, error_callback: Optional[Callback] = None
    ) -> None:
        """Signal True if the package is installed, False if not."""
        self._complete(
            "isAppInstalled",
            lambda: self.inventory.is_app_installed(package_name),
            callback,
            error_callback,
        )

    def get_installed_apps(
        self, callback: Callback, error_callback: Optional[Callback] = None
    ) -> None:
        """Signal the list of non-system app payloads."""
        async def query() -> list[dict[str, Any]]:
            return [app.to_payload() for app in await self.inventory.get_installed_apps()]

        self._complete("getInstalledApps", query, callback, error_callback)

    def get_all_installed_apps(
        self, callback: Callback, error_callback: Optional[Callback] = None
    ) -> None:
        """Signal the list of all app payloads, each with ``isSystemApp``."""
        async def query() -> list[dict[str, Any]]:
            return [app.to_payload() for app in await self.inventory.get_all_installed_apps()]

        self._complete("getAllInstalledApps", query, callback, error_callback)

    def dispatch(
        self,
        method: str,
        *args: Any,
        callback: Callback,
        error_callback: Optional[Callback] = None,
    ) -> None:
        """Invoke a method by its bridge name.

        Raises:
            UnknownMethodError: If ``method`` is not exported.
        """
        attr = self.METHODS.get(method)
        if attr is None:
            raise UnknownMethodError(method, context={"module": self.name})
        getattr(self, attr)(*args, callback, error_callback)
