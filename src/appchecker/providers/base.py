"""Protocol definitions for package registries."""

from __future__ import annotations

from typing import List, Protocol

from appchecker.core.models import PackageInfo


class PackageRegistry(Protocol):
    """Protocol for a host's installed-package registry."""

    async def has_package(self, package_name: str) -> bool:
        """Return True if the registry knows the package, False if not found."""
        ...

    async def list_packages(self) -> List[PackageInfo]:
        """List every installed package, system ones included."""
        ...
