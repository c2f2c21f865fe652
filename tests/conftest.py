from __future__ import annotations

import pytest

from appchecker.core.models import ApplicationFlags, PackageInfo

DUMPSYS_OUTPUT = """\
Database versions:
  Internal:
    sdkVersion=33 databaseVersion=3

Packages:
  Package [com.example.a] (5c1f0a2):
    userId=10123
    pkg=Package{8d3e1b1 com.example.a}
    codePath=/data/app/~~Qm9v==/com.example.a-1
    resourcePath=/data/app/~~Qm9v==/com.example.a-1
    versionCode=1 minSdk=21 targetSdk=33
    versionName=1.0
    splits=[base]
    flags=[ HAS_CODE ALLOW_CLEAR_USER_DATA ALLOW_BACKUP ]
    privateFlags=[ PRIVATE_FLAG_ACTIVITIES_RESIZE_MODE_RESIZEABLE ]
    timeStamp=2023-01-01 10:00:00
    firstInstallTime=2023-01-01 10:00:00
    lastUpdateTime=2023-01-02 10:00:00
    User 0: ceDataInode=4096 installed=true hidden=false
  Package [com.example.sys] (7ab44c0):
    userId=1000
    codePath=/system/priv-app/ExampleSys
    versionCode=2 minSdk=33 targetSdk=33
    versionName=null
    pkgFlags=[ SYSTEM HAS_CODE PERSISTENT ]
    timeStamp=2008-12-31 16:00:00
    firstInstallTime=2008-12-31 16:00:00
    lastUpdateTime=2008-12-31 16:00:00

Hidden system packages:
  Package [com.example.sys] (1f2e3d4):
    userId=1000
    codePath=/system/priv-app/ExampleSys
    versionCode=1 minSdk=33 targetSdk=33
    versionName=0.9
    pkgFlags=[ SYSTEM HAS_CODE ]
"""


class FakeRegistry:
    """In-memory registry used in place of a device."""

    def __init__(self, packages: list[PackageInfo]) -> None:
        self.packages = packages
        self.list_calls = 0

    async def has_package(self, package_name: str) -> bool:
        return any(p.package_name == package_name for p in self.packages)

    async def list_packages(self) -> list[PackageInfo]:
        self.list_calls += 1
        return list(self.packages)


@pytest.fixture
def scenario_packages() -> list[PackageInfo]:
    return [
        PackageInfo(
            package_name="com.example.a",
            version_code=1,
            version_name="1.0",
            label="Example A",
            first_install_time=1672567200000,
            last_update_time=1672653600000,
        ),
        PackageInfo(
            package_name="com.example.sys",
            version_code=2,
            version_name=None,
            flags=ApplicationFlags.SYSTEM | ApplicationFlags.HAS_CODE,
        ),
    ]


@pytest.fixture
def fake_registry(scenario_packages) -> FakeRegistry:
    return FakeRegistry(scenario_packages)
