import dataclasses

import pytest

from appchecker.core.models import (
    ApplicationFlags,
    CatalogApp,
    InstalledApp,
    PackageInfo,
    version_or_unknown,
)


def test_version_or_unknown_substitutes_only_missing_versions() -> None:
    assert version_or_unknown(None) == "Unknown"
    assert version_or_unknown("2.3.1") == "2.3.1"
    assert version_or_unknown("") == ""


def test_application_flags_from_names_ignores_unknown_names() -> None:
    flags = ApplicationFlags.from_names(["SYSTEM", "has_code", "SOMETHING_NEW"])

    assert flags == ApplicationFlags.SYSTEM | ApplicationFlags.HAS_CODE


def test_installed_app_payload_has_timestamps_and_no_system_flag() -> None:
    info = PackageInfo(
        package_name="com.example.a",
        version_code=7,
        version_name="1.2",
        label="Example",
        first_install_time=1000,
        last_update_time=2000,
    )

    assert InstalledApp.from_info(info).to_payload() == {
        "packageName": "com.example.a",
        "appName": "Example",
        "versionName": "1.2",
        "versionCode": 7,
        "firstInstallTime": 1000,
        "lastUpdateTime": 2000,
    }


def test_catalog_app_payload_has_system_flag_and_no_timestamps() -> None:
    info = PackageInfo(
        package_name="com.example.sys",
        version_code=2,
        flags=ApplicationFlags.SYSTEM,
        first_install_time=1000,
    )

    assert CatalogApp.from_info(info).to_payload() == {
        "packageName": "com.example.sys",
        "appName": "com.example.sys",
        "versionName": "Unknown",
        "versionCode": 2,
        "isSystemApp": True,
    }


def test_records_are_immutable() -> None:
    app = CatalogApp.from_info(PackageInfo(package_name="com.example.a"))

    with pytest.raises(dataclasses.FrozenInstanceError):
        app.app_name = "changed"  # type: ignore[misc]
