from conftest import DUMPSYS_OUTPUT

from appchecker.analysis.dumpsys import (
    packages_section,
    parse_badging_label,
    parse_packages,
    parse_pm_path,
    parse_timestamp,
)
from appchecker.core.models import ApplicationFlags


def test_parse_timestamp_converts_device_time_to_epoch_millis() -> None:
    assert parse_timestamp("2023-01-01 10:00:00") == 1672567200000


def test_parse_timestamp_applies_device_time_zone() -> None:
    # Berlin is UTC+1 in January.
    assert parse_timestamp("2023-01-01 11:00:00", "Europe/Berlin") == 1672567200000


def test_parse_timestamp_returns_zero_for_garbage() -> None:
    assert parse_timestamp("") == 0
    assert parse_timestamp("unknown") == 0


def test_packages_section_returns_none_without_header() -> None:
    assert packages_section("Activity Resolver Table:\n  Non-Data Actions:\n") is None


def test_parse_packages_keeps_dumpsys_order() -> None:
    packages = parse_packages(DUMPSYS_OUTPUT)

    assert [p.package_name for p in packages] == ["com.example.a", "com.example.sys"]


def test_parse_packages_ignores_hidden_system_packages_section() -> None:
    packages = parse_packages(DUMPSYS_OUTPUT)

    sys_pkg = packages[1]
    assert sys_pkg.version_code == 2
    assert len([p for p in packages if p.package_name == "com.example.sys"]) == 1


def test_parse_packages_reads_fields_of_user_package() -> None:
    pkg = parse_packages(DUMPSYS_OUTPUT)[0]

    assert pkg.version_code == 1
    assert pkg.version_name == "1.0"
    assert pkg.code_path == "/data/app/~~Qm9v==/com.example.a-1"
    assert pkg.first_install_time == 1672567200000
    assert pkg.last_update_time == 1672653600000
    assert ApplicationFlags.HAS_CODE in pkg.flags
    assert not pkg.is_system
    assert pkg.label is None


def test_parse_packages_maps_null_version_and_pkg_flags() -> None:
    pkg = parse_packages(DUMPSYS_OUTPUT)[1]

    assert pkg.version_name is None
    assert pkg.is_system
    assert ApplicationFlags.PERSISTENT in pkg.flags


def test_parse_packages_returns_empty_list_for_empty_section() -> None:
    assert parse_packages("Packages:\n\nQueries:\n") == []


def test_parse_packages_returns_none_without_section() -> None:
    assert parse_packages("Can't find service: package") is None


def test_parse_pm_path_extracts_all_apk_paths() -> None:
    text = "package:/data/app/x/base.apk\npackage:/data/app/x/split_config.en.apk\n"

    assert parse_pm_path(text) == [
        "/data/app/x/base.apk",
        "/data/app/x/split_config.en.apk",
    ]


def test_parse_pm_path_returns_empty_list_for_no_output() -> None:
    assert parse_pm_path("") == []


BADGING = """\
package: name='com.example.a' versionCode='1' versionName='1.0'
application-label:'Example'
application-label-de:'Beispiel'
application-label-pt-BR:'Exemplo'
application: label='Example' icon='res/mipmap/ic_launcher.png'
"""


def test_parse_badging_label_prefers_exact_locale() -> None:
    assert parse_badging_label(BADGING, "pt-BR") == "Exemplo"


def test_parse_badging_label_falls_back_to_language() -> None:
    assert parse_badging_label(BADGING, "de-AT") == "Beispiel"


def test_parse_badging_label_falls_back_to_default_label() -> None:
    assert parse_badging_label(BADGING, "fr") == "Example"
    assert parse_badging_label(BADGING) == "Example"


def test_parse_badging_label_returns_none_without_labels() -> None:
    assert parse_badging_label("package: name='x'") is None
