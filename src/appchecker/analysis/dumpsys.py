"""Parse package manager output captured from ``adb shell``."""

from __future__ import annotations

import re
from datetime import datetime
from typing import List, Optional

from appchecker.core.config import device_zone
from appchecker.core.models import ApplicationFlags, PackageInfo

PACKAGE_HEADER = re.compile(r"^\s*Package \[(?P<name>[^\]]+)\]")
VERSION_CODE = re.compile(r"\bversionCode=(?P<code>-?\d+)")
FLAGS = re.compile(r"^\s*(?P<key>pkgFlags|flags)=\[(?P<names>[^\]]*)\]")
FIELD = re.compile(r"^\s*(?P<key>versionName|codePath|firstInstallTime|lastUpdateTime)=(?P<value>.*)$")
LABEL = re.compile(r"^application-label(?:-(?P<locale>[^:]+))?:'(?P<label>.*)'$")

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_timestamp(value: str, device_tz: str = "UTC") -> int:
    """Convert a dumpsys timestamp to epoch milliseconds.

    Args:
        value: Timestamp as printed by dumpsys, in device local time.
        device_tz: IANA time zone the device clock runs in.

    Returns:
        Milliseconds since the epoch, or 0 if the value is not a timestamp.
    """
    try:
        moment = datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        return 0
    return int(moment.replace(tzinfo=device_zone(device_tz)).timestamp() * 1000)


def packages_section(text: str) -> Optional[List[str]]:
    """Return the lines of the ``Packages:`` section, or None if absent."""
    lines = text.splitlines()
    for index, line in enumerate(lines):
        if line.rstrip() == "Packages:":
            break
    else:
        return None

    section: List[str] = []
    for line in lines[index + 1:]:
        if line and not line[0].isspace():
            break
        section.append(line)
    return section


def parse_packages(text: str, device_tz: str = "UTC") -> Optional[List[PackageInfo]]:
    """Parse ``dumpsys package packages`` output into PackageInfo records.

    Records keep the order in which dumpsys lists them. Only the first
    occurrence of each field inside a package block is used.

    Args:
        text: Raw command output.
        device_tz: IANA time zone for the install timestamps.

    Returns:
        The parsed packages, or None when the output has no Packages section.
    """
    section = packages_section(text)
    if section is None:
        return None

    blocks: List[tuple[str, List[str]]] = []
    for line in section:
        if match := PACKAGE_HEADER.match(line):
            blocks.append((match.group("name"), []))
        elif blocks:
            blocks[-1][1].append(line)

    return [_package_from_block(name, body, device_tz) for name, body in blocks]


def _package_from_block(name: str, body: List[str], device_tz: str) -> PackageInfo:
    fields: dict[str, str] = {}
    flag_lines: dict[str, str] = {}
    version_code = 0
    seen_code = False

    for line in body:
        if not seen_code and (match := VERSION_CODE.search(line)):
            version_code = int(match.group("code"))
            seen_code = True
            continue
        if match := FLAGS.match(line):
            flag_lines.setdefault(match.group("key"), match.group("names"))
            continue
        if match := FIELD.match(line):
            fields.setdefault(match.group("key"), match.group("value").strip())

    # Older releases print application flags as pkgFlags, newer ones as flags.
    raw_flags = flag_lines.get("pkgFlags", flag_lines.get("flags", ""))

    version_name = fields.get("versionName")
    if version_name == "null":
        version_name = None

    return PackageInfo(
        package_name=name,
        version_code=version_code,
        version_name=version_name,
        flags=ApplicationFlags.from_names(raw_flags.split()),
        first_install_time=parse_timestamp(fields.get("firstInstallTime", ""), device_tz),
        last_update_time=parse_timestamp(fields.get("lastUpdateTime", ""), device_tz),
        code_path=fields.get("codePath"),
    )


def parse_pm_path(text: str) -> List[str]:
    """Extract APK paths from ``pm path`` output."""
    return [
        line.strip()[len("package:"):]
        for line in text.splitlines()
        if line.strip().startswith("package:")
    ]


def parse_badging_label(text: str, locale: str | None = None) -> Optional[str]:
    """Pick the application label from ``aapt dump badging`` output.

    A label for the exact locale wins, then one for its language, then
    the default label.
    """
    labels: dict[str | None, str] = {}
    for line in text.splitlines():
        if match := LABEL.match(line.strip()):
            labels.setdefault(match.group("locale"), match.group("label"))

    candidates: List[str | None] = []
    if locale:
        candidates.append(locale)
        candidates.append(re.split(r"[-_]", locale)[0])
    candidates.append(None)

    for key in candidates:
        if labels.get(key):
            return labels[key]
    return None
