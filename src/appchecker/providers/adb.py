"""Android package registry reached through adb."""

from __future__ import annotations

import dataclasses
import posixpath
import shlex
import time
from typing import List

from appchecker.analysis.dumpsys import parse_badging_label, parse_packages, parse_pm_path
from appchecker.core.config import CheckerEnv
from appchecker.core.errors import AdbCommandError, DeviceUnavailableError, EnumerationError
from appchecker.core.logging import get_logger
from appchecker.core.models import PackageInfo
from appchecker.core.shell import run_capture

log = get_logger(__name__)

DEVICE_ERRORS = (
    "no devices",
    "device offline",
    "unauthorized",
    "not found",
    "more than one device",
)


def strip_adb_notices(stderr: str) -> str:
    """Drop adb's own "* daemon ..." status lines from stderr."""
    return "\n".join(
        line for line in stderr.splitlines() if not line.lstrip().startswith("* ")
    ).strip()


def apk_path(code_path: str | None) -> str | None:
    """Guess the base APK inside a package's code path.

    Installed apps keep ``base.apk`` in their code directory; system apps
    name the APK after the directory.
    """
    if not code_path:
        return None
    if code_path.endswith(".apk"):
        return code_path
    if code_path.startswith("/data/"):
        return posixpath.join(code_path, "base.apk")
    return posixpath.join(code_path, posixpath.basename(code_path.rstrip("/")) + ".apk")


def device_problem(stderr: str) -> bool:
    """Return True if adb's stderr describes a device connection problem."""
    text = stderr.lower()
    return text.startswith("error:") and any(marker in text for marker in DEVICE_ERRORS)


class AdbPackageRegistry:
    """Package registry backed by ``pm`` and ``dumpsys`` on a device."""

    def __init__(self, env: CheckerEnv) -> None:
        self.env = env

    def _argv(self, *shell_args: str) -> list[str]:
        argv = [self.env.adb]
        if self.env.serial:
            argv += ["-s", self.env.serial]
        # adb joins these into one command line for the device shell.
        return argv + ["shell", *(shlex.quote(arg) for arg in shell_args)]

    async def _shell(self, *shell_args: str) -> tuple[str, str, int]:
        argv = self._argv(*shell_args)
        out, err, code = await run_capture(*argv, timeout=self.env.timeout)
        err = strip_adb_notices(err)
        if code != 0 and device_problem(err):
            log.error("device_unavailable", serial=self.env.serial, error=err)
            raise DeviceUnavailableError(serial=self.env.serial, error=err)
        return out, err, code

    async def has_package(self, package_name: str) -> bool:
        """Look a package up with ``pm path``.

        Args:
            package_name: Package identifier, passed through unvalidated.

        Returns:
            True if the package manager reports at least one APK path.

        Raises:
            DeviceUnavailableError: If no usable device is attached.
            AdbCommandError: If adb fails for any other reason.
        """
        out, err, code = await self._shell("pm", "path", package_name)
        paths = parse_pm_path(out)
        if paths:
            return True
        # pm exits 1 with empty output for an unknown package.
        if code in (0, 1) and not err:
            log.debug("package_not_found", package=package_name)
            return False

        command = " ".join(self._argv("pm", "path", package_name))
        log.error("package_lookup_failed", package=package_name, returncode=code, error=err)
        raise AdbCommandError(
            command=command,
            returncode=code,
            error=err or out,
            context={"package": package_name},
        )

    async def list_packages(self) -> List[PackageInfo]:
        """Enumerate packages from ``dumpsys package packages``.

        Returns:
            Every package in dumpsys order, labels resolved when a label
            tool is configured.

        Raises:
            DeviceUnavailableError: If no usable device is attached.
            EnumerationError: If the listing cannot be read.
        """
        start = time.perf_counter()
        command = " ".join(self._argv("dumpsys", "package", "packages"))
        log.debug("package_list_start", command=command)

        out, err, code = await self._shell("dumpsys", "package", "packages")
        if code != 0:
            log.error("package_list_failed", command=command, returncode=code, error=err)
            raise EnumerationError(
                f"dumpsys exited with code {code}",
                command=command,
                error=err or out,
            )

        packages = parse_packages(out, self.env.device_tz)
        if packages is None:
            log.error("package_list_unreadable", command=command, output_preview=out[:200])
            raise EnumerationError(
                "dumpsys output has no Packages section",
                command=command,
                context={"output_preview": out[:200]},
            )

        if self.env.label_tool:
            packages = [
                dataclasses.replace(p, label=await self.resolve_label(p))
                for p in packages
            ]

        duration_ms = int((time.perf_counter() - start) * 1000)
        log.info("package_list_complete", count=len(packages), duration_ms=duration_ms)

        return packages

    async def resolve_label(self, info: PackageInfo) -> str | None:
        """Read a package's display label with the on-device aapt tool.

        The APK is located from the code path dumpsys already reported;
        ``pm path`` is only asked when that guess cannot be read.

        Returns None when no label tool is configured or it reports no label.
        """
        if not self.env.label_tool:
            return None

        guess = apk_path(info.code_path)
        if guess is not None:
            out, _, code = await self._shell(self.env.label_tool, "dump", "badging", guess)
            if code == 0:
                return parse_badging_label(out, self.env.locale)

        out, _, code = await self._shell("pm", "path", info.package_name)
        paths = [p for p in parse_pm_path(out) if p != guess]
        if code != 0 or not paths:
            return None

        out, err, code = await self._shell(self.env.label_tool, "dump", "badging", paths[0])
        if code != 0:
            log.warning(
                "label_lookup_failed", package=info.package_name, returncode=code, error=err
            )
            return None
        return parse_badging_label(out, self.env.locale)
