"""Asynchronous shell command execution with timeout."""

from __future__ import annotations

import asyncio
import time
from typing import Optional

from appchecker.core.errors import AdbTimeoutError, ToolNotFoundError
from appchecker.core.logging import get_logger

log = get_logger(__name__)


async def run_capture(
    *cmd: str, timeout: Optional[float] = 30
) -> tuple[str, str, int]:
    """Run a command asynchronously with optional timeout.

    Args:
        *cmd: Command and its arguments to run.
        timeout: Timeout in seconds, or None to wait indefinitely.

    Returns:
        A tuple of (stdout, stderr, returncode).

    Raises:
        ToolNotFoundError: If the executable does not exist.
        AdbTimeoutError: If the command times out.
    """
    start = time.perf_counter()
    command = " ".join(cmd)
    log.debug("command_start", command=command, timeout=timeout)

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
    except FileNotFoundError as e:
        log.error("command_not_found", command=command, tool=cmd[0])
        raise ToolNotFoundError(tool=cmd[0], context={"command": command}) from e

    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError as e:
        duration_ms = int((time.perf_counter() - start) * 1000)
        log.error(
            "command_timeout",
            command=command,
            timeout=timeout,
            duration_ms=duration_ms
        )
        try:
            process.kill()
            await process.wait()
        finally:
            raise AdbTimeoutError(
                command=command,
                timeout=timeout,
                context={"duration_ms": duration_ms}
            ) from e

    duration_ms = int((time.perf_counter() - start) * 1000)
    log.info(
        "command_complete",
        command=command,
        returncode=process.returncode,
        duration_ms=duration_ms
    )

    return (
        out.decode(errors="replace").strip(),
        err.decode(errors="replace").strip(),
        process.returncode,
    )
