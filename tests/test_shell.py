import asyncio
import sys

import pytest

from appchecker.core import shell
from appchecker.core.errors import AdbTimeoutError, ToolNotFoundError
from appchecker.core.shell import run_capture


def test_run_capture_returns_output_and_returncode() -> None:
    out, err, code = asyncio.run(
        run_capture(sys.executable, "-c", "import sys; print('ok'); sys.stderr.write('warn'); sys.exit(3)")
    )

    assert (out, err, code) == ("ok", "warn", 3)


def test_run_capture_raises_for_missing_executable() -> None:
    with pytest.raises(ToolNotFoundError) as excinfo:
        asyncio.run(run_capture("/nonexistent/adb", "devices"))

    assert excinfo.value.context["tool"] == "/nonexistent/adb"


def test_run_capture_raises_on_timeout() -> None:
    with pytest.raises(AdbTimeoutError) as excinfo:
        asyncio.run(run_capture(sys.executable, "-c", "import time; time.sleep(5)", timeout=0.2))

    assert excinfo.value.context["timeout"] == 0.2


def test_run_capture_reaps_process_after_timeout(monkeypatch) -> None:
    started = []
    real_exec = shell.asyncio.create_subprocess_exec

    async def tracking_exec(*args, **kwargs):
        process = await real_exec(*args, **kwargs)
        started.append(process)
        return process

    monkeypatch.setattr(shell.asyncio, "create_subprocess_exec", tracking_exec)

    with pytest.raises(AdbTimeoutError):
        asyncio.run(run_capture(sys.executable, "-c", "import time; time.sleep(5)", timeout=0.2))

    (process,) = started
    assert process.returncode is not None
