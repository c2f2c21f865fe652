"""Module defining custom exceptions for the appchecker package."""

from __future__ import annotations

from typing import Any, Self

# Exit Codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_TRANSIENT_ERROR = 3


class CheckerError(Exception):
    """Base exception class with context propagation.

    All exceptions raised by appchecker inherit from this class.
    Context is a dictionary that accumulates relevant information
    as the exception propagates up the call stack.

    Example:
        raise CheckerError("Lookup failed", context={"package": "com.foo"})

        # Or with context propagation
        try:
            ...
        except CheckerError as e:
            raise e.with_context(operation="isAppInstalled")
    """
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **new_context: Any) -> Self:
        """Merge additional context into the exception and return it.

        Args:
            **new_context: Additional context to add to the exception.

        Returns:
            The same exception instance with merged context.
        """
        self.context.update(new_context)
        return self

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class TransientError(CheckerError):
    """Errors caused by temporary conditions.

    The same query may succeed if issued again later. Nothing in
    appchecker retries on its own.
    """
    pass


class UserError(CheckerError):
    """Errors caused by caller input; do not repeat without correction."""
    pass


class SystemError(CheckerError):
    """Errors due to the host environment.

    Missing tools, unreachable devices or unreadable package data.
    These need the environment fixed before any query can succeed.
    """
    pass


## Specific Exceptions ##

class AdbCommandError(TransientError):
    """adb returned a non-zero exit code that is not a device problem."""
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        returncode: int | None = None,
        error: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        """Initialise AdbCommandError with detailed context.

        Args:
            message: Optional custom error message.
            command: The adb command that was executed.
            returncode: The exit code returned by the command.
            error: The error output from the command.
            context: Additional context information.
        """
        ctx = context or {}
        if command:
            ctx["command"] = command
        if returncode is not None:
            ctx["returncode"] = returncode
        if error:
            ctx["error"] = error

        if message is None:
            message = f"adb command failed with exit code {returncode if returncode is not None else 'unknown'}"

        super().__init__(message, context=ctx)


class AdbTimeoutError(TransientError):
    """adb did not finish within the configured timeout.

    Typically a device that stopped responding or a wedged adb server.
    """
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        timeout: float | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if timeout is not None:
            ctx["timeout"] = timeout

        if message is None:
            message = f"adb command timed out after {timeout or 'unknown'}s"

        super().__init__(message, context=ctx)


class UnknownMethodError(UserError):
    """A bridge call named a method the module does not export."""
    def __init__(
        self,
        method: str,
        message: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        ctx["method"] = method
        super().__init__(message or f"Unknown method '{method}'", context=ctx)


class ConfigError(UserError):
    """A configuration value cannot be used."""
    def __init__(
        self,
        message: str,
        setting: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if setting:
            ctx["setting"] = setting
        if value is not None:
            ctx["value"] = value
        super().__init__(message, context=ctx)


class ToolNotFoundError(SystemError):
    """The adb executable could not be started."""
    def __init__(
        self,
        message: str | None = None,
        tool: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if tool:
            ctx["tool"] = tool

        if message is None:
            message = f"Executable '{tool or 'adb'}' not found"

        super().__init__(message, context=ctx)


class DeviceUnavailableError(SystemError):
    """No usable device: missing, offline or unauthorised.

    Typically indicates:
        - No device or emulator attached
        - The selected serial is not connected
        - USB debugging authorisation pending on the device
    """
    def __init__(
        self,
        message: str | None = None,
        serial: str | None = None,
        error: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if serial:
            ctx["serial"] = serial
        if error:
            ctx["error"] = error

        if message is None:
            message = "No usable Android device"

        super().__init__(message, context=ctx)


class EnumerationError(SystemError):
    """The package list could not be read from the device."""
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        error: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if error:
            ctx["error"] = error

        super().__init__(message or "Package enumeration failed", context=ctx)


# CLI Error Message Templates

ERROR_TEMPLATES = {
    AdbTimeoutError: (
        "⚠️ Command timed out after {timeout}s: {command}\n"
        "   The device may be unresponsive - try 'adb reconnect'"
    ),
    AdbCommandError: (
        "⚠️ adb command failed: {command}\n"
        "   Exit Code: {returncode}\n"
        "   Error: {error}"
    ),
    ToolNotFoundError: (
        "⚠️ {message}\n"
        "   Fix: install the Android platform-tools or pass --adb PATH"
    ),
    DeviceUnavailableError: (
        "⚠️ {message}: {error}\n"
        "   Fix: check 'adb devices' and accept the debugging prompt on the device"
    ),
    EnumerationError: (
        "⚠️ Could not list packages: {message}\n"
        "   Command: {command}"
    ),
    TransientError: (
        "⚠️ Temporary failure: {message}\n"
        "   This may resolve itself - try again in a moment"
    ),
    ConfigError: (
        "❌ Invalid setting {setting}={value}: {message}"
    ),
    UserError: (
        "❌ {message}"
    ),
    SystemError: (
        "⚠️ System error: {message}\n"
        "   Please check your device connection and try again"
    ),
    CheckerError: (
        "❌ {message}"
    ),
}


def format_error_message(error: CheckerError) -> str:
    """Format an error message for CLI display based on the error type.

    Args:
        error: The CheckerError instance to format.

    Returns:
        A formatted string message for CLI display.
    """
    template = ERROR_TEMPLATES.get(type(error), ERROR_TEMPLATES[CheckerError])
    try:
        return template.format(**{**error.context, "message": error.message})
    except KeyError:
        return f"❌ {error.message}"


def exit_code_for(error: Exception) -> int:
    """Map an exception to the process exit code."""
    if isinstance(error, TransientError):
        return EXIT_TRANSIENT_ERROR
    if isinstance(error, SystemError):
        return EXIT_SYSTEM_ERROR
    if isinstance(error, CheckerError):
        return EXIT_USER_ERROR
    return EXIT_SYSTEM_ERROR


def error_payload(error: Exception) -> dict[str, Any]:
    """Convert an exception to the payload sent on the bridge error channel.

    Args:
        error: Any exception raised while serving a call.

    Returns:
        A dictionary with ``code``, ``message`` and ``context`` keys.
    """
    if isinstance(error, CheckerError):
        return {
            "code": type(error).__name__,
            "message": error.message,
            "context": dict(error.context),
        }
    return {"code": type(error).__name__, "message": str(error), "context": {}}
