"""Structured error types.

``QuietTypesError`` carries a machine-readable code and a ``recoverable``
flag. Errors are raised at the process boundary (``quiet_types.npm``) and
classified by installation targets; none of them escape a single
completed-line event.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    PACKAGE_NOT_FOUND = "PACKAGE_NOT_FOUND"
    INSTALL_FAILED = "INSTALL_FAILED"
    LIST_FAILED = "LIST_FAILED"
    INVALID_EVENT = "INVALID_EVENT"


class QuietTypesError(Exception):
    def __init__(self, code: ErrorCode, message: str, recoverable: bool) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable


class NpmCommandError(QuietTypesError):
    """A package-manager invocation exited non-zero or could not be spawned."""

    def __init__(
        self,
        command: list[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
        code: ErrorCode = ErrorCode.INSTALL_FAILED,
    ) -> None:
        joined = " ".join(command)
        if returncode is None:
            message = f"Could not run {joined!r}"
        else:
            message = f"{joined!r} exited with status {returncode}"
        super().__init__(code, message, recoverable=True)
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
