"""Package-manager process boundary.

The package manager is an opaque external command. This module only knows
how to spell the four invocations, how to read ``@types`` entries out of a
listing and how to recognise the "no such package" failure.
"""

from __future__ import annotations

import asyncio
import re
import shutil
from typing import Protocol

import structlog

from quiet_types.errors import ErrorCode, NpmCommandError
from quiet_types.models.npm import CommandResult

log = structlog.get_logger()

TYPES_SCOPE = "@types"

# npm <= 9 prints "npm ERR!", npm >= 10 prints "npm error"
_NOT_FOUND_MARKERS = ("npm ERR! code E404", "npm error code E404")

_TYPES_ENTRY = re.compile(r"@types/([^@\s]+)@(\S+)")


def types_package(module: str) -> str:
    return f"{TYPES_SCOPE}/{module}"


def parse_installed_types(listing: str) -> set[str]:
    """Collect ``<name>`` from every ``@types/<name>@<version>`` in a listing."""
    names: set[str] = set()
    for line in listing.splitlines():
        match = _TYPES_ENTRY.search(line)
        if match:
            names.add(match.group(1))
    return names


def is_not_found(stderr: str) -> bool:
    """True when npm reports that the requested package is not published."""
    return stderr.lstrip().startswith(_NOT_FOUND_MARKERS)


class PackageManager(Protocol):
    """The four command shapes used by installation targets."""

    async def list_global(self) -> CommandResult: ...

    async def list_local(self, cwd: str) -> CommandResult: ...

    async def install_global(self, module: str) -> CommandResult: ...

    async def install_local(self, module: str, cwd: str) -> CommandResult: ...


class NpmRunner:
    """Runs ``npm`` as a child process on the running event loop."""

    def __init__(self, command: str = "npm") -> None:
        self._command = command

    @property
    def executable(self) -> str:
        # npm ships as npm.cmd on Windows; which() resolves PATHEXT
        return shutil.which(self._command) or self._command

    async def list_global(self) -> CommandResult:
        return await self.run(["list", "-g", "--depth=0"], code=ErrorCode.LIST_FAILED)

    async def list_local(self, cwd: str) -> CommandResult:
        return await self.run(["list", "--depth=0"], cwd=cwd, code=ErrorCode.LIST_FAILED)

    async def install_global(self, module: str) -> CommandResult:
        return await self.run(["install", "-g", types_package(module)])

    async def install_local(self, module: str, cwd: str) -> CommandResult:
        return await self.run(["install", "--save-dev", types_package(module)], cwd=cwd)

    async def run(
        self,
        args: list[str],
        cwd: str | None = None,
        *,
        code: ErrorCode = ErrorCode.INSTALL_FAILED,
    ) -> CommandResult:
        """Run one npm command to completion.

        Raises ``NpmCommandError`` when the process cannot be started or
        exits non-zero. No timeout is applied.
        """
        argv = [self.executable, *args]
        log.debug("npm_command_started", command=argv, cwd=cwd)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise NpmCommandError(argv, None, stderr=str(exc), code=code) from exc

        raw_out, raw_err = await proc.communicate()
        stdout = raw_out.decode("utf-8", errors="replace")
        stderr = raw_err.decode("utf-8", errors="replace")
        returncode = proc.returncode if proc.returncode is not None else -1

        log.debug("npm_command_finished", command=argv, returncode=returncode)
        if returncode != 0:
            raise NpmCommandError(argv, returncode, stdout=stdout, stderr=stderr, code=code)
        return CommandResult(command=argv, returncode=returncode, stdout=stdout, stderr=stderr)
