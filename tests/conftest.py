"""Shared fixtures: an in-memory npm stand-in and a capturing output channel."""

from __future__ import annotations

import asyncio
import io
import json
from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from quiet_types.config import Settings
from quiet_types.errors import ErrorCode, NpmCommandError
from quiet_types.models.npm import CommandResult
from quiet_types.output import OutputChannel
from quiet_types.state import AppState, build_state


def _listing(*types: str) -> str:
    """Render an ``npm list --depth=0`` tree containing the given @types names."""
    lines = ["/usr/local/lib"]
    lines += [f"├── @types/{name}@1.0.0" for name in types]
    lines.append("└── npm@10.8.1")
    return "\n".join(lines) + "\n"


@dataclass
class FakeNpm:
    """Records every command; answers from in-memory package sets."""

    global_types: set[str] = field(default_factory=set)
    local_types: set[str] = field(default_factory=set)
    # module -> stderr of a failing install
    failures: dict[str, str] = field(default_factory=dict)
    list_fails: bool = False
    # When set, listings block until the event fires
    gate: asyncio.Event | None = None
    # module -> event an install of that module waits on
    holds: dict[str, asyncio.Event] = field(default_factory=dict)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    @property
    def installs(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == "install"]

    @property
    def listings(self) -> list[tuple[str, ...]]:
        return [call for call in self.calls if call[0] == "list"]

    async def list_global(self) -> CommandResult:
        return await self._list(("list", "-g", "--depth=0"), self.global_types)

    async def list_local(self, cwd: str) -> CommandResult:
        return await self._list(("list", "--depth=0", cwd), self.local_types)

    async def install_global(self, module: str) -> CommandResult:
        return await self._install(("install", "-g", f"@types/{module}"), module)

    async def install_local(self, module: str, cwd: str) -> CommandResult:
        return await self._install(("install", "--save-dev", f"@types/{module}", cwd), module)

    async def _list(self, call: tuple[str, ...], types: set[str]) -> CommandResult:
        self.calls.append(call)
        if self.gate is not None:
            await self.gate.wait()
        if self.list_fails:
            raise NpmCommandError(
                ["npm", *call], 1, stderr="npm ERR! boom", code=ErrorCode.LIST_FAILED
            )
        return CommandResult(command=["npm", *call], returncode=0, stdout=_listing(*sorted(types)))

    async def _install(self, call: tuple[str, ...], module: str) -> CommandResult:
        self.calls.append(call)
        if module in self.holds:
            await self.holds[module].wait()
        if module in self.failures:
            raise NpmCommandError(["npm", *call], 1, stderr=self.failures[module])
        return CommandResult(command=["npm", *call], returncode=0, stdout="added 1 package\n")


@pytest.fixture()
def npm() -> FakeNpm:
    return FakeNpm()


@pytest.fixture()
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture()
def output(stream: io.StringIO) -> OutputChannel:
    return OutputChannel(stream)


@pytest.fixture()
def make_state(npm: FakeNpm, output: OutputChannel) -> Callable[..., AppState]:
    """Factory: ``make_state(target="auto", workspace_root=...)``."""

    def _make(**settings: object) -> AppState:
        return build_state(Settings(**settings), output, npm)  # type: ignore[arg-type]

    return _make


@pytest.fixture()
def records(stream: io.StringIO) -> Callable[[], list[dict[str, str | None]]]:
    """Everything written to the host so far, decoded."""

    def _read() -> list[dict[str, str | None]]:
        return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]

    return _read


@pytest.fixture()
def messages(
    records: Callable[[], list[dict[str, str | None]]],
) -> Callable[[], list[str]]:
    """Channel messages written so far, in order."""

    def _read() -> list[str]:
        return [str(r["message"]) for r in records() if "message" in r]

    return _read
