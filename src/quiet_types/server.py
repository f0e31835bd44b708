"""stdio bridge between the host editor and the orchestrator.

The host writes one JSON event per line on stdin (see
``quiet_types.models.events``); channel and status records come back on
stdout. Each completed line is handled in its own task, so a slow install
never blocks later events. At EOF the bridge waits for in-flight work and
exits.

Run with ``python -m quiet_types.server``.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from pydantic import ValidationError

from quiet_types.config import Settings
from quiet_types.errors import ErrorCode
from quiet_types.logs import configure_logging
from quiet_types.models.events import (
    LineEvent,
    ManifestCreatedEvent,
    ManifestDeletedEvent,
    SelectionEvent,
    parse_event,
)
from quiet_types.output import OutputChannel
from quiet_types.state import build_state
from quiet_types.tracker import LineTracker

if TYPE_CHECKING:
    from quiet_types.state import AppState

log = structlog.get_logger()


class Bridge:
    def __init__(self, state: AppState) -> None:
        self._state = state
        self._tracker = LineTracker()
        self._tasks: set[asyncio.Task[None]] = set()

    def handle(self, raw: str) -> None:
        """Dispatch one raw JSON event. Invalid events are logged and skipped."""
        try:
            event = parse_event(raw)
        except ValidationError:
            log.warning("invalid_event", code=ErrorCode.INVALID_EVENT, raw=raw, exc_info=True)
            return

        orchestrator = self._state.orchestrator
        match event:
            case SelectionEvent():
                completed = self._tracker.on_selection_changed(
                    event.document, event.line, event.line_at
                )
                if completed is not None:
                    self.spawn(self._complete(completed))
            case LineEvent():
                self.spawn(self._complete(event.text))
            case ManifestCreatedEvent():
                orchestrator.on_manifest_created()
            case ManifestDeletedEvent():
                orchestrator.on_manifest_deleted()

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every in-flight task has settled."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def _complete(self, line: str) -> None:
        try:
            await self._state.orchestrator.on_line_completed(line)
        except Exception:
            # One failed line must never take the bridge down
            log.exception("line_handler_error", line=line)


async def run(settings: Settings, stdin: TextIO, stdout: TextIO) -> None:
    state = build_state(settings, OutputChannel(stdout))
    bridge = Bridge(state)
    log.info(
        "bridge_started",
        target=settings.target,
        workspace_root=settings.workspace_root,
        manifest_present=state.orchestrator.manifest_present,
    )
    if settings.cache.preload:
        bridge.spawn(state.preload())

    while True:
        raw = await asyncio.to_thread(stdin.readline)
        if not raw:
            break
        if raw.strip():
            bridge.handle(raw)

    await bridge.drain()
    log.info("bridge_stopped", missing=len(state.missing))


def main() -> None:
    settings = Settings()
    configure_logging(settings.logging.level, settings.logging.format)
    asyncio.run(run(settings, sys.stdin, sys.stdout))


if __name__ == "__main__":
    main()
