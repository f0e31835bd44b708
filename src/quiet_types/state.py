"""Process-wide application state, wired once at startup."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING

from quiet_types.cache import MissingTypes
from quiet_types.npm import NpmRunner
from quiet_types.orchestrator import Orchestrator
from quiet_types.targets import GlobalTarget, WorkspaceTarget

if TYPE_CHECKING:
    from quiet_types.config import Settings
    from quiet_types.npm import PackageManager
    from quiet_types.output import OutputChannel


@dataclass
class AppState:
    settings: Settings
    output: OutputChannel
    missing: MissingTypes
    global_target: GlobalTarget
    workspace_target: WorkspaceTarget | None
    orchestrator: Orchestrator

    async def preload(self) -> None:
        """Populate every existence cache concurrently."""
        caches = [self.global_target.cache]
        if self.workspace_target is not None:
            caches.append(self.workspace_target.cache)
        await asyncio.gather(*(cache.preload() for cache in caches))


def build_state(
    settings: Settings,
    output: OutputChannel,
    npm: PackageManager | None = None,
) -> AppState:
    """Create both targets around one shared ``MissingTypes`` set."""
    npm = npm or NpmRunner(settings.npm.command)
    missing = MissingTypes()
    global_target = GlobalTarget(npm, missing)
    workspace_target = None
    if settings.workspace_root:
        workspace_target = WorkspaceTarget(npm, missing, settings.workspace_root)

    orchestrator = Orchestrator(settings, global_target, workspace_target, missing, output)
    return AppState(
        settings=settings,
        output=output,
        missing=missing,
        global_target=global_target,
        workspace_target=workspace_target,
        orchestrator=orchestrator,
    )
