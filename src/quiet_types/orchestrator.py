"""Completed-line handling: extract, check, choose a target, install, report."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from quiet_types.extractor import extract_module_name
from quiet_types.models.outcome import InstallOutcome

if TYPE_CHECKING:
    from quiet_types.cache import MissingTypes
    from quiet_types.config import Settings
    from quiet_types.output import OutputChannel
    from quiet_types.targets import InstallTarget, WorkspaceTarget

log = structlog.get_logger()


def _install_status(module: str) -> str:
    return f"Installing @types/<{module}>..."


class Orchestrator:
    def __init__(
        self,
        settings: Settings,
        global_target: InstallTarget,
        workspace_target: WorkspaceTarget | None,
        missing: MissingTypes,
        output: OutputChannel,
    ) -> None:
        self._settings = settings
        self._global = global_target
        self._workspace = workspace_target
        self._missing = missing
        self._output = output
        self._manifest_present = False
        # Modules with an install in flight, oldest first
        self._installing: list[str] = []
        if workspace_target is not None:
            manifest = Path(workspace_target.root) / settings.manifest_name
            self._manifest_present = manifest.is_file()

    @property
    def manifest_present(self) -> bool:
        return self._manifest_present

    def on_manifest_created(self) -> None:
        if self._workspace is not None:
            self._manifest_present = True
            log.info("manifest_created", root=self._workspace.root)

    def on_manifest_deleted(self) -> None:
        self._manifest_present = False
        log.info("manifest_deleted")

    def choose_target(self) -> InstallTarget | None:
        """Pick the install destination for the configured mode."""
        match self._settings.target:
            case "global":
                return self._global
            case "workspace":
                return self._workspace
            case "auto":
                if self._manifest_present and self._workspace is not None:
                    return self._workspace
                return self._global
            case _:
                return self._workspace

    async def on_line_completed(self, line: str) -> InstallOutcome:
        module = extract_module_name(line)
        if module is None:
            return InstallOutcome.IGNORED
        if module in self._missing:
            log.debug("types_known_missing", module=module)
            return InstallOutcome.KNOWN_MISSING

        for target in self._existence_order():
            if await target.exists(module):
                self._output.append_line(f"{target.name}: @types/<{module}> already exists.")
                return InstallOutcome.ALREADY_PRESENT

        target = self.choose_target()
        if target is None:
            log.debug("no_install_target", module=module, mode=self._settings.target)
            return InstallOutcome.NO_TARGET

        self._output.append_line(f"Installing <{module}> to {target.name}.")
        self._begin_install(module)
        log.info("install_started", module=module, target=target.name)
        try:
            installed = await target.install(module)
        except Exception:
            log.exception("install_error", module=module, target=target.name)
            installed = False
        finally:
            self._end_install(module)

        if not installed:
            self._output.append_line(f"{target.name}: failed to install @types/<{module}>.")
            return InstallOutcome.FAILED

        if self._settings.cache.update_after_install:
            target.mark_installed(module)
        self._output.append_line(f"{target.name}: @types/<{module}> installed.")
        return InstallOutcome.INSTALLED

    def _begin_install(self, module: str) -> None:
        self._installing.append(module)
        self._output.set_status(_install_status(module))

    def _end_install(self, module: str) -> None:
        """Clear the status only once no install is left in flight."""
        self._installing.remove(module)
        if self._installing:
            self._output.set_status(_install_status(self._installing[-1]))
        else:
            self._output.set_status(None)

    def _existence_order(self) -> list[InstallTarget]:
        targets: list[InstallTarget] = []
        if self._workspace is not None:
            targets.append(self._workspace)
        targets.append(self._global)
        return targets
