"""Installation targets: the global npm prefix and the open workspace.

Both variants answer the same two questions (is ``@types/<module>``
already installed here? can it be installed here?) through the shared
helpers below. Install failures never raise: a "not published" failure is
recorded in the shared ``MissingTypes`` set, anything else is logged.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import TYPE_CHECKING, Protocol

import structlog

from quiet_types.cache import ExistenceCache
from quiet_types.errors import NpmCommandError
from quiet_types.npm import is_not_found, parse_installed_types, types_package

if TYPE_CHECKING:
    from quiet_types.cache import MissingTypes
    from quiet_types.models.npm import CommandResult
    from quiet_types.npm import PackageManager

log = structlog.get_logger()


class InstallTarget(Protocol):
    @property
    def name(self) -> str: ...

    async def exists(self, module: str) -> bool: ...

    async def install(self, module: str) -> bool: ...

    def mark_installed(self, module: str) -> None: ...


async def _list_types(listing: Awaitable[CommandResult]) -> set[str]:
    result = await listing
    return parse_installed_types(result.stdout)


async def _install(
    target: str,
    module: str,
    command: Awaitable[CommandResult],
    missing: MissingTypes,
) -> bool:
    try:
        await command
    except NpmCommandError as exc:
        if is_not_found(exc.stderr):
            missing.add(module)
            return False
        log.error(
            "install_failed",
            target=target,
            package=types_package(module),
            returncode=exc.returncode,
            stdout=exc.stdout,
            stderr=exc.stderr,
        )
        return False
    log.info("install_succeeded", target=target, package=types_package(module))
    return True


class GlobalTarget:
    """``npm install -g`` into the user's global prefix."""

    def __init__(self, npm: PackageManager, missing: MissingTypes) -> None:
        self._npm = npm
        self._missing = missing
        self.cache = ExistenceCache(self.name, lambda: _list_types(self._npm.list_global()))

    @property
    def name(self) -> str:
        return "global"

    async def exists(self, module: str) -> bool:
        return await self.cache.contains(module)

    async def install(self, module: str) -> bool:
        return await _install(self.name, module, self._npm.install_global(module), self._missing)

    def mark_installed(self, module: str) -> None:
        self.cache.add(module)


class WorkspaceTarget:
    """``npm install --save-dev`` inside the workspace root."""

    def __init__(self, npm: PackageManager, missing: MissingTypes, root: str) -> None:
        self._npm = npm
        self._missing = missing
        self.root = root
        self.cache = ExistenceCache(self.name, lambda: _list_types(self._npm.list_local(root)))

    @property
    def name(self) -> str:
        return "workspace"

    async def exists(self, module: str) -> bool:
        return await self.cache.contains(module)

    async def install(self, module: str) -> bool:
        return await _install(
            self.name, module, self._npm.install_local(module, self.root), self._missing
        )

    def mark_installed(self, module: str) -> None:
        self.cache.add(module)
