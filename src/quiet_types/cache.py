"""In-memory caches for installed and missing ``@types`` packages.

``ExistenceCache`` memoises one listing per installation target for the
lifetime of the process. Population is single-flight: the first query
starts one listing task and every concurrent query awaits that same task.
A failed listing is logged and degrades to an empty set, which is then
authoritative; the listing is never retried.

``MissingTypes`` records modules for which no ``@types`` package is
published. It only grows.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterator

import structlog

from quiet_types.errors import QuietTypesError

log = structlog.get_logger()


class ExistenceCache:
    """Names of ``@types`` packages already installed in one target."""

    def __init__(self, target: str, loader: Callable[[], Awaitable[set[str]]]) -> None:
        self._target = target
        self._loader = loader
        self._names: set[str] | None = None
        self._pending: asyncio.Task[set[str]] | None = None

    @property
    def populated(self) -> bool:
        return self._names is not None

    async def contains(self, module: str) -> bool:
        names = await self._load()
        return module in names

    async def preload(self) -> None:
        """Populate eagerly instead of on first query."""
        await self._load()

    def add(self, module: str) -> None:
        """Mark ``module`` present. Ignored until the cache is populated."""
        if self._names is not None:
            self._names.add(module)

    async def _load(self) -> set[str]:
        if self._names is not None:
            return self._names
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._populate())
        # One cancelled caller must not cancel the listing for the others
        return await asyncio.shield(self._pending)

    async def _populate(self) -> set[str]:
        try:
            names = await self._loader()
        except QuietTypesError:
            log.warning("existence_cache_load_error", target=self._target, exc_info=True)
            names = set()
        self._names = names
        log.info("existence_cache_populated", target=self._target, count=len(names))
        return names


class MissingTypes:
    """Modules confirmed to have no published ``@types`` package."""

    def __init__(self) -> None:
        self._modules: set[str] = set()

    def add(self, module: str) -> None:
        if module not in self._modules:
            self._modules.add(module)
            log.info("types_marked_missing", module=module)

    def __contains__(self, module: object) -> bool:
        return module in self._modules

    def __iter__(self) -> Iterator[str]:
        return iter(self._modules)

    def __len__(self) -> int:
        return len(self._modules)
