from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from longbridge_mcp.config.settings import get_settings

if TYPE_CHECKING:
    from longbridge_mcp.config.settings import Settings

logger = structlog.get_logger()


class SessionKind(StrEnum):
    quote = "quote"
    trade = "trade"


SessionFactory = Callable[[SessionKind, "Settings"], Awaitable[Any]]


class SessionManager:
    """Process-wide backend sessions, created on first use and shared afterwards.

    The in-flight construction task is memoized, not just its result, so
    concurrent first callers await one construction and observe the same
    handle. A construction that fails is forgotten and retried on the next
    call; everyone already awaiting it sees the same fault. There is no
    close or refresh: a handle lives as long as the process.
    """

    def __init__(
        self,
        settings_loader: Callable[[], Settings] = get_settings,
        factory: SessionFactory | None = None,
    ) -> None:
        self._settings_loader = settings_loader
        self._factory = factory
        self._settings: Settings | None = None
        self._tasks: dict[SessionKind, asyncio.Task[Any]] = {}
        self._construction_counts: dict[SessionKind, int] = dict.fromkeys(SessionKind, 0)

    @property
    def settings(self) -> Settings:
        """Configuration, loaded once from the environment on first access."""
        if self._settings is None:
            self._settings = self._settings_loader()
            logger.info("settings_loaded")
        return self._settings

    async def get_session(self, kind: SessionKind) -> Any:
        """Return the session for kind, constructing it on first use."""
        kind = SessionKind(kind)
        task = self._tasks.get(kind)
        if task is None:
            task = asyncio.ensure_future(self._construct(kind))
            self._tasks[kind] = task
            task.add_done_callback(lambda t, k=kind: self._forget_failed(k, t))
        return await asyncio.shield(task)

    async def quote(self) -> Any:
        return await self.get_session(SessionKind.quote)

    async def trade(self) -> Any:
        return await self.get_session(SessionKind.trade)

    def construction_count(self, kind: SessionKind) -> int:
        return self._construction_counts[SessionKind(kind)]

    def is_ready(self, kind: SessionKind) -> bool:
        task = self._tasks.get(SessionKind(kind))
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    async def _construct(self, kind: SessionKind) -> Any:
        self._construction_counts[kind] += 1
        logger.info("session_constructing", kind=str(kind))
        factory = self._factory
        if factory is None:
            from longbridge_mcp.backend.longport import open_session

            factory = open_session
        session = await factory(kind, self.settings)
        logger.info("session_ready", kind=str(kind))
        return session

    def _forget_failed(self, kind: SessionKind, task: asyncio.Task[Any]) -> None:
        if task.cancelled() or task.exception() is not None:
            if self._tasks.get(kind) is task:
                del self._tasks[kind]
            if not task.cancelled():
                logger.warning(
                    "session_construction_failed",
                    kind=str(kind),
                    error=str(task.exception()),
                )
