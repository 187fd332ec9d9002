"""Shared pytest fixtures.

Backend sessions are AsyncMock fakes: every attribute is an awaitable
method, so tools and the dispatcher run without the Longport SDK or network.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from longbridge_mcp.session.manager import SessionKind, SessionManager
from longbridge_mcp.tools.builtins import build_registry
from longbridge_mcp.tools.registry import ToolRegistry


@pytest.fixture
def quote_session() -> AsyncMock:
    return AsyncMock(name="QuoteSession")


@pytest.fixture
def trade_session() -> AsyncMock:
    return AsyncMock(name="TradeSession")


@pytest.fixture
def session_factory(quote_session: AsyncMock, trade_session: AsyncMock) -> AsyncMock:
    async def _open(kind: SessionKind, _settings) -> AsyncMock:
        return quote_session if kind is SessionKind.quote else trade_session

    return AsyncMock(side_effect=_open)


@pytest.fixture
def sessions(session_factory: AsyncMock) -> SessionManager:
    return SessionManager(settings_loader=MagicMock(name="Settings"), factory=session_factory)


@pytest.fixture
def registry() -> ToolRegistry:
    return build_registry()
