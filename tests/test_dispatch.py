"""Tests for dispatch_tool: the single fault-containment point.

Covers:
- Unknown tool names surface as error envelopes
- Validation failures never touch the backend
- Backend faults become one error block with the fault's message
- Collections become one block per element, in order
- Candlesticks issue exactly one of the two backend queries
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from longbridge_mcp.gateway.dispatch import dispatch_tool
from longbridge_mcp.session.manager import SessionKind, SessionManager
from longbridge_mcp.tools.codes import AdjustType, Period
from longbridge_mcp.tools.parsing import NaiveDate
from longbridge_mcp.tools.registry import ToolRegistry


async def _dispatch(name, arguments, registry, sessions):
    return await dispatch_tool(name, arguments, registry=registry, sessions=sessions)


class TestResolution:
    @pytest.mark.asyncio
    async def test_unknown_tool(
        self, registry: ToolRegistry, sessions: SessionManager, session_factory: AsyncMock
    ) -> None:
        envelope = await _dispatch("not-a-tool", {}, registry, sessions)
        assert envelope.is_error is True
        assert len(envelope.content) == 1
        assert "not-a-tool" in envelope.texts()[0]
        session_factory.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_string_name(
        self, registry: ToolRegistry, sessions: SessionManager
    ) -> None:
        envelope = await _dispatch(None, {}, registry, sessions)
        assert envelope.is_error is True
        assert len(envelope.content) == 1


class TestValidation:
    @pytest.mark.asyncio
    async def test_missing_required_field(
        self, registry: ToolRegistry, sessions: SessionManager, session_factory: AsyncMock
    ) -> None:
        envelope = await _dispatch("quote-realtime-info", None, registry, sessions)
        assert envelope.is_error is True
        assert envelope.texts()[0].startswith("Validation error: symbol")
        session_factory.assert_not_awaited()
        assert sessions.construction_count(SessionKind.quote) == 0

    @pytest.mark.asyncio
    async def test_candlestick_discriminant_mismatch(
        self, registry: ToolRegistry, sessions: SessionManager, quote_session: AsyncMock
    ) -> None:
        args = {
            "symbol": "700.HK",
            "period": 1000,
            "adjust_type": 0,
            "query_type": 2,
            "offset_request": {"direction": 1},
        }
        envelope = await _dispatch("quote-history-candlesticks", args, registry, sessions)
        assert envelope.is_error is True
        assert "date_request" in envelope.texts()[0]
        quote_session.history_candlesticks_by_date.assert_not_awaited()
        quote_session.history_candlesticks_by_offset.assert_not_awaited()


class TestBackendFaults:
    @pytest.mark.asyncio
    async def test_handler_fault_becomes_error_envelope(
        self, registry: ToolRegistry, sessions: SessionManager, quote_session: AsyncMock
    ) -> None:
        quote_session.quote.side_effect = RuntimeError("simulated backend failure")
        envelope = await _dispatch(
            "quote-realtime-info", {"symbol": ["AAPL.US", "700.HK"]}, registry, sessions
        )
        assert envelope.is_error is True
        assert envelope.texts() == ["simulated backend failure"]

    @pytest.mark.asyncio
    async def test_session_construction_fault(
        self, registry: ToolRegistry, session_factory: AsyncMock
    ) -> None:
        session_factory.side_effect = ConnectionError("handshake failed")
        sessions = SessionManager(settings_loader=lambda: None, factory=session_factory)
        envelope = await _dispatch("quote-depth", {"symbol": "700.HK"}, registry, sessions)
        assert envelope.is_error is True
        assert envelope.texts() == ["handshake failed"]

    @pytest.mark.asyncio
    async def test_settings_fault(self, registry: ToolRegistry, session_factory: AsyncMock) -> None:
        def _missing_credentials():
            raise ValueError("LONGPORT_APP_KEY missing")

        sessions = SessionManager(settings_loader=_missing_credentials, factory=session_factory)
        envelope = await _dispatch("quote-watch-list", {}, registry, sessions)
        assert envelope.is_error is True
        assert "LONGPORT_APP_KEY" in envelope.texts()[0]
        session_factory.assert_not_awaited()


class TestSuccess:
    @pytest.mark.asyncio
    async def test_collection_one_block_per_element(
        self, registry: ToolRegistry, sessions: SessionManager, quote_session: AsyncMock
    ) -> None:
        infos = [{"symbol": "A.US"}, {"symbol": "B.US"}, {"symbol": "C.US"}]
        quote_session.static_info.return_value = infos
        envelope = await _dispatch(
            "quote-static-info", {"symbol": ["A.US", "B.US", "C.US"]}, registry, sessions
        )
        assert envelope.is_error is None
        assert len(envelope.content) == 3
        assert [json.loads(t) for t in envelope.texts()] == infos
        quote_session.static_info.assert_awaited_once_with(["A.US", "B.US", "C.US"])

    @pytest.mark.asyncio
    async def test_single_object_one_block(
        self, registry: ToolRegistry, sessions: SessionManager, quote_session: AsyncMock
    ) -> None:
        quote_session.depth.return_value = {"asks": [], "bids": []}
        envelope = await _dispatch("quote-depth", {"symbol": "700.HK"}, registry, sessions)
        assert envelope.texts() == ['{"asks": [], "bids": []}']

    @pytest.mark.asyncio
    async def test_trade_tools_use_trade_session(
        self,
        registry: ToolRegistry,
        sessions: SessionManager,
        quote_session: AsyncMock,
        trade_session: AsyncMock,
    ) -> None:
        trade_session.account_balance.return_value = [{"currency": "USD"}]
        envelope = await _dispatch(
            "trade-account-balance", {"currency": "USD"}, registry, sessions
        )
        assert envelope.texts() == ['{"currency": "USD"}']
        assert sessions.construction_count(SessionKind.trade) == 1
        assert sessions.construction_count(SessionKind.quote) == 0

    @pytest.mark.asyncio
    async def test_candlesticks_by_date_issues_one_query(
        self, registry: ToolRegistry, sessions: SessionManager, quote_session: AsyncMock
    ) -> None:
        quote_session.history_candlesticks_by_date.return_value = [{"close": "1"}]
        args = {
            "symbol": "700.HK",
            "period": "1000",
            "adjust_type": 1,
            "query_type": 2,
            "date_request": {"start_date": "20231001", "end_date": "20231016"},
            "offset_request": {"direction": 1},
        }
        envelope = await _dispatch("quote-history-candlesticks", args, registry, sessions)
        assert envelope.is_error is None
        assert envelope.texts() == ['[{"close": "1"}]']
        quote_session.history_candlesticks_by_date.assert_awaited_once_with(
            "700.HK",
            Period.DAY,
            AdjustType.FORWARD_ADJUST,
            NaiveDate(2023, 10, 1),
            NaiveDate(2023, 10, 16),
        )
        quote_session.history_candlesticks_by_offset.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_session_reused_across_calls(
        self,
        registry: ToolRegistry,
        sessions: SessionManager,
        quote_session: AsyncMock,
        session_factory: AsyncMock,
    ) -> None:
        quote_session.watchlist.return_value = []
        for _ in range(3):
            await _dispatch("quote-watch-list", {}, registry, sessions)
        assert session_factory.await_count == 1
