"""Market data tools backed by the quote session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from longbridge_mcp.session.manager import SessionKind
from longbridge_mcp.tools.base import BaseTool, RiskLevel, ToolName, ToolOutput
from longbridge_mcp.tools.params import (
    CalcIndexParams,
    DateRangeQuery,
    EmptyParams,
    HistoryCandlesticksParams,
    SingleSymbolParams,
    SymbolListParams,
    ToolParams,
    TradesParams,
)

if TYPE_CHECKING:
    from longbridge_mcp.backend.longport import QuoteSession


class _QuoteTool(BaseTool):
    @property
    def session_kind(self) -> SessionKind:
        return SessionKind.quote

    @property
    def risk_level(self) -> RiskLevel:
        return RiskLevel.low


class StaticInfoTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_static_info

    @property
    def description(self) -> str:
        return "This API is used to obtain the basic information of securities."

    @property
    def params_model(self) -> type[ToolParams]:
        return SymbolListParams

    async def execute(self, params: SymbolListParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.many(await session.static_info(params.symbol))


class RealtimeQuoteTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_realtime_info

    @property
    def description(self) -> str:
        return (
            "This API is used to obtain the real-time quotes of securities, "
            "and supports all types of securities."
        )

    @property
    def params_model(self) -> type[ToolParams]:
        return SymbolListParams

    async def execute(self, params: SymbolListParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.many(await session.quote(params.symbol))


class DepthTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_depth

    @property
    def description(self) -> str:
        return "This API is used to obtain the depth data of security."

    @property
    def params_model(self) -> type[ToolParams]:
        return SingleSymbolParams

    async def execute(self, params: SingleSymbolParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.one(await session.depth(params.symbol))


class TradesTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_trades

    @property
    def description(self) -> str:
        return "This API is used to obtain the trades data of security."

    @property
    def params_model(self) -> type[ToolParams]:
        return TradesParams

    async def execute(self, params: TradesParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.many(await session.trades(params.symbol, params.count))


class IntradayTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_intraday

    @property
    def description(self) -> str:
        return "This API is used to obtain the intraday data of security."

    @property
    def params_model(self) -> type[ToolParams]:
        return SingleSymbolParams

    async def execute(self, params: SingleSymbolParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.one(await session.intraday(params.symbol))


class HistoryCandlesticksTool(_QuoteTool):
    """Candlesticks addressed by date range or by offset from an anchor.

    Exactly one of the two backend queries is issued, chosen by the
    validated query variant.
    """

    @property
    def name(self) -> ToolName:
        return ToolName.quote_history_candlesticks

    @property
    def description(self) -> str:
        return "This API is used to obtain the history candlestick data of security."

    @property
    def params_model(self) -> type[ToolParams]:
        return HistoryCandlesticksParams

    async def execute(
        self, params: HistoryCandlesticksParams, session: QuoteSession
    ) -> ToolOutput:
        query = params.query
        if isinstance(query, DateRangeQuery):
            candlesticks = await session.history_candlesticks_by_date(
                params.symbol, params.period, params.adjust_type, query.start, query.end
            )
        else:
            candlesticks = await session.history_candlesticks_by_offset(
                params.symbol,
                params.period,
                params.adjust_type,
                query.forward,
                query.count,
                query.anchor,
            )
        return ToolOutput.one(candlesticks)


class CapitalFlowTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_capital_flow

    @property
    def description(self) -> str:
        return "This API is used to obtain the intraday capital flow of security."

    @property
    def params_model(self) -> type[ToolParams]:
        return SingleSymbolParams

    async def execute(self, params: SingleSymbolParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.one(await session.capital_flow(params.symbol))


class CapitalDistributionTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_capital_distribution

    @property
    def description(self) -> str:
        return "This API is used to obtain the capital distribution of security."

    @property
    def params_model(self) -> type[ToolParams]:
        return SingleSymbolParams

    async def execute(self, params: SingleSymbolParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.one(await session.capital_distribution(params.symbol))


class CalcIndexTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_calc_index

    @property
    def description(self) -> str:
        return "This API is used to obtain the calculate indexes of securities."

    @property
    def params_model(self) -> type[ToolParams]:
        return CalcIndexParams

    async def execute(self, params: CalcIndexParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.one(await session.calc_indexes(params.symbols, params.calc_index))


class WatchListTool(_QuoteTool):
    @property
    def name(self) -> ToolName:
        return ToolName.quote_watch_list

    @property
    def description(self) -> str:
        return "This API is used to obtain the watched groups and securities of the user."

    @property
    def params_model(self) -> type[ToolParams]:
        return EmptyParams

    async def execute(self, params: EmptyParams, session: QuoteSession) -> ToolOutput:
        return ToolOutput.many(await session.watchlist())
