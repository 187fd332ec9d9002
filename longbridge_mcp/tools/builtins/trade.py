"""Account and execution tools backed by the trade session."""

from __future__ import annotations

from typing import TYPE_CHECKING

from longbridge_mcp.session.manager import SessionKind
from longbridge_mcp.tools.base import BaseTool, RiskLevel, ToolName, ToolOutput
from longbridge_mcp.tools.params import (
    AccountBalanceParams,
    HistoryExecutionsParams,
    StockPositionsParams,
    TodayExecutionsParams,
    ToolParams,
)

if TYPE_CHECKING:
    from longbridge_mcp.backend.longport import TradeSession


class _TradeTool(BaseTool):
    @property
    def session_kind(self) -> SessionKind:
        return SessionKind.trade

    @property
    def risk_level(self) -> RiskLevel:
        return RiskLevel.low


class AccountBalanceTool(_TradeTool):
    @property
    def name(self) -> ToolName:
        return ToolName.trade_account_balance

    @property
    def description(self) -> str:
        return (
            "The API is used to obtain the available, desirable, frozen, to-be-settled, "
            "and in-transit funds (fund purchase and redemption) information for each "
            "currency of the user."
        )

    @property
    def params_model(self) -> type[ToolParams]:
        return AccountBalanceParams

    async def execute(self, params: AccountBalanceParams, session: TradeSession) -> ToolOutput:
        return ToolOutput.many(await session.account_balance(params.currency))


class StockPositionsTool(_TradeTool):
    """Positions come back grouped by account channel; one block per channel."""

    @property
    def name(self) -> ToolName:
        return ToolName.trade_stock_positions

    @property
    def description(self) -> str:
        return (
            "The API is used to obtain stock position information including account, "
            "stock code, number of shares held, number of available shares, average "
            "position price (calculated according to account settings), and currency."
        )

    @property
    def params_model(self) -> type[ToolParams]:
        return StockPositionsParams

    async def execute(self, params: StockPositionsParams, session: TradeSession) -> ToolOutput:
        response = await session.stock_positions(params.symbol)
        return ToolOutput.many(response.channels)


class HistoryExecutionsTool(_TradeTool):
    @property
    def name(self) -> ToolName:
        return ToolName.trade_history_executions

    @property
    def description(self) -> str:
        return "This API is used to obtain the history executions (filled trades) of the user."

    @property
    def params_model(self) -> type[ToolParams]:
        return HistoryExecutionsParams

    async def execute(
        self, params: HistoryExecutionsParams, session: TradeSession
    ) -> ToolOutput:
        executions = await session.history_executions(
            symbol=params.symbol, start_at=params.start_at, end_at=params.end_at
        )
        return ToolOutput.many(executions)


class TodayExecutionsTool(_TradeTool):
    @property
    def name(self) -> ToolName:
        return ToolName.trade_today_executions

    @property
    def description(self) -> str:
        return "This API is used to obtain today's executions (filled trades) of the user."

    @property
    def params_model(self) -> type[ToolParams]:
        return TodayExecutionsParams

    async def execute(self, params: TodayExecutionsParams, session: TradeSession) -> ToolOutput:
        executions = await session.today_executions(
            symbol=params.symbol, order_id=params.order_id
        )
        return ToolOutput.many(executions)
