from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from longbridge_mcp.session.manager import SessionKind
from longbridge_mcp.tools.params import ToolParams


class ToolName(StrEnum):
    """The closed set of tools this server exposes."""

    trade_account_balance = "trade-account-balance"
    trade_stock_positions = "trade-stock-positions"
    trade_history_executions = "trade-history-executions"
    trade_today_executions = "trade-today-executions"

    quote_static_info = "quote-static-info"
    quote_realtime_info = "quote-realtime-info"
    quote_depth = "quote-depth"
    quote_trades = "quote-trades"
    quote_intraday = "quote-intraday"
    quote_history_candlesticks = "quote-history-candlesticks"
    quote_capital_flow = "quote-capital-flow"
    quote_capital_distribution = "quote-capital-distribution"
    quote_calc_index = "quote-calc-index"
    quote_watch_list = "quote-watch-list"


class RiskLevel(StrEnum):
    """Side-effect classification. Undeclared tools default to high."""

    low = "low"
    high = "high"


@dataclass(frozen=True)
class ToolOutput:
    """Ordered items produced by a tool; each becomes one content block."""

    items: tuple[Any, ...]

    @classmethod
    def one(cls, item: Any) -> ToolOutput:
        return cls((item,))

    @classmethod
    def many(cls, items: Iterable[Any]) -> ToolOutput:
        return cls(tuple(items))


class BaseTool(ABC):
    """Abstract base class for brokerage tools."""

    @property
    @abstractmethod
    def name(self) -> ToolName:
        """Unique tool name used by callers."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        ...

    @property
    @abstractmethod
    def params_model(self) -> type[ToolParams]:
        """Pydantic model that validates and types the tool's arguments."""
        ...

    @property
    @abstractmethod
    def session_kind(self) -> SessionKind:
        """Backend session the tool runs against."""
        ...

    @property
    def risk_level(self) -> RiskLevel:
        """Fail-closed default: high. Read-only tools declare low."""
        return RiskLevel.high

    @property
    def parameters(self) -> dict:
        """JSON Schema describing the tool's input parameters."""
        return self.params_model.model_json_schema()

    @abstractmethod
    async def execute(self, params: Any, session: Any) -> ToolOutput:
        """Issue exactly one backend request with already-validated params."""
        ...
