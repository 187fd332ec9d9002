from __future__ import annotations

from longbridge_mcp.tools.builtins.quote import (
    CalcIndexTool,
    CapitalDistributionTool,
    CapitalFlowTool,
    DepthTool,
    HistoryCandlesticksTool,
    IntradayTool,
    RealtimeQuoteTool,
    StaticInfoTool,
    TradesTool,
    WatchListTool,
)
from longbridge_mcp.tools.builtins.trade import (
    AccountBalanceTool,
    HistoryExecutionsTool,
    StockPositionsTool,
    TodayExecutionsTool,
)
from longbridge_mcp.tools.registry import ToolRegistry


def register_builtins(registry: ToolRegistry) -> None:
    """Register all built-in tools with the registry."""
    registry.register(AccountBalanceTool())
    registry.register(StockPositionsTool())
    registry.register(HistoryExecutionsTool())
    registry.register(TodayExecutionsTool())

    registry.register(StaticInfoTool())
    registry.register(RealtimeQuoteTool())
    registry.register(DepthTool())
    registry.register(TradesTool())
    registry.register(IntradayTool())
    registry.register(HistoryCandlesticksTool())
    registry.register(CapitalFlowTool())
    registry.register(CapitalDistributionTool())
    registry.register(CalcIndexTool())
    registry.register(WatchListTool())


def build_registry() -> ToolRegistry:
    """Registry holding every built-in tool, frozen."""
    registry = ToolRegistry()
    register_builtins(registry)
    registry.freeze()
    return registry
