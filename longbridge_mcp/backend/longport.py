"""Longport OpenAPI adapter.

The SDK contexts are blocking; every call runs in a worker thread so a
dispatch chain only suspends while its single backend request is in flight.
Domain codes are translated through exhaustive tables here, the only place
that knows the SDK's enums.
"""

from __future__ import annotations

import asyncio
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog
from longport.openapi import AdjustType as SdkAdjustType
from longport.openapi import CalcIndex as SdkCalcIndex
from longport.openapi import Config, QuoteContext, TradeContext
from longport.openapi import Period as SdkPeriod

from longbridge_mcp.infra.errors import SessionError
from longbridge_mcp.session.manager import SessionKind
from longbridge_mcp.tools.codes import AdjustType, CalcIndex, Currency, Period

if TYPE_CHECKING:
    from longbridge_mcp.config.settings import LongportSettings, Settings
    from longbridge_mcp.tools.parsing import NaiveDate, NaiveDatetime

logger = structlog.get_logger()

PERIODS: dict[Period, Any] = {
    Period.MIN_1: SdkPeriod.Min_1,
    Period.MIN_2: SdkPeriod.Min_2,
    Period.MIN_3: SdkPeriod.Min_3,
    Period.MIN_5: SdkPeriod.Min_5,
    Period.MIN_10: SdkPeriod.Min_10,
    Period.MIN_15: SdkPeriod.Min_15,
    Period.MIN_20: SdkPeriod.Min_20,
    Period.MIN_30: SdkPeriod.Min_30,
    Period.MIN_45: SdkPeriod.Min_45,
    Period.MIN_60: SdkPeriod.Min_60,
    Period.MIN_120: SdkPeriod.Min_120,
    Period.MIN_180: SdkPeriod.Min_180,
    Period.MIN_240: SdkPeriod.Min_240,
    Period.DAY: SdkPeriod.Day,
    Period.WEEK: SdkPeriod.Week,
    Period.MONTH: SdkPeriod.Month,
    Period.QUARTER: SdkPeriod.Quarter,
    Period.YEAR: SdkPeriod.Year,
}

ADJUST_TYPES: dict[AdjustType, Any] = {
    AdjustType.NO_ADJUST: SdkAdjustType.NoAdjust,
    AdjustType.FORWARD_ADJUST: SdkAdjustType.ForwardAdjust,
}

CALC_INDEXES: dict[CalcIndex, Any] = {
    CalcIndex.LAST_DONE: SdkCalcIndex.LastDone,
    CalcIndex.CHANGE_VALUE: SdkCalcIndex.ChangeValue,
    CalcIndex.CHANGE_RATE: SdkCalcIndex.ChangeRate,
    CalcIndex.VOLUME: SdkCalcIndex.Volume,
    CalcIndex.TURNOVER: SdkCalcIndex.Turnover,
    CalcIndex.YTD_CHANGE_RATE: SdkCalcIndex.YtdChangeRate,
    CalcIndex.TURNOVER_RATE: SdkCalcIndex.TurnoverRate,
    CalcIndex.TOTAL_MARKET_VALUE: SdkCalcIndex.TotalMarketValue,
    CalcIndex.CAPITAL_FLOW: SdkCalcIndex.CapitalFlow,
    CalcIndex.AMPLITUDE: SdkCalcIndex.Amplitude,
    CalcIndex.VOLUME_RATIO: SdkCalcIndex.VolumeRatio,
    CalcIndex.PE_TTM_RATIO: SdkCalcIndex.PeTtmRatio,
    CalcIndex.PB_RATIO: SdkCalcIndex.PbRatio,
    CalcIndex.DIVIDEND_RATIO_TTM: SdkCalcIndex.DividendRatioTtm,
    CalcIndex.FIVE_DAY_CHANGE_RATE: SdkCalcIndex.FiveDayChangeRate,
    CalcIndex.TEN_DAY_CHANGE_RATE: SdkCalcIndex.TenDayChangeRate,
    CalcIndex.HALF_YEAR_CHANGE_RATE: SdkCalcIndex.HalfYearChangeRate,
    CalcIndex.FIVE_MINUTES_CHANGE_RATE: SdkCalcIndex.FiveMinutesChangeRate,
    CalcIndex.EXPIRY_DATE: SdkCalcIndex.ExpiryDate,
    CalcIndex.STRIKE_PRICE: SdkCalcIndex.StrikePrice,
    CalcIndex.UPPER_STRIKE_PRICE: SdkCalcIndex.UpperStrikePrice,
    CalcIndex.LOWER_STRIKE_PRICE: SdkCalcIndex.LowerStrikePrice,
    CalcIndex.OUTSTANDING_QTY: SdkCalcIndex.OutstandingQty,
    CalcIndex.OUTSTANDING_RATIO: SdkCalcIndex.OutstandingRatio,
    CalcIndex.PREMIUM: SdkCalcIndex.Premium,
    CalcIndex.ITM_OTM: SdkCalcIndex.ItmOtm,
    CalcIndex.IMPLIED_VOLATILITY: SdkCalcIndex.ImpliedVolatility,
    CalcIndex.WARRANT_DELTA: SdkCalcIndex.WarrantDelta,
    CalcIndex.CALL_PRICE: SdkCalcIndex.CallPrice,
    CalcIndex.TO_CALL_PRICE: SdkCalcIndex.ToCallPrice,
    CalcIndex.EFFECTIVE_LEVERAGE: SdkCalcIndex.EffectiveLeverage,
    CalcIndex.LEVERAGE_RATIO: SdkCalcIndex.LeverageRatio,
    CalcIndex.CONVERSION_RATIO: SdkCalcIndex.ConversionRatio,
    CalcIndex.BALANCE_POINT: SdkCalcIndex.BalancePoint,
    CalcIndex.OPEN_INTEREST: SdkCalcIndex.OpenInterest,
    CalcIndex.DELTA: SdkCalcIndex.Delta,
    CalcIndex.GAMMA: SdkCalcIndex.Gamma,
    CalcIndex.THETA: SdkCalcIndex.Theta,
    CalcIndex.VEGA: SdkCalcIndex.Vega,
    CalcIndex.RHO: SdkCalcIndex.Rho,
}


def build_config(settings: LongportSettings) -> Config:
    optional = {
        key: value
        for key, value in (
            ("http_url", settings.http_url),
            ("quote_ws_url", settings.quote_ws_url),
            ("trade_ws_url", settings.trade_ws_url),
        )
        if value
    }
    return Config(
        app_key=settings.app_key,
        app_secret=settings.app_secret,
        access_token=settings.access_token,
        **optional,
    )


async def _call(fn: Any, *args: Any, **kwargs: Any) -> Any:
    return await asyncio.to_thread(partial(fn, *args, **kwargs))


class QuoteSession:
    """Async facade over longport.openapi.QuoteContext."""

    def __init__(self, ctx: QuoteContext) -> None:
        self._ctx = ctx

    async def static_info(self, symbols: list[str]) -> list[Any]:
        return await _call(self._ctx.static_info, symbols)

    async def quote(self, symbols: list[str]) -> list[Any]:
        return await _call(self._ctx.quote, symbols)

    async def depth(self, symbol: str) -> Any:
        return await _call(self._ctx.depth, symbol)

    async def trades(self, symbol: str, count: int) -> list[Any]:
        return await _call(self._ctx.trades, symbol, count)

    async def intraday(self, symbol: str) -> list[Any]:
        return await _call(self._ctx.intraday, symbol)

    async def history_candlesticks_by_offset(
        self,
        symbol: str,
        period: Period,
        adjust_type: AdjustType,
        forward: bool,
        count: int,
        anchor: NaiveDatetime | None = None,
    ) -> list[Any]:
        return await _call(
            self._ctx.history_candlesticks_by_offset,
            symbol,
            PERIODS[period],
            ADJUST_TYPES[adjust_type],
            forward,
            count,
            time=anchor.to_datetime() if anchor else None,
        )

    async def history_candlesticks_by_date(
        self,
        symbol: str,
        period: Period,
        adjust_type: AdjustType,
        start: NaiveDate,
        end: NaiveDate,
    ) -> list[Any]:
        return await _call(
            self._ctx.history_candlesticks_by_date,
            symbol,
            PERIODS[period],
            ADJUST_TYPES[adjust_type],
            start=start.to_date(),
            end=end.to_date(),
        )

    async def capital_flow(self, symbol: str) -> list[Any]:
        return await _call(self._ctx.capital_flow, symbol)

    async def capital_distribution(self, symbol: str) -> Any:
        return await _call(self._ctx.capital_distribution, symbol)

    async def calc_indexes(self, symbols: list[str], indexes: list[CalcIndex]) -> list[Any]:
        return await _call(self._ctx.calc_indexes, symbols, [CALC_INDEXES[i] for i in indexes])

    async def watchlist(self) -> list[Any]:
        return await _call(self._ctx.watchlist)


class TradeSession:
    """Async facade over longport.openapi.TradeContext."""

    def __init__(self, ctx: TradeContext) -> None:
        self._ctx = ctx

    async def account_balance(self, currency: Currency | None = None) -> list[Any]:
        return await _call(
            self._ctx.account_balance, currency=str(currency) if currency else None
        )

    async def stock_positions(self, symbols: list[str] | None = None) -> Any:
        return await _call(self._ctx.stock_positions, symbols=symbols)

    async def history_executions(
        self,
        symbol: str | None = None,
        start_at: NaiveDatetime | None = None,
        end_at: NaiveDatetime | None = None,
    ) -> list[Any]:
        return await _call(
            self._ctx.history_executions,
            symbol=symbol,
            start_at=start_at.to_datetime() if start_at else None,
            end_at=end_at.to_datetime() if end_at else None,
        )

    async def today_executions(
        self, symbol: str | None = None, order_id: str | None = None
    ) -> list[Any]:
        return await _call(self._ctx.today_executions, symbol=symbol, order_id=order_id)


async def open_session(kind: SessionKind, settings: Settings) -> QuoteSession | TradeSession:
    """Default SessionManager factory: connect a Longport context for kind."""
    config = build_config(settings.longport)
    try:
        if kind is SessionKind.quote:
            return QuoteSession(await asyncio.to_thread(QuoteContext, config))
        return TradeSession(await asyncio.to_thread(TradeContext, config))
    except Exception as e:
        logger.exception("longport_connect_failed", kind=str(kind))
        raise SessionError(f"Failed to open {kind} session: {e}") from e
