"""Closed code tables accepted by the tool arguments.

Every accepted literal is a member; anything else is rejected at validation.
The SDK-side counterparts live in longbridge_mcp.backend.longport.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum


class Currency(StrEnum):
    HKD = "HKD"
    USD = "USD"
    CNH = "CNH"


class Period(IntEnum):
    """Candlestick period. Values are the wire codes."""

    MIN_1 = 1
    MIN_2 = 2
    MIN_3 = 3
    MIN_5 = 5
    MIN_10 = 10
    MIN_15 = 15
    MIN_20 = 20
    MIN_30 = 30
    MIN_45 = 45
    MIN_60 = 60
    MIN_120 = 120
    MIN_180 = 180
    MIN_240 = 240
    DAY = 1000
    WEEK = 2000
    MONTH = 3000
    QUARTER = 3500
    YEAR = 4000

    @property
    def is_intraday(self) -> bool:
        return self < Period.DAY


PERIOD_LABELS: dict[Period, str] = {
    Period.MIN_1: "One Minute",
    Period.MIN_2: "Two Minutes",
    Period.MIN_3: "Three Minutes",
    Period.MIN_5: "Five Minutes",
    Period.MIN_10: "Ten Minutes",
    Period.MIN_15: "Fifteen Minutes",
    Period.MIN_20: "Twenty Minutes",
    Period.MIN_30: "Thirty Minutes",
    Period.MIN_45: "Forty Five Minutes",
    Period.MIN_60: "Sixty Minutes",
    Period.MIN_120: "Two Hours",
    Period.MIN_180: "Three Hours",
    Period.MIN_240: "Four Hours",
    Period.DAY: "One Day",
    Period.WEEK: "One Week",
    Period.MONTH: "One Month",
    Period.QUARTER: "One Quarter",
    Period.YEAR: "One Year",
}


class AdjustType(IntEnum):
    NO_ADJUST = 0
    FORWARD_ADJUST = 1


class QueryType(IntEnum):
    """Discriminant of a candlestick query."""

    BY_OFFSET = 1
    BY_DATE = 2


class Direction(IntEnum):
    HISTORICAL = 0  # toward older data
    LATEST = 1  # toward newer data


class CalcIndex(IntEnum):
    """Computed quote indexes, numbered as in the Longport quote API."""

    LAST_DONE = 1
    CHANGE_VALUE = 2
    CHANGE_RATE = 3
    VOLUME = 4
    TURNOVER = 5
    YTD_CHANGE_RATE = 6
    TURNOVER_RATE = 7
    TOTAL_MARKET_VALUE = 8
    CAPITAL_FLOW = 9
    AMPLITUDE = 10
    VOLUME_RATIO = 11
    PE_TTM_RATIO = 12
    PB_RATIO = 13
    DIVIDEND_RATIO_TTM = 14
    FIVE_DAY_CHANGE_RATE = 15
    TEN_DAY_CHANGE_RATE = 16
    HALF_YEAR_CHANGE_RATE = 17
    FIVE_MINUTES_CHANGE_RATE = 18
    EXPIRY_DATE = 19
    STRIKE_PRICE = 20
    UPPER_STRIKE_PRICE = 21
    LOWER_STRIKE_PRICE = 22
    OUTSTANDING_QTY = 23
    OUTSTANDING_RATIO = 24
    PREMIUM = 25
    ITM_OTM = 26
    IMPLIED_VOLATILITY = 27
    WARRANT_DELTA = 28
    CALL_PRICE = 29
    TO_CALL_PRICE = 30
    EFFECTIVE_LEVERAGE = 31
    LEVERAGE_RATIO = 32
    CONVERSION_RATIO = 33
    BALANCE_POINT = 34
    OPEN_INTEREST = 35
    DELTA = 36
    GAMMA = 37
    THETA = 38
    VEGA = 39
    RHO = 40


def describe_codes(labels: dict) -> str:
    """Render a code table as 'code: label' pairs for tool descriptions."""
    return ", ".join(f"{int(code)}: {label}" for code, label in labels.items())
