"""Parameter specifications: one pydantic model per tool.

A model instance is the validated request handed to a tool. Models never
exist partially valid: validate_arguments() either returns a complete
instance or raises ToolValidationError with one FieldIssue per offending
field.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Self, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainValidator,
    PrivateAttr,
    ValidationError,
    WithJsonSchema,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from longbridge_mcp.infra.errors import FieldIssue, ToolValidationError
from longbridge_mcp.tools.codes import (
    PERIOD_LABELS,
    AdjustType,
    CalcIndex,
    Currency,
    Direction,
    Period,
    QueryType,
    describe_codes,
)
from longbridge_mcp.tools.parsing import (
    NaiveDate,
    NaiveDatetime,
    parse_date,
    parse_datetime,
    parse_time,
)

SYMBOL_PATTERN = r"^[A-Z0-9]+\.[A-Z]+$"
MAX_SYMBOLS = 500
MAX_CANDLESTICKS = 1000
DEFAULT_CANDLESTICK_COUNT = 10

_SYMBOL_DESCRIPTION = "Stock code, use ticker.region format, e.g. AAPL.US"

Symbol = Annotated[str, Field(pattern=SYMBOL_PATTERN, description=_SYMBOL_DESCRIPTION)]
SymbolList = Annotated[
    list[Symbol],
    Field(
        max_length=MAX_SYMBOLS,
        description=f"{_SYMBOL_DESCRIPTION}. At most {MAX_SYMBOLS} symbols per request.",
    ),
]

SymbolFilter = Annotated[list[Symbol], Field(max_length=MAX_SYMBOLS)]

CompactDate = Annotated[
    NaiveDate,
    PlainValidator(parse_date),
    WithJsonSchema({"type": "string", "pattern": r"^[0-9]{8}$"}),
]


def _check_compact_date(value: str) -> str:
    parse_date(value)
    return value


def _check_compact_time(value: str) -> str:
    parse_time(value)
    return value


# Kept as text: combined with a companion field through parse_datetime.
CompactDateText = Annotated[str, AfterValidator(_check_compact_date)]
CompactTimeText = Annotated[str, AfterValidator(_check_compact_time)]


def _exact_code(value: Any) -> Any:
    """Accept only integer codes; their string and float forms are not listed."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("expected an integer code")
    return value


# Digit strings are listed for period only.
_PERIOD_TEXT: dict[str, Period] = {str(int(period)): period for period in Period}

AdjustTypeCode = Annotated[AdjustType, BeforeValidator(_exact_code)]
QueryTypeCode = Annotated[QueryType, BeforeValidator(_exact_code)]
DirectionCode = Annotated[Direction, BeforeValidator(_exact_code)]
CalcIndexCode = Annotated[CalcIndex, BeforeValidator(_exact_code)]


def _refinement_error(path: str, message: str) -> PydanticCustomError:
    """Error raised from a model-level refinement that still points at one field."""
    return PydanticCustomError("refinement", message, {"path": path})


class ToolParams(BaseModel):
    """Base for every tool's parameters. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore")


class EmptyParams(ToolParams):
    pass


class AccountBalanceParams(ToolParams):
    currency: Currency | None = Field(None, description="Currency filter")


class StockPositionsParams(ToolParams):
    symbol: SymbolFilter | None = Field(
        None,
        description=f"{_SYMBOL_DESCRIPTION}. Omit to list all positions.",
    )


class SymbolListParams(ToolParams):
    symbol: SymbolList


class SingleSymbolParams(ToolParams):
    symbol: Symbol


class TradesParams(ToolParams):
    symbol: Symbol
    count: int = Field(
        DEFAULT_CANDLESTICK_COUNT,
        ge=1,
        le=MAX_CANDLESTICKS,
        description="Count of trades, valid range: [1,1000]. Default value: 10",
    )


class CalcIndexParams(ToolParams):
    symbols: SymbolList
    calc_index: list[CalcIndexCode] = Field(
        min_length=1,
        max_length=len(CalcIndex),
        description="Calculate index codes, e.g. 1 (last done), 3 (change rate), 12 (PE TTM)",
    )


class HistoryExecutionsParams(ToolParams):
    symbol: Symbol | None = None
    start_date: CompactDateText | None = Field(
        None, description="Start date, in YYYYMMDD format. Default: 90 days before end"
    )
    start_time: CompactTimeText | None = Field(
        None, description="Start time, in HHMM or HHMMSS format"
    )
    end_date: CompactDateText | None = Field(
        None, description="End date, in YYYYMMDD format. Default: now"
    )
    end_time: CompactTimeText | None = Field(
        None, description="End time, in HHMM or HHMMSS format"
    )

    _start_at: NaiveDatetime | None = PrivateAttr(None)
    _end_at: NaiveDatetime | None = PrivateAttr(None)

    @model_validator(mode="after")
    def _combine(self) -> Self:
        if self.start_time and not self.start_date:
            raise _refinement_error("start_time", "start_time requires start_date")
        if self.end_time and not self.end_date:
            raise _refinement_error("end_time", "end_time requires end_date")
        if self.start_date:
            self._start_at = parse_datetime(self.start_date, self.start_time)
        if self.end_date:
            self._end_at = parse_datetime(self.end_date, self.end_time)
        if self._start_at and self._end_at and self._start_at > self._end_at:
            raise _refinement_error("end_date", "end must not be earlier than start")
        return self

    @property
    def start_at(self) -> NaiveDatetime | None:
        return self._start_at

    @property
    def end_at(self) -> NaiveDatetime | None:
        return self._end_at


class TodayExecutionsParams(ToolParams):
    symbol: Symbol | None = None
    order_id: Annotated[str, Field(min_length=1)] | None = Field(
        None, description="Order ID filter"
    )


# ---------------------------------------------------------------------------
# History candlesticks
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DateRangeQuery:
    start: NaiveDate
    end: NaiveDate


@dataclass(frozen=True)
class OffsetQuery:
    forward: bool
    count: int
    anchor: NaiveDatetime | None  # None: latest trading day


CandlestickQuery = DateRangeQuery | OffsetQuery


class DateRequest(BaseModel):
    start_date: CompactDate = Field(
        description="Date of query begin, in YYYYMMDD format, for example: 20231016"
    )
    end_date: CompactDate = Field(
        description="Date of query end, in YYYYMMDD format, for example: 20231016"
    )


class OffsetRequest(BaseModel):
    direction: DirectionCode = Field(
        description="Query direction. 0: toward historical data, 1: toward latest data"
    )
    date: CompactDateText | None = Field(
        None,
        description=(
            "Query date, in YYYYMMDD format, for example: 20231016. "
            "Default value: latest trading day of the underlying market."
        ),
    )
    minute: CompactTimeText | None = Field(
        None,
        description="Query time, in HHMM format, for example: 0935, "
        "only valid when querying minute-level data",
    )
    count: int = Field(
        DEFAULT_CANDLESTICK_COUNT,
        ge=1,
        le=MAX_CANDLESTICKS,
        description="Count of Candlesticks, valid range: [1,1000]. Default value: 10",
    )

    _anchor: NaiveDatetime | None = PrivateAttr(None)

    @model_validator(mode="after")
    def _parse_anchor(self) -> Self:
        if self.date:
            self._anchor = parse_datetime(self.date, self.minute)
        return self

    @property
    def anchor(self) -> NaiveDatetime | None:
        return self._anchor


class HistoryCandlesticksParams(ToolParams):
    symbol: Symbol
    period: Period = Field(
        description=f"Candlestick period. {describe_codes(PERIOD_LABELS)}"
    )
    adjust_type: AdjustTypeCode = Field(
        description="Adjustment type. 0: actual, 1: adjust forward"
    )
    query_type: QueryTypeCode = Field(
        description="Query type. 1: query by offset, 2: query by date"
    )
    date_request: DateRequest | None = Field(None, description="Required when querying by date")
    offset_request: OffsetRequest | None = Field(
        None, description="Required when querying by offset"
    )

    _query: CandlestickQuery | None = PrivateAttr(None)

    @field_validator("period", mode="before")
    @classmethod
    def _coerce_period(cls, v: Any) -> Any:
        if isinstance(v, str):
            if v not in _PERIOD_TEXT:
                raise ValueError(f"unknown period code '{v}'")
            return _PERIOD_TEXT[v]
        return _exact_code(v)

    @model_validator(mode="after")
    def _select_query(self) -> Self:
        if self.query_type is QueryType.BY_DATE:
            if self.date_request is None:
                raise _refinement_error(
                    "date_request", "date_request is required when query_type is 2 (by date)"
                )
            self.offset_request = None
            self._query = DateRangeQuery(
                start=self.date_request.start_date, end=self.date_request.end_date
            )
        else:
            if self.offset_request is None:
                raise _refinement_error(
                    "offset_request",
                    "offset_request is required when query_type is 1 (by offset)",
                )
            self.date_request = None
            self._query = OffsetQuery(
                forward=self.offset_request.direction is Direction.LATEST,
                count=self.offset_request.count,
                anchor=self.offset_request.anchor,
            )
        return self

    @property
    def query(self) -> CandlestickQuery:
        assert self._query is not None
        return self._query


# ---------------------------------------------------------------------------
# Validation entry point
# ---------------------------------------------------------------------------

P = TypeVar("P", bound=BaseModel)


def _format_loc(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def issues_from_validation_error(exc: ValidationError) -> list[FieldIssue]:
    """Flatten a pydantic ValidationError into per-field issues.

    Refinement errors carry no location of their own; their target field
    travels in ctx["path"] and is appended to the model's location.
    """
    issues: list[FieldIssue] = []
    for err in exc.errors(include_url=False):
        loc = tuple(err.get("loc", ()))
        ctx = err.get("ctx") or {}
        if err.get("type") == "refinement" and ctx.get("path"):
            loc = (*loc, ctx["path"])
        issues.append(FieldIssue(path=_format_loc(loc), message=err.get("msg", "invalid")))
    return issues


def validate_arguments(model: type[P], arguments: object) -> P:
    """Validate raw tool arguments. None means no arguments.

    Raises ToolValidationError listing every offending field.
    """
    if arguments is None:
        arguments = {}
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise ToolValidationError(issues_from_validation_error(exc)) from exc
