"""Uniform result envelope for every tool call.

Success: one text block per produced item, in order.
Error: exactly one text block and isError set; never mixed with success blocks.
"""

from __future__ import annotations

import dataclasses
import datetime as dt
import json
import math
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum, StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from longbridge_mcp.infra.errors import ToolValidationError
from longbridge_mcp.tools.base import ToolOutput

_MAX_DEPTH = 12


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ResultEnvelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: list[TextContent]
    is_error: bool | None = Field(None, alias="isError")

    def texts(self) -> list[str]:
        return [block.text for block in self.content]

    def to_wire(self) -> dict[str, Any]:
        """Dump as sent to callers: camelCase keys, isError omitted on success."""
        return self.model_dump(by_alias=True, exclude_none=True)


class FaultKind(StrEnum):
    validation = "validation"
    backend = "backend"
    unknown = "unknown"


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def _public_attributes(value: Any) -> dict[str, Any]:
    """Readable state of an SDK object: public, non-callable attributes.

    Enum-like SDK classes expose their variants as class attributes of the
    same type; those are skipped.
    """
    cls = type(value)
    attrs: dict[str, Any] = {}
    for name in dir(value):
        if name.startswith("_"):
            continue
        if isinstance(getattr(cls, name, None), cls):
            continue
        try:
            attr = getattr(value, name)
        except AttributeError:
            continue
        if callable(attr):
            continue
        attrs[name] = attr
    return attrs


def to_jsonable(value: Any, _depth: int = 0) -> Any:
    """Convert a backend result into JSON-compatible data."""
    if _depth > _MAX_DEPTH:
        return str(value)
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Enum):
        return to_jsonable(value.value, _depth + 1)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        # NaN and infinities have no JSON form
        return value if math.isfinite(value) else None
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return to_jsonable(value.model_dump(), _depth + 1)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_jsonable(getattr(value, f.name), _depth + 1)
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v, _depth + 1) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v, _depth + 1) for v in value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")

    attrs = _public_attributes(value)
    if not attrs:
        return str(value)
    return {name: to_jsonable(attr, _depth + 1) for name, attr in attrs.items()}


def serialize(value: Any) -> str:
    return json.dumps(to_jsonable(value), ensure_ascii=False, allow_nan=False)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def success(output: ToolOutput) -> ResultEnvelope:
    return ResultEnvelope(content=[TextContent(text=serialize(item)) for item in output.items])


def classify_fault(fault: object) -> FaultKind:
    if isinstance(fault, ToolValidationError):
        return FaultKind.validation
    if isinstance(fault, Exception):
        return FaultKind.backend
    return FaultKind.unknown


def fault_message(fault: object) -> str:
    kind = classify_fault(fault)
    if kind is FaultKind.validation:
        assert isinstance(fault, ToolValidationError)
        return "Validation error: " + "; ".join(issue.render() for issue in fault.issues)
    if kind is FaultKind.backend:
        return str(fault) or type(fault).__name__
    try:
        return json.dumps(fault, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(fault)


def error(fault: object) -> ResultEnvelope:
    return ResultEnvelope(content=[TextContent(text=fault_message(fault))], is_error=True)
