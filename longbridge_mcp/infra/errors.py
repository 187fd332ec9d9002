"""Custom exception hierarchy for longbridge-mcp.

All application-specific exceptions inherit from LongbridgeError,
which carries an error code for logging and envelope rendering.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


class LongbridgeError(Exception):
    """Base exception for all longbridge-mcp errors."""

    def __init__(self, message: str, *, code: str = "INTERNAL_ERROR") -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class FieldIssue:
    """One offending field: dotted path inside the arguments plus the constraint."""

    path: str
    message: str

    def render(self) -> str:
        if not self.path:
            return self.message
        return f"{self.path}: {self.message}"


class ToolValidationError(LongbridgeError):
    """Tool arguments rejected by the parameter specification."""

    def __init__(
        self,
        issues: Iterable[FieldIssue],
        *,
        code: str = "INVALID_ARGS",
    ) -> None:
        self.issues: tuple[FieldIssue, ...] = tuple(issues)
        super().__init__(
            "; ".join(issue.render() for issue in self.issues) or "Invalid arguments",
            code=code,
        )


class UnknownToolError(ToolValidationError):
    """Tool name not present in the registry. Rendered like any validation failure."""

    def __init__(self, name: object, available: Iterable[str] = ()) -> None:
        self.name = name
        expected = ", ".join(f"'{n}'" for n in available)
        message = f"Invalid tool name '{name}'"
        if expected:
            message = f"{message}, expected one of {expected}"
        super().__init__([FieldIssue(path="name", message=message)], code="UNKNOWN_TOOL")


class RegistryError(LongbridgeError):
    """Misuse of the tool registry (duplicate or unknown registrations, writes after freeze)."""

    def __init__(self, message: str, *, code: str = "REGISTRY_ERROR") -> None:
        super().__init__(message, code=code)


class SessionError(LongbridgeError):
    """Errors constructing a backend session."""

    def __init__(self, message: str, *, code: str = "SESSION_ERROR") -> None:
        super().__init__(message, code=code)
