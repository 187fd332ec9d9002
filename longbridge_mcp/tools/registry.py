from __future__ import annotations

import structlog

from longbridge_mcp.infra.errors import RegistryError, UnknownToolError
from longbridge_mcp.tools.base import BaseTool, ToolName

logger = structlog.get_logger()

_CATALOG: frozenset[str] = frozenset(ToolName)


class ToolRegistry:
    """Registry for brokerage tools. Read-only once frozen."""

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}
        self._frozen = False

    def register(self, tool: BaseTool) -> None:
        """Register a tool.

        Raises RegistryError if frozen, if the name is already registered,
        or if the name is outside ToolName.
        """
        if self._frozen:
            raise RegistryError(f"Registry is frozen, cannot register {tool.name}")
        if tool.name not in _CATALOG:
            raise RegistryError(f"Tool name not in catalog: {tool.name}")
        if tool.name in self._tools:
            raise RegistryError(f"Tool already registered: {tool.name}")
        self._tools[str(tool.name)] = tool
        logger.debug("tool_registered", tool_name=str(tool.name))

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name. Returns None if not found."""
        if not isinstance(name, str):
            return None
        return self._tools.get(name)

    def lookup(self, name: object) -> BaseTool:
        """Get a tool by name. Raises UnknownToolError if not found."""
        tool = self.get(name)  # type: ignore[arg-type]
        if tool is None:
            raise UnknownToolError(name, available=self.names())
        return tool

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[BaseTool]:
        return list(self._tools.values())

    def get_tools_schema(self) -> list[dict]:
        """Return the advertised catalog.

        Output format:
        [{"name": ..., "description": ..., "inputSchema": ...}]
        """
        return [
            {
                "name": str(tool.name),
                "description": tool.description,
                "inputSchema": tool.parameters,
            }
            for tool in self._tools.values()
        ]
