"""Stdio transport: advertises the tool catalog and forwards calls to dispatch_tool."""

from __future__ import annotations

from typing import Any

import mcp.types as types
import structlog
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from longbridge_mcp.gateway.dispatch import dispatch_tool
from longbridge_mcp.gateway.envelope import ResultEnvelope
from longbridge_mcp.session.manager import SessionManager
from longbridge_mcp.tools.base import RiskLevel
from longbridge_mcp.tools.builtins import build_registry
from longbridge_mcp.tools.registry import ToolRegistry

logger = structlog.get_logger()

SERVER_NAME = "longbridge"


def to_call_result(envelope: ResultEnvelope) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text) for text in envelope.texts()],
        isError=bool(envelope.is_error),
    )


def create_server(
    registry: ToolRegistry | None = None,
    sessions: SessionManager | None = None,
) -> Server:
    registry = registry or build_registry()
    sessions = sessions or SessionManager()
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def _list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=str(tool.name),
                description=tool.description,
                inputSchema=tool.parameters,
                annotations=types.ToolAnnotations(
                    readOnlyHint=tool.risk_level is RiskLevel.low
                ),
            )
            for tool in registry.list_tools()
        ]

    # Arguments are validated by the tools' own models, not by the transport.
    @server.call_tool(validate_input=False)
    async def _call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        envelope = await dispatch_tool(name, arguments, registry=registry, sessions=sessions)
        return to_call_result(envelope)

    return server


async def serve(
    registry: ToolRegistry | None = None,
    sessions: SessionManager | None = None,
) -> None:
    server = create_server(registry, sessions)
    logger.info("server_starting", name=SERVER_NAME)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
