"""Core dispatch: registry lookup → validate → session → execute → envelope.

This is the single fault-containment point: every Exception raised on the
way becomes an error envelope. Cancellation is not an Exception and still
propagates to the transport.
"""

from __future__ import annotations

import structlog

from longbridge_mcp.gateway.envelope import ResultEnvelope, error, success
from longbridge_mcp.infra.errors import ToolValidationError, UnknownToolError
from longbridge_mcp.session.manager import SessionManager
from longbridge_mcp.tools.params import validate_arguments
from longbridge_mcp.tools.registry import ToolRegistry

logger = structlog.get_logger()


async def dispatch_tool(
    name: object,
    arguments: object,
    *,
    registry: ToolRegistry,
    sessions: SessionManager,
) -> ResultEnvelope:
    """Run one tool call and return its envelope. Never raises Exception."""
    try:
        # 1. Resolve
        tool = registry.lookup(name)

        # 2. Validate
        params = validate_arguments(tool.params_model, arguments)

        # 3. Session (may suspend on first construction)
        session = await sessions.get_session(tool.session_kind)

        # 4. Execute
        output = await tool.execute(params, session)

        # 5. Envelope
        envelope = success(output)
    except UnknownToolError as e:
        logger.warning("unknown_tool", tool_name=str(name))
        return error(e)
    except ToolValidationError as e:
        logger.info(
            "tool_validation_failed",
            tool_name=str(name),
            issues=[issue.render() for issue in e.issues],
        )
        return error(e)
    except Exception as e:
        logger.exception("tool_execution_failed", tool_name=str(name))
        return error(e)

    logger.info("tool_dispatched", tool_name=str(name), blocks=len(envelope.content))
    return envelope
