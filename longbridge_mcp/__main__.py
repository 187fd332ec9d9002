from __future__ import annotations

import asyncio

from longbridge_mcp.config.settings import get_logging_settings
from longbridge_mcp.gateway.server import serve
from longbridge_mcp.infra.logging import setup_logging


def main() -> None:
    log_settings = get_logging_settings()
    setup_logging(json_output=log_settings.json_output, log_level=log_settings.level)
    asyncio.run(serve())


if __name__ == "__main__":
    main()
