"""
valkey_mcp/core/server.py
=========================

Server runtime: wiring, startup checks and the stdio run loop.

Startup sequence
----------------
1. ``Config.from_env()`` + ``validate()``: bad URLs or DB indexes fail fast.
2. ``Toolkit(config)``: one shared Valkey client and error handler.
3. ``ValkeyClient.ping()`` bounded by ``VALKEY_PING_TIMEOUT``: a server that
   is unreachable at startup aborts the process with a clear log line
   instead of failing on the first tool call.
4. ``build_server``: populate the ``ToolRegistry`` and bridge every tool into
   a ``FastMCP`` instance.
5. Serve MCP over stdio until the client disconnects, then close the pool.

Logging goes to **stderr**; stdout carries the MCP stdio transport.
"""

import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from fastmcp import FastMCP

from ..config import Config, ConfigError
from ..tool_definitions import register_all
from ..tool_definitions.registry import ToolRegistry
from ..tools.error_handler import CommandError
from ..tools.toolkit import Toolkit

logger = logging.getLogger(__name__)

USAGE = "Usage: python server.py [serve|tools]"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_registry(toolkit: Toolkit) -> ToolRegistry:
    registry = ToolRegistry()
    register_all(registry, toolkit.valkey)
    return registry


def build_server(toolkit: Toolkit) -> Tuple[FastMCP, ToolRegistry]:
    """Create the FastMCP server with every Valkey tool registered.

    Parameters
    ----------
    toolkit:
        Container holding the shared client and error handler.

    Returns
    -------
    Tuple[FastMCP, ToolRegistry]
        The server ready to run, and the registry backing it.
    """
    registry = build_registry(toolkit)
    server = FastMCP(toolkit.config.server_name)
    registry.register_with_mcp(server, toolkit.error_handler)
    return server, registry


async def serve(config: Config) -> None:
    """Validate, connect, and serve MCP over stdio until the client disconnects."""
    config.validate()
    toolkit = Toolkit(config)
    try:
        await toolkit.valkey.ping()
        logger.info("Connected to Valkey at %s", config.valkey_url)

        server, registry = build_server(toolkit)
        logger.info("Starting %s with %d tools", config.server_name, registry.count())
        await server.run_async(transport="stdio")
    finally:
        await toolkit.close()


def describe_tools(config: Optional[Config] = None) -> List[Dict[str, Any]]:
    """Return ``{name, description, inputSchema}`` for every tool.

    The client is never connected, so this works without a running server.
    """
    toolkit = Toolkit(config or Config())
    return [info.to_dict() for info in build_registry(toolkit).get_all_tool_info()]


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    command = argv[0].lower() if argv else "serve"

    if command == "tools":
        print(json.dumps(describe_tools(), indent=2))
        return 0

    if command != "serve":
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 1

    try:
        config = Config.from_env()
        configure_logging(config.log_level)
        asyncio.run(serve(config))
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    except CommandError as exc:
        logger.error("Failed to connect to Valkey: %s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0
