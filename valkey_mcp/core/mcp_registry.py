"""
valkey_mcp/core/mcp_registry.py
===============================

Bridges the **tool registry** into a **FastMCP** server.

Background: registry tools vs. FastMCP tools
--------------------------------------------
- Registry tools take a raw JSON string and return a typed dataclass.
- FastMCP tools receive the already-decoded ``arguments`` dict from the MCP
  request and must return a ``ToolResult``.

``BridgedTool`` performs the translation for one tool:

    MCP tools/call arguments (dict)
        ↓  json.dumps
    tool.execute(raw_json)
        ↓  to_mapping (bytes → base64, dataclasses → dicts)
    ToolResult(structured_content=mapping)

The schema FastMCP advertises is the one ``BaseTool`` derived at
construction; FastMCP's own signature-based schema generation is not used.

Errors
------
Any failure (tool error, unmarshalable result) becomes a ``ToolError`` so
FastMCP reports it to the client as an error result instead of dropping it.
When an ``ErrorHandler`` is supplied, the message carries its
classification and suggestions.
"""

import json
import logging
import time
from typing import Any, Dict, Optional

from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import Tool, ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr

from ..tools.encoding import to_mapping
from ..tools.error_handler import ErrorHandler

logger = logging.getLogger(__name__)

EMPTY_OBJECT_SCHEMA: Dict[str, Any] = {"type": "object", "properties": {}}


class BridgedTool(Tool):
    """A FastMCP ``Tool`` that delegates to a registry tool."""

    _target: Any = PrivateAttr(default=None)
    _error_handler: Optional[ErrorHandler] = PrivateAttr(default=None)

    @classmethod
    def from_tool(cls, tool, error_handler: Optional[ErrorHandler] = None) -> "BridgedTool":
        """Wrap ``tool``; tools without a schema advertise an empty object schema."""
        schema = tool.input_schema if tool.input_schema is not None else EMPTY_OBJECT_SCHEMA
        bridged = cls(name=tool.name, description=tool.description, parameters=dict(schema))
        bridged._target = tool
        bridged._error_handler = error_handler
        return bridged

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        logger.debug("Tool call: %s args=%s", self.name, arguments)
        started = time.perf_counter()

        try:
            raw_input = json.dumps(arguments or {})
        except (TypeError, ValueError) as exc:
            raise ToolError(f"failed to marshal arguments for tool {self.name}: {exc}") from exc

        try:
            result = await self._target.execute(raw_input)
        except Exception as exc:
            logger.warning("Tool %s failed: %s", self.name, exc)
            raise ToolError(self._describe(exc)) from exc

        try:
            mapping = to_mapping(result)
        except (TypeError, ValueError) as exc:
            raise ToolError(f"failed to marshal result of tool {self.name}: {exc}") from exc

        logger.info("Tool %s completed in %.1f ms", self.name, (time.perf_counter() - started) * 1000)
        return ToolResult(
            content=[TextContent(type="text", text=json.dumps(mapping))],
            structured_content=mapping,
        )

    def _describe(self, error: Exception) -> str:
        if self._error_handler is None:
            return f"failed to execute tool {self.name}: {error}"
        return self._error_handler.describe(error, self.name)
