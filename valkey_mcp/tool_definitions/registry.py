"""
valkey_mcp/tool_definitions/registry.py
=======================================

Central directory of every tool, keyed by name.

Lifecycle
---------
One ``ToolRegistry`` is created at startup and filled by
``tool_definitions.register_all``.  After registration it is only read:
lookups and ``execute_tool`` may run concurrently from many MCP requests
without locking, because registration completes before the server starts
serving.

Bridging into FastMCP
---------------------
``register_with_mcp`` wraps every registered tool in a ``BridgedTool``
(``core/mcp_registry.py``) and adds it to the ``FastMCP`` server.  FastMCP
then advertises the derived schema and routes ``tools/call`` requests to the
tool's ``execute``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from ..tools.error_handler import (
    DuplicateToolError,
    ErrorHandler,
    ToolExecutionError,
    ToolNotFoundError,
)

logger = logging.getLogger(__name__)


@runtime_checkable
class Tool(Protocol):
    """Capability every registered tool provides."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def input_schema(self) -> Optional[Dict[str, Any]]: ...

    async def execute(self, raw_input: Union[str, bytes, None] = None) -> Any: ...


@dataclass
class ToolInfo:
    """Discovery record for one tool."""
    name: str
    description: str
    input_schema: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        info: Dict[str, Any] = {"name": self.name, "description": self.description}
        if self.input_schema is not None:
            info["inputSchema"] = self.input_schema
        return info


class ToolRegistry:
    """Name → tool mapping that enforces unique names."""

    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Add ``tool``.

        Raises
        ------
        DuplicateToolError
            If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise DuplicateToolError(f"tool {tool.name} already registered")
        self._tools[tool.name] = tool
        logger.debug("Registered tool: %s", tool.name)

    def must_register(self, tool: Tool) -> None:
        """Like ``register``, but a duplicate is a programming error and is not recoverable."""
        try:
            self.register(tool)
        except DuplicateToolError as exc:
            logger.critical("Tool registration failed: %s", exc)
            raise RuntimeError(f"fatal tool registration error: {exc}") from exc

    def get_tool(self, name: str) -> Optional[Tool]:
        """Return the tool registered under ``name``, or None.  Absence is not an error."""
        return self._tools.get(name)

    def list_tools(self) -> List[str]:
        return sorted(self._tools)

    def count(self) -> int:
        return len(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def get_all_tool_info(self) -> List[ToolInfo]:
        return [
            ToolInfo(name=t.name, description=t.description, input_schema=t.input_schema)
            for _, t in sorted(self._tools.items())
        ]

    async def execute_tool(self, name: str, raw_input: Union[str, bytes, None] = None) -> Any:
        """Run the named tool and return exactly what its ``execute`` returns.

        Raises
        ------
        ToolNotFoundError
            If no tool is registered under ``name``.
        ToolExecutionError
            Wrapping whatever the tool raised, with the tool name prefixed.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(f"tool not found: {name}")

        try:
            return await tool.execute(raw_input)
        except Exception as exc:
            raise ToolExecutionError(f"failed to execute tool {name}: {exc}") from exc

    def register_with_mcp(self, server, error_handler: Optional[ErrorHandler] = None) -> int:
        """Add every registered tool to a ``FastMCP`` server.

        Returns
        -------
        int
            Number of tools added.
        """
        from ..core.mcp_registry import BridgedTool

        for name in self.list_tools():
            server.add_tool(BridgedTool.from_tool(self._tools[name], error_handler))
        logger.info("Registered %d Valkey tools with MCP server.", len(self._tools))
        return len(self._tools)
