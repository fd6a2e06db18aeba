"""
valkey_mcp/__init__.py
======================

Valkey MCP server: exposes Valkey commands as schema-described MCP tools.

Layout
------
- ``config.py``         : environment-driven configuration.
- ``tools/``            : Valkey client, binary-safe encoding, error handling.
- ``tool_definitions/`` : the tool base class, the registry and every tool.
- ``core/``             : FastMCP bridge and server runtime.

Typical use::

    from valkey_mcp.core import main
    main(["serve"])
"""

__version__ = "1.0.0"
