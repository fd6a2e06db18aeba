"""
valkey_mcp/core
===============

The **core** sub-package contains the server runtime:

- ``server.py``       : builds the FastMCP server, checks connectivity and
                        serves over stdio.
- ``mcp_registry.py`` : bridges registry tools into FastMCP ``Tool`` objects.
"""

from .server import build_server, describe_tools, main, serve  # noqa: F401
