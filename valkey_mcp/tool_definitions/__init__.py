"""
valkey_mcp/tool_definitions
===========================

This sub-package contains every **MCP tool** the LLM can invoke.

How tools work
--------------
1. ``base.py`` provides ``BaseTool``: each tool declares an ``Input``
   dataclass whose fields carry ``param()`` metadata, and the JSON Schema is
   derived from it once, at construction.
2. Each domain module defines the tools for one command family and exposes
   ``register(registry, client)``.
3. ``register_all`` builds every tool around the shared ``ValkeyClient`` and
   adds it to the ``ToolRegistry`` (``registry.py``).
4. ``ToolRegistry.register_with_mcp`` bridges the registry into FastMCP.

Tool categories
---------------
- ``server_tools.py``    : INFO, PING, CLIENT LIST, DBSIZE, SLOWLOG, CONFIG
- ``key_tools.py``       : scan, type, TTL, expire, rename, delete, dump/restore
- ``string_tools.py``    : GET / SET / MGET / counters / APPEND / ranges
- ``hash_tools.py``      : hash fields and values
- ``list_tools.py``      : push / pop / range / index / trim
- ``set_tools.py``       : membership and set algebra
- ``stream_tools.py``    : XADD / XRANGE / XLEN / XREAD
- ``cluster_tools.py``   : CLUSTER INFO / NODES / KEYSLOT / COUNTKEYSINSLOT
- ``scripting_tools.py`` : EVAL / SCRIPT LOAD / EVALSHA
"""

from . import (
    cluster_tools,
    hash_tools,
    key_tools,
    list_tools,
    scripting_tools,
    server_tools,
    set_tools,
    stream_tools,
    string_tools,
)
from .registry import ToolRegistry

_MODULES = (
    server_tools,
    key_tools,
    string_tools,
    list_tools,
    hash_tools,
    set_tools,
    stream_tools,
    cluster_tools,
    scripting_tools,
)


def register_all(registry: ToolRegistry, client) -> None:
    """Register every Valkey tool, each bound to ``client``.

    Duplicate names are a programming error and abort startup.
    """
    for module in _MODULES:
        module.register(registry, client)
