"""
valkey_mcp/tools
================

The **tools** sub-package contains the infrastructure the MCP tools are built
on.  Nothing here is visible to the LLM directly.

Modules
-------
- ``valkey_client.py``: Valkey connection and one coroutine per command.
- ``encoding.py``: Binary-safe value encoding and JSON marshalling.
- ``error_handler.py``: Error taxonomy plus pattern-matched, user-friendly
  error formatting.
- ``formatters.py``: Parsers for INFO / CLUSTER INFO / CLIENT LIST /
  SLOWLOG replies.
- ``toolkit.py``: Dependency-injection container that wires the client
  and error handler together.
"""

from .toolkit import Toolkit  # noqa: F401
from .valkey_client import StreamEntry, ValkeyClient  # noqa: F401
