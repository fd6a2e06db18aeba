"""
server.py
=========

Runs the Valkey MCP server.

Usage
-----
    # Serve MCP over stdio (what an MCP client launches):
    python server.py
    python server.py serve

    # Print the name, description and input schema of every tool as JSON:
    python server.py tools

Environment Variables
---------------------
Connection settings are read from the environment (or a local ``.env``)::

    VALKEY_URL=valkey://localhost:6379
    VALKEY_PASSWORD=
    VALKEY_DB=0
    VALKEY_PING_TIMEOUT=5
    LOG_LEVEL=INFO

See ``valkey_mcp/config.py`` for the full list.
"""

import sys

from valkey_mcp.core.server import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
