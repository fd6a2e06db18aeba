"""
valkey_mcp/tools/toolkit.py
===========================

Dependency Injection (DI) container for the infrastructure objects.

Every tool needs the same Valkey client, and the MCP bridge needs the error
handler.  ``Toolkit`` creates **one instance of each** and the server hands
them out explicitly:

- tools receive ``toolkit.valkey`` in their constructor
  (see ``tool_definitions.register_all``),
- the registry bridge receives ``toolkit.error_handler``.

No tool constructs its own client, and tests swap the client for an
``AsyncMock`` without patching module globals.
"""

import logging

from ..config import Config
from .error_handler import ErrorHandler
from .valkey_client import ValkeyClient

logger = logging.getLogger(__name__)


class Toolkit:
    """Wires the infrastructure objects together into one injectable container.

    Parameters
    ----------
    config:
        A fully populated ``Config`` instance.

    Attributes
    ----------
    config:
        Application configuration.
    valkey:
        Lazy-connected Valkey client shared by every tool.
    error_handler:
        Stateless error classification and formatting utility.
    """

    def __init__(self, config: Config):
        self.config = config
        self.valkey = ValkeyClient(config)
        self.error_handler = ErrorHandler()
        logger.debug("Toolkit initialised for %s", config.valkey_url)

    async def close(self) -> None:
        await self.valkey.close()
