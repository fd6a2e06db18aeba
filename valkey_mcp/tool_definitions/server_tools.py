"""
valkey_mcp/tool_definitions/server_tools.py
===========================================

Server-level tools: INFO, PING, CLIENT LIST, DBSIZE, SLOWLOG and CONFIG.

``server_info`` and ``server_ping`` take no input at all, so their schema is
``None`` (the MCP bridge advertises an empty object schema for them).

``server_ping`` never raises for an unreachable server: it reports
``alive: false`` with the failure message, because "is it up?" is the
question being asked.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List

from ..tools.error_handler import CommandError
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, param, require

logger = logging.getLogger(__name__)


# ── server_info ───────────────────────────────────────────────────────────────

@dataclass
class ServerInfoOutput:
    info: Dict[str, str]


class ServerInfoTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("server_info", "Get server information and statistics")
        self.client = client

    async def execute(self, raw_input=None) -> ServerInfoOutput:
        with self.command_context("failed to get server info"):
            info = await self.client.get_server_info()
        return ServerInfoOutput(info=info)


# ── server_ping ───────────────────────────────────────────────────────────────

@dataclass
class ServerPingOutput:
    alive: bool
    latency_ms: float
    message: str = ""


class ServerPingTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("server_ping", "Test connectivity to Valkey server and measure latency")
        self.client = client

    async def execute(self, raw_input=None) -> ServerPingOutput:
        started = time.perf_counter()
        try:
            await self.client.ping()
        except CommandError as exc:
            latency = (time.perf_counter() - started) * 1000
            logger.warning("Ping failed after %.1f ms: %s", latency, exc)
            return ServerPingOutput(alive=False, latency_ms=latency, message=str(exc))

        latency = (time.perf_counter() - started) * 1000
        return ServerPingOutput(alive=True, latency_ms=latency, message="Server is responding")


# ── client_list ───────────────────────────────────────────────────────────────

@dataclass
class ClientListInput:
    pass


@dataclass
class ClientListOutput:
    client_count: int
    clients: List[Dict[str, str]]
    raw_info: str


class ClientListTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("client_list", "List all client connections to the Valkey server", ClientListInput)
        self.client = client

    async def execute(self, raw_input=None) -> ClientListOutput:
        self.parse_input(raw_input)

        with self.command_context("failed to list clients"):
            clients, raw = await self.client.get_client_list()

        return ClientListOutput(client_count=len(clients), clients=clients, raw_info=raw)


# ── dbsize ────────────────────────────────────────────────────────────────────

@dataclass
class DBSizeInput:
    pass


@dataclass
class DBSizeOutput:
    size: int


class DBSizeTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("dbsize", "Get the number of keys in the current database", DBSizeInput)
        self.client = client

    async def execute(self, raw_input=None) -> DBSizeOutput:
        self.parse_input(raw_input)

        with self.command_context("failed to get database size"):
            size = await self.client.get_database_size()

        return DBSizeOutput(size=size)


# ── slowlog_get ───────────────────────────────────────────────────────────────

@dataclass
class SlowlogGetInput:
    count: int = param("description=Number of slowlog entries to retrieve (0 for all),minimum=0", default=0)


@dataclass
class SlowlogGetOutput:
    entries: List[Dict[str, Any]]
    count: int


class SlowlogGetTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("slowlog_get", "Get slow query log entries from Redis/Valkey server", SlowlogGetInput)
        self.client = client

    async def execute(self, raw_input=None) -> SlowlogGetOutput:
        params = self.parse_input(raw_input)

        with self.command_context("failed to get slowlog"):
            entries = await self.client.get_slowlog(max(params.count, 0))

        return SlowlogGetOutput(entries=entries, count=len(entries))


# ── config_get / config_set ───────────────────────────────────────────────────

@dataclass
class ConfigGetInput:
    parameter: str = param(
        "required,description=Configuration parameter name or glob pattern to retrieve",
        default="",
    )


@dataclass
class ConfigGetOutput:
    parameters: Dict[str, str]


class ConfigGetTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("config_get", "Get Redis/Valkey server configuration parameters", ConfigGetInput)
        self.client = client

    async def execute(self, raw_input=None) -> ConfigGetOutput:
        params = self.parse_input(raw_input)
        require(params.parameter, "parameter cannot be empty")

        with self.command_context(f"failed to get config {params.parameter!r}"):
            values = await self.client.config_get(params.parameter)

        return ConfigGetOutput(parameters=values)


@dataclass
class ConfigSetInput:
    parameter: str = param("required,description=Configuration parameter name", default="")
    value: str = param("required,description=Value to set for the parameter", default="")


@dataclass
class ConfigSetOutput:
    success: bool
    message: str


class ConfigSetTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("config_set", "Set Redis/Valkey server configuration parameters", ConfigSetInput)
        self.client = client

    async def execute(self, raw_input=None) -> ConfigSetOutput:
        params = self.parse_input(raw_input)
        require(params.parameter, "parameter cannot be empty")
        require(params.value, "value cannot be empty")

        with self.command_context(f"failed to set config {params.parameter!r}"):
            success = await self.client.config_set(params.parameter, params.value)

        message = "Configuration updated successfully" if success else "Configuration update failed"
        return ConfigSetOutput(success=success, message=message)


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        ServerInfoTool(client),
        ServerPingTool(client),
        ClientListTool(client),
        DBSizeTool(client),
        SlowlogGetTool(client),
        ConfigGetTool(client),
        ConfigSetTool(client),
    ):
        registry.must_register(tool)
