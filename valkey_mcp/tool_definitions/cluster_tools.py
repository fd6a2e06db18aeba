"""
valkey_mcp/tool_definitions/cluster_tools.py
============================================

Cluster introspection tools.  Against a standalone server the ``CLUSTER``
commands fail with "cluster support disabled"; that surfaces as a
``CommandError`` which the error handler turns into a ``ClusterDisabled``
explanation.
"""

from dataclasses import dataclass
from typing import Dict

from ..tools.error_handler import ToolValidationError
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, param, require_key

MAX_SLOT = 16383


@dataclass
class ClusterInfoInput:
    pass


@dataclass
class ClusterInfoOutput:
    info: Dict[str, str]


class ClusterInfoTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("cluster_info", "Get Redis/Valkey cluster information and state", ClusterInfoInput)
        self.client = client

    async def execute(self, raw_input=None) -> ClusterInfoOutput:
        self.parse_input(raw_input)
        with self.command_context("failed to get cluster info"):
            info = await self.client.get_cluster_info()
        return ClusterInfoOutput(info=info)


@dataclass
class ClusterNodesInput:
    pass


@dataclass
class ClusterNodesOutput:
    nodes: str


class ClusterNodesTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "cluster_nodes",
            "Get information about all nodes in the Redis/Valkey cluster",
            ClusterNodesInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> ClusterNodesOutput:
        self.parse_input(raw_input)
        with self.command_context("failed to get cluster nodes"):
            nodes = await self.client.get_cluster_nodes()
        return ClusterNodesOutput(nodes=nodes)


@dataclass
class ClusterKeyslotInput:
    key: str = param("required,description=Key to get the hash slot for", default="")


@dataclass
class ClusterKeyslotOutput:
    slot: int


class ClusterKeyslotTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "cluster_keyslot",
            "Get the hash slot for a key in a Redis/Valkey cluster",
            ClusterKeyslotInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> ClusterKeyslotOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        with self.command_context(f"failed to get key slot for key {params.key!r}"):
            slot = await self.client.get_key_slot(params.key)
        return ClusterKeyslotOutput(slot=slot)


@dataclass
class ClusterCountKeysInSlotInput:
    slot: int = param("required,description=Hash slot number (0-16383),minimum=0,maximum=16383", default=0)


@dataclass
class ClusterCountKeysInSlotOutput:
    count: int


class ClusterCountKeysInSlotTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "cluster_count_keysinslot",
            "Count the number of keys in a specific hash slot",
            ClusterCountKeysInSlotInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> ClusterCountKeysInSlotOutput:
        params = self.parse_input(raw_input)
        if params.slot < 0 or params.slot > MAX_SLOT:
            raise ToolValidationError(f"slot must be between 0 and {MAX_SLOT}")
        with self.command_context(f"failed to count keys in slot {params.slot}"):
            count = await self.client.count_keys_in_slot(params.slot)
        return ClusterCountKeysInSlotOutput(count=count)


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        ClusterInfoTool(client),
        ClusterNodesTool(client),
        ClusterKeyslotTool(client),
        ClusterCountKeysInSlotTool(client),
    ):
        registry.must_register(tool)
