"""
valkey_mcp/tool_definitions/stream_tools.py
===========================================

Tools for Valkey streams.  Entries are returned as flat dicts::

    {"_id": "1700000000000-0", "sensor": "t1", "payload": "<base64 if binary>"}

Stream IDs are always text; field values go through ``encode_value``.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from ..tools.encoding import encode_stream_entries
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, param, require, require_key

AUTO_ID = "*"


@dataclass
class XAddStreamInput:
    key: str = param("required,description=Stream key", default="")
    id: str = param("description=Stream entry ID (* for auto-generate, defaults to *)", default="")
    fields: Dict[str, str] = param("required,description=Field-value pairs", default_factory=dict)


@dataclass
class XAddStreamOutput:
    id: str


class XAddStreamTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("xadd_stream", "Add entry to stream with specified fields", XAddStreamInput)
        self.client = client

    async def execute(self, raw_input=None) -> XAddStreamOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.fields, "fields cannot be empty")

        with self.command_context(f"failed to add entry to stream {params.key!r}"):
            entry_id = await self.client.add_stream(params.key, params.id or AUTO_ID, params.fields)

        return XAddStreamOutput(id=entry_id)


@dataclass
class XRangeStreamInput:
    key: str = param("required,description=Stream key", default="")
    start: str = param("required,description=Start ID (- for first entry)", default="-")
    end: str = param("required,description=End ID (+ for last entry)", default="+")
    count: int = param("description=Maximum entries to return (0 for all),minimum=0", default=0)


@dataclass
class StreamEntriesOutput:
    entries: List[Dict[str, Any]]
    count: int


class XRangeStreamTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("xrange_stream", "Get stream entries in ID range", XRangeStreamInput)
        self.client = client

    async def execute(self, raw_input=None) -> StreamEntriesOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to read range from stream {params.key!r}"):
            entries = await self.client.get_stream_range(
                params.key, params.start or "-", params.end or "+", params.count
            )

        return StreamEntriesOutput(entries=encode_stream_entries(entries), count=len(entries))


@dataclass
class XLenStreamInput:
    key: str = param("required,description=Stream key", default="")


@dataclass
class XLenStreamOutput:
    count: int


class XLenStreamTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("xlen_stream", "Get number of entries in stream", XLenStreamInput)
        self.client = client

    async def execute(self, raw_input=None) -> XLenStreamOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get length of stream {params.key!r}"):
            length = await self.client.get_stream_length(params.key)

        return XLenStreamOutput(count=length)


@dataclass
class XReadStreamInput:
    key: str = param("required,description=Stream key", default="")
    id: str = param("required,description=Start ID ($ for new entries, 0 for first)", default="0")
    count: int = param("description=Maximum entries to return (0 for all),minimum=0", default=0)


class XReadStreamTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("xread_stream", "Read entries from stream starting at ID", XReadStreamInput)
        self.client = client

    async def execute(self, raw_input=None) -> StreamEntriesOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to read from stream {params.key!r}"):
            entries = await self.client.read_stream(params.key, params.id or "0", params.count)

        return StreamEntriesOutput(entries=encode_stream_entries(entries), count=len(entries))


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        XAddStreamTool(client),
        XRangeStreamTool(client),
        XLenStreamTool(client),
        XReadStreamTool(client),
    ):
        registry.must_register(tool)
