"""
valkey_mcp/tool_definitions/list_tools.py
=========================================

Tools for Valkey lists: push, pop, range reads, index access and trimming.
Indexes are 0-based; negative indexes count from the tail.
"""

from dataclasses import dataclass
from typing import Any, List

from ..tools.encoding import encode_slice, encode_value
from ..tools.error_handler import ToolValidationError
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, default_count, param, require, require_key


# ── lpush_list / rpush_list ───────────────────────────────────────────────────

@dataclass
class LPushListInput:
    key: str = param("required,description=List key", default="")
    values: List[str] = param("required,minItems=1,description=Values to push to the left", default_factory=list)


@dataclass
class RPushListInput:
    key: str = param("required,description=List key", default="")
    values: List[str] = param("required,minItems=1,description=Values to push to the right", default_factory=list)


@dataclass
class PushListOutput:
    key: str
    list_length: int
    values: List[str]


class _PushListTool(BaseTool):
    tail = False

    def __init__(self, name: str, description: str, input_type, client: ValkeyClient):
        super().__init__(name, description, input_type)
        self.client = client

    async def execute(self, raw_input=None) -> PushListOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.values, "at least one value must be provided")

        with self.command_context(f"failed to push to list {params.key!r}"):
            length = await self.client.push_list(params.key, params.values, tail=self.tail)

        return PushListOutput(key=params.key, list_length=length, values=params.values)


class LPushListTool(_PushListTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("lpush_list", "Push values to the left (head) of a list", LPushListInput, client)


class RPushListTool(_PushListTool):
    tail = True

    def __init__(self, client: ValkeyClient):
        super().__init__("rpush_list", "Push values to the right (tail) of a list", RPushListInput, client)


# ── lpop_list / rpop_list ─────────────────────────────────────────────────────

@dataclass
class PopListInput:
    key: str = param("required,description=List key", default="")
    count: int = param("description=Number of elements to pop (default: 1),minimum=1", default=0)


@dataclass
class PopListOutput:
    key: str
    elements: List[Any]
    count: int


class _PopListTool(BaseTool):
    tail = False

    def __init__(self, name: str, description: str, client: ValkeyClient):
        super().__init__(name, description, PopListInput)
        self.client = client

    async def execute(self, raw_input=None) -> PopListOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        count = default_count(params.count)
        if count < 0:
            raise ToolValidationError("count must be positive")

        with self.command_context(f"failed to pop from list {params.key!r}"):
            raw = await self.client.pop_list(params.key, count, tail=self.tail)

        return PopListOutput(key=params.key, elements=encode_slice(raw), count=len(raw))


class LPopListTool(_PopListTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("lpop_list", "Remove and return elements from the left (head) of a list", client)


class RPopListTool(_PopListTool):
    tail = True

    def __init__(self, client: ValkeyClient):
        super().__init__("rpop_list", "Remove and return elements from the right (tail) of a list", client)


# ── lrange_list / ltrim_list ──────────────────────────────────────────────────

@dataclass
class ListRangeInput:
    key: str = param("required,description=List key", default="")
    start: int = param("required,description=Start index (0-based, negative for from-end)", default=0)
    stop: int = param("required,description=Stop index (inclusive, negative for from-end)", default=-1)


@dataclass
class LRangeListOutput:
    key: str
    values: List[Any]
    count: int


class LRangeListTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("lrange_list", "Get a range of elements from a list", ListRangeInput)
        self.client = client

    async def execute(self, raw_input=None) -> LRangeListOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get range from list {params.key!r}"):
            raw = await self.client.get_list_range(params.key, params.start, params.stop)

        return LRangeListOutput(key=params.key, values=encode_slice(raw), count=len(raw))


@dataclass
class LTrimListOutput:
    key: str
    start: int
    stop: int
    success: bool


class LTrimListTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("ltrim_list", "Trim a list to keep only elements within a range", ListRangeInput)
        self.client = client

    async def execute(self, raw_input=None) -> LTrimListOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to trim list {params.key!r}"):
            success = await self.client.trim_list(params.key, params.start, params.stop)

        return LTrimListOutput(key=params.key, start=params.start, stop=params.stop, success=success)


# ── get_list_length ───────────────────────────────────────────────────────────

@dataclass
class GetListLengthInput:
    key: str = param("required,description=List key", default="")


@dataclass
class GetListLengthOutput:
    key: str
    length: int
    exists: bool


class GetListLengthTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_list_length", "Get the number of elements in a list", GetListLengthInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetListLengthOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get length of list {params.key!r}"):
            length = await self.client.get_list_length(params.key)

        return GetListLengthOutput(key=params.key, length=length, exists=length > 0)


# ── get_list_index / lset_list ────────────────────────────────────────────────

@dataclass
class GetListIndexInput:
    key: str = param("required,description=List key", default="")
    index: int = param("required,description=Index (0-based, negative for from-end)", default=0)


@dataclass
class GetListIndexOutput:
    key: str
    index: int
    value: Any
    exists: bool


class GetListIndexTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_list_index", "Get an element from a list by index", GetListIndexInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetListIndexOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get index {params.index} of list {params.key!r}"):
            raw, exists = await self.client.get_list_index(params.key, params.index)

        return GetListIndexOutput(key=params.key, index=params.index, value=encode_value(raw), exists=exists)


@dataclass
class LSetListInput:
    key: str = param("required,description=List key", default="")
    index: int = param("required,description=Index (0-based, negative for from-end)", default=0)
    value: str = param("required,description=Value to set", default="")


@dataclass
class LSetListOutput:
    key: str
    index: int
    value: str
    success: bool


class LSetListTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("lset_list", "Set the value of an element in a list by index", LSetListInput)
        self.client = client

    async def execute(self, raw_input=None) -> LSetListOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to set index {params.index} of list {params.key!r}"):
            success = await self.client.set_list_index(params.key, params.index, params.value)

        return LSetListOutput(key=params.key, index=params.index, value=params.value, success=success)


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        LRangeListTool(client),
        LPushListTool(client),
        RPushListTool(client),
        LPopListTool(client),
        RPopListTool(client),
        GetListLengthTool(client),
        GetListIndexTool(client),
        LSetListTool(client),
        LTrimListTool(client),
    ):
        registry.must_register(tool)
