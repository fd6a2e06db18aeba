"""
valkey_mcp/tool_definitions/string_tools.py
===========================================

Tools for Valkey string values: GET / SET / MGET / INCRBY / DECRBY / APPEND /
STRLEN / GETRANGE.

Every tool follows the same shape:

1. ``parse_input`` the raw JSON into the ``Input`` dataclass,
2. check business rules (non-empty key, conflicting flags) **before** any
   command is sent,
3. call exactly one ``ValkeyClient`` method inside ``command_context`` so
   failures carry the operation and key,
4. pass byte results through ``encode_value`` and return the ``Output``
   dataclass.

Empty vs. missing
-----------------
``get_string`` on a missing key returns ``{"value": "", "exists": false}``;
on a key holding the empty string it returns ``{"value": "", "exists": true}``.
Only the ``exists`` flag tells them apart.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..tools.encoding import encode_map, encode_value
from ..tools.error_handler import ToolValidationError
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, default_count, param, require, require_key, require_keys


# ── get_string ────────────────────────────────────────────────────────────────

@dataclass
class GetStringInput:
    key: str = param("required,description=Key to retrieve", default="")


@dataclass
class GetStringOutput:
    key: str
    value: Any
    exists: bool


class GetStringTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_string", "Get a string value from Valkey by key", GetStringInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetStringOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get string for key {params.key!r}"):
            raw, exists = await self.client.get_string(params.key)

        return GetStringOutput(key=params.key, value=encode_value(raw), exists=exists)


# ── set_string ────────────────────────────────────────────────────────────────

@dataclass
class SetStringInput:
    key: str = param("required,description=Key to set", default="")
    value: str = param("required,description=Value to store", default="")
    ttl_seconds: Optional[int] = param("description=Optional TTL in seconds,minimum=1", default=None)
    nx: bool = param("description=Only set if key does not exist", default=False)
    xx: bool = param("description=Only set if key exists", default=False)


@dataclass
class SetStringOutput:
    success: bool
    key: str
    message: str = ""


class SetStringTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "set_string",
            "Set a string value in Valkey with optional TTL and conditional flags (NX/XX)",
            SetStringInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> SetStringOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.value, "value cannot be empty")
        if params.nx and params.xx:
            raise ToolValidationError("cannot use both nx and xx flags")
        if params.ttl_seconds is not None and params.ttl_seconds < 0:
            raise ToolValidationError("ttl_seconds cannot be negative")

        with self.command_context(f"failed to set string for key {params.key!r}"):
            success = await self.client.set_string(
                params.key, params.value, params.ttl_seconds, params.nx, params.xx
            )

        if success:
            message = "Value set successfully"
        elif params.nx:
            message = "Key already exists (NX condition not met)"
        elif params.xx:
            message = "Key does not exist (XX condition not met)"
        else:
            message = "Value was not set"
        return SetStringOutput(success=success, key=params.key, message=message)


# ── mget_strings ──────────────────────────────────────────────────────────────

@dataclass
class MGetStringsInput:
    keys: List[str] = param("required,minItems=1,description=Keys to retrieve", default_factory=list)


@dataclass
class MGetStringsOutput:
    values: Dict[str, Any]
    count: int


class MGetStringsTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("mget_strings", "Get multiple string values from Valkey by keys", MGetStringsInput)
        self.client = client

    async def execute(self, raw_input=None) -> MGetStringsOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)

        with self.command_context("failed to get strings"):
            raw = await self.client.get_strings(params.keys)

        values = encode_map(raw)
        return MGetStringsOutput(values=values, count=len(values))


# ── incr_string / decr_string ─────────────────────────────────────────────────

@dataclass
class IncrStringInput:
    key: str = param("required,description=Key storing a numeric string", default="")
    amount: int = param("description=Amount to increment (default: 1)", default=0)


@dataclass
class DecrStringInput:
    key: str = param("required,description=Key storing a numeric string", default="")
    amount: int = param("description=Amount to decrement (default: 1)", default=0)


@dataclass
class CounterOutput:
    key: str
    value: int
    message: str = ""


class IncrStringTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("incr_string", "Increment a numeric string value", IncrStringInput)
        self.client = client

    async def execute(self, raw_input=None) -> CounterOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        amount = default_count(params.amount)

        with self.command_context(f"failed to increment key {params.key!r}"):
            value = await self.client.increment_number(params.key, amount)

        return CounterOutput(key=params.key, value=value, message=f"Incremented by {amount}")


class DecrStringTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("decr_string", "Decrement a numeric string value", DecrStringInput)
        self.client = client

    async def execute(self, raw_input=None) -> CounterOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        amount = default_count(params.amount)

        with self.command_context(f"failed to decrement key {params.key!r}"):
            value = await self.client.decrement_number(params.key, amount)

        return CounterOutput(key=params.key, value=value, message=f"Decremented by {amount}")


# ── append_string ─────────────────────────────────────────────────────────────

@dataclass
class AppendStringInput:
    key: str = param("required,description=Key to append to", default="")
    value: str = param("required,description=Value to append", default="")


@dataclass
class AppendStringOutput:
    key: str
    new_length: int
    appended_value: str


class AppendStringTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("append_string", "Append a value to a string", AppendStringInput)
        self.client = client

    async def execute(self, raw_input=None) -> AppendStringOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.value, "value cannot be empty")

        with self.command_context(f"failed to append to key {params.key!r}"):
            length = await self.client.append_string(params.key, params.value)

        return AppendStringOutput(key=params.key, new_length=length, appended_value=params.value)


# ── string_length ─────────────────────────────────────────────────────────────

@dataclass
class StringLengthInput:
    key: str = param("required,description=String key", default="")


@dataclass
class StringLengthOutput:
    key: str
    length: int
    exists: bool


class StringLengthTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("string_length", "Get the length of a string value", StringLengthInput)
        self.client = client

    async def execute(self, raw_input=None) -> StringLengthOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get length of key {params.key!r}"):
            length = await self.client.string_length(params.key)

        return StringLengthOutput(key=params.key, length=length, exists=length > 0)


# ── get_string_range ──────────────────────────────────────────────────────────

@dataclass
class GetStringRangeInput:
    key: str = param("required,description=String key", default="")
    start: int = param("required,description=Start offset (negative counts from the end)", default=0)
    end: int = param("required,description=End offset, inclusive (negative counts from the end)", default=0)


@dataclass
class GetStringRangeOutput:
    key: str
    value: Any


class GetStringRangeTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "get_string_range",
            "Get a substring of a string by start and end index",
            GetStringRangeInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> GetStringRangeOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get range of key {params.key!r}"):
            raw = await self.client.get_range(params.key, params.start, params.end)

        return GetStringRangeOutput(key=params.key, value=encode_value(raw))


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        GetStringTool(client),
        SetStringTool(client),
        MGetStringsTool(client),
        IncrStringTool(client),
        DecrStringTool(client),
        AppendStringTool(client),
        StringLengthTool(client),
        GetStringRangeTool(client),
    ):
        registry.must_register(tool)
