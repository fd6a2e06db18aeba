"""
valkey_mcp/tool_definitions/hash_tools.py
=========================================

Tools for Valkey hashes.

Field names are always returned as text; field values go through
``encode_map`` / ``encode_value`` so a hash that mixes UTF-8 strings and
binary payloads (e.g. Java-serialized objects) keeps both intact.
"""

from dataclasses import dataclass
from typing import Any, Dict, List

from ..tools.encoding import encode_map, encode_slice, encode_value
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, default_count, param, require, require_key


@dataclass
class HashKeyInput:
    key: str = param("required,description=Hash key", default="")


@dataclass
class HashFieldInput:
    key: str = param("required,description=Hash key", default="")
    field: str = param("required,description=Field name", default="")


@dataclass
class HashFieldsInput:
    key: str = param("required,description=Hash key", default="")
    fields: List[str] = param("required,minItems=1,description=Field names", default_factory=list)


def _require_fields(fields: List[str]) -> None:
    require(fields, "at least one field must be provided")


# ── get_hash ──────────────────────────────────────────────────────────────────

@dataclass
class GetHashOutput:
    key: str
    fields: Dict[str, Any]
    field_count: int
    exists: bool


class GetHashTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_hash", "Get all fields and values of a hash", HashKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetHashOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get hash for key {params.key!r}"):
            raw = await self.client.get_map(params.key)

        return GetHashOutput(
            key=params.key,
            fields=encode_map(raw),
            field_count=len(raw),
            exists=len(raw) > 0,
        )


# ── set_hash ──────────────────────────────────────────────────────────────────

@dataclass
class SetHashInput:
    key: str = param("required,description=Hash key", default="")
    fields: Dict[str, str] = param("required,description=Fields to set", default_factory=dict)


@dataclass
class SetHashOutput:
    key: str
    fields_added: int
    fields_updated: int = 0
    message: str = ""


class SetHashTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("set_hash", "Set multiple fields in a hash", SetHashInput)
        self.client = client

    async def execute(self, raw_input=None) -> SetHashOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        _require_fields(params.fields)

        with self.command_context(f"failed to set hash fields for key {params.key!r}"):
            added = await self.client.set_map(params.key, params.fields)

        return SetHashOutput(
            key=params.key,
            fields_added=added,
            fields_updated=len(params.fields) - added,
            message=f"Set {len(params.fields)} field(s)",
        )


# ── get_hash_field ────────────────────────────────────────────────────────────

@dataclass
class GetHashFieldOutput:
    key: str
    field: str
    value: Any
    exists: bool


class GetHashFieldTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_hash_field", "Get the value of a specific field in a hash", HashFieldInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetHashFieldOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.field, "field cannot be empty")

        with self.command_context(f"failed to get field {params.field!r} from hash {params.key!r}"):
            raw, exists = await self.client.get_map_field(params.key, params.field)

        return GetHashFieldOutput(key=params.key, field=params.field, value=encode_value(raw), exists=exists)


# ── get_hash_fields / hmget_hash ──────────────────────────────────────────────

@dataclass
class GetHashFieldsOutput:
    key: str
    fields: Dict[str, Any]
    count: int


class GetHashFieldsTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_hash_fields", "Get values for specific fields in a hash", HashFieldsInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetHashFieldsOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        _require_fields(params.fields)

        with self.command_context(f"failed to get fields from hash {params.key!r}"):
            raw = await self.client.get_map_fields(params.key, params.fields)

        return GetHashFieldsOutput(key=params.key, fields=encode_map(raw), count=len(raw))


@dataclass
class HMGetHashOutput:
    key: str
    result: Dict[str, Any]


class HMGetHashTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("hmget_hash", "Get multiple hash fields at once", HashFieldsInput)
        self.client = client

    async def execute(self, raw_input=None) -> HMGetHashOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        _require_fields(params.fields)

        with self.command_context(f"failed to get fields from hash {params.key!r}"):
            raw = await self.client.get_map_fields(params.key, params.fields)

        return HMGetHashOutput(key=params.key, result=encode_map(raw))


# ── delete_hash_field ─────────────────────────────────────────────────────────

@dataclass
class DeleteHashFieldOutput:
    key: str
    fields_deleted: int
    fields: List[str]


class DeleteHashFieldTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("delete_hash_field", "Delete one or more fields from a hash", HashFieldsInput)
        self.client = client

    async def execute(self, raw_input=None) -> DeleteHashFieldOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        _require_fields(params.fields)

        with self.command_context(f"failed to delete fields from hash {params.key!r}"):
            deleted = await self.client.delete_map_fields(params.key, params.fields)

        return DeleteHashFieldOutput(key=params.key, fields_deleted=deleted, fields=params.fields)


# ── hash_field_exists ─────────────────────────────────────────────────────────

@dataclass
class HashFieldExistsOutput:
    key: str
    field: str
    exists: bool


class HashFieldExistsTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("hash_field_exists", "Check if a field exists in a hash", HashFieldInput)
        self.client = client

    async def execute(self, raw_input=None) -> HashFieldExistsOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.field, "field cannot be empty")

        with self.command_context(f"failed to check field {params.field!r} in hash {params.key!r}"):
            exists = await self.client.map_field_exists(params.key, params.field)

        return HashFieldExistsOutput(key=params.key, field=params.field, exists=exists)


# ── incr_hash_field ───────────────────────────────────────────────────────────

@dataclass
class IncrHashFieldInput:
    key: str = param("required,description=Hash key", default="")
    field: str = param("required,description=Field name", default="")
    amount: int = param("description=Amount to increment (default: 1)", default=0)


@dataclass
class IncrHashFieldOutput:
    key: str
    field: str
    new_value: int


class IncrHashFieldTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("incr_hash_field", "Increment a numeric field in a hash", IncrHashFieldInput)
        self.client = client

    async def execute(self, raw_input=None) -> IncrHashFieldOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.field, "field cannot be empty")

        with self.command_context(f"failed to increment field {params.field!r} in hash {params.key!r}"):
            value = await self.client.increment_map_field(params.key, params.field, default_count(params.amount))

        return IncrHashFieldOutput(key=params.key, field=params.field, new_value=value)


# ── hlen_hash / hkeys_hash / hvals_hash ───────────────────────────────────────

@dataclass
class HLenHashOutput:
    key: str
    result: int


class HLenHashTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("hlen_hash", "Get the number of fields in a hash", HashKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> HLenHashOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get length of hash {params.key!r}"):
            length = await self.client.get_map_length(params.key)

        return HLenHashOutput(key=params.key, result=length)


@dataclass
class HKeysHashOutput:
    key: str
    result: List[str]


class HKeysHashTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("hkeys_hash", "Get all field names in a hash", HashKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> HKeysHashOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get field names of hash {params.key!r}"):
            names = await self.client.list_map_field_names(params.key)

        return HKeysHashOutput(key=params.key, result=names)


@dataclass
class HValsHashOutput:
    key: str
    result: List[Any]


class HValsHashTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("hvals_hash", "Get all values in a hash", HashKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> HValsHashOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get values of hash {params.key!r}"):
            values = await self.client.list_map_field_values(params.key)

        return HValsHashOutput(key=params.key, result=encode_slice(values))


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        GetHashTool(client),
        SetHashTool(client),
        GetHashFieldTool(client),
        GetHashFieldsTool(client),
        HMGetHashTool(client),
        DeleteHashFieldTool(client),
        HashFieldExistsTool(client),
        IncrHashFieldTool(client),
        HLenHashTool(client),
        HKeysHashTool(client),
        HValsHashTool(client),
    ):
        registry.must_register(tool)
