"""
valkey_mcp/tool_definitions/key_tools.py
========================================

Generic keyspace tools: discovery (SCAN / KEYS / TYPE / EXISTS), lifetime
(EXPIRE / PERSIST / TTL), renaming, deletion, introspection (MEMORY USAGE /
OBJECT) and DUMP / RESTORE.

Batch deletes
-------------
``delete_keys`` issues one ``DEL`` per key.  Each delete is independent: if
the third key fails, the first two stay deleted and the error reports the key
that failed.  Valkey offers no multi-key rollback on this path.

DUMP / RESTORE
--------------
The serialization format is always binary, so ``dump_key`` returns it as
base64 unconditionally (not through ``encode_value``), and ``restore_key``
expects the same base64 string back.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import List

from ..tools.error_handler import ToolValidationError
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, param, require, require_key, require_keys

DEFAULT_SCAN_PATTERN = "*"
DEFAULT_SCAN_COUNT = 100


@dataclass
class KeyInput:
    key: str = param("required,description=Key to check", default="")


# ── scan_keys / keys_by_pattern ───────────────────────────────────────────────

@dataclass
class ScanKeysInput:
    pattern: str = param("description=Glob pattern to filter keys (default: *)", default="")
    count: int = param("description=Approximate number of keys to return (default: 100),minimum=1", default=0)


@dataclass
class ScanKeysOutput:
    keys: List[str]
    count: int
    pattern: str


class ScanKeysTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "scan_keys",
            "Scan keys matching a pattern (non-blocking alternative to KEYS)",
            ScanKeysInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> ScanKeysOutput:
        params = self.parse_input(raw_input)
        pattern = params.pattern or DEFAULT_SCAN_PATTERN
        count = params.count if params.count > 0 else DEFAULT_SCAN_COUNT

        with self.command_context(f"failed to scan keys matching {pattern!r}"):
            keys = await self.client.scan_keys(pattern, count)

        return ScanKeysOutput(keys=keys, count=len(keys), pattern=pattern)


@dataclass
class KeysByPatternInput:
    pattern: str = param(
        "required,description=Key pattern to match (supports wildcards like * and ?)",
        default="",
    )


@dataclass
class KeysByPatternOutput:
    keys: List[str]
    count: int


class KeysByPatternTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("keys_by_pattern", "Get keys matching a pattern in Valkey", KeysByPatternInput)
        self.client = client

    async def execute(self, raw_input=None) -> KeysByPatternOutput:
        params = self.parse_input(raw_input)
        require(params.pattern, "pattern cannot be empty")

        with self.command_context(f"failed to get keys matching {params.pattern!r}"):
            keys = await self.client.keys_by_pattern(params.pattern)

        return KeysByPatternOutput(keys=keys, count=len(keys))


# ── get_key_type / get_key_ttl ────────────────────────────────────────────────

@dataclass
class GetKeyTypeOutput:
    key: str
    type: str
    exists: bool


class GetKeyTypeTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_key_type", "Get the data type of a key", KeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetKeyTypeOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to check key {params.key!r}"):
            key_type = await self.client.get_key_type(params.key)

        return GetKeyTypeOutput(key=params.key, type=key_type, exists=key_type != "none")


@dataclass
class GetKeyTTLOutput:
    key: str
    ttl_seconds: int
    has_expiry: bool
    exists: bool


class GetKeyTTLTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_key_ttl", "Get the time-to-live (TTL) of a key in seconds", KeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetKeyTTLOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get TTL for key {params.key!r}"):
            ttl = await self.client.get_ttl(params.key)

        # -2: missing key, -1: no expiry
        return GetKeyTTLOutput(key=params.key, ttl_seconds=ttl, has_expiry=ttl > 0, exists=ttl != -2)


# ── delete_keys / exists_key / touch_keys ─────────────────────────────────────

@dataclass
class DeleteKeysInput:
    keys: List[str] = param("required,minItems=1,description=Keys to delete", default_factory=list)


@dataclass
class DeleteKeysOutput:
    deleted_count: int
    keys: List[str]


class DeleteKeysTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("delete_keys", "Delete one or more keys from Valkey", DeleteKeysInput)
        self.client = client

    async def execute(self, raw_input=None) -> DeleteKeysOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)

        deleted = 0
        for key in params.keys:
            with self.command_context(f"failed to delete key {key!r}"):
                if await self.client.delete_key(key):
                    deleted += 1

        return DeleteKeysOutput(deleted_count=deleted, keys=params.keys)


@dataclass
class ExistsKeyInput:
    keys: List[str] = param(
        "required,minItems=1,description=Array of keys to check for existence",
        default_factory=list,
    )


@dataclass
class ExistsKeyOutput:
    count: int


class ExistsKeyTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("exists_key", "Check if a key exists in Valkey", ExistsKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> ExistsKeyOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)

        with self.command_context("failed to check keys"):
            found = await self.client.exists_keys(params.keys)

        return ExistsKeyOutput(count=sum(1 for exists in found.values() if exists))


@dataclass
class TouchKeysInput:
    keys: List[str] = param(
        "required,minItems=1,description=List of keys to update access time for",
        default_factory=list,
    )


@dataclass
class TouchKeysOutput:
    count: int
    keys: List[str]
    updated: int


class TouchKeysTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("touch_keys", "Update access time for multiple keys in Valkey", TouchKeysInput)
        self.client = client

    async def execute(self, raw_input=None) -> TouchKeysOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)

        with self.command_context("failed to touch keys"):
            updated = await self.client.touch_keys(params.keys)

        return TouchKeysOutput(count=len(params.keys), keys=params.keys, updated=updated)


# ── expire_key / persist_key ──────────────────────────────────────────────────

@dataclass
class ExpireKeyInput:
    key: str = param("required,description=Key to expire", default="")
    seconds: int = param("required,minimum=1,description=Seconds until expiration", default=0)


@dataclass
class ExpireKeyOutput:
    key: str
    seconds: int
    success: bool
    message: str = ""


class ExpireKeyTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("expire_key", "Set an expiration time (TTL) on a key", ExpireKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> ExpireKeyOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        if params.seconds <= 0:
            raise ToolValidationError("seconds must be positive")

        with self.command_context(f"failed to set expiration for key {params.key!r}"):
            success = await self.client.expire_key(params.key, params.seconds)

        message = "Expiration set successfully" if success else "Key does not exist"
        return ExpireKeyOutput(key=params.key, seconds=params.seconds, success=success, message=message)


@dataclass
class PersistKeyInput:
    key: str = param("required,description=Key to persist", default="")


@dataclass
class PersistKeyOutput:
    key: str
    success: bool
    message: str = ""


class PersistKeyTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "persist_key",
            "Remove the expiration timeout from a key (make it persistent)",
            PersistKeyInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> PersistKeyOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to persist key {params.key!r}"):
            success = await self.client.persist_key(params.key)

        message = "Key made persistent" if success else "Key does not exist or has no expiration"
        return PersistKeyOutput(key=params.key, success=success, message=message)


# ── rename_key ────────────────────────────────────────────────────────────────

@dataclass
class RenameKeyInput:
    key: str = param("required,description=Current key name", default="")
    new_key: str = param("required,description=New key name", default="")


@dataclass
class RenameKeyOutput:
    old_key: str
    new_key: str
    success: bool
    message: str = ""


class RenameKeyTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("rename_key", "Rename a key to a new name", RenameKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> RenameKeyOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.new_key, "new_key cannot be empty")
        if params.key == params.new_key:
            raise ToolValidationError("key and new_key must be different")

        with self.command_context(f"failed to rename key from {params.key!r} to {params.new_key!r}"):
            success = await self.client.rename_key(params.key, params.new_key)

        message = "Key renamed successfully" if success else "Key does not exist or rename failed"
        return RenameKeyOutput(old_key=params.key, new_key=params.new_key, success=success, message=message)


# ── memory_usage / object_encoding / object_idletime ──────────────────────────

@dataclass
class MemoryUsageInput:
    key: str = param("required,description=The key to get memory usage for", default="")


@dataclass
class MemoryUsageOutput:
    bytes: int
    key: str


class MemoryUsageTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("memory_usage", "Get memory usage of a key in bytes", MemoryUsageInput)
        self.client = client

    async def execute(self, raw_input=None) -> MemoryUsageOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get memory usage for key {params.key!r}"):
            usage = await self.client.memory_usage(params.key)

        return MemoryUsageOutput(bytes=usage, key=params.key)


@dataclass
class ObjectEncodingInput:
    key: str = param("required,description=The key to get encoding type for", default="")


@dataclass
class ObjectEncodingOutput:
    encoding: str
    key: str


class ObjectEncodingTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("object_encoding", "Get the encoding type of a key's value in Valkey", ObjectEncodingInput)
        self.client = client

    async def execute(self, raw_input=None) -> ObjectEncodingOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get object encoding for key {params.key!r}"):
            encoding = await self.client.object_encoding(params.key)

        return ObjectEncodingOutput(encoding=encoding, key=params.key)


@dataclass
class ObjectIdletimeInput:
    key: str = param("required,description=Key to check idle time for", default="")


@dataclass
class ObjectIdletimeOutput:
    idle_time: int


class ObjectIdletimeTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "object_idletime",
            "Get the idle time (time since last access) of a key in seconds",
            ObjectIdletimeInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> ObjectIdletimeOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get object idle time for key {params.key!r}"):
            idle = await self.client.object_idletime(params.key)

        return ObjectIdletimeOutput(idle_time=idle)


# ── dump_key / restore_key ────────────────────────────────────────────────────

@dataclass
class DumpKeyInput:
    key: str = param("required,description=Key to serialize", default="")


@dataclass
class DumpKeyOutput:
    serialized: str
    size: int


class DumpKeyTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("dump_key", "Serialize value of key (returns base64-encoded serialization)", DumpKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> DumpKeyOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to dump key {params.key!r}"):
            raw = await self.client.dump_key(params.key)

        raw = raw or b""
        return DumpKeyOutput(serialized=base64.b64encode(raw).decode("ascii"), size=len(raw))


@dataclass
class RestoreKeyInput:
    key: str = param("required,description=Key to restore to", default="")
    ttl: int = param("description=TTL in milliseconds (0 for no expiry),minimum=0", default=0)
    serialized_value: str = param(
        "description=Base64-encoded serialized value (alternative to serialized)",
        default="",
    )
    serialized: str = param(
        "description=Base64-encoded serialized value (alternative to serialized_value)",
        default="",
    )


@dataclass
class RestoreKeyOutput:
    success: bool
    message: str


class RestoreKeyTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "restore_key",
            "Restore serialized value to key (accepts base64-encoded serialization)",
            RestoreKeyInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> RestoreKeyOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        if params.ttl < 0:
            raise ToolValidationError("ttl cannot be negative")

        encoded = params.serialized or params.serialized_value
        require(encoded, "either 'serialized' or 'serialized_value' must be provided")
        try:
            payload = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ToolValidationError(f"failed to decode base64 serialized data: {exc}") from exc

        with self.command_context(f"failed to restore key {params.key!r}"):
            success = await self.client.restore_key(params.key, params.ttl, payload)

        message = "Key restored successfully" if success else "Key restoration completed with warnings"
        return RestoreKeyOutput(success=success, message=message)


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        ScanKeysTool(client),
        GetKeyTypeTool(client),
        GetKeyTTLTool(client),
        DeleteKeysTool(client),
        ExpireKeyTool(client),
        PersistKeyTool(client),
        RenameKeyTool(client),
        KeysByPatternTool(client),
        ExistsKeyTool(client),
        MemoryUsageTool(client),
        TouchKeysTool(client),
        ObjectEncodingTool(client),
        ObjectIdletimeTool(client),
        DumpKeyTool(client),
        RestoreKeyTool(client),
    ):
        registry.must_register(tool)
