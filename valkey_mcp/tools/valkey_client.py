"""
valkey_mcp/tools/valkey_client.py
=================================

Valkey connectivity and command execution.

Connection Strategy
-------------------
The client uses a **lazy connection** pattern: the connection pool is not
created until the first command is sent.  Importing the package or building
the tool registry never touches the network, so ``python server.py tools``
works without a running server.

Valkey is wire-compatible with Redis, so commands go through
``redis.asyncio``.  ``decode_responses`` stays off: values come back as raw
``bytes`` and are handed to the tools untouched, which is what makes the
binary-safe encoding in ``encoding.py`` possible.  Identifiers that are
always text (keys, hash field names, stream IDs, status strings) are decoded
here.

Error Strategy
--------------
Every ``redis.exceptions.RedisError`` is re-raised as ``CommandError`` with
the command name in front, e.g. ``GET failed: WRONGTYPE ...``.  Nothing is
retried; retry and reconnect policy belongs to the connection pool.
"""

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

import redis.asyncio as redis
from redis.exceptions import RedisError

from ..config import Config
from .error_handler import CommandError
from .formatters import (
    decode_string_map,
    flatten_info,
    normalize_slowlog,
    parse_client_list,
    parse_cluster_info,
    to_text,
)

logger = logging.getLogger(__name__)


@dataclass
class StreamEntry:
    """One stream entry.  ``id`` is always text; field values stay raw bytes."""
    id: str
    field_values: Dict[str, bytes] = field(default_factory=dict)


@contextmanager
def _command(name: str) -> Iterator[None]:
    try:
        yield
    except RedisError as exc:
        raise CommandError(f"{name} failed: {exc}") from exc


def _text_list(values) -> List[str]:
    return [to_text(v) for v in values or []]


def _byte_list(values) -> List[bytes]:
    return list(values or [])


class ValkeyClient:
    """Owns the connection pool and exposes one coroutine per Valkey command.

    Parameters
    ----------
    config:
        Populated ``Config`` instance.

    Notes
    -----
    A single instance is shared by every tool.  ``redis.asyncio`` pools
    connections internally, so concurrent tool calls are safe.
    """

    def __init__(self, config: Config):
        self.config = config
        self._redis: Optional[redis.Redis] = None

    def connect(self) -> redis.Redis:
        """Create (or return the existing) client.  No I/O happens here."""
        if self._redis is None:
            logger.info("Opening Valkey connection pool for %s (db %d)", self.config.valkey_url, self.config.valkey_db)
            options: Dict[str, Any] = {"db": self.config.valkey_db, "decode_responses": False}
            if self.config.valkey_password:
                options["password"] = self.config.valkey_password
            self._redis = redis.Redis.from_url(self.config.client_url, **options)
        return self._redis

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Valkey connection pool closed")

    # ── Server ────────────────────────────────────────────────────────────────

    async def ping(self) -> None:
        """Send ``PING``, bounded by ``config.ping_timeout`` seconds.

        Raises
        ------
        CommandError
            If the server does not answer in time or the command fails.
        """
        try:
            with _command("PING"):
                await asyncio.wait_for(self.connect().ping(), timeout=self.config.ping_timeout)
        except asyncio.TimeoutError as exc:
            raise CommandError(f"PING failed: timed out after {self.config.ping_timeout}s") from exc

    async def get_server_info(self) -> Dict[str, str]:
        with _command("INFO"):
            info = await self.connect().info()
        return flatten_info(info)

    async def get_database_size(self) -> int:
        with _command("DBSIZE"):
            return int(await self.connect().dbsize())

    async def get_slowlog(self, count: int) -> List[Dict[str, Any]]:
        """Return up to ``count`` slowlog entries; ``0`` uses the server default."""
        with _command("SLOWLOG GET"):
            entries = await self.connect().slowlog_get(count if count > 0 else None)
        return normalize_slowlog(entries)

    async def get_client_list(self) -> Tuple[List[Dict[str, str]], str]:
        """Return ``(clients, raw_text)`` for ``CLIENT LIST``."""
        with _command("CLIENT LIST"):
            raw = await self.connect().execute_command("CLIENT", "LIST")
        text = to_text(raw)
        return parse_client_list(text), text

    async def config_get(self, parameter: str) -> Dict[str, str]:
        with _command("CONFIG GET"):
            reply = await self.connect().config_get(parameter)
        return decode_string_map(reply)

    async def config_set(self, parameter: str, value: str) -> bool:
        with _command("CONFIG SET"):
            return bool(await self.connect().config_set(parameter, value))

    # ── Strings ───────────────────────────────────────────────────────────────

    async def get_string(self, key: str) -> Tuple[Optional[bytes], bool]:
        """Return ``(value, exists)``.  An empty string value still exists."""
        with _command("GET"):
            raw = await self.connect().get(key)
        return raw, raw is not None

    async def set_string(
        self,
        key: str,
        value: str,
        ttl_seconds: Optional[int] = None,
        nx: bool = False,
        xx: bool = False,
    ) -> bool:
        """``SET`` with optional ``EX``/``NX``/``XX``.  False when a condition blocked the write."""
        with _command("SET"):
            result = await self.connect().set(
                key,
                value,
                ex=ttl_seconds if ttl_seconds else None,
                nx=nx,
                xx=xx,
            )
        return bool(result)

    async def increment_number(self, key: str, amount: int) -> int:
        with _command("INCRBY"):
            return int(await self.connect().incrby(key, amount))

    async def decrement_number(self, key: str, amount: int) -> int:
        with _command("DECRBY"):
            return int(await self.connect().decrby(key, amount))

    async def append_string(self, key: str, value: str) -> int:
        with _command("APPEND"):
            return int(await self.connect().append(key, value))

    async def get_range(self, key: str, start: int, end: int) -> bytes:
        with _command("GETRANGE"):
            return await self.connect().getrange(key, start, end) or b""

    async def string_length(self, key: str) -> int:
        with _command("STRLEN"):
            return int(await self.connect().strlen(key))

    async def get_strings(self, keys: List[str]) -> Dict[str, bytes]:
        """``MGET``; keys that do not exist are left out of the result."""
        with _command("MGET"):
            values = await self.connect().mget(keys)
        return {k: v for k, v in zip(keys, values) if v is not None}

    # ── Keys ──────────────────────────────────────────────────────────────────

    async def delete_key(self, key: str) -> bool:
        with _command("DEL"):
            return await self.connect().delete(key) > 0

    async def exists_key(self, key: str) -> bool:
        with _command("EXISTS"):
            return await self.connect().exists(key) > 0

    async def exists_keys(self, keys: List[str]) -> Dict[str, bool]:
        result = {}
        for key in keys:
            result[key] = await self.exists_key(key)
        return result

    async def expire_key(self, key: str, seconds: int) -> bool:
        with _command("EXPIRE"):
            return bool(await self.connect().expire(key, seconds))

    async def persist_key(self, key: str) -> bool:
        with _command("PERSIST"):
            return bool(await self.connect().persist(key))

    async def rename_key(self, old_key: str, new_key: str) -> bool:
        with _command("RENAME"):
            return bool(await self.connect().rename(old_key, new_key))

    async def get_ttl(self, key: str) -> int:
        """TTL in seconds; ``-1`` means no expiry and ``-2`` means missing key."""
        with _command("TTL"):
            return int(await self.connect().ttl(key))

    async def get_key_type(self, key: str) -> str:
        with _command("TYPE"):
            return to_text(await self.connect().type(key))

    async def keys_by_pattern(self, pattern: str) -> List[str]:
        with _command("KEYS"):
            return _text_list(await self.connect().keys(pattern))

    async def scan_keys(self, pattern: str, count: int) -> List[str]:
        """Iterate ``SCAN`` until ``count`` keys are collected or the cursor wraps."""
        keys: List[str] = []
        with _command("SCAN"):
            async for key in self.connect().scan_iter(match=pattern, count=count):
                keys.append(to_text(key))
                if len(keys) >= count:
                    break
        return keys

    async def memory_usage(self, key: str) -> int:
        with _command("MEMORY USAGE"):
            return int(await self.connect().memory_usage(key) or 0)

    async def touch_keys(self, keys: List[str]) -> int:
        with _command("TOUCH"):
            return int(await self.connect().touch(*keys))

    async def object_encoding(self, key: str) -> str:
        with _command("OBJECT ENCODING"):
            return to_text(await self.connect().execute_command("OBJECT", "ENCODING", key))

    async def object_idletime(self, key: str) -> int:
        with _command("OBJECT IDLETIME"):
            return int(await self.connect().execute_command("OBJECT", "IDLETIME", key) or 0)

    async def dump_key(self, key: str) -> Optional[bytes]:
        with _command("DUMP"):
            return await self.connect().dump(key)

    async def restore_key(self, key: str, ttl_ms: int, serialized: bytes) -> bool:
        with _command("RESTORE"):
            return bool(await self.connect().restore(key, ttl_ms, serialized))

    # ── Hashes ────────────────────────────────────────────────────────────────

    async def get_map(self, key: str) -> Dict[str, bytes]:
        with _command("HGETALL"):
            reply = await self.connect().hgetall(key)
        return {to_text(k): v for k, v in (reply or {}).items()}

    async def set_map(self, key: str, fields: Mapping[str, str]) -> int:
        with _command("HSET"):
            return int(await self.connect().hset(key, mapping=dict(fields)))

    async def get_map_field(self, key: str, field_name: str) -> Tuple[Optional[bytes], bool]:
        with _command("HGET"):
            raw = await self.connect().hget(key, field_name)
        return raw, raw is not None

    async def get_map_fields(self, key: str, fields: List[str]) -> Dict[str, bytes]:
        """``HMGET``; fields that do not exist are left out of the result."""
        with _command("HMGET"):
            values = await self.connect().hmget(key, fields)
        return {f: v for f, v in zip(fields, values) if v is not None}

    async def delete_map_fields(self, key: str, fields: List[str]) -> int:
        with _command("HDEL"):
            return int(await self.connect().hdel(key, *fields))

    async def map_field_exists(self, key: str, field_name: str) -> bool:
        with _command("HEXISTS"):
            return bool(await self.connect().hexists(key, field_name))

    async def increment_map_field(self, key: str, field_name: str, amount: int) -> int:
        with _command("HINCRBY"):
            return int(await self.connect().hincrby(key, field_name, amount))

    async def get_map_length(self, key: str) -> int:
        with _command("HLEN"):
            return int(await self.connect().hlen(key))

    async def list_map_field_names(self, key: str) -> List[str]:
        with _command("HKEYS"):
            return _text_list(await self.connect().hkeys(key))

    async def list_map_field_values(self, key: str) -> List[bytes]:
        with _command("HVALS"):
            return _byte_list(await self.connect().hvals(key))

    # ── Lists ─────────────────────────────────────────────────────────────────

    async def push_list(self, key: str, values: List[str], tail: bool = False) -> int:
        name = "RPUSH" if tail else "LPUSH"
        with _command(name):
            push = self.connect().rpush if tail else self.connect().lpush
            return int(await push(key, *values))

    async def pop_list(self, key: str, count: int, tail: bool = False) -> List[bytes]:
        name = "RPOP" if tail else "LPOP"
        with _command(name):
            pop = self.connect().rpop if tail else self.connect().lpop
            reply = await pop(key, count)
        if reply is None:
            return []
        if isinstance(reply, bytes):
            return [reply]
        return list(reply)

    async def get_list_range(self, key: str, start: int, stop: int) -> List[bytes]:
        with _command("LRANGE"):
            return _byte_list(await self.connect().lrange(key, start, stop))

    async def get_list_length(self, key: str) -> int:
        with _command("LLEN"):
            return int(await self.connect().llen(key))

    async def get_list_index(self, key: str, index: int) -> Tuple[Optional[bytes], bool]:
        with _command("LINDEX"):
            raw = await self.connect().lindex(key, index)
        return raw, raw is not None

    async def set_list_index(self, key: str, index: int, value: str) -> bool:
        with _command("LSET"):
            return bool(await self.connect().lset(key, index, value))

    async def trim_list(self, key: str, start: int, stop: int) -> bool:
        with _command("LTRIM"):
            return bool(await self.connect().ltrim(key, start, stop))

    # ── Sets ──────────────────────────────────────────────────────────────────

    async def add_set(self, key: str, members: List[str]) -> int:
        with _command("SADD"):
            return int(await self.connect().sadd(key, *members))

    async def remove_set(self, key: str, members: List[str]) -> int:
        with _command("SREM"):
            return int(await self.connect().srem(key, *members))

    async def list_set_members(self, key: str) -> List[bytes]:
        with _command("SMEMBERS"):
            return sorted(await self.connect().smembers(key) or [])

    async def check_set_member(self, key: str, member: str) -> bool:
        with _command("SISMEMBER"):
            return bool(await self.connect().sismember(key, member))

    async def get_set_size(self, key: str) -> int:
        with _command("SCARD"):
            return int(await self.connect().scard(key))

    async def pop_set(self, key: str, count: int) -> List[bytes]:
        with _command("SPOP"):
            return _byte_list(await self.connect().spop(key, count))

    async def get_random_set_member(self, key: str, count: int) -> List[bytes]:
        with _command("SRANDMEMBER"):
            return _byte_list(await self.connect().srandmember(key, count))

    async def set_intersection(self, keys: List[str]) -> List[bytes]:
        with _command("SINTER"):
            return sorted(await self.connect().sinter(keys) or [])

    async def set_union(self, keys: List[str]) -> List[bytes]:
        with _command("SUNION"):
            return sorted(await self.connect().sunion(keys) or [])

    async def set_difference(self, first_key: str, other_keys: List[str]) -> List[bytes]:
        with _command("SDIFF"):
            return sorted(await self.connect().sdiff([first_key, *other_keys]) or [])

    # ── Streams ───────────────────────────────────────────────────────────────

    async def add_stream(self, key: str, entry_id: str, fields: Mapping[str, str]) -> str:
        with _command("XADD"):
            return to_text(await self.connect().xadd(key, dict(fields), id=entry_id))

    async def get_stream_range(self, key: str, start: str, end: str, count: int) -> List[StreamEntry]:
        with _command("XRANGE"):
            reply = await self.connect().xrange(key, min=start, max=end, count=count if count > 0 else None)
        return [_stream_entry(item) for item in reply or []]

    async def get_stream_length(self, key: str) -> int:
        with _command("XLEN"):
            return int(await self.connect().xlen(key))

    async def read_stream(self, key: str, entry_id: str, count: int) -> List[StreamEntry]:
        with _command("XREAD"):
            reply = await self.connect().xread({key: entry_id}, count=count if count > 0 else None)
        return _stream_entries_from_xread(reply)

    # ── Cluster ───────────────────────────────────────────────────────────────

    async def get_cluster_info(self) -> Dict[str, str]:
        with _command("CLUSTER INFO"):
            raw = await self.connect().execute_command("CLUSTER", "INFO")
        return parse_cluster_info(raw)

    async def get_cluster_nodes(self) -> str:
        with _command("CLUSTER NODES"):
            return to_text(await self.connect().execute_command("CLUSTER", "NODES"))

    async def get_key_slot(self, key: str) -> int:
        with _command("CLUSTER KEYSLOT"):
            return int(await self.connect().execute_command("CLUSTER", "KEYSLOT", key))

    async def count_keys_in_slot(self, slot: int) -> int:
        with _command("CLUSTER COUNTKEYSINSLOT"):
            return int(await self.connect().execute_command("CLUSTER", "COUNTKEYSINSLOT", slot))

    # ── Scripting ─────────────────────────────────────────────────────────────

    async def eval_script(self, script: str, keys: List[str], args: List[str]) -> Any:
        with _command("EVAL"):
            return await self.connect().eval(script, len(keys), *keys, *args)

    async def load_script(self, script: str) -> str:
        with _command("SCRIPT LOAD"):
            return to_text(await self.connect().script_load(script))

    async def eval_sha(self, sha: str, keys: List[str], args: List[str]) -> Any:
        with _command("EVALSHA"):
            return await self.connect().evalsha(sha, len(keys), *keys, *args)


# ── Stream reply helpers ──────────────────────────────────────────────────────

def _stream_entry(item) -> StreamEntry:
    entry_id, fields = item
    if fields is None:
        fields = {}
    elif not isinstance(fields, Mapping):
        flat = list(fields)
        fields = {flat[i]: flat[i + 1] for i in range(0, len(flat) - 1, 2)}
    return StreamEntry(id=to_text(entry_id), field_values={to_text(k): v for k, v in fields.items()})


def _stream_entries_from_xread(reply) -> List[StreamEntry]:
    """Flatten an ``XREAD`` reply in either RESP2 (list) or RESP3 (mapping) form."""
    if not reply:
        return []
    if isinstance(reply, Mapping):
        batches = list(reply.values())
    else:
        batches = [stream[1] for stream in reply]

    entries = []
    for batch in batches:
        # RESP3 wraps each stream's entries in one extra list
        if batch and isinstance(batch[0], list) and batch[0] and isinstance(batch[0][0], (list, tuple)):
            batch = batch[0]
        entries.extend(_stream_entry(item) for item in batch)
    return entries
