"""
valkey_mcp/tools/encoding.py
============================

Binary-safe conversion of Valkey payloads into JSON-ready values.

Why per-value detection?
------------------------
Valkey stores opaque bytes.  Many values are plain text, but polyglot
clients also store Java-serialized objects, protobuf messages and other
payloads that are never valid UTF-8.  Decoding those with ``errors="replace"``
would silently corrupt them.

Every value is therefore checked on its own:

- valid UTF-8  → returned as ``str`` and serialized as a bare JSON string
- anything else → kept as ``bytes`` and serialized as a base64 JSON string

Empty and missing values both become ``""``.

Identifiers (hash field names, set-member map keys, stream IDs) are always
text and are never base64-encoded.

Marshalling
-----------
``marshal`` / ``to_mapping`` turn the dataclass outputs of the tools into
JSON.  They are the single place where ``bytes`` become base64, so tools can
return ``encode_value`` results directly without caring about transport.
"""

import base64
import dataclasses
import json
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

SafeValue = Union[str, bytes]


def encode_value(raw: Optional[bytes]) -> SafeValue:
    """Encode one payload: text if it is valid UTF-8, otherwise raw bytes."""
    if not raw:
        return ""
    if isinstance(raw, str):
        return raw
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return bytes(raw)


def encode_slice(values: Optional[Iterable[Optional[bytes]]]) -> List[SafeValue]:
    """Element-wise ``encode_value``, preserving order and length."""
    if values is None:
        return []
    return [encode_value(v) for v in values]


def encode_map(values: Optional[Mapping[Any, Optional[bytes]]]) -> Dict[str, SafeValue]:
    """Field-wise ``encode_value``.  Keys are always returned as text."""
    if not values:
        return {}
    return {_text(k): encode_value(v) for k, v in values.items()}


def encode_stream_entries(entries) -> List[Dict[str, SafeValue]]:
    """Flatten stream entries into ``{"_id": id, field: value, ...}`` dicts."""
    result = []
    for entry in entries or []:
        item: Dict[str, SafeValue] = {"_id": entry.id}
        for name, value in entry.field_values.items():
            item[_text(name)] = encode_value(value)
        result.append(item)
    return result


def encode_reply(reply: Any) -> Any:
    """Recursively encode a free-form server reply (e.g. a Lua script result)."""
    if isinstance(reply, (bytes, bytearray)):
        return encode_value(bytes(reply))
    if isinstance(reply, (list, tuple, set)):
        return [encode_reply(item) for item in reply]
    if isinstance(reply, dict):
        return {_text(k): encode_reply(v) for k, v in reply.items()}
    return reply


def _text(value: Any) -> str:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="surrogateescape")
    return str(value)


# ── JSON marshalling ──────────────────────────────────────────────────────────

def json_default(obj: Any) -> Any:
    """``json.dumps`` hook: base64 for bytes, dicts for dataclasses."""
    if isinstance(obj, (bytes, bytearray)):
        return base64.b64encode(bytes(obj)).decode("ascii")
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def marshal(obj: Any) -> str:
    """Serialize a tool result to a JSON string."""
    return json.dumps(obj, default=json_default)


def to_mapping(obj: Any) -> Dict[str, Any]:
    """Serialize a tool result and read it back as a plain string-keyed dict.

    Raises
    ------
    TypeError
        If the result cannot be serialized or is not a JSON object.
    """
    decoded = json.loads(marshal(obj))
    if not isinstance(decoded, dict):
        raise TypeError(f"tool result must serialize to a JSON object, got {type(decoded).__name__}")
    return decoded
