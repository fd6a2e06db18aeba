"""
valkey_mcp/tools/formatters.py
==============================

Parsers that turn Valkey's administrative replies into flat, JSON-friendly
structures.

Why a separate module?
----------------------
``INFO``, ``CLUSTER INFO``, ``CLIENT LIST`` and ``SLOWLOG GET`` all reply in
ad-hoc text or nested-array formats, and the shape also differs between
RESP2 and RESP3 connections.  Keeping the parsing here lets the client stay a
thin command layer and lets the parsers be tested without a server.
"""

from typing import Any, Dict, List, Mapping, Union

RawText = Union[bytes, str, None]


def to_text(value: Any) -> str:
    """Decode bytes as UTF-8 (replacing invalid sequences); ``str()`` otherwise."""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return to_text(value)


def flatten_info(info: Mapping[Any, Any]) -> Dict[str, str]:
    """Flatten a parsed ``INFO`` reply to ``str -> str``.

    Nested sections such as ``db0`` (``{"keys": 3, "expires": 0}``) are
    rendered back into their wire form ``keys=3,expires=0``.
    """
    flat: Dict[str, str] = {}
    for key, value in (info or {}).items():
        if isinstance(value, Mapping):
            flat[to_text(key)] = ",".join(
                f"{to_text(k)}={_format_scalar(v)}" for k, v in value.items()
            )
        else:
            flat[to_text(key)] = _format_scalar(value)
    return flat


def parse_cluster_info(raw: Union[RawText, Mapping]) -> Dict[str, str]:
    """Parse ``CLUSTER INFO`` (``key:value`` lines separated by CRLF)."""
    if isinstance(raw, Mapping):
        return {to_text(k): _format_scalar(v) for k, v in raw.items()}

    info: Dict[str, str] = {}
    for line in to_text(raw).splitlines():
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        info[key.strip()] = value.strip()
    return info


def parse_client_list(raw: RawText) -> List[Dict[str, str]]:
    """Parse ``CLIENT LIST``: one client per line, space-separated ``k=v`` pairs."""
    clients = []
    for line in to_text(raw).splitlines():
        line = line.strip()
        if not line:
            continue
        client = {}
        for pair in line.split(" "):
            key, sep, value = pair.partition("=")
            if sep:
                client[key] = value
        clients.append(client)
    return clients


def normalize_slowlog(entries: Any) -> List[Dict[str, Any]]:
    """Normalize ``SLOWLOG GET`` entries into uniform dicts.

    Accepts both the dicts produced by the client library's reply callback
    and the raw nested-array form
    ``[id, timestamp, duration, [args...], client_address, client_name]``.

    Returns
    -------
    List[Dict[str, Any]]
        Dicts with ``id``, ``timestamp``, ``duration_us``, ``command``,
        ``client_address`` and ``client_name``.
    """
    normalized = []
    for entry in entries or []:
        if isinstance(entry, Mapping):
            command = entry.get("command", b"")
            if isinstance(command, (list, tuple)):
                command = " ".join(to_text(arg) for arg in command)
            normalized.append({
                "id": int(entry.get("id", 0)),
                "timestamp": int(entry.get("start_time", entry.get("timestamp", 0))),
                "duration_us": int(entry.get("duration", entry.get("duration_us", 0))),
                "command": to_text(command),
                "client_address": to_text(entry.get("client_address")),
                "client_name": to_text(entry.get("client_name")),
            })
            continue

        fields = list(entry)
        args = fields[3] if len(fields) > 3 else []
        normalized.append({
            "id": int(fields[0]),
            "timestamp": int(fields[1]),
            "duration_us": int(fields[2]),
            "command": " ".join(to_text(arg) for arg in args),
            "client_address": to_text(fields[4]) if len(fields) > 4 else "",
            "client_name": to_text(fields[5]) if len(fields) > 5 else "",
        })
    return normalized


def decode_string_map(raw: Any) -> Dict[str, str]:
    """Decode a ``CONFIG GET``-style reply (mapping or flat pair list) to text."""
    if isinstance(raw, Mapping):
        return {to_text(k): to_text(v) for k, v in raw.items()}
    items = list(raw or [])
    return {to_text(items[i]): to_text(items[i + 1]) for i in range(0, len(items) - 1, 2)}
