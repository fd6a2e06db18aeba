"""
valkey_mcp/tool_definitions/base.py
===================================

Schema-derived base class shared by every tool.

Declaring parameters once
-------------------------
Each tool declares its parameters as an ordinary dataclass.  Fields carry two
pieces of metadata, attached with ``param()``:

- the JSON name the caller uses for the field, and
- a comma-separated directive string describing JSON-Schema constraints.

::

    @dataclass
    class Input:
        key: str = param("required,description=Key to retrieve", default="")
        count: int = param("description=Maximum entries,minimum=0", default=0)

From that one declaration ``BaseTool`` derives:

1. the JSON Schema advertised to MCP clients (built **once**, in the
   constructor, and never mutated afterwards), and
2. input parsing: raw JSON is decoded and validated against the field types
   with a pydantic ``TypeAdapter``.

Directives
----------
``required``
    Adds the field's JSON name to the schema's ``required`` list.
``description=<text>``
    Field description.  Commas inside the text are kept.
``enum=<v1>,<v2>,...``
    Allowed values.  Repeated ``enum=`` directives accumulate.
``minimum=`` / ``maximum=`` / ``minLength=`` / ``maxLength=`` / ``minItems=`` / ``maxItems=``
    Numeric constraints; parsed as ``int`` when possible, else ``float``.
"""

import dataclasses
import json
import logging
import typing
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type, Union

from pydantic import TypeAdapter, ValidationError

from ..tools.error_handler import CommandError, InvalidInputError, ToolValidationError

logger = logging.getLogger(__name__)

JSON_NAME = "json"
SCHEMA_TAG = "jsonschema"
EXCLUDED = "-"

NUMERIC_DIRECTIVES = ("minimum", "maximum", "minLength", "maxLength", "minItems", "maxItems")
_CONTINUABLE = ("description", "enum")

_MISSING = dataclasses.MISSING


def param(
    schema_tag: str = "",
    *,
    default: Any = _MISSING,
    default_factory: Any = _MISSING,
    json_name: Optional[str] = None,
) -> Any:
    """Declare a tool input field.

    Parameters
    ----------
    schema_tag:
        Directive string, e.g. ``"required,description=Hash key"``.
    default / default_factory:
        Passed through to ``dataclasses.field``.
    json_name:
        External name of the field.  Defaults to the attribute name; ``"-"``
        excludes the field from the schema and from parsing.
    """
    metadata = {JSON_NAME: json_name, SCHEMA_TAG: schema_tag}
    kwargs: Dict[str, Any] = {"metadata": metadata}
    if default is not _MISSING:
        kwargs["default"] = default
    if default_factory is not _MISSING:
        kwargs["default_factory"] = default_factory
    return dataclasses.field(**kwargs)


# ── Schema derivation ─────────────────────────────────────────────────────────

def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) is Union:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def json_type_for(annotation: Any) -> Optional[str]:
    """Map a Python annotation to a JSON-Schema type name, or None if unknown."""
    annotation = _unwrap_optional(annotation)
    origin = typing.get_origin(annotation) or annotation

    # bool is a subclass of int
    if origin is bool:
        return "boolean"
    if origin is int:
        return "integer"
    if origin is float:
        return "number"
    if origin in (str, bytes):
        return "string"
    if origin in (list, tuple, set, frozenset):
        return "array"
    if origin is dict:
        return "object"
    return None


def _parse_number(value: str) -> Optional[Union[int, float]]:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return None


def parse_directives(tag: str) -> Tuple[Dict[str, Any], bool]:
    """Parse a directive string into schema keywords plus a required flag.

    Tokens that are not a known directive continue the previous
    ``description=`` or ``enum=`` value, so ``"description=Start ID ($ for new
    entries, 0 for first)"`` keeps its comma and ``"enum=GET,SET,DEL"`` yields
    three values.
    """
    keywords: Dict[str, Any] = {}
    required = False
    current: Optional[str] = None

    for token in tag.split(","):
        stripped = token.strip()
        if not stripped:
            continue
        if stripped == "required":
            required = True
            current = None
            continue

        name, sep, value = stripped.partition("=")
        if sep and (name in _CONTINUABLE or name in NUMERIC_DIRECTIVES):
            if name == "description":
                keywords["description"] = value
            elif name == "enum":
                keywords.setdefault("enum", []).append(value)
            else:
                number = _parse_number(value)
                if number is not None:
                    keywords[name] = number
            current = name if name in _CONTINUABLE else None
            continue

        if current == "description":
            keywords["description"] += "," + token
        elif current == "enum":
            keywords["enum"].append(stripped)

    return keywords, required


def _json_name(f: dataclasses.Field) -> Optional[str]:
    if JSON_NAME not in f.metadata:
        return None
    name = f.metadata[JSON_NAME] or f.name
    if name == EXCLUDED:
        return None
    return name


def generate_json_schema(prototype: Any) -> Dict[str, Any]:
    """Derive ``{"type": "object", "properties": ..., "required": ...}`` from a dataclass.

    ``prototype`` may be a dataclass type or instance.  Anything else yields
    an empty object schema.  Derivation never raises.
    """
    schema: Dict[str, Any] = {"type": "object", "properties": {}}
    if prototype is None or not dataclasses.is_dataclass(prototype):
        return schema

    cls = prototype if isinstance(prototype, type) else type(prototype)
    try:
        hints = typing.get_type_hints(cls)
    except (NameError, TypeError):
        logger.warning("Could not resolve type hints for %s; field types omitted", cls.__name__)
        hints = {}

    required: List[str] = []
    for f in dataclasses.fields(cls):
        name = _json_name(f)
        if name is None:
            continue

        prop: Dict[str, Any] = {}
        json_type = json_type_for(hints.get(f.name, f.type))
        if json_type:
            prop["type"] = json_type

        keywords, is_required = parse_directives(f.metadata.get(SCHEMA_TAG, ""))
        prop.update(keywords)
        if is_required:
            required.append(name)

        schema["properties"][name] = prop

    if required:
        schema["required"] = required
    return schema


# ── Tool base class ───────────────────────────────────────────────────────────

class BaseTool:
    """Name, description and derived schema shared by every concrete tool.

    Parameters
    ----------
    name:
        Globally unique tool name.
    description:
        One-line summary shown to MCP clients.
    input_type:
        Dataclass describing the parameters, or ``None`` for tools that take
        no input (their schema is ``None``, not an empty object).
    """

    def __init__(self, name: str, description: str, input_type: Optional[Type] = None):
        self._name = name
        self._description = description
        self._input_type = input_type
        self._input_schema = generate_json_schema(input_type) if input_type is not None else None
        self._adapter: Optional[TypeAdapter] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def input_schema(self) -> Optional[Dict[str, Any]]:
        return self._input_schema

    def parse_input(self, raw_input: Union[str, bytes, None]) -> Any:
        """Decode ``raw_input`` into an instance of the input dataclass.

        Empty input (or JSON ``null``) yields the dataclass defaults.  Unknown
        keys and ``null`` values are ignored.

        Raises
        ------
        InvalidInputError
            On malformed JSON, a non-object payload, or a field type mismatch.
        """
        target = self._input_type
        if target is None:
            return None
        if raw_input is None or not raw_input.strip():
            return target()

        try:
            payload = json.loads(raw_input)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise InvalidInputError(f"invalid input format: {exc}") from exc

        if payload is None:
            return target()
        if not isinstance(payload, dict):
            raise InvalidInputError(
                f"invalid input format: expected a JSON object, got {type(payload).__name__}"
            )

        kwargs = {}
        for f in dataclasses.fields(target):
            name = _json_name(f)
            if name is not None and payload.get(name) is not None:
                kwargs[f.name] = payload[name]

        try:
            return self._type_adapter().validate_python(kwargs)
        except ValidationError as exc:
            raise InvalidInputError(f"invalid input format: {exc}") from exc

    def _type_adapter(self) -> TypeAdapter:
        if self._adapter is None:
            self._adapter = TypeAdapter(self._input_type)
        return self._adapter

    @contextmanager
    def command_context(self, context: str) -> Iterator[None]:
        """Prefix any ``CommandError`` raised inside the block with ``context``."""
        try:
            yield
        except CommandError as exc:
            raise CommandError(f"{context}: {exc}") from exc

    async def execute(self, raw_input: Union[str, bytes, None] = None) -> Any:
        raise NotImplementedError(f"execute not implemented for tool {self._name}")


# ── Validation helpers ────────────────────────────────────────────────────────

def require(value: Any, message: str) -> None:
    """Raise ``ToolValidationError(message)`` when ``value`` is empty."""
    if not value:
        raise ToolValidationError(message)


def require_key(key: str) -> None:
    require(key, "key cannot be empty")


def require_keys(keys: List[str]) -> None:
    require(keys, "at least one key must be provided")
    if any(not k for k in keys):
        raise ToolValidationError("keys cannot contain empty values")


def default_count(count: int) -> int:
    """Zero means "not given" for optional counts; default to one."""
    return count if count != 0 else 1
