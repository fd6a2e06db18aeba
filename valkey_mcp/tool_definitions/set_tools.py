"""
valkey_mcp/tool_definitions/set_tools.py
========================================

Tools for Valkey sets: membership changes, membership checks, random
sampling and the multi-set algebra (SINTER / SUNION / SDIFF).

Members are binary-safe: every member list is passed through
``encode_slice``.  Member lists from SMEMBERS and the set-algebra commands
are returned sorted so repeated calls produce stable output.
"""

from dataclasses import dataclass
from typing import Any, List

from ..tools.encoding import encode_slice
from ..tools.error_handler import ToolValidationError
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, default_count, param, require, require_key, require_keys


@dataclass
class SetKeyInput:
    key: str = param("required,description=Set key", default="")


@dataclass
class SetMembersInput:
    key: str = param("required,description=Set key", default="")
    members: List[str] = param("required,minItems=1,description=Set members", default_factory=list)


# ── add_set / remove_set_member ───────────────────────────────────────────────

@dataclass
class AddSetOutput:
    key: str
    members_added: int
    members: List[str]


class AddSetTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("add_set", "Add members to a set", SetMembersInput)
        self.client = client

    async def execute(self, raw_input=None) -> AddSetOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.members, "at least one member must be provided")

        with self.command_context(f"failed to add members to set {params.key!r}"):
            added = await self.client.add_set(params.key, params.members)

        return AddSetOutput(key=params.key, members_added=added, members=params.members)


@dataclass
class RemoveSetMemberOutput:
    key: str
    members_removed: int
    members: List[str]


class RemoveSetMemberTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("remove_set_member", "Remove members from a set", SetMembersInput)
        self.client = client

    async def execute(self, raw_input=None) -> RemoveSetMemberOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.members, "at least one member must be provided")

        with self.command_context(f"failed to remove members from set {params.key!r}"):
            removed = await self.client.remove_set(params.key, params.members)

        return RemoveSetMemberOutput(key=params.key, members_removed=removed, members=params.members)


# ── get_set_members / get_set_cardinality ─────────────────────────────────────

@dataclass
class GetSetMembersOutput:
    key: str
    members: List[Any]
    member_count: int
    exists: bool


class GetSetMembersTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_set_members", "Get all members of a set", SetKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetSetMembersOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get members of set {params.key!r}"):
            raw = await self.client.list_set_members(params.key)

        return GetSetMembersOutput(
            key=params.key,
            members=encode_slice(raw),
            member_count=len(raw),
            exists=len(raw) > 0,
        )


@dataclass
class GetSetCardinalityOutput:
    key: str
    cardinality: int
    exists: bool


class GetSetCardinalityTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("get_set_cardinality", "Get the number of members in a set (cardinality)", SetKeyInput)
        self.client = client

    async def execute(self, raw_input=None) -> GetSetCardinalityOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get cardinality of set {params.key!r}"):
            size = await self.client.get_set_size(params.key)

        return GetSetCardinalityOutput(key=params.key, cardinality=size, exists=size > 0)


# ── set_is_member ─────────────────────────────────────────────────────────────

@dataclass
class SetIsMemberInput:
    key: str = param("required,description=Set key", default="")
    member: str = param("required,description=Member to check", default="")


@dataclass
class SetIsMemberOutput:
    key: str
    member: str
    is_member: bool


class SetIsMemberTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("set_is_member", "Check if a member exists in a set", SetIsMemberInput)
        self.client = client

    async def execute(self, raw_input=None) -> SetIsMemberOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        require(params.member, "member cannot be empty")

        with self.command_context(f"failed to check membership in set {params.key!r}"):
            is_member = await self.client.check_set_member(params.key, params.member)

        return SetIsMemberOutput(key=params.key, member=params.member, is_member=is_member)


# ── pop_set_member / get_random_set_member ────────────────────────────────────

@dataclass
class PopSetMemberInput:
    key: str = param("required,description=Set key", default="")
    count: int = param("description=Number of members to pop (default: 1),minimum=1", default=0)


@dataclass
class RandomSetMemberInput:
    key: str = param("required,description=Set key", default="")
    count: int = param(
        "description=Number of members to return (default: 1). Negative values allow repeats",
        default=0,
    )


@dataclass
class SetSampleOutput:
    key: str
    members: List[Any]
    count: int


class PopSetMemberTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("pop_set_member", "Remove and return random members from a set", PopSetMemberInput)
        self.client = client

    async def execute(self, raw_input=None) -> SetSampleOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)
        count = default_count(params.count)
        if count < 0:
            raise ToolValidationError("count must be positive")

        with self.command_context(f"failed to pop from set {params.key!r}"):
            raw = await self.client.pop_set(params.key, count)

        return SetSampleOutput(key=params.key, members=encode_slice(raw), count=len(raw))


class GetRandomSetMemberTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "get_random_set_member",
            "Return random members from a set without removing them",
            RandomSetMemberInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> SetSampleOutput:
        params = self.parse_input(raw_input)
        require_key(params.key)

        with self.command_context(f"failed to get random members of set {params.key!r}"):
            raw = await self.client.get_random_set_member(params.key, default_count(params.count))

        return SetSampleOutput(key=params.key, members=encode_slice(raw), count=len(raw))


# ── sinter_sets / sunion_sets / sdiff_sets ────────────────────────────────────

@dataclass
class SInterSetsInput:
    keys: List[str] = param("required,minItems=1,description=Set keys to intersect", default_factory=list)


@dataclass
class SUnionSetsInput:
    keys: List[str] = param("required,minItems=1,description=Set keys to union", default_factory=list)


@dataclass
class SDiffSetsInput:
    keys: List[str] = param(
        "required,minItems=2,description=Array of set keys - members of the first set "
        "that are not in any of the others are returned",
        default_factory=list,
    )


@dataclass
class SetAlgebraOutput:
    members: List[Any]
    count: int


class SInterSetsTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("sinter_sets", "Get the intersection of multiple sets", SInterSetsInput)
        self.client = client

    async def execute(self, raw_input=None) -> SetAlgebraOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)

        with self.command_context("failed to intersect sets"):
            raw = await self.client.set_intersection(params.keys)

        return SetAlgebraOutput(members=encode_slice(raw), count=len(raw))


class SUnionSetsTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("sunion_sets", "Get the union of multiple sets", SUnionSetsInput)
        self.client = client

    async def execute(self, raw_input=None) -> SetAlgebraOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)

        with self.command_context("failed to union sets"):
            raw = await self.client.set_union(params.keys)

        return SetAlgebraOutput(members=encode_slice(raw), count=len(raw))


class SDiffSetsTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "sdiff_sets",
            "Get the difference of sets (members in first set but not in others)",
            SDiffSetsInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> SetAlgebraOutput:
        params = self.parse_input(raw_input)
        require_keys(params.keys)
        if len(params.keys) < 2:
            raise ToolValidationError("at least two keys must be provided")

        with self.command_context(f"failed to diff sets against {params.keys[0]!r}"):
            raw = await self.client.set_difference(params.keys[0], params.keys[1:])

        return SetAlgebraOutput(members=encode_slice(raw), count=len(raw))


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        GetSetMembersTool(client),
        AddSetTool(client),
        RemoveSetMemberTool(client),
        GetSetCardinalityTool(client),
        SetIsMemberTool(client),
        PopSetMemberTool(client),
        GetRandomSetMemberTool(client),
        SInterSetsTool(client),
        SUnionSetsTool(client),
        SDiffSetsTool(client),
    ):
        registry.must_register(tool)
