"""
valkey_mcp/tool_definitions/scripting_tools.py
==============================================

Lua scripting tools: EVAL, SCRIPT LOAD and EVALSHA.

Script replies are free-form (integers, bulk strings, nested arrays).
``encode_reply`` walks the reply and applies the usual text-or-base64 rule to
every bulk string it finds.
"""

from dataclasses import dataclass
from typing import Any, List

from ..tools.encoding import encode_reply
from ..tools.valkey_client import ValkeyClient
from .base import BaseTool, param, require


@dataclass
class EvalScriptInput:
    script: str = param("required,description=Lua script to execute", default="")
    keys: List[str] = param("description=Keys that the script will access", default_factory=list)
    args: List[str] = param("description=Additional arguments for the script", default_factory=list)


@dataclass
class EvalSHAInput:
    sha: str = param("required,description=SHA1 hash of the loaded script,minLength=40,maxLength=40", default="")
    keys: List[str] = param("description=Keys that the script will access", default_factory=list)
    args: List[str] = param("description=Additional arguments for the script", default_factory=list)


@dataclass
class ScriptResultOutput:
    result: Any


class EvalScriptTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("eval_script", "Execute a Lua script on Redis/Valkey server", EvalScriptInput)
        self.client = client

    async def execute(self, raw_input=None) -> ScriptResultOutput:
        params = self.parse_input(raw_input)
        require(params.script, "script cannot be empty")

        with self.command_context("failed to execute script"):
            reply = await self.client.eval_script(params.script, params.keys, params.args)

        return ScriptResultOutput(result=encode_reply(reply))


class EvalSHAScriptTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__("evalsha_script", "Execute a previously loaded Lua script by its SHA1 hash", EvalSHAInput)
        self.client = client

    async def execute(self, raw_input=None) -> ScriptResultOutput:
        params = self.parse_input(raw_input)
        require(params.sha, "sha cannot be empty")

        with self.command_context(f"failed to execute script {params.sha}"):
            reply = await self.client.eval_sha(params.sha, params.keys, params.args)

        return ScriptResultOutput(result=encode_reply(reply))


@dataclass
class ScriptLoadInput:
    script: str = param("required,description=Lua script to load", default="")


@dataclass
class ScriptLoadOutput:
    sha: str


class ScriptLoadTool(BaseTool):
    def __init__(self, client: ValkeyClient):
        super().__init__(
            "script_load",
            "Load a Lua script into Redis/Valkey and return its SHA1 hash",
            ScriptLoadInput,
        )
        self.client = client

    async def execute(self, raw_input=None) -> ScriptLoadOutput:
        params = self.parse_input(raw_input)
        require(params.script, "script cannot be empty")

        with self.command_context("failed to load script"):
            sha = await self.client.load_script(params.script)

        return ScriptLoadOutput(sha=sha)


def register(registry, client: ValkeyClient) -> None:
    for tool in (
        EvalScriptTool(client),
        ScriptLoadTool(client),
        EvalSHAScriptTool(client),
    ):
        registry.must_register(tool)
