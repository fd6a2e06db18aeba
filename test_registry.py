import asyncio
import json
import unittest
from dataclasses import dataclass
from unittest.mock import MagicMock

from fastmcp.exceptions import ToolError

from valkey_mcp.core.mcp_registry import EMPTY_OBJECT_SCHEMA, BridgedTool
from valkey_mcp.tool_definitions.base import BaseTool, param
from valkey_mcp.tool_definitions.registry import Tool, ToolInfo, ToolRegistry
from valkey_mcp.tools.error_handler import (
    CommandError,
    DuplicateToolError,
    ErrorHandler,
    ToolExecutionError,
    ToolNotFoundError,
)


@dataclass
class EchoInput:
    message: str = param("required,description=Text to echo", default="")


@dataclass
class EchoOutput:
    message: str
    payload: bytes = b""


class EchoTool(BaseTool):
    def __init__(self, name="echo"):
        super().__init__(name, "Echo the message back", EchoInput)

    async def execute(self, raw_input=None):
        params = self.parse_input(raw_input)
        return EchoOutput(message=params.message, payload=b"\xff\x00")


class FailingTool(BaseTool):
    def __init__(self):
        super().__init__("failing", "Always fails")

    async def execute(self, raw_input=None):
        raise CommandError("WRONGTYPE Operation against a key holding the wrong kind of value")


class TestToolRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = ToolRegistry()

    def run_async(self, coro):
        return asyncio.run(coro)

    def test_register_and_get(self):
        tool = EchoTool()
        self.registry.register(tool)
        self.assertIs(self.registry.get_tool("echo"), tool)
        self.assertIn("echo", self.registry)
        self.assertEqual(self.registry.count(), 1)

    def test_tools_satisfy_protocol(self):
        self.assertIsInstance(EchoTool(), Tool)

    def test_duplicate_is_rejected(self):
        self.registry.register(EchoTool())
        with self.assertRaises(DuplicateToolError) as ctx:
            self.registry.register(EchoTool())
        self.assertIn("already registered", str(ctx.exception))
        self.assertEqual(self.registry.count(), 1)

    def test_must_register_duplicate_is_fatal(self):
        self.registry.must_register(EchoTool())
        with self.assertRaises(RuntimeError):
            self.registry.must_register(EchoTool())

    def test_get_missing_tool(self):
        self.assertIsNone(self.registry.get_tool("nope"))

    def test_list_tools_sorted(self):
        for name in ("zeta", "alpha", "mid"):
            self.registry.register(EchoTool(name))
        self.assertEqual(self.registry.list_tools(), ["alpha", "mid", "zeta"])
        self.assertEqual(len(self.registry), 3)

    def test_tool_info(self):
        self.registry.register(EchoTool())
        self.registry.register(FailingTool())
        infos = self.registry.get_all_tool_info()

        self.assertEqual([i.name for i in infos], ["echo", "failing"])
        echo = infos[0].to_dict()
        self.assertEqual(echo["inputSchema"]["required"], ["message"])
        self.assertNotIn("inputSchema", infos[1].to_dict())

    def test_tool_info_dataclass(self):
        info = ToolInfo(name="x", description="d")
        self.assertEqual(info.to_dict(), {"name": "x", "description": "d"})

    def test_execute_tool(self):
        self.registry.register(EchoTool())
        result = self.run_async(self.registry.execute_tool("echo", '{"message": "hi"}'))
        self.assertIsInstance(result, EchoOutput)
        self.assertEqual(result.message, "hi")

    def test_execute_unknown_tool(self):
        with self.assertRaises(ToolNotFoundError) as ctx:
            self.run_async(self.registry.execute_tool("ghost", "{}"))
        self.assertEqual(str(ctx.exception), "tool not found: ghost")

    def test_execute_wraps_tool_errors(self):
        self.registry.register(FailingTool())
        with self.assertRaises(ToolExecutionError) as ctx:
            self.run_async(self.registry.execute_tool("failing"))
        self.assertTrue(str(ctx.exception).startswith("failed to execute tool failing: "))
        self.assertIsInstance(ctx.exception.__cause__, CommandError)

    def test_register_with_mcp(self):
        self.registry.register(EchoTool())
        self.registry.register(FailingTool())
        server = MagicMock()

        added = self.registry.register_with_mcp(server)

        self.assertEqual(added, 2)
        self.assertEqual(server.add_tool.call_count, 2)
        bridged = [c.args[0] for c in server.add_tool.call_args_list]
        self.assertEqual([b.name for b in bridged], ["echo", "failing"])
        self.assertTrue(all(isinstance(b, BridgedTool) for b in bridged))


class TestBridgedTool(unittest.TestCase):

    def run_async(self, coro):
        return asyncio.run(coro)

    def test_schema_is_advertised(self):
        bridged = BridgedTool.from_tool(EchoTool())
        self.assertEqual(bridged.parameters["required"], ["message"])
        self.assertEqual(bridged.description, "Echo the message back")

    def test_schemaless_tool_gets_empty_object(self):
        bridged = BridgedTool.from_tool(FailingTool())
        self.assertEqual(bridged.parameters, EMPTY_OBJECT_SCHEMA)

    def test_run_returns_structured_content(self):
        bridged = BridgedTool.from_tool(EchoTool())
        result = self.run_async(bridged.run({"message": "hello"}))

        self.assertEqual(result.structured_content, {"message": "hello", "payload": "/wA="})
        self.assertEqual(json.loads(result.content[0].text), result.structured_content)

    def test_run_surfaces_errors(self):
        bridged = BridgedTool.from_tool(FailingTool())
        with self.assertRaises(ToolError) as ctx:
            self.run_async(bridged.run({}))
        self.assertIn("failed to execute tool failing", str(ctx.exception))

    def test_run_with_error_handler(self):
        bridged = BridgedTool.from_tool(FailingTool(), ErrorHandler())
        with self.assertRaises(ToolError) as ctx:
            self.run_async(bridged.run({}))
        message = str(ctx.exception)
        self.assertIn("WrongType", message)
        self.assertIn("`failing`", message)


class TestErrorHandler(unittest.TestCase):

    def test_patterns(self):
        cases = {
            "GET failed: WRONGTYPE Operation against a key": "WrongType",
            "NOSCRIPT No matching script": "ScriptNotFound",
            "ERR value is not an integer or out of range": "NotANumber",
            "ERR index out of range": "IndexOutOfRange",
            "BUSYKEY Target key name already exists.": "KeyExists",
            "ERR no such key": "KeyNotFound",
            "NOAUTH Authentication required.": "AuthenticationFailed",
            "ERR This instance has cluster support disabled": "ClusterDisabled",
            "Error connecting to localhost:6379. Connection refused.": "ConnectionError",
        }
        for message, expected in cases.items():
            error_type, _, suggestions = ErrorHandler.handle_valkey_error(CommandError(message))
            self.assertEqual(error_type, expected, message)
            self.assertTrue(suggestions)

    def test_fallback(self):
        error_type, _, _ = ErrorHandler.handle_valkey_error(CommandError("something odd"))
        self.assertEqual(error_type, "ValkeyError")

    def test_format(self):
        text = ErrorHandler.format_error_response(
            ValueError("boom"), "ValkeyError", "It broke.", ["Try again"], tool_name="get_string"
        )
        self.assertIn("❌ **ValkeyError**", text)
        self.assertIn("1. Try again", text)
        self.assertIn("`get_string`", text)
        self.assertTrue(text.endswith("boom"))


if __name__ == "__main__":
    unittest.main()
