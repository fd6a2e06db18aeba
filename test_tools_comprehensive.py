import asyncio
import base64
import json
import unittest
from unittest.mock import AsyncMock, MagicMock

from valkey_mcp.tool_definitions import (
    cluster_tools,
    hash_tools,
    key_tools,
    list_tools,
    register_all,
    scripting_tools,
    server_tools,
    set_tools,
    stream_tools,
    string_tools,
)
from valkey_mcp.tool_definitions.registry import ToolRegistry
from valkey_mcp.tools.encoding import marshal, to_mapping
from valkey_mcp.tools.error_handler import (
    CommandError,
    InvalidInputError,
    ToolValidationError,
)
from valkey_mcp.tools.valkey_client import StreamEntry, ValkeyClient

JAVA_SERIALIZED = bytes([0xAC, 0xED, 0x00, 0x05, 0x74, 0x00, 0x04, 0x54, 0x65, 0x73, 0x74])


class ToolTestCase(unittest.TestCase):

    def setUp(self):
        self.client = AsyncMock(spec=ValkeyClient)

    def run_async(self, coro):
        return asyncio.run(coro)

    def call(self, tool, **arguments):
        return self.run_async(tool.execute(json.dumps(arguments)))


class TestStringTools(ToolTestCase):

    def test_get_string(self):
        self.client.get_string.return_value = (b"hello", True)
        result = self.call(string_tools.GetStringTool(self.client), key="greeting")
        self.assertEqual(result.value, "hello")
        self.assertTrue(result.exists)
        self.client.get_string.assert_awaited_once_with("greeting")

    def test_get_string_empty_vs_missing(self):
        tool = string_tools.GetStringTool(self.client)

        self.client.get_string.return_value = (None, False)
        missing = self.call(tool, key="nope")
        self.client.get_string.return_value = (b"", True)
        empty = self.call(tool, key="blank")

        self.assertEqual(missing.value, "")
        self.assertFalse(missing.exists)
        self.assertEqual(empty.value, "")
        self.assertTrue(empty.exists)

    def test_get_string_binary(self):
        self.client.get_string.return_value = (JAVA_SERIALIZED, True)
        result = to_mapping(self.call(string_tools.GetStringTool(self.client), key="pojo"))
        self.assertEqual(base64.b64decode(result["value"]), JAVA_SERIALIZED)

    def test_get_string_requires_key(self):
        with self.assertRaises(ToolValidationError) as ctx:
            self.call(string_tools.GetStringTool(self.client), key="")
        self.assertEqual(str(ctx.exception), "key cannot be empty")
        self.client.get_string.assert_not_awaited()

    def test_get_string_command_error_has_context(self):
        self.client.get_string.side_effect = CommandError("GET failed: connection refused")
        with self.assertRaises(CommandError) as ctx:
            self.call(string_tools.GetStringTool(self.client), key="k")
        self.assertEqual(str(ctx.exception), "failed to get string for key 'k': GET failed: connection refused")

    def test_get_string_malformed_input(self):
        with self.assertRaises(InvalidInputError):
            self.run_async(string_tools.GetStringTool(self.client).execute("{bad"))

    def test_set_string_nx_and_xx_conflict(self):
        with self.assertRaises(ToolValidationError) as ctx:
            self.call(string_tools.SetStringTool(self.client), key="k", value="v", nx=True, xx=True)
        self.assertIn("cannot use both nx and xx", str(ctx.exception))
        self.client.set_string.assert_not_awaited()

    def test_set_string_with_ttl(self):
        self.client.set_string.return_value = True
        result = self.call(string_tools.SetStringTool(self.client), key="k", value="v", ttl_seconds=60)
        self.assertTrue(result.success)
        self.assertEqual(result.message, "Value set successfully")
        self.client.set_string.assert_awaited_once_with("k", "v", 60, False, False)

    def test_set_string_nx_not_met(self):
        self.client.set_string.return_value = False
        result = self.call(string_tools.SetStringTool(self.client), key="k", value="v", nx=True)
        self.assertFalse(result.success)
        self.assertIn("NX", result.message)

    def test_set_string_requires_value(self):
        with self.assertRaises(ToolValidationError):
            self.call(string_tools.SetStringTool(self.client), key="k")

    def test_mget_strings(self):
        self.client.get_strings.return_value = {"a": b"1", "c": JAVA_SERIALIZED}
        result = self.call(string_tools.MGetStringsTool(self.client), keys=["a", "b", "c"])
        self.assertEqual(result.count, 2)
        self.assertEqual(result.values["a"], "1")
        self.assertEqual(result.values["c"], JAVA_SERIALIZED)

    def test_mget_rejects_empty_key(self):
        with self.assertRaises(ToolValidationError) as ctx:
            self.call(string_tools.MGetStringsTool(self.client), keys=["a", ""])
        self.assertEqual(str(ctx.exception), "keys cannot contain empty values")

    def test_incr_defaults_to_one(self):
        self.client.increment_number.return_value = 11
        result = self.call(string_tools.IncrStringTool(self.client), key="counter")
        self.assertEqual(result.value, 11)
        self.client.increment_number.assert_awaited_once_with("counter", 1)

    def test_decr_amount(self):
        self.client.decrement_number.return_value = 5
        self.call(string_tools.DecrStringTool(self.client), key="counter", amount=5)
        self.client.decrement_number.assert_awaited_once_with("counter", 5)

    def test_append_and_length(self):
        self.client.append_string.return_value = 11
        result = self.call(string_tools.AppendStringTool(self.client), key="k", value=" world")
        self.assertEqual(result.new_length, 11)

        self.client.string_length.return_value = 0
        self.assertFalse(self.call(string_tools.StringLengthTool(self.client), key="none").exists)

    def test_get_string_range(self):
        self.client.get_range.return_value = b"ell"
        result = self.call(string_tools.GetStringRangeTool(self.client), key="k", start=1, end=3)
        self.assertEqual(result.value, "ell")
        self.client.get_range.assert_awaited_once_with("k", 1, 3)


class TestKeyTools(ToolTestCase):

    def test_scan_defaults(self):
        self.client.scan_keys.return_value = ["a", "b"]
        result = self.call(key_tools.ScanKeysTool(self.client))
        self.assertEqual(result.pattern, "*")
        self.assertEqual(result.count, 2)
        self.client.scan_keys.assert_awaited_once_with("*", 100)

    def test_scan_without_input(self):
        self.client.scan_keys.return_value = []
        result = self.run_async(key_tools.ScanKeysTool(self.client).execute(None))
        self.assertEqual(result.keys, [])

    def test_get_key_type(self):
        self.client.get_key_type.return_value = "none"
        result = self.call(key_tools.GetKeyTypeTool(self.client), key="missing")
        self.assertFalse(result.exists)

        self.client.get_key_type.return_value = "hash"
        self.assertTrue(self.call(key_tools.GetKeyTypeTool(self.client), key="h").exists)

    def test_get_key_ttl(self):
        tool = key_tools.GetKeyTTLTool(self.client)
        self.client.get_ttl.return_value = -1
        persistent = self.call(tool, key="k")
        self.assertTrue(persistent.exists)
        self.assertFalse(persistent.has_expiry)

        self.client.get_ttl.return_value = -2
        self.assertFalse(self.call(tool, key="k").exists)

    def test_delete_keys_partial_failure(self):
        self.client.delete_key.side_effect = [True, True, CommandError("DEL failed: boom")]
        with self.assertRaises(CommandError) as ctx:
            self.call(key_tools.DeleteKeysTool(self.client), keys=["a", "b", "c"])
        self.assertIn("'c'", str(ctx.exception))
        self.assertEqual(self.client.delete_key.await_count, 3)

    def test_delete_keys_counts_existing(self):
        self.client.delete_key.side_effect = [True, False]
        result = self.call(key_tools.DeleteKeysTool(self.client), keys=["a", "b"])
        self.assertEqual(result.deleted_count, 1)

    def test_exists_key(self):
        self.client.exists_keys.return_value = {"a": True, "b": False, "c": True}
        self.assertEqual(self.call(key_tools.ExistsKeyTool(self.client), keys=["a", "b", "c"]).count, 2)

    def test_expire_requires_positive_seconds(self):
        with self.assertRaises(ToolValidationError):
            self.call(key_tools.ExpireKeyTool(self.client), key="k", seconds=0)
        self.client.expire_key.assert_not_awaited()

    def test_rename_same_key(self):
        with self.assertRaises(ToolValidationError) as ctx:
            self.call(key_tools.RenameKeyTool(self.client), key="k", new_key="k")
        self.assertIn("must be different", str(ctx.exception))

    def test_persist_and_touch(self):
        self.client.persist_key.return_value = False
        self.assertFalse(self.call(key_tools.PersistKeyTool(self.client), key="k").success)

        self.client.touch_keys.return_value = 1
        result = self.call(key_tools.TouchKeysTool(self.client), keys=["a", "b"])
        self.assertEqual((result.count, result.updated), (2, 1))

    def test_introspection(self):
        self.client.memory_usage.return_value = 72
        self.client.object_encoding.return_value = "listpack"
        self.client.object_idletime.return_value = 9
        self.assertEqual(self.call(key_tools.MemoryUsageTool(self.client), key="k").bytes, 72)
        self.assertEqual(self.call(key_tools.ObjectEncodingTool(self.client), key="k").encoding, "listpack")
        self.assertEqual(self.call(key_tools.ObjectIdletimeTool(self.client), key="k").idle_time, 9)

    def test_keys_by_pattern_requires_pattern(self):
        with self.assertRaises(ToolValidationError):
            self.call(key_tools.KeysByPatternTool(self.client), pattern="")

    def test_dump_key_is_base64(self):
        self.client.dump_key.return_value = JAVA_SERIALIZED
        result = self.call(key_tools.DumpKeyTool(self.client), key="k")
        self.assertEqual(base64.b64decode(result.serialized), JAVA_SERIALIZED)
        self.assertEqual(result.size, 11)

    def test_restore_key_accepts_either_name(self):
        encoded = base64.b64encode(JAVA_SERIALIZED).decode()
        self.client.restore_key.return_value = True

        self.call(key_tools.RestoreKeyTool(self.client), key="k", serialized=encoded)
        self.call(key_tools.RestoreKeyTool(self.client), key="k", ttl=500, serialized_value=encoded)

        self.client.restore_key.assert_awaited_with("k", 500, JAVA_SERIALIZED)

    def test_restore_key_rejects_bad_base64(self):
        with self.assertRaises(ToolValidationError):
            self.call(key_tools.RestoreKeyTool(self.client), key="k", serialized="not base64!")
        with self.assertRaises(ToolValidationError):
            self.call(key_tools.RestoreKeyTool(self.client), key="k")
        self.client.restore_key.assert_not_awaited()


class TestHashTools(ToolTestCase):

    def test_get_hash_mixed_encoding(self):
        self.client.get_map.return_value = {"name": b"John Doe", "pojo": JAVA_SERIALIZED}
        result = self.call(hash_tools.GetHashTool(self.client), key="user:1")
        payload = json.loads(marshal(result))

        self.assertEqual(payload["field_count"], 2)
        self.assertTrue(payload["exists"])
        self.assertEqual(payload["fields"]["name"], "John Doe")
        self.assertEqual(base64.b64decode(payload["fields"]["pojo"]), JAVA_SERIALIZED)

    def test_get_hash_missing(self):
        self.client.get_map.return_value = {}
        result = self.call(hash_tools.GetHashTool(self.client), key="none")
        self.assertFalse(result.exists)
        self.assertEqual(result.fields, {})

    def test_set_hash_counts(self):
        self.client.set_map.return_value = 1
        result = self.call(hash_tools.SetHashTool(self.client), key="h", fields={"a": "1", "b": "2"})
        self.assertEqual(result.fields_added, 1)
        self.assertEqual(result.fields_updated, 1)

    def test_set_hash_requires_fields(self):
        with self.assertRaises(ToolValidationError):
            self.call(hash_tools.SetHashTool(self.client), key="h", fields={})

    def test_get_hash_field(self):
        self.client.get_map_field.return_value = (None, False)
        result = self.call(hash_tools.GetHashFieldTool(self.client), key="h", field="missing")
        self.assertFalse(result.exists)
        self.assertEqual(result.value, "")

    def test_hmget_and_get_fields(self):
        self.client.get_map_fields.return_value = {"a": b"1"}
        self.assertEqual(self.call(hash_tools.HMGetHashTool(self.client), key="h", fields=["a", "b"]).result, {"a": "1"})
        self.assertEqual(self.call(hash_tools.GetHashFieldsTool(self.client), key="h", fields=["a"]).count, 1)

    def test_delete_and_exists(self):
        self.client.delete_map_fields.return_value = 2
        self.assertEqual(
            self.call(hash_tools.DeleteHashFieldTool(self.client), key="h", fields=["a", "b"]).fields_deleted, 2
        )
        self.client.map_field_exists.return_value = True
        self.assertTrue(self.call(hash_tools.HashFieldExistsTool(self.client), key="h", field="a").exists)

    def test_incr_hash_field(self):
        self.client.increment_map_field.return_value = 3
        result = self.call(hash_tools.IncrHashFieldTool(self.client), key="h", field="n")
        self.assertEqual(result.new_value, 3)
        self.client.increment_map_field.assert_awaited_once_with("h", "n", 1)

    def test_hlen_hkeys_hvals(self):
        self.client.get_map_length.return_value = 2
        self.client.list_map_field_names.return_value = ["a", "b"]
        self.client.list_map_field_values.return_value = [b"1", b"\xff"]
        self.assertEqual(self.call(hash_tools.HLenHashTool(self.client), key="h").result, 2)
        self.assertEqual(self.call(hash_tools.HKeysHashTool(self.client), key="h").result, ["a", "b"])
        self.assertEqual(self.call(hash_tools.HValsHashTool(self.client), key="h").result, ["1", b"\xff"])


class TestListTools(ToolTestCase):

    def test_push_directions(self):
        self.client.push_list.return_value = 2
        self.call(list_tools.LPushListTool(self.client), key="l", values=["a", "b"])
        self.client.push_list.assert_awaited_with("l", ["a", "b"], tail=False)
        self.call(list_tools.RPushListTool(self.client), key="l", values=["c"])
        self.client.push_list.assert_awaited_with("l", ["c"], tail=True)

    def test_push_requires_values(self):
        with self.assertRaises(ToolValidationError):
            self.call(list_tools.LPushListTool(self.client), key="l", values=[])

    def test_pop(self):
        self.client.pop_list.return_value = [b"a", JAVA_SERIALIZED]
        result = self.call(list_tools.RPopListTool(self.client), key="l", count=2)
        self.assertEqual(result.elements, ["a", JAVA_SERIALIZED])
        self.client.pop_list.assert_awaited_once_with("l", 2, tail=True)

    def test_pop_empty_list(self):
        self.client.pop_list.return_value = []
        result = self.call(list_tools.LPopListTool(self.client), key="l")
        self.assertEqual(result.count, 0)
        self.client.pop_list.assert_awaited_once_with("l", 1, tail=False)

    def test_lrange(self):
        self.client.get_list_range.return_value = [b"x", b"y"]
        result = self.call(list_tools.LRangeListTool(self.client), key="l", start=0, stop=-1)
        self.assertEqual(result.values, ["x", "y"])

    def test_index_length_set_trim(self):
        self.client.get_list_index.return_value = (None, False)
        self.assertFalse(self.call(list_tools.GetListIndexTool(self.client), key="l", index=99).exists)

        self.client.get_list_length.return_value = 4
        self.assertEqual(self.call(list_tools.GetListLengthTool(self.client), key="l").length, 4)

        self.client.set_list_index.return_value = True
        self.assertTrue(self.call(list_tools.LSetListTool(self.client), key="l", index=0, value="v").success)

        self.client.trim_list.return_value = True
        self.assertTrue(self.call(list_tools.LTrimListTool(self.client), key="l", start=0, stop=9).success)


class TestSetTools(ToolTestCase):

    def test_add_and_remove(self):
        self.client.add_set.return_value = 2
        self.assertEqual(self.call(set_tools.AddSetTool(self.client), key="s", members=["a", "b"]).members_added, 2)
        self.client.remove_set.return_value = 1
        self.assertEqual(
            self.call(set_tools.RemoveSetMemberTool(self.client), key="s", members=["a"]).members_removed, 1
        )

    def test_members(self):
        self.client.list_set_members.return_value = [b"a", b"b"]
        result = self.call(set_tools.GetSetMembersTool(self.client), key="s")
        self.assertEqual(result.members, ["a", "b"])
        self.assertTrue(result.exists)

    def test_cardinality_and_membership(self):
        self.client.get_set_size.return_value = 0
        self.assertFalse(self.call(set_tools.GetSetCardinalityTool(self.client), key="s").exists)
        self.client.check_set_member.return_value = True
        self.assertTrue(self.call(set_tools.SetIsMemberTool(self.client), key="s", member="a").is_member)

    def test_pop_and_random(self):
        self.client.pop_set.return_value = [b"x"]
        self.assertEqual(self.call(set_tools.PopSetMemberTool(self.client), key="s").members, ["x"])
        self.client.pop_set.assert_awaited_once_with("s", 1)

        self.client.get_random_set_member.return_value = [b"y", b"y"]
        result = self.call(set_tools.GetRandomSetMemberTool(self.client), key="s", count=-2)
        self.assertEqual(result.count, 2)
        self.client.get_random_set_member.assert_awaited_once_with("s", -2)

    def test_algebra(self):
        self.client.set_intersection.return_value = [b"b"]
        self.client.set_union.return_value = [b"a", b"b", b"c"]
        self.client.set_difference.return_value = [b"a"]

        self.assertEqual(self.call(set_tools.SInterSetsTool(self.client), keys=["s1", "s2"]).members, ["b"])
        self.assertEqual(self.call(set_tools.SUnionSetsTool(self.client), keys=["s1", "s2"]).count, 3)
        self.assertEqual(self.call(set_tools.SDiffSetsTool(self.client), keys=["s1", "s2", "s3"]).members, ["a"])
        self.client.set_difference.assert_awaited_once_with("s1", ["s2", "s3"])

    def test_sdiff_needs_two_keys(self):
        with self.assertRaises(ToolValidationError) as ctx:
            self.call(set_tools.SDiffSetsTool(self.client), keys=["only"])
        self.assertIn("at least two keys", str(ctx.exception))


class TestStreamTools(ToolTestCase):

    def test_xadd_auto_id(self):
        self.client.add_stream.return_value = "1700000000000-0"
        result = self.call(stream_tools.XAddStreamTool(self.client), key="events", fields={"type": "login"})
        self.assertEqual(result.id, "1700000000000-0")
        self.client.add_stream.assert_awaited_once_with("events", "*", {"type": "login"})

    def test_xadd_requires_fields(self):
        with self.assertRaises(ToolValidationError):
            self.call(stream_tools.XAddStreamTool(self.client), key="events", fields={})

    def test_xrange(self):
        self.client.get_stream_range.return_value = [
            StreamEntry(id="1-0", field_values={"temp": b"21"}),
            StreamEntry(id="2-0", field_values={"blob": b"\xff"}),
        ]
        result = self.call(stream_tools.XRangeStreamTool(self.client), key="s", start="-", end="+")
        self.assertEqual(result.count, 2)
        self.assertEqual(result.entries[0], {"_id": "1-0", "temp": "21"})
        self.assertEqual(to_mapping(result)["entries"][1]["blob"], "/w==")

    def test_xlen_and_xread(self):
        self.client.get_stream_length.return_value = 7
        self.assertEqual(self.call(stream_tools.XLenStreamTool(self.client), key="s").count, 7)

        self.client.read_stream.return_value = []
        self.assertEqual(self.call(stream_tools.XReadStreamTool(self.client), key="s", id="$").count, 0)
        self.client.read_stream.assert_awaited_once_with("s", "$", 0)


class TestServerTools(ToolTestCase):

    def test_server_info_takes_no_input(self):
        tool = server_tools.ServerInfoTool(self.client)
        self.assertIsNone(tool.input_schema)
        self.client.get_server_info.return_value = {"redis_version": "7.2.4"}
        self.assertEqual(self.run_async(tool.execute()).info["redis_version"], "7.2.4")

    def test_ping_alive(self):
        self.client.ping.return_value = None
        result = self.run_async(server_tools.ServerPingTool(self.client).execute())
        self.assertTrue(result.alive)
        self.assertGreaterEqual(result.latency_ms, 0)

    def test_ping_unreachable(self):
        self.client.ping.side_effect = CommandError("PING failed: connection refused")
        result = self.run_async(server_tools.ServerPingTool(self.client).execute())
        self.assertFalse(result.alive)
        self.assertIn("connection refused", result.message)

    def test_client_list_and_dbsize(self):
        self.client.get_client_list.return_value = ([{"id": "1"}], "id=1")
        result = self.call(server_tools.ClientListTool(self.client))
        self.assertEqual(result.client_count, 1)

        self.client.get_database_size.return_value = 42
        self.assertEqual(self.call(server_tools.DBSizeTool(self.client)).size, 42)

    def test_slowlog(self):
        self.client.get_slowlog.return_value = [{"id": 1, "command": "KEYS *"}]
        result = self.call(server_tools.SlowlogGetTool(self.client), count=5)
        self.assertEqual(result.count, 1)
        self.client.get_slowlog.assert_awaited_once_with(5)

    def test_config(self):
        self.client.config_get.return_value = {"maxmemory": "0"}
        self.assertEqual(
            self.call(server_tools.ConfigGetTool(self.client), parameter="maxmemory").parameters,
            {"maxmemory": "0"},
        )
        with self.assertRaises(ToolValidationError):
            self.call(server_tools.ConfigSetTool(self.client), parameter="maxmemory", value="")
        self.client.config_set.assert_not_awaited()


class TestClusterTools(ToolTestCase):

    def test_cluster_info_and_nodes(self):
        self.client.get_cluster_info.return_value = {"cluster_state": "ok"}
        self.assertEqual(self.call(cluster_tools.ClusterInfoTool(self.client)).info["cluster_state"], "ok")
        self.client.get_cluster_nodes.return_value = "abc 127.0.0.1:7000@17000 myself,master - 0 0 1 connected 0-5460"
        self.assertIn("myself", self.call(cluster_tools.ClusterNodesTool(self.client)).nodes)

    def test_keyslot(self):
        self.client.get_key_slot.return_value = 12539
        self.assertEqual(self.call(cluster_tools.ClusterKeyslotTool(self.client), key="foo").slot, 12539)

    def test_count_keys_in_slot_range(self):
        with self.assertRaises(ToolValidationError):
            self.call(cluster_tools.ClusterCountKeysInSlotTool(self.client), slot=16384)
        self.client.count_keys_in_slot.return_value = 3
        self.assertEqual(self.call(cluster_tools.ClusterCountKeysInSlotTool(self.client), slot=100).count, 3)

    def test_cluster_disabled(self):
        self.client.get_cluster_info.side_effect = CommandError(
            "CLUSTER INFO failed: This instance has cluster support disabled"
        )
        with self.assertRaises(CommandError):
            self.call(cluster_tools.ClusterInfoTool(self.client))


class TestScriptingTools(ToolTestCase):

    def test_eval_encodes_reply(self):
        self.client.eval_script.return_value = [1, b"ok", [b"\xff"]]
        result = self.call(scripting_tools.EvalScriptTool(self.client), script="return 1", keys=["k"], args=["a"])
        self.assertEqual(result.result, [1, "ok", [b"\xff"]])
        self.client.eval_script.assert_awaited_once_with("return 1", ["k"], ["a"])

    def test_script_load_and_evalsha(self):
        sha = "e0e1f9fabfc9d4800c877a703b823ac0578ff8db"
        self.client.load_script.return_value = sha
        self.assertEqual(self.call(scripting_tools.ScriptLoadTool(self.client), script="return 1").sha, sha)

        self.client.eval_sha.return_value = b"done"
        self.assertEqual(self.call(scripting_tools.EvalSHAScriptTool(self.client), sha=sha).result, "done")

    def test_eval_requires_script(self):
        with self.assertRaises(ToolValidationError):
            self.call(scripting_tools.EvalScriptTool(self.client), script="")


class TestRegisterAll(unittest.TestCase):

    def test_every_tool_registers_once(self):
        registry = ToolRegistry()
        register_all(registry, MagicMock(spec=ValkeyClient))

        self.assertEqual(registry.count(), 71)
        names = registry.list_tools()
        self.assertEqual(len(names), len(set(names)))
        for expected in ("get_string", "set_string", "get_hash", "xread_stream", "sdiff_sets", "restore_key"):
            self.assertIn(expected, registry)

    def test_schemas_are_objects(self):
        registry = ToolRegistry()
        register_all(registry, MagicMock(spec=ValkeyClient))
        for info in registry.get_all_tool_info():
            self.assertTrue(info.description, info.name)
            if info.input_schema is not None:
                self.assertEqual(info.input_schema["type"], "object", info.name)

    def test_registering_twice_is_fatal(self):
        registry = ToolRegistry()
        client = MagicMock(spec=ValkeyClient)
        register_all(registry, client)
        with self.assertRaises(RuntimeError):
            register_all(registry, client)


if __name__ == "__main__":
    unittest.main()
