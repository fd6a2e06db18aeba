import unittest

from valkey_mcp.tools.formatters import (
    decode_string_map,
    flatten_info,
    normalize_slowlog,
    parse_client_list,
    parse_cluster_info,
    to_text,
)


class TestFormatters(unittest.TestCase):

    def test_to_text(self):
        self.assertEqual(to_text(None), "")
        self.assertEqual(to_text(b"abc"), "abc")
        self.assertEqual(to_text(42), "42")
        self.assertEqual(to_text(b"\xff"), "�")

    def test_flatten_info(self):
        info = {
            "redis_version": "7.2.4",
            "connected_clients": 2,
            "cluster_enabled": False,
            "db0": {"keys": 3, "expires": 0, "avg_ttl": 0},
        }
        flat = flatten_info(info)
        self.assertEqual(flat["redis_version"], "7.2.4")
        self.assertEqual(flat["connected_clients"], "2")
        self.assertEqual(flat["cluster_enabled"], "0")
        self.assertEqual(flat["db0"], "keys=3,expires=0,avg_ttl=0")

    def test_flatten_empty_info(self):
        self.assertEqual(flatten_info(None), {})

    def test_parse_cluster_info(self):
        raw = b"cluster_state:ok\r\ncluster_slots_assigned:16384\r\ncluster_known_nodes:6\r\n"
        info = parse_cluster_info(raw)
        self.assertEqual(info["cluster_state"], "ok")
        self.assertEqual(info["cluster_slots_assigned"], "16384")
        self.assertEqual(len(info), 3)

    def test_parse_cluster_info_mapping(self):
        self.assertEqual(parse_cluster_info({b"cluster_state": b"fail"}), {"cluster_state": "fail"})

    def test_parse_client_list(self):
        raw = (
            b"id=3 addr=127.0.0.1:52555 laddr=127.0.0.1:6379 fd=8 name= age=10 db=0 cmd=client|list\n"
            b"id=4 addr=127.0.0.1:52556 laddr=127.0.0.1:6379 fd=9 name=worker age=2 db=1 cmd=get\n"
        )
        clients = parse_client_list(raw)
        self.assertEqual(len(clients), 2)
        self.assertEqual(clients[0]["id"], "3")
        self.assertEqual(clients[0]["name"], "")
        self.assertEqual(clients[1]["name"], "worker")
        self.assertEqual(clients[1]["db"], "1")

    def test_parse_empty_client_list(self):
        self.assertEqual(parse_client_list(b""), [])

    def test_normalize_slowlog_dicts(self):
        entries = [{
            "id": 14,
            "start_time": 1700000000,
            "duration": 12000,
            "command": b"KEYS *",
            "client_address": b"127.0.0.1:5000",
            "client_name": b"",
        }]
        normalized = normalize_slowlog(entries)
        self.assertEqual(normalized[0], {
            "id": 14,
            "timestamp": 1700000000,
            "duration_us": 12000,
            "command": "KEYS *",
            "client_address": "127.0.0.1:5000",
            "client_name": "",
        })

    def test_normalize_slowlog_raw_arrays(self):
        entries = [[7, 1700000001, 250, [b"SET", b"k", b"v"], b"10.0.0.2:6000", b"app"]]
        normalized = normalize_slowlog(entries)
        self.assertEqual(normalized[0]["command"], "SET k v")
        self.assertEqual(normalized[0]["client_name"], "app")
        self.assertEqual(normalized[0]["duration_us"], 250)

    def test_normalize_short_slowlog_entry(self):
        normalized = normalize_slowlog([[1, 2, 3, [b"PING"]]])
        self.assertEqual(normalized[0]["client_address"], "")

    def test_decode_string_map(self):
        self.assertEqual(decode_string_map({b"maxmemory": b"0"}), {"maxmemory": "0"})
        self.assertEqual(
            decode_string_map([b"maxmemory", b"0", b"timeout", b"300"]),
            {"maxmemory": "0", "timeout": "300"},
        )
        self.assertEqual(decode_string_map(None), {})


if __name__ == "__main__":
    unittest.main()
