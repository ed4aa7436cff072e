"""Tests for server spec parsing and options."""

import dataclasses

import pytest

from dalli_ring import InvalidWeightError, Option, parse_server, parse_servers
from dalli_ring.config import DEFAULT_PROBE_TIMEOUT, validate_weights


class TestParseServer:

    def test_plain(self):
        assert parse_server("cache1:11211") == ("cache1:11211", 1)

    def test_inline_weight(self):
        assert parse_server("cache1:11211:3") == ("cache1:11211", 3)

    def test_ipv6_inline_weight(self):
        assert parse_server("[::1]:11211:2") == ("[::1]:11211", 2)
        assert parse_server("[::1]:11211") == ("[::1]:11211", 1)

    def test_unix_path_not_split(self):
        assert parse_server("/tmp/mc.sock") == ("/tmp/mc.sock", 1)

    @pytest.mark.parametrize("spec", ["cache1:11211:x", "cache1:11211:0", "cache1:11211:", "cache1:11211:-2"])
    def test_malformed_weight(self, spec):
        with pytest.raises(InvalidWeightError) as exc:
            parse_server(spec)
        assert exc.value.label == "cache1:11211"


class TestParseServers:

    def test_order_preserved(self):
        servers = parse_servers(["b:1", "a:1:2", "c:1"])
        assert list(servers.items()) == [("b:1", 1), ("a:1", 2), ("c:1", 1)]

    def test_duplicate_keeps_position_last_weight_wins(self):
        servers = parse_servers(["a:1", "b:1", "a:1:4"])
        assert list(servers.items()) == [("a:1", 4), ("b:1", 1)]

    def test_empty(self):
        assert parse_servers([]) == {}


class TestValidateWeights:

    def test_valid(self):
        assert validate_weights({"a:1": 1, "b:1": 7}) == {"a:1": 1, "b:1": 7}

    @pytest.mark.parametrize("weight", [0, -1, 1.5, "2", None, True])
    def test_invalid(self, weight):
        with pytest.raises(InvalidWeightError):
            validate_weights({"a:1": weight})


class TestOption:

    def test_defaults(self):
        option = Option()
        assert option.check_alive is False
        assert option.failover is False
        assert option.probe_timeout == DEFAULT_PROBE_TIMEOUT

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Option().check_alive = True
