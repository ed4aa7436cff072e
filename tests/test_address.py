"""Tests for server address parsing."""

import pytest

from dalli_ring import AddressResolutionError, TCPAddress, UnixAddress, resolve_address


class TestResolveAddress:

    def test_host_port(self):
        address = resolve_address("cache1.lvh.me:11210")
        assert address == TCPAddress("cache1.lvh.me", 11210)
        assert address.network == "tcp"
        assert str(address) == "cache1.lvh.me:11210"

    def test_ipv4(self):
        assert resolve_address("127.0.0.1:11211") == TCPAddress("127.0.0.1", 11211)

    def test_ipv6(self):
        address = resolve_address("[::1]:11211")
        assert address == TCPAddress("::1", 11211)
        assert str(address) == "[::1]:11211"

    def test_empty_host_allowed(self):
        assert resolve_address(":11211") == TCPAddress("", 11211)

    def test_unix_socket(self):
        address = resolve_address("/var/run/memcached.sock")
        assert address == UnixAddress("/var/run/memcached.sock")
        assert address.network == "unix"
        assert str(address) == "/var/run/memcached.sock"

    def test_relative_unix_socket(self):
        assert isinstance(resolve_address("run/memcached.sock"), UnixAddress)

    @pytest.mark.parametrize(
        "label", ["cache-1.lvh.me:11211", "cache_1:11211", "cache1.lvh.me.:11211", "10.0.0.1:11211"]
    )
    def test_valid_hosts(self, label):
        assert str(resolve_address(label)) == label

    def test_addresses_are_hashable(self):
        assert len({resolve_address("a:1"), resolve_address("a:1")}) == 1

    @pytest.mark.parametrize(
        "label",
        [
            "",
            "localhost",
            "localhost:",
            "localhost:abc",
            "localhost:-1",
            "localhost:65536",
            "::1:11211",
            "[::1]11211",
            "[::1:11211",
            "[not-an-ip]:11211",
            "bad host:11211",
            "a b@c:11211",
            "exa\tmple:80",
            "-cache:11211",
            "cache..lvh.me:11211",
        ],
    )
    def test_malformed(self, label):
        with pytest.raises(AddressResolutionError) as exc:
            resolve_address(label)
        assert exc.value.label == label
        assert isinstance(exc.value, ValueError)
