"""Shared fixtures for dalli_ring tests."""

import json
import socket
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    """Load a JSON reference fixture (servers, keys, results)."""
    with open(FIXTURES_DIR / name, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def keys_fixture():
    return load_fixture("keys.json")


@pytest.fixture
def weighted_keys_fixture():
    return load_fixture("keys-with-weights.json")


@pytest.fixture
def tcp_server():
    """A listening TCP socket on 127.0.0.1; yields its "host:port" label."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    sock.listen(16)
    host, port = sock.getsockname()
    yield f"{host}:{port}"
    sock.close()


@pytest.fixture
def unix_server(tmp_path):
    """A listening Unix domain socket; yields its path."""
    path = str(tmp_path / "memcached.sock")
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.bind(path)
    sock.listen(16)
    yield path
    sock.close()


@pytest.fixture
def closed_port():
    """A "host:port" label on which nothing is listening."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    host, port = sock.getsockname()
    sock.close()
    return f"{host}:{port}"
