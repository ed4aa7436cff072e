"""
dalli-ring - ketama server selector for memcache clients

Maps cache keys to servers with a weighted ketama hash ring. Point
placement and lookup follow dallimin/go-ketama, which agrees with the
dalli Ruby client except for keys hashing above the last ring point:
those wrap to the first point here, while dalli gives them to the last.

Usage:
    from dalli_ring import Option, new, new_with_weights

    selector = new([
        "cache1.example.com:11211",
        "cache2.example.com:11211:2",   # inline weight
        "/var/run/memcached.sock",
    ])
    address = selector.pick_server("user:123:profile")

    # Skip dead servers by rehashing the key
    selector = new_with_weights(
        {"cache1:11211": 1, "cache2:11211": 3},
        Option(check_alive=True, failover=True),
    )
"""

from .address import Address, TCPAddress, UnixAddress, resolve_address
from .config import Option, parse_server, parse_servers
from .errors import (
    AddressResolutionError,
    InvalidWeightError,
    NoServersError,
    RingError,
)
from .hash_ring import (
    POINTS_PER_SERVER,
    Entry,
    HashRing,
    Server,
    build_ring,
    search,
    server_point,
)
from .health import is_alive
from .selector import MAX_ATTEMPTS, RingSelector, new, new_with_weights

__version__ = "0.1.0"

__all__ = [
    # Selector
    "RingSelector",
    "new",
    "new_with_weights",
    "MAX_ATTEMPTS",
    # Ring
    "HashRing",
    "Entry",
    "Server",
    "build_ring",
    "search",
    "server_point",
    "POINTS_PER_SERVER",
    # Addresses
    "Address",
    "TCPAddress",
    "UnixAddress",
    "resolve_address",
    # Config
    "Option",
    "parse_server",
    "parse_servers",
    # Health
    "is_alive",
    # Errors
    "RingError",
    "NoServersError",
    "AddressResolutionError",
    "InvalidWeightError",
]
