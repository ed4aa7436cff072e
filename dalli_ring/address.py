"""
Server address types.

A server label is either a "host:port" pair (TCP) or a filesystem path
containing "/" (Unix domain socket). Host names are kept as given and
looked up by the socket layer when a connection is made.
"""

import ipaddress
import re
from dataclasses import dataclass
from typing import Union

from .errors import AddressResolutionError


@dataclass(frozen=True)
class TCPAddress:
    """A TCP endpoint."""
    host: str
    port: int

    @property
    def network(self) -> str:
        return "tcp"

    def __str__(self) -> str:
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


@dataclass(frozen=True)
class UnixAddress:
    """A Unix domain socket path."""
    path: str

    @property
    def network(self) -> str:
        return "unix"

    def __str__(self) -> str:
        return self.path


Address = Union[TCPAddress, UnixAddress]

# RFC 1123 host name labels; underscores are tolerated as many resolvers do
_HOST_LABEL = re.compile(r"[A-Za-z0-9_](?:[A-Za-z0-9_-]{0,61}[A-Za-z0-9_])?")


def _valid_hostname(host: str) -> bool:
    if len(host) > 253:
        return False
    labels = host[:-1].split(".") if host.endswith(".") else host.split(".")
    return all(_HOST_LABEL.fullmatch(part) for part in labels)


def _split_host_port(label: str):
    if label.startswith("["):
        end = label.find("]")
        if end < 0:
            raise AddressResolutionError(label, "missing ']' in address")
        host = label[1:end]
        try:
            ipaddress.ip_address(host)
        except ValueError:
            raise AddressResolutionError(label, f"invalid IP address '{host}'")
        rest = label[end + 1:]
        if not rest.startswith(":"):
            raise AddressResolutionError(label, "missing port in address")
        return host, rest[1:]

    host, sep, port = label.rpartition(":")
    if not sep:
        raise AddressResolutionError(label, "missing port in address")
    if ":" in host:
        raise AddressResolutionError(label, "too many colons in address")
    if host and not _valid_hostname(host):
        raise AddressResolutionError(label, f"invalid host '{host}'")
    return host, port


def resolve_address(label: str) -> Address:
    """
    Turn a server label into an address.

    Args:
        label: "host:port", "[ipv6]:port" or a socket path containing "/"

    Returns:
        TCPAddress or UnixAddress

    Raises:
        AddressResolutionError: If the label is malformed
    """
    if not label:
        raise AddressResolutionError(label, "empty address")

    if "/" in label:
        return UnixAddress(label)

    host, port = _split_host_port(label)

    if not (port.isascii() and port.isdigit()):
        raise AddressResolutionError(label, f"invalid port '{port}'")

    port_num = int(port)
    if port_num > 65535:
        raise AddressResolutionError(label, f"port {port_num} out of range")

    return TCPAddress(host, port_num)
