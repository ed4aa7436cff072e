"""
Liveness probing for candidate servers.

A probe opens a connection, peeks without blocking to see whether the
peer already hung up, and closes it. Any socket error means "not alive".
"""

import logging
import socket
from typing import Callable

from .address import Address, UnixAddress
from .config import DEFAULT_PROBE_TIMEOUT

logger = logging.getLogger(__name__)

Probe = Callable[[Address], bool]


def _connect(address: Address, timeout: float) -> socket.socket:
    if isinstance(address, UnixAddress):
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(timeout)
        try:
            sock.connect(address.path)
        except OSError:
            sock.close()
            raise
        return sock

    return socket.create_connection((address.host, address.port), timeout=timeout)


def is_alive(address: Address, timeout: float = DEFAULT_PROBE_TIMEOUT) -> bool:
    """
    Check whether a server accepts connections.

    Args:
        address: Server to probe
        timeout: Connect timeout in seconds

    Returns:
        True if the connection was accepted and not immediately closed
    """
    try:
        sock = _connect(address, timeout)
    except OSError as e:
        logger.debug(f"Probe of {address} failed to connect: {e}")
        return False

    try:
        sock.setblocking(False)
        try:
            data = sock.recv(1, socket.MSG_PEEK)
        except BlockingIOError:
            # Nothing to read yet: connection is open
            return True
        if not data:
            logger.debug(f"Probe of {address}: connection closed by peer")
            return False
        return True
    except OSError as e:
        logger.debug(f"Probe of {address} failed to read: {e}")
        return False
    finally:
        sock.close()


def make_probe(timeout: float = DEFAULT_PROBE_TIMEOUT) -> Probe:
    """Return a probe bound to the given timeout."""
    def probe(address: Address) -> bool:
        return is_alive(address, timeout=timeout)
    return probe
