"""
Server selector for memcache clients.

Maps keys to servers over a ketama ring. Optionally probes the chosen
server and, on failure, rehashes the key to jump to another point of
the ring instead of walking to its neighbour, which spreads the load of
a dead server over the rest of the cluster.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

import numpy as np

from .address import Address
from .config import Option, parse_servers
from .errors import NoServersError
from .hash_ring import HashRing, build_ring, key_hash, search
from .health import Probe, make_probe

logger = logging.getLogger(__name__)

# Lookups tried before giving up (dalli uses the same bound)
MAX_ATTEMPTS = 20


class RingSelector:
    """
    Picks the server owning a key.

    The ring and options are fixed at construction; to change the server
    set, build a new selector. Lookups share the ring without locking.

    Usage:
        selector = new(["cache1:11211", "cache2:11211:2"])
        address = selector.pick_server("user:123")
    """

    def __init__(
        self,
        ring: HashRing,
        option: Optional[Option] = None,
        probe: Optional[Probe] = None,
    ):
        """
        Initialize the selector.

        Args:
            ring: A built hash ring
            option: Lookup options (defaults: no probing, no failover)
            probe: Liveness check to use instead of a socket probe
        """
        self._ring = ring
        self._option = option or Option()
        self._probe = probe or make_probe(self._option.probe_timeout)
        self._points = ring.coordinates
        self._addresses = tuple(ring.addresses)

    @classmethod
    def from_servers(
        cls,
        servers: Sequence[str],
        option: Optional[Option] = None,
        probe: Optional[Probe] = None,
    ) -> "RingSelector":
        """Build from server specs, which may carry inline weights."""
        return cls(build_ring(parse_servers(servers)), option, probe)

    @classmethod
    def from_weights(
        cls,
        servers: Mapping[str, int],
        option: Optional[Option] = None,
        probe: Optional[Probe] = None,
    ) -> "RingSelector":
        """Build from a label -> weight mapping."""
        return cls(build_ring(servers), option, probe)

    @property
    def ring(self) -> HashRing:
        return self._ring

    @property
    def option(self) -> Option:
        return self._option

    def pick_server(self, key: str) -> Address:
        """
        Return the address of the server a key should be stored on.

        Args:
            key: Cache key

        Returns:
            Server address

        Raises:
            NoServersError: If the ring is empty or no live server was found
        """
        n = len(self._ring)

        if n == 0:
            raise NoServersError()

        if n == 1:
            return self._ring.entries[0].server.address

        return self._pick(key)

    def _pick(self, key: str) -> Address:
        option = self._option
        x = key_hash(key)

        for attempt in range(MAX_ATTEMPTS):
            idx = search(self._points, x)

            if idx < 0 and option.failover:
                x = key_hash(f"{attempt}{key}")
                continue

            address = self._ring.entries[idx].server.address

            if not option.check_alive:
                return address

            if self._probe(address):
                return address

            if not option.failover:
                logger.debug(f"Server {address} for key '{key}' is down")
                break

            logger.debug(f"Server {address} is down, rehashing key '{key}' (attempt {attempt + 1})")
            x = key_hash(f"{attempt}{key}")

        logger.warning(f"No live server found for key '{key}'")
        raise NoServersError()

    def servers(self) -> List[Address]:
        """Distinct server addresses in configuration order."""
        return list(self._addresses)

    def each(self, visit: Callable[[Address], Any]) -> None:
        """
        Call visit for every server address, in order.

        The first exception raised by visit stops the iteration and
        propagates to the caller.
        """
        for address in self._addresses:
            visit(address)

    def distribution(self, keys: Iterable[str]) -> Dict[Address, int]:
        """
        Count how many keys each server owns.

        Uses plain ring ownership, without probing or failover.

        Args:
            keys: Sample of keys

        Returns:
            Dict mapping every server address to its key count
        """
        if not self._addresses:
            raise NoServersError()

        if len(self._ring) == 1:
            total = sum(1 for _ in keys)
            counts = np.zeros(len(self._addresses), dtype=np.int64)
            counts[self._ring.owners[0]] = total
        else:
            owners = np.fromiter(
                (self._ring.owners[search(self._points, key_hash(k))] for k in keys),
                dtype=np.intp,
            )
            counts = np.bincount(owners, minlength=len(self._addresses))

        return {
            address: int(count)
            for address, count in zip(self._addresses, counts)
        }

    def __iter__(self) -> Iterator[Address]:
        return iter(self._addresses)

    def __len__(self) -> int:
        """Number of configured servers."""
        return len(self._addresses)


def new(
    servers: Sequence[str],
    option: Optional[Option] = None,
    probe: Optional[Probe] = None,
) -> RingSelector:
    """
    Create a selector from server specs ("host:port[:weight]" or paths).

    Raises:
        AddressResolutionError: If a server label is malformed
        InvalidWeightError: If an inline weight is malformed
    """
    return RingSelector.from_servers(servers, option, probe)


def new_with_weights(
    servers: Mapping[str, int],
    option: Optional[Option] = None,
    probe: Optional[Probe] = None,
) -> RingSelector:
    """
    Create a selector from a label -> weight mapping.

    Raises:
        AddressResolutionError: If a server label is malformed
        InvalidWeightError: If a weight is not a positive integer
    """
    return RingSelector.from_weights(servers, option, probe)
