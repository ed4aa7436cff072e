"""
Ketama hash ring construction and lookup.

Each server gets a number of points proportional to its share of the
total cluster weight. Points are placed with the ketama scheme used by
dalli: SHA-1 of "label:index", first 8 hex digits as an unsigned 32-bit
coordinate. The ring is built once and never modified.
"""

import hashlib
import logging
import zlib
from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple, Union

import numpy as np

from .address import Address, resolve_address
from .config import validate_weights

logger = logging.getLogger(__name__)

# MEMCACHED_POINTS_PER_SERVER_KETAMA
POINTS_PER_SERVER = 160


@dataclass(frozen=True)
class Server:
    """A configured server: its label, resolved address and weight."""
    label: str
    address: Address
    weight: int = 1


@dataclass(frozen=True)
class Entry:
    """One point on the ring, owned by a server."""
    point: int
    server: Server


def key_hash(key: str) -> int:
    """CRC32-IEEE of the UTF-8 encoded key (lone surrogates passed through)."""
    return zlib.crc32(key.encode("utf-8", "surrogatepass")) & 0xFFFFFFFF


def server_point(label: str, index: int) -> int:
    """
    Ring coordinate of the index-th point of a server.

    Args:
        label: Server label as configured (e.g. "cache1:11211")
        index: Point index, starting at 0

    Returns:
        First 4 bytes of SHA-1("label:index") as a big-endian integer
    """
    digest = hashlib.sha1(f"{label}:{index}".encode("utf-8")).hexdigest()
    return int(digest[:8], 16)


def entry_count(weight: int, total_servers: int, total_weight: int) -> int:
    """Number of ring points for a server of the given weight."""
    return (total_servers * POINTS_PER_SERVER * weight) // total_weight


def search(points: Sequence[int], h: int) -> int:
    """
    Ketama binary search over sorted ring coordinates.

    Returns the index of the point owning h. The arithmetic follows the
    go-ketama search used by dalli-compatible clients, including its
    boundary branches:

    - a match in (points[m-1], points[m]] returns m - 1;
    - a match below the first point returns -1, the wrap boundary,
      which indexes the last entry;
    - h == 0 returns the last index;
    - running off the end returns 0.

    Args:
        points: Ring coordinates sorted ascending (must be non-empty)
        h: 32-bit lookup hash

    Returns:
        Entry index in [-1, len(points) - 1]
    """
    maxp = len(points)
    lowp = 0
    highp = maxp

    while True:
        midp = (lowp + highp) // 2
        if midp >= maxp:
            if midp == maxp:
                return 0
            return maxp - 1

        midval = points[midp]
        midval1 = 0 if midp == 0 else points[midp - 1]

        if midval1 < h <= midval:
            return midp - 1

        if midval < h:
            lowp = midp + 1
        elif midp == 0:
            # highp would go below zero; an unsigned counter wraps to the top
            return maxp - 1
        else:
            highp = midp - 1

        if lowp > highp:
            return 0


@dataclass(frozen=True, eq=False)
class HashRing:
    """
    Immutable ketama ring.

    Attributes:
        entries: Ring points sorted by coordinate
        servers: Configured servers in first-seen order
        points: Sorted coordinates as a read-only uint32 array
        owners: For each entry, the index of its server in `servers`
    """
    entries: Tuple[Entry, ...]
    servers: Tuple[Server, ...]
    points: np.ndarray
    owners: np.ndarray

    @property
    def addresses(self) -> List[Address]:
        """Distinct server addresses, one per configured server."""
        return [s.address for s in self.servers]

    @property
    def coordinates(self) -> List[int]:
        return self.points.tolist()

    def points_for(self, label: str) -> int:
        """Number of ring points owned by a server label."""
        for i, server in enumerate(self.servers):
            if server.label == label:
                return int(np.count_nonzero(self.owners == i))
        return 0

    def __len__(self) -> int:
        """Number of points on the ring."""
        return len(self.entries)


def _empty_ring() -> HashRing:
    return HashRing(
        entries=(),
        servers=(),
        points=np.zeros(0, dtype=np.uint32),
        owners=np.zeros(0, dtype=np.intp),
    )


def build_ring(
    servers: Union[Mapping[str, int], Iterable[Tuple[str, int]]]
) -> HashRing:
    """
    Build a ring from weighted servers.

    Args:
        servers: label -> weight mapping, or (label, weight) pairs.
                 Duplicate labels keep their first position.

    Returns:
        HashRing (empty if no servers are given)

    Raises:
        AddressResolutionError: If a label is not a valid address
        InvalidWeightError: If a weight is not a positive integer
    """
    items = servers.items() if isinstance(servers, Mapping) else servers
    weights = validate_weights(dict(items))

    if not weights:
        return _empty_ring()

    configured = [
        Server(label, resolve_address(label), weight)
        for label, weight in weights.items()
    ]

    # A lone server owns every key; one point is enough
    if len(configured) == 1:
        counts = [1]
    else:
        total_weight = sum(weights.values())
        counts = [
            entry_count(s.weight, len(configured), total_weight)
            for s in configured
        ]

    raw_points = []
    raw_owners = []
    for idx, (server, count) in enumerate(zip(configured, counts)):
        for i in range(count):
            raw_points.append(server_point(server.label, i))
            raw_owners.append(idx)

    points = np.array(raw_points, dtype=np.uint32)
    owners = np.array(raw_owners, dtype=np.intp)

    order = np.argsort(points, kind="stable")
    points = points[order]
    owners = owners[order]
    points.setflags(write=False)
    owners.setflags(write=False)

    entries = tuple(
        Entry(int(p), configured[o])
        for p, o in zip(points.tolist(), owners.tolist())
    )

    logger.info(
        f"Built hash ring with {len(configured)} servers and {len(entries)} points"
    )

    return HashRing(
        entries=entries,
        servers=tuple(configured),
        points=points,
        owners=owners,
    )
