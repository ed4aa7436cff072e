"""
Selector options and server list parsing.

Servers are configured either as plain labels, optionally carrying an
inline weight ("host:port:weight"), or as an explicit label -> weight map.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Tuple

from .errors import InvalidWeightError

# Upper bound for a single liveness probe (seconds)
DEFAULT_PROBE_TIMEOUT = 0.05

DEFAULT_WEIGHT = 1


@dataclass(frozen=True)
class Option:
    """
    Lookup behaviour of a selector.

    Attributes:
        check_alive: Probe the candidate server before returning it
        failover: On a dead candidate, rehash the key and try again
        probe_timeout: Connect/read timeout of a single probe (seconds)
    """
    check_alive: bool = False
    failover: bool = False
    probe_timeout: float = DEFAULT_PROBE_TIMEOUT


def _parse_weight(label: str, raw: str) -> int:
    if not (raw.isascii() and raw.isdigit()):
        raise InvalidWeightError(label, raw)
    weight = int(raw)
    if weight < 1:
        raise InvalidWeightError(label, raw)
    return weight


def validate_weight(label: str, weight) -> int:
    """Check a weight taken from a label -> weight mapping."""
    if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
        raise InvalidWeightError(label, weight)
    return weight


def parse_server(spec: str) -> Tuple[str, int]:
    """
    Split a server spec into its label and weight.

    Args:
        spec: "host:port", "host:port:weight", "[ipv6]:port[:weight]"
              or a Unix socket path

    Returns:
        (label, weight) tuple; weight defaults to 1

    Raises:
        InvalidWeightError: If an inline weight is not a positive integer
    """
    if "/" in spec:
        return spec, DEFAULT_WEIGHT

    if spec.startswith("["):
        end = spec.find("]")
        if end < 0:
            return spec, DEFAULT_WEIGHT
        head, rest = spec[:end + 1], spec[end + 1:]
        parts = rest.split(":", 2)
        # rest looks like ":port" or ":port:weight"
        if len(parts) == 3:
            label = f"{head}:{parts[1]}"
            return label, _parse_weight(label, parts[2])
        return spec, DEFAULT_WEIGHT

    parts = spec.split(":", 2)
    if len(parts) == 3:
        label = ":".join(parts[:2])
        return label, _parse_weight(label, parts[2])

    return spec, DEFAULT_WEIGHT


def parse_servers(specs: Iterable[str]) -> Dict[str, int]:
    """
    Parse a list of server specs into an ordered label -> weight map.

    A label listed twice keeps its first position; the last weight wins.
    """
    servers: Dict[str, int] = {}
    for spec in specs:
        label, weight = parse_server(spec)
        servers[label] = weight
    return servers


def validate_weights(servers: Mapping[str, int]) -> Dict[str, int]:
    """Copy a label -> weight mapping, rejecting non-positive weights."""
    return {
        label: validate_weight(label, weight)
        for label, weight in servers.items()
    }
