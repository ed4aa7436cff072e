"""
Print the server each key is routed to.

Usage:
    python -m dalli_ring --server cache1:11211 --server cache2:11211:2 user:1 user:2
    python -m dalli_ring --server cache1:11211 --check-alive --failover user:1
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_PROBE_TIMEOUT, Option
from .errors import NoServersError, RingError
from .selector import new

logger = logging.getLogger("dalli_ring")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dalli_ring",
        description="Show which memcache server owns each key",
    )
    parser.add_argument(
        "--server",
        action="append",
        default=[],
        help="Server as host:port[:weight] or socket path (repeatable)",
    )
    parser.add_argument("--check-alive", action="store_true", help="Probe servers before picking them")
    parser.add_argument("--failover", action="store_true", help="Rehash keys away from dead servers")
    parser.add_argument(
        "--probe-timeout",
        type=float,
        default=DEFAULT_PROBE_TIMEOUT,
        help="Liveness probe timeout in seconds",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    parser.add_argument("keys", nargs="+", help="Keys to look up")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    option = Option(
        check_alive=args.check_alive,
        failover=args.failover,
        probe_timeout=args.probe_timeout,
    )

    try:
        selector = new(args.server, option)
    except RingError as e:
        logger.error(f"Invalid server configuration: {e}")
        return 1

    status = 0
    for key in args.keys:
        try:
            address = selector.pick_server(key)
        except NoServersError as e:
            print(f"{key} -> error: {e}")
            status = 1
            continue
        print(f"{key} -> {address}")

    return status


if __name__ == "__main__":
    sys.exit(main())
