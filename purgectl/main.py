#!/usr/bin/env python3
"""
purgectl - HTCP purge CLI

Sends HTCP CLR requests for one or more URLs.

Usage:
    purgectl -t 10.0.0.1:4827 http://example.org/page
    purgectl -c /etc/htcp-purge/config.toml URL [URL ...]
"""

import sys
import asyncio
import logging
import argparse
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from htcpurge import __version__
from htcpurge.config import ConfigError, PurgerConfig, RouteConfig
from htcpurge.purger import HTCPPurger, PurgeStatus
from htcpurge.transport import TransportError


logger = logging.getLogger("purgectl")

# IPv4 host and port, e.g. 10.64.0.12:4827
TARGET_RE = re.compile(r"((?:\d{1,3}\.){3}\d{1,3}):(\d{1,5})")


def parse_target(value: str) -> Tuple[str, int]:
    """Parse an ip:port argument."""
    match = TARGET_RE.fullmatch(value)
    if not match:
        raise argparse.ArgumentTypeError(f"expected <ip:port>, got {value!r}")

    host, port = match.group(1), int(match.group(2))
    if port < 1 or port > 65535:
        raise argparse.ArgumentTypeError(f"invalid port: {port}")
    return host, port


class PurgeCtl:
    """purgectl CLI application."""

    def __init__(self, config: PurgerConfig):
        self.config = config

    async def purge(self, urls: Sequence[str]) -> int:
        """Purge URLs in one batch. Returns the process exit code."""
        purger = HTCPPurger(self.config)

        await purger.bind()
        try:
            for url in urls:
                logger.info(f"Sending purge for {url}")
            results = await purger.purge(urls)
        finally:
            purger.close()

        failed = 0
        for result in results:
            if result.status == PurgeStatus.SENT:
                dest = result.destination
                print(f"sent    #{result.transaction_id:<6} {dest.host}:{dest.port}  {result.identifier}")
            else:
                failed += 1
                print(f"{result.status.value:<8}        {result.identifier}", file=sys.stderr)

        return 1 if failed else 0


def build_config(args: argparse.Namespace) -> PurgerConfig:
    """Build purger configuration from command-line arguments."""
    if args.config:
        config = PurgerConfig.load(args.config)
    else:
        host, port = args.target
        config = PurgerConfig(routes=[RouteConfig(host=host, port=port)])

    if args.ttl is not None:
        config.multicast_ttl = args.ttl

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="purgectl",
        description="Send HTCP CLR purge requests",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-t", "--target",
        type=parse_target,
        help="Cache endpoint as <ip:port>; all URLs are sent there",
    )
    source.add_argument(
        "-c", "--config",
        type=Path,
        help="Configuration file with route rules",
    )
    parser.add_argument(
        "--ttl",
        type=int,
        default=None,
        help="Multicast TTL (default 8)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"purgectl {__version__}",
    )
    parser.add_argument(
        "urls",
        nargs="+",
        metavar="URL",
        help="URL to purge",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        config = build_config(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    if not args.verbose:
        logging.getLogger().setLevel(config.log_level)

    try:
        return asyncio.run(PurgeCtl(config).purge(args.urls))
    except TransportError as e:
        logger.error(f"Transport error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
