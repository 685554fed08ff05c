"""
HTCP Purger

Front end that turns a batch of URLs into HTCP CLR datagrams.

For every URL in a batch:
1. Look up the cache endpoint with the RouteResolver
2. Allocate the next transaction id and encode the CLR request
3. Send it over the shared transport

All sends of a batch run concurrently. A URL without a route, a URL too
long to encode, or a failed send is reported for that URL only; the rest
of the batch is still sent. Nothing is retried and nothing is read back.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .config import ConfigError, PurgerConfig, RouteConfig
from .packet import EncodingError, TransactionCounter, check_uri, encode_clr
from .routing import Destination, RouteResolver, RouteRule
from .transport import BaseTransport, TransportError, UDPTransport


logger = logging.getLogger(__name__)

# Diagnostic callback categories
LOG_NO_ROUTE = "error/htcp-purge"
LOG_ENCODE_ERROR = "error/htcp-encode"
LOG_SEND_ERROR = "error/htcp-send"

LogCallback = Callable[[str, Dict[str, Any]], None]
Identifier = Union[str, bytes]


def _no_log(category: str, details: Dict[str, Any]) -> None:
    pass


class PurgeStatus(Enum):
    """Outcome of purging one URL."""
    SENT = "sent"
    NO_ROUTE = "no_route"
    ENCODE_ERROR = "encode_error"
    SEND_ERROR = "send_error"


@dataclass
class PurgeResult:
    """Per-URL result of a purge batch."""
    identifier: Identifier
    status: PurgeStatus
    destination: Optional[Destination] = None
    transaction_id: Optional[int] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == PurgeStatus.SENT


def _route_config(route: Union[RouteConfig, RouteRule, Mapping[str, Any]]) -> RouteConfig:
    if isinstance(route, RouteConfig):
        return route
    if isinstance(route, RouteRule):
        return RouteConfig(host=route.host, port=route.port, pattern=route.pattern)
    try:
        return RouteConfig(
            host=route["host"],
            port=route["port"],
            pattern=route.get("pattern", route.get("rule")),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise ConfigError(f"Malformed route {route!r}: {e}") from e


class HTCPPurger:
    """
    Sends HTCP CLR requests for URLs to their configured caches.

    Usage:
        purger = HTCPPurger(routes=[
            {"pattern": r"/^https?:\\/\\/upload\\./", "host": "239.128.0.113", "port": 4827},
            {"host": "239.128.0.112", "port": 4827},
        ])
        await purger.bind()
        results = await purger.purge(["http://upload.example.org/a.png"])
        purger.close()

    Or as an async context manager, which binds on entry and closes on exit:

        async with HTCPPurger(config) as purger:
            await purger.purge(urls)
    """

    def __init__(
        self,
        config: Optional[PurgerConfig] = None,
        *,
        routes: Optional[Iterable[Union[RouteConfig, RouteRule, Mapping[str, Any]]]] = None,
        multicast_ttl: Optional[int] = None,
        log: Optional[LogCallback] = None,
        transport: Optional[BaseTransport] = None,
    ):
        """
        Initialize purger.

        Args:
            config: Full configuration; when omitted one is built from
                routes and multicast_ttl
            routes: Route entries (RouteConfig, RouteRule or dicts with
                host, port and optional pattern)
            multicast_ttl: Multicast TTL for the outbound socket (default 8)
            log: Diagnostic callback invoked as log(category, {"msg": ...})
            transport: Transport to send through (default: UDPTransport)

        Raises:
            ConfigError: If no routes are given, any route is invalid, or
                config is combined with routes or multicast_ttl
        """
        if config is not None and (routes is not None or multicast_ttl is not None):
            raise ConfigError("Pass either config or routes/multicast_ttl, not both")

        if config is None:
            config = PurgerConfig(routes=[_route_config(r) for r in routes or []])
            if multicast_ttl is not None:
                config.multicast_ttl = multicast_ttl

        config.validate()

        self._config = config
        self._resolver = RouteResolver(
            RouteRule(host=r.host, port=r.port, pattern=r.pattern)
            for r in config.routes
        )
        self._log = log or _no_log
        self._counter = TransactionCounter()

        self._transport = transport or UDPTransport(
            multicast_ttl=config.multicast_ttl,
            bind_host=config.bind_host,
            bind_port=config.bind_port,
        )

        # Statistics
        self._batches = 0
        self._packets_sent = 0
        self._no_route = 0
        self._encode_errors = 0
        self._send_errors = 0

    @property
    def config(self) -> PurgerConfig:
        return self._config

    @property
    def resolver(self) -> RouteResolver:
        return self._resolver

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def next_transaction_id(self) -> int:
        """Transaction id the next encoded packet will carry."""
        return self._counter.peek()

    async def bind(self) -> None:
        """
        Bind the outbound socket.

        Must complete before purge() is called.

        Raises:
            TransportError: If the socket cannot be bound
        """
        await self._transport.open()
        logger.info(
            f"Purger bound ({len(self._resolver)} routes, "
            f"multicast TTL {self._config.multicast_ttl})"
        )

    async def purge(self, identifiers: Iterable[Identifier]) -> List[PurgeResult]:
        """
        Purge a batch of URLs.

        Packets are built in input order, so transaction ids follow the
        order of ``identifiers``; the sends themselves are unordered.

        Args:
            identifiers: URLs to purge

        Returns:
            One PurgeResult per URL, in input order

        Raises:
            TransportError: If bind() has not completed
        """
        if not self._transport.is_bound:
            raise TransportError("Purger is not bound; call bind() first")

        self._batches += 1
        prepared = [self._prepare(identifier) for identifier in identifiers]

        await asyncio.gather(*(
            self._send(result, packet)
            for result, packet in prepared
            if packet is not None
        ))

        return [result for result, _ in prepared]

    def _prepare(self, identifier: Identifier) -> Tuple[PurgeResult, Optional[bytes]]:
        """Route and encode one URL. Returns the packet, or None to skip."""
        url = identifier.decode("utf-8", "replace") if isinstance(identifier, bytes) else identifier

        destination = self._resolver.resolve(url)
        if destination is None:
            self._no_route += 1
            self._report(LOG_NO_ROUTE, f"Could not find route for {url}")
            return PurgeResult(identifier, PurgeStatus.NO_ROUTE), None

        # Only packets that will be sent consume a transaction id
        try:
            check_uri(identifier)
        except EncodingError as e:
            self._encode_errors += 1
            self._report(LOG_ENCODE_ERROR, f"Could not encode purge for {url[:128]}: {e}")
            return PurgeResult(
                identifier, PurgeStatus.ENCODE_ERROR,
                destination=destination,
                error=e,
            ), None

        transaction_id = self._counter.next()
        packet = encode_clr(identifier, transaction_id)

        result = PurgeResult(
            identifier, PurgeStatus.SENT,
            destination=destination,
            transaction_id=transaction_id,
        )
        return result, packet

    async def _send(self, result: PurgeResult, packet: bytes) -> None:
        destination = result.destination
        try:
            await self._transport.send(packet, (destination.host, destination.port))
        except TransportError as e:
            self._send_errors += 1
            result.status = PurgeStatus.SEND_ERROR
            result.error = e
            self._report(LOG_SEND_ERROR, f"Failed to send purge for {result.identifier!r}: {e}")
            return

        self._packets_sent += 1
        logger.debug(
            f"CLR #{result.transaction_id} -> {destination.host}:{destination.port} "
            f"({len(packet)} bytes)"
        )

    def _report(self, category: str, msg: str) -> None:
        logger.warning(msg)
        self._log(category, {"msg": msg})

    def close(self) -> None:
        """
        Release the outbound socket.

        Idempotent. Never raises, even if the socket was never bound or is
        already closed.
        """
        try:
            self._transport.close()
        except Exception:
            # Socket already invalid.
            pass
        logger.debug("Purger closed")

    def get_statistics(self) -> dict:
        """
        Get purger statistics.

        Returns:
            dict: Batch and packet counters plus transport statistics
        """
        return {
            "batches": self._batches,
            "packets_sent": self._packets_sent,
            "no_route": self._no_route,
            "encode_errors": self._encode_errors,
            "send_errors": self._send_errors,
            "next_transaction_id": self._counter.peek(),
            "transport": self._transport.get_statistics(),
        }

    async def __aenter__(self) -> 'HTCPPurger':
        await self.bind()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return (
            f"<HTCPPurger routes={len(self._resolver)} "
            f"transport={self._transport.name} next_id={self._counter.peek()}>"
        )
