"""
Loopback Transport

A virtual transport that records datagrams in memory instead of sending
them. Useful for testing the purger without sockets.

Features:
- Records every (data, address) pair in send order
- Configurable per-address send failures
- Configurable bind failure
"""

import asyncio
from dataclasses import dataclass, field
from typing import List, Set, Tuple

from .base import BaseTransport, TransportError, TransportState


@dataclass
class LoopbackConfig:
    """Failure injection for the loopback transport."""

    # Hosts whose sends raise TransportError
    failing_hosts: Set[str] = field(default_factory=set)

    # Make open() raise TransportError
    fail_bind: bool = False

    # Simulated send latency (seconds)
    latency: float = 0.0


class LoopbackTransport(BaseTransport):
    """
    In-memory transport for testing.

    Usage:
        transport = LoopbackTransport()
        purger = HTCPPurger(routes=[...], transport=transport)
        await purger.bind()
        await purger.purge(["http://example.org/"])

        data, address = transport.sent[0]
    """

    def __init__(self, config: LoopbackConfig = None, name: str = "loopback"):
        super().__init__(name)
        self._config = config or LoopbackConfig()
        self.sent: List[Tuple[bytes, Tuple[str, int]]] = []
        self.close_calls = 0

    async def open(self) -> None:
        if self._config.fail_bind:
            raise TransportError(f"{self.name}: simulated bind failure")
        if self._state == TransportState.CLOSED:
            raise TransportError(f"{self.name} is closed")
        self._state = TransportState.BOUND

    async def send(self, data: bytes, address: Tuple[str, int]) -> None:
        self._check_bound()

        if self._config.latency:
            await asyncio.sleep(self._config.latency)

        if address[0] in self._config.failing_hosts:
            self._tx_errors += 1
            raise TransportError(f"{self.name}: simulated send failure to {address[0]}")

        self.sent.append((bytes(data), address))
        self._packets_sent += 1
        self._bytes_sent += len(data)

    def close(self) -> None:
        self.close_calls += 1
        self._state = TransportState.CLOSED
