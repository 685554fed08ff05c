"""
UDP Transport

Owns the outbound IPv4 UDP socket used for HTCP CLR requests.

The socket is bound once, exclusively (no SO_REUSEADDR), with multicast
loopback disabled and the configured multicast TTL applied before any
datagram is sent. Sends go through loop.sock_sendto(), so a failure for one
datagram surfaces as an exception on that send only.
"""

import asyncio
import logging
import socket
from typing import Optional, Tuple

from ..config import DEFAULT_BIND_HOST, DEFAULT_BIND_PORT, DEFAULT_MULTICAST_TTL
from .base import BaseTransport, TransportError, TransportState


logger = logging.getLogger(__name__)


class UDPTransport(BaseTransport):
    """
    Non-blocking UDP sender for asyncio.

    Usage:
        transport = UDPTransport(multicast_ttl=8)
        await transport.open()
        await transport.send(packet, ("239.128.0.112", 4827))
        transport.close()
    """

    def __init__(
        self,
        multicast_ttl: int = DEFAULT_MULTICAST_TTL,
        bind_host: str = DEFAULT_BIND_HOST,
        bind_port: int = DEFAULT_BIND_PORT,
        name: str = "udp",
    ):
        super().__init__(name)
        self._multicast_ttl = multicast_ttl
        self._bind_address = (bind_host, bind_port)
        self._socket: Optional[socket.socket] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def local_address(self) -> Optional[Tuple[str, int]]:
        """Address the socket is bound to, once open."""
        if self._socket is None:
            return None
        return self._socket.getsockname()

    @property
    def sock(self) -> Optional[socket.socket]:
        """Underlying socket while bound."""
        return self._socket

    async def open(self) -> None:
        if self._state == TransportState.BOUND:
            raise TransportError(f"{self.name} is already bound")
        if self._state == TransportState.CLOSED:
            raise TransportError(f"{self.name} is closed")

        self._loop = asyncio.get_running_loop()
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)

        try:
            sock.setblocking(False)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_LOOP, 0)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, self._multicast_ttl)
            await self._loop.run_in_executor(None, sock.bind, self._bind_address)
        except OSError as e:
            sock.close()
            raise TransportError(f"Failed to bind UDP socket to {self._bind_address}: {e}") from e

        self._socket = sock
        self._state = TransportState.BOUND
        logger.debug(f"UDP socket bound to {sock.getsockname()}")

    async def _resolve(self, address: Tuple[str, int]) -> Tuple[str, int]:
        host, port = address
        try:
            infos = await self._loop.getaddrinfo(
                host, port,
                family=socket.AF_INET,
                type=socket.SOCK_DGRAM,
            )
        except (OSError, UnicodeError, ValueError) as e:
            # gaierror, or a host the idna codec rejects
            raise TransportError(f"Cannot resolve {host!r}: {e}") from e

        if not infos:
            raise TransportError(f"Cannot resolve {host}")
        return infos[0][4]

    async def send(self, data: bytes, address: Tuple[str, int]) -> None:
        self._check_bound()

        try:
            sockaddr = await self._resolve(address)
            await self._loop.sock_sendto(self._socket, data, sockaddr)
        except TransportError:
            self._tx_errors += 1
            raise
        except (OSError, ValueError) as e:
            self._tx_errors += 1
            raise TransportError(f"Failed to send to {address[0]}:{address[1]}: {e}") from e

        self._packets_sent += 1
        self._bytes_sent += len(data)

    def close(self) -> None:
        sock, self._socket = self._socket, None
        self._state = TransportState.CLOSED

        if sock is None:
            return

        try:
            sock.close()
        except OSError:
            # Already invalid; nothing left to release.
            pass
