"""
Purge Transport Base Class

Defines the interface the purger uses to put datagrams on the wire.

Design Principles:
- Async interface; open and send may suspend
- Send only, nothing is ever read back
- close() never raises
- State tracking and statistics
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Tuple


class TransportError(Exception):
    """Exception raised for transport-related errors."""
    pass


class TransportState(Enum):
    """Transport lifecycle state."""
    UNBOUND = auto()   # Not yet opened
    BOUND = auto()     # Ready to send
    CLOSED = auto()    # Released, cannot be reused


class BaseTransport(ABC):
    """
    Abstract base class for datagram transports.

    Usage:
        transport = ConcreteTransport()
        await transport.open()
        await transport.send(packet, ("10.0.0.1", 4827))
        transport.close()
    """

    def __init__(self, name: str = "transport"):
        self.name = name
        self._state = TransportState.UNBOUND

        # Statistics
        self._packets_sent = 0
        self._bytes_sent = 0
        self._tx_errors = 0

    @property
    def state(self) -> TransportState:
        """Current transport state."""
        return self._state

    @property
    def is_bound(self) -> bool:
        """Whether the transport can send."""
        return self._state == TransportState.BOUND

    @abstractmethod
    async def open(self) -> None:
        """
        Acquire the underlying socket.

        Raises:
            TransportError: If the socket cannot be bound
        """
        pass

    @abstractmethod
    async def send(self, data: bytes, address: Tuple[str, int]) -> None:
        """
        Send one datagram.

        Completes once the datagram is queued locally; there is no
        acknowledgment from the peer.

        Raises:
            TransportError: If the transport is not bound or the send fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the socket. Safe to call more than once."""
        pass

    def get_statistics(self) -> dict:
        """
        Get transport statistics.

        Returns:
            dict: Statistics including packets/bytes sent and errors
        """
        return {
            "name": self.name,
            "state": self._state.name,
            "packets_sent": self._packets_sent,
            "bytes_sent": self._bytes_sent,
            "tx_errors": self._tx_errors,
        }

    def _check_bound(self) -> None:
        if self._state != TransportState.BOUND:
            raise TransportError(
                f"{self.name} is not bound (state={self._state.name}); call bind() first"
            )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name} state={self._state.name}>"
