"""
Purge Transport Module

Datagram transports used by the purger:
- base.py: Abstract interface, TransportError
- udp.py: Real IPv4 UDP socket
- loopback.py: In-memory transport for tests
"""

from .base import (
    BaseTransport,
    TransportError,
    TransportState,
)

from .udp import (
    UDPTransport,
)

from .loopback import (
    LoopbackTransport,
    LoopbackConfig,
)

__all__ = [
    'BaseTransport',
    'TransportError',
    'TransportState',
    'UDPTransport',
    'LoopbackTransport',
    'LoopbackConfig',
]
