"""
Shared fixtures for htcpurge tests.
"""

import socket

import pytest

from htcpurge.transport import LoopbackTransport


# "test.com" purged with transaction id 1
REFERENCE_PACKET = bytes([
    0, 44, 0, 0, 0, 38, 4, 0,
    0, 0, 0, 1, 0, 0, 0, 4, 72, 69, 65, 68, 0, 8,
    116, 101, 115, 116, 46, 99, 111, 109, 0, 8, 72,
    84, 84, 80, 47, 49, 46, 48, 0, 0, 0, 2,
])

# Same request with transaction id 2
REFERENCE_PACKET_2 = bytes([
    0, 44, 0, 0, 0, 38, 4, 0,
    0, 0, 0, 2, 0, 0, 0, 4, 72, 69, 65, 68, 0, 8,
    116, 101, 115, 116, 46, 99, 111, 109, 0, 8, 72,
    84, 84, 80, 47, 49, 46, 48, 0, 0, 0, 2,
])


@pytest.fixture
def loopback() -> LoopbackTransport:
    return LoopbackTransport()


@pytest.fixture
def udp_listener():
    """UDP socket on 127.0.0.1 with an ephemeral port."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


class LogRecorder:
    """Collects diagnostic callback invocations."""

    def __init__(self):
        self.calls = []

    def __call__(self, category, details):
        self.calls.append((category, details))

    def categories(self):
        return [category for category, _ in self.calls]


@pytest.fixture
def log_recorder() -> LogRecorder:
    return LogRecorder()


@pytest.fixture
def reference_packets():
    """Reference CLR packets for "test.com" with ids 1 and 2."""
    return REFERENCE_PACKET, REFERENCE_PACKET_2
