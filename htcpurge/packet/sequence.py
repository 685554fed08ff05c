"""
HTCP Transaction Ids

Allocates the per-request transaction id carried in every CLR header.

Design:
- One counter per purger instance, never process-wide
- Starts at 1 and increments once per packet
- Wraps at the 32-bit field width
- Thread-safe allocation
"""

import threading


# First id handed out
INITIAL_TRANSACTION_ID = 1

# Transaction id field is 32 bits wide
TRANSACTION_ID_MASK = 0xFFFFFFFF


class TransactionCounter:
    """
    Monotonic, wrapping transaction id allocator.

    Usage:
        counter = TransactionCounter()
        counter.next()  # 1
        counter.next()  # 2
    """

    def __init__(self, start: int = INITIAL_TRANSACTION_ID):
        self._value = start & TRANSACTION_ID_MASK
        self._lock = threading.Lock()

    def next(self) -> int:
        """Return the current id and advance the counter."""
        with self._lock:
            value = self._value
            self._value = (value + 1) & TRANSACTION_ID_MASK
            return value

    def peek(self) -> int:
        """Id the next call to next() will return."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"<TransactionCounter next={self.peek()}>"
