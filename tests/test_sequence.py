"""
Tests for transaction id allocation.
"""

import threading

from htcpurge.packet import TransactionCounter


def test_starts_at_one():
    counter = TransactionCounter()

    assert counter.peek() == 1
    assert counter.next() == 1
    assert counter.next() == 2
    assert counter.peek() == 3


def test_sequential_ids_are_strictly_increasing():
    counter = TransactionCounter()
    ids = [counter.next() for _ in range(1000)]

    assert ids == sorted(ids)
    assert len(set(ids)) == len(ids)


def test_wraps_at_32_bits():
    counter = TransactionCounter(start=0xFFFFFFFE)

    assert counter.next() == 0xFFFFFFFE
    assert counter.next() == 0xFFFFFFFF
    assert counter.next() == 0
    assert counter.next() == 1


def test_counters_are_independent():
    a = TransactionCounter()
    b = TransactionCounter()
    a.next()
    a.next()

    assert b.next() == 1


def test_concurrent_allocation_has_no_lost_updates():
    counter = TransactionCounter()
    seen = []
    lock = threading.Lock()

    def worker():
        local = [counter.next() for _ in range(500)]
        with lock:
            seen.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(seen) == list(range(1, 4001))
    assert counter.peek() == 4001
