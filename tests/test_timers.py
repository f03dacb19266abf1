import threading
import time

from scanner.timers import DelayAccumulator


def test_reserve_returns_backlog_before_adding():
    acc = DelayAccumulator()
    assert acc.reserve(100) == 0
    assert acc.reserve(50) == 100
    assert acc.reserve(0) == 150
    assert acc.value == 150


def test_tick_never_goes_negative():
    acc = DelayAccumulator()
    acc.reserve(2)
    for _ in range(5):
        acc.tick()
        assert acc.value >= 0
    assert acc.value == 0


def test_concurrent_reserves_are_not_lost():
    acc = DelayAccumulator()

    def worker():
        for _ in range(1000):
            acc.reserve(1)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert acc.value == 8000


def test_value_stays_non_negative_with_ticks_and_reserves():
    acc = DelayAccumulator()
    observed = []

    def ticker():
        for _ in range(3000):
            acc.tick()
            observed.append(acc.value)

    def reserver():
        for i in range(500):
            acc.reserve(i % 3)

    threads = [threading.Thread(target=ticker), threading.Thread(target=ticker), threading.Thread(target=reserver)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert min(observed) >= 0
    assert acc.value >= 0


def test_background_ticker_drains_backlog():
    acc = DelayAccumulator()
    acc.start()
    acc.start()
    try:
        assert acc.running
        acc.reserve(20)
        deadline = time.monotonic() + 2
        while acc.value > 0 and time.monotonic() < deadline:
            time.sleep(0.005)
        assert acc.value == 0
    finally:
        acc.stop()
    assert not acc.running
