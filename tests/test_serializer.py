"""Tests for the FIFO write serializer."""

from __future__ import annotations

import threading
import time
from collections.abc import Generator

import pytest

from blogstore.storage.serializer import WriteSerializer


@pytest.fixture
def serializer() -> Generator[WriteSerializer, None, None]:
    s = WriteSerializer(name="test-writer")
    yield s
    s.shutdown()


def test_tasks_run_in_submission_order(serializer: WriteSerializer) -> None:
    order: list[int] = []

    def task(n: int) -> int:
        # Earlier tasks sleep longer; ordering must still hold.
        time.sleep(0.002 * (5 - n))
        order.append(n)
        return n

    futures = [serializer.enqueue(task, n) for n in range(5)]
    assert [f.result(timeout=5) for f in futures] == [0, 1, 2, 3, 4]
    assert order == [0, 1, 2, 3, 4]


def test_failing_task_does_not_stall_queue(serializer: WriteSerializer) -> None:
    def boom() -> None:
        raise RuntimeError("disk on fire")

    failed = serializer.enqueue(boom)
    after = serializer.enqueue(lambda: "still running")

    with pytest.raises(RuntimeError, match="disk on fire"):
        failed.result(timeout=5)
    assert after.result(timeout=5) == "still running"


def test_run_reraises_task_exception(serializer: WriteSerializer) -> None:
    with pytest.raises(ValueError):
        serializer.run(int, "not a number")
    assert serializer.run(int, "7") == 7


def test_no_two_tasks_overlap(serializer: WriteSerializer) -> None:
    """Submissions from many threads never execute concurrently."""
    active = 0
    peak = 0
    guard = threading.Lock()

    def task() -> None:
        nonlocal active, peak
        with guard:
            active += 1
            peak = max(peak, active)
        time.sleep(0.001)
        with guard:
            active -= 1

    threads = [threading.Thread(target=lambda: serializer.run(task)) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert peak == 1


def test_shutdown_drains_pending_tasks() -> None:
    s = WriteSerializer(name="drain-writer")
    done: list[int] = []
    for n in range(3):
        s.enqueue(done.append, n)
    s.shutdown(wait=True)
    assert done == [0, 1, 2]
