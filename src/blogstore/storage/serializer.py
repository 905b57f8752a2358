"""
Write Serializer: one FIFO queue for every write in the process.

Both collection stores submit their read-modify-write bodies here. A single
worker thread drains the queue, so no two write bodies ever run at the same
time, whichever collection they target. Each submission gets its own
:class:`concurrent.futures.Future`:

- tasks run strictly in submission order;
- an exception resolves only that task's future, the worker moves on;
- there is no cancellation and no per-task timeout.

Usage
-----
>>> serializer = WriteSerializer()
>>> serializer.enqueue(lambda: 1 + 1).result()
2
>>> serializer.shutdown()
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, TypeVar

from blogstore.core.settings import get_logger

T = TypeVar("T")

logger = get_logger("blogstore.serializer")


class WriteSerializer:
    """Single-consumer FIFO task queue."""

    def __init__(self, name: str = "blogstore-writer") -> None:
        self._name = name
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._closed = False

    def enqueue(self, task: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        """
        Queue ``task(*args, **kwargs)`` behind every previously queued task.

        Returns
        -------
        Future[T]
            Resolves with the task's return value or its exception.
        """
        return self._executor.submit(self._run, task, *args, **kwargs)

    def run(self, task: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Queue ``task`` and block until it has run; re-raises its exception."""
        return self.enqueue(task, *args, **kwargs).result()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks; with ``wait`` the queue is drained first."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait)

    def _run(self, task: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return task(*args, **kwargs)
        except Exception:
            logger.exception("[WRITE QUEUE] task %r failed", getattr(task, "__name__", task))
            raise


__all__ = ["WriteSerializer"]
