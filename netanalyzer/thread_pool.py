"""A fixed-size pool of worker threads fed from a FIFO queue."""

from __future__ import annotations

import os
import threading
from collections import deque
from typing import Callable

from . import logger


class ThreadPool:
    """Runs queued callables on a fixed number of threads.

    After shutdown no new tasks are accepted, but tasks already queued still run.
    """

    def __init__(self, threads: int | None = None) -> None:
        if threads is None:
            threads = os.cpu_count() or 1
        self._tasks: deque[Callable[[], object]] = deque()
        self._condition = threading.Condition()
        self._stop = False
        self._workers = [
            threading.Thread(target=self._work, daemon=True) for _ in range(threads)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stop or self._tasks)
                if self._stop and not self._tasks:
                    return
                task = self._tasks.popleft()
            try:
                task()
            except Exception as exc:  # keep the worker alive
                logger.error(f"Task failed: {exc!r}")

    def enqueue(self, task: Callable[[], object]) -> None:
        """Queue a task; ignored once the pool is shut down."""
        with self._condition:
            if self._stop:
                return
            self._tasks.append(task)
            self._condition.notify()

    def shutdown(self) -> None:
        """Stop accepting tasks and let idle workers exit."""
        with self._condition:
            self._stop = True
            self._condition.notify_all()

    def close(self) -> None:
        """Shut down and wait for every worker to finish."""
        self.shutdown()
        for worker in self._workers:
            worker.join()

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()