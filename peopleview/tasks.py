"""
Background execution of blocking store calls.

Work runs on a thread pool; completions are queued and only applied when the
UI thread calls `process_completions()`, so callbacks never run on a worker.
"""

from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable
import logging
import queue
import threading

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class TaskCoordinator:
    def __init__(self, max_workers: int = 4, executor: ThreadPoolExecutor | None = None):
        # a borrowed executor is left running on shutdown
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="peopleview")
        self._completions: queue.Queue = queue.Queue()
        self._pending = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Tasks submitted whose callbacks have not run yet."""
        with self._lock:
            return self._pending

    def submit(self, fn: Callable[[], Any], on_success: Callback,
               on_failure: Callback | None = None) -> Future:
        with self._lock:
            self._pending += 1
        future = self._executor.submit(fn)
        future.add_done_callback(lambda f: self._completions.put((f, on_success, on_failure)))
        return future

    def process_completions(self, wait: bool = False, timeout: float | None = None) -> int:
        """
        Run callbacks of finished tasks on the calling thread.
        With wait=True, keep going until nothing is pending. Returns callbacks run.
        """
        handled = 0
        while True:
            try:
                if wait and self.pending:
                    item = self._completions.get(timeout=timeout)
                else:
                    item = self._completions.get_nowait()
            except queue.Empty:
                return handled
            future, on_success, on_failure = item
            with self._lock:
                self._pending -= 1
            handled += 1
            error = future.exception()
            if error is None:
                on_success(future.result())
            elif on_failure is not None:
                on_failure(error)
            else:
                logger.error("Background task failed", exc_info=error)

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)
