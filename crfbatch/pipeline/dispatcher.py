"""Bounded-parallelism dispatch of independent jobs.

One job is launched per item. An admission gate (a bounded semaphore of
size `concurrency`) is acquired on the dispatching thread before each
submission and released in the worker's `finally`, so at most `concurrency`
jobs are ever between admission and completion, and a failing job can't keep
a slot. `dispatch()` is also the join barrier: it returns only once every
launched job has returned.
"""

import threading
import concurrent.futures
import logging
from typing import Callable, Iterable, List, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class DispatchReport(BaseModel):
    launched: int = 0
    completed: int = 0
    crashed: int = 0
    peak_active: int = 0


class BoundedDispatcher:
    """Runs `work(item)` for each item with at most `concurrency` in flight.

    Args:
        concurrency: Admission bound (C). Must be >= 1.
    """

    def __init__(self, concurrency: int = 4):
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self.concurrency = concurrency
        self.logger = logging.getLogger(__name__)

        self._gate = threading.BoundedSemaphore(concurrency)
        self._state_lock = threading.Lock()
        self._active = 0
        self._peak_active = 0

    @property
    def active(self) -> int:
        with self._state_lock:
            return self._active

    def _run_admitted(self, work: Callable[[T], object], item: T) -> None:
        """Worker body; the gate slot was acquired by the dispatcher."""
        with self._state_lock:
            self._active += 1
            self._peak_active = max(self._peak_active, self._active)
        try:
            work(item)
        finally:
            with self._state_lock:
                self._active -= 1
            self._gate.release()

    def dispatch(self, items: Iterable[T], work: Callable[[T], object]) -> DispatchReport:
        items = list(items)
        report = DispatchReport()
        futures: List[concurrent.futures.Future] = []

        with self._state_lock:
            self._peak_active = 0

        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix="encode"
        ) as executor:
            for item in items:
                self._gate.acquire()
                try:
                    future = executor.submit(self._run_admitted, work, item)
                except BaseException:
                    self._gate.release()
                    raise
                futures.append(future)
                report.launched += 1

            # Join barrier
            concurrent.futures.wait(futures)

        for future in futures:
            try:
                future.result()
            except Exception as e:
                report.crashed += 1
                self.logger.error(f"Job crashed with unexpected exception: {e!r}")
            report.completed += 1

        with self._state_lock:
            report.peak_active = self._peak_active

        self.logger.debug(
            f"DISPATCH_END: launched={report.launched} completed={report.completed} "
            f"crashed={report.crashed} peak_active={report.peak_active}"
        )
        return report
