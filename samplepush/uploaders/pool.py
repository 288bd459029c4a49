"""Fixed-size worker pool fed from one unbounded queue.

Every dispatched reference is counted in a WorkCounter before it is queued,
so the counter cannot reach zero while items are still waiting to be queued.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from typing import Any, Optional

from samplepush.core.validation import validate_workers
from samplepush.models.progress import UploadOutcome

logger = logging.getLogger(__name__)

Handler = Callable[[str], UploadOutcome]

_STOP = object()


# =============================================================================
# Work Counter
# =============================================================================


class WorkCounter:
    """Outstanding-work counter with a blocking wait."""

    def __init__(self) -> None:
        self._count = 0
        self._interrupted = False
        self._cond = threading.Condition()

    @property
    def value(self) -> int:
        with self._cond:
            return self._count

    def add(self, n: int = 1) -> None:
        """Record ``n`` newly dispatched items."""
        with self._cond:
            self._count += n

    def done(self) -> None:
        """Record one completed item.

        Raises:
            ValueError: If called more times than items were added.
        """
        with self._cond:
            if self._count <= 0:
                raise ValueError("WorkCounter.done() called with no outstanding work")
            self._count -= 1
            if self._count == 0:
                self._cond.notify_all()

    def interrupt(self) -> None:
        """Wake waiters without the count reaching zero."""
        with self._cond:
            self._interrupted = True
            self._cond.notify_all()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the count is zero.

        Returns:
            True if all work drained, False if interrupted or timed out first.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._count == 0 or self._interrupted, timeout)
            return self._count == 0 and not self._interrupted


# =============================================================================
# Worker Pool
# =============================================================================


class WorkerPool:
    """N worker threads draining a shared queue of sample references.

    With ``fail_fast`` set, the first failed outcome aborts the run: waiters
    are woken, further submissions are refused and queued items are dropped.
    """

    def __init__(
        self,
        handler: Handler,
        workers: int = 1,
        *,
        fail_fast: bool = False,
    ) -> None:
        self.handler = handler
        self.workers = validate_workers(workers)
        self.fail_fast = fail_fast
        self.counter = WorkCounter()
        self.dispatched = 0
        self.first_failure: Optional[UploadOutcome] = None
        self._queue: queue.Queue[Any] = queue.Queue()
        self._threads: list[threading.Thread] = []
        self._outcomes: list[UploadOutcome] = []
        self._lock = threading.Lock()
        self._aborted = threading.Event()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the worker threads."""
        if self._threads:
            return
        for i in range(self.workers):
            thread = threading.Thread(
                target=self._worker,
                name=f"samplepush-worker-{i + 1}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        logger.debug("Started %d workers", self.workers)

    def close(self, *, wait: bool = True) -> None:
        """Stop the workers once the queue is drained.

        Args:
            wait: Join the worker threads. Pass False to leave in-flight
                uploads behind, e.g. after an abort.
        """
        for _ in self._threads:
            self._queue.put(_STOP)
        if wait:
            for thread in self._threads:
                thread.join()
        self._threads = []

    def __enter__(self) -> WorkerPool:
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close(wait=not self.aborted)

    # =========================================================================
    # Dispatch
    # =========================================================================

    @property
    def aborted(self) -> bool:
        return self._aborted.is_set()

    @property
    def outcomes(self) -> list[UploadOutcome]:
        with self._lock:
            return list(self._outcomes)

    def submit(self, reference: str) -> bool:
        """Queue one reference for upload.

        Returns:
            False if the pool has aborted and the reference was not queued.
        """
        if self.aborted:
            return False
        self.counter.add()
        self.dispatched += 1
        self._queue.put(reference)
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every dispatched reference is processed.

        Returns:
            True if all work drained, False if the pool aborted first.
        """
        return self.counter.wait(timeout)

    # =========================================================================
    # Workers
    # =========================================================================

    def _worker(self) -> None:
        while True:
            reference = self._queue.get()
            if reference is _STOP:
                return

            if self.aborted:
                logger.debug("Dropping %s after abort", reference)
                self.counter.done()
                continue

            start_time = time.time()
            try:
                outcome = self.handler(reference)
            except Exception as e:
                logger.exception("Unhandled error while copying %s", reference)
                outcome = UploadOutcome.failure(reference, e, time.time() - start_time)

            self._record(outcome)
            self.counter.done()

    def _record(self, outcome: UploadOutcome) -> None:
        abort = False
        with self._lock:
            self._outcomes.append(outcome)
            if self.fail_fast and not outcome.success and not self.aborted:
                self.first_failure = outcome
                self._aborted.set()
                abort = True

        if abort:
            logger.error("Aborting run after failed upload of %s", outcome.reference)
            self.counter.interrupt()
