"""Single-slot background worker with a busy guard."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class WorkerBusy(RuntimeError):
    """A job is already running on the worker."""


class InferenceWorker:
    """
    Runs ``task`` on one dedicated thread, one job at a time.

    ``submit`` refuses new work while a job is active. The busy flag is cleared
    before the job's result is published, so whoever is notified (through
    ``on_done`` or ``Future.result``) can submit again straight away.
    """

    def __init__(self, task: Callable[..., Any]) -> None:
        self._task = task
        self._lock = threading.Lock()
        self._busy = False
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="inference")

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._busy

    def _run(self, *args: Any) -> Any:
        try:
            return self._task(*args)
        finally:
            with self._lock:
                self._busy = False

    def submit(self, *args: Any, on_done: Optional[Callable[[Future], None]] = None) -> Future:
        with self._lock:
            if self._busy:
                raise WorkerBusy("Inference is already running.")
            self._busy = True
        try:
            future = self._executor.submit(self._run, *args)
        except RuntimeError:
            with self._lock:
                self._busy = False
            raise
        if on_done is not None:
            future.add_done_callback(on_done)
        return future

    def shutdown(self, wait: bool = True) -> None:
        logger.debug("Shutting down inference worker")
        self._executor.shutdown(wait=wait)
