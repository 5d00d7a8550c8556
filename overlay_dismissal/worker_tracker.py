from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Set


class WorkerTracker:
    """Tracks background worker threads (profile fetches) for orderly shutdown."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger
        self._lock = threading.Lock()
        self._threads: Set[threading.Thread] = set()

    @property
    def live_workers(self) -> List[str]:
        with self._lock:
            return [thr.name for thr in self._threads if thr.is_alive()]

    def spawn(self, target: Callable[[], None], *, name: str) -> threading.Thread:
        def _run() -> None:
            try:
                target()
            finally:
                self.untrack(threading.current_thread())

        thread = threading.Thread(target=_run, name=name, daemon=True)
        with self._lock:
            self._threads.add(thread)
        thread.start()
        return thread

    def untrack(self, thread: Optional[threading.Thread]) -> None:
        if thread is None:
            return
        with self._lock:
            self._threads.discard(thread)

    def join_all(self, *, timeout: float = 2.0) -> None:
        with self._lock:
            threads = list(self._threads)
        for thread in threads:
            thread.join(timeout=timeout)
            if thread.is_alive():
                self._logger.warning("Worker %s did not exit cleanly within %.1fs", thread.name, timeout)
            self.untrack(thread)

    def log_state(self, label: str) -> None:
        live = self.live_workers
        if live:
            self._logger.debug("Tracked workers %s: %s", label, live)
