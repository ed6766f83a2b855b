from __future__ import annotations

import threading
from typing import Optional

from .models import Outcome, Unavailable


class ConcurrentWriteError(RuntimeError):
    """Two writers raced on an :class:`OutcomeCell`; only the poller may write."""


class OutcomeCell:
    """Holds the latest poll outcome for one writer and many concurrent readers.

    Outcomes are immutable, so readers share the stored snapshot instead of
    copying it. Request handlers read from worker threads while the poller
    writes from the event loop, hence the thread lock.
    """

    def __init__(self, initial: Optional[Outcome] = None) -> None:
        self._value: Outcome = initial if initial is not None else Unavailable()
        self._lock = threading.Lock()
        self._writer = threading.Lock()

    def read(self) -> Outcome:
        with self._lock:
            return self._value

    def write(self, outcome: Outcome) -> None:
        if not self._writer.acquire(blocking=False):
            raise ConcurrentWriteError("outcome cell already has an active writer")
        try:
            with self._lock:
                self._value = outcome
        finally:
            self._writer.release()
