"""Snapshot store and refresh policy for tick counters."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_THRESHOLD_MS = 950.0

T = TypeVar("T")


def refresh_due(now: float, last_refresh: float | None, threshold_ms: float) -> bool:
    """Return True if a new sample should be pulled.

    A state that never accepted a sample is always due.
    """
    if last_refresh is None:
        return True
    return now - last_refresh > threshold_ms


class TickState(Generic[T]):
    """Two generations of a tick sample plus the time the newer one was accepted.

    ``T`` is a single snapshot for the aggregate counters or a tuple of
    snapshots for the per-core counters.  Each state owns its lock; a
    refresh and the read of the ``(previous, current)`` pair happen under it.
    """

    def __init__(
        self,
        name: str,
        initial: T,
        accept: Callable[[T], bool],
        threshold_ms: float = DEFAULT_REFRESH_THRESHOLD_MS,
    ) -> None:
        self.name = name
        self.previous: T = initial
        self.current: T = initial
        self.last_refresh: float | None = None
        self._accept = accept
        self._threshold_ms = threshold_ms
        self._lock = threading.Lock()

    def seed(self, now: float, sample: T) -> bool:
        """Set both generations to *sample* if it is usable."""
        with self._lock:
            if not self._accept(sample):
                logger.debug("%s: initial sample is all zero, leaving state unseeded", self.name)
                return False
            self.previous = sample
            self.current = sample
            self.last_refresh = now
            return True

    def is_stale(self, now: float) -> bool:
        return refresh_due(now, self.last_refresh, self._threshold_ms)

    def maybe_refresh(self, now: float, pull: Callable[[], T]) -> tuple[T, T]:
        """Pull a new sample when stale, then return ``(previous, current)``.

        Errors raised by *pull* propagate and leave the state untouched.
        """
        with self._lock:
            logger.debug("%s: now=%.0f last_refresh=%s", self.name, now, self.last_refresh)
            if refresh_due(now, self.last_refresh, self._threshold_ms):
                self._offer_locked(now, pull())
            return self.previous, self.current

    def _offer_locked(self, now: float, sample: T) -> bool:
        if not self._accept(sample):
            logger.debug("%s: discarding all-zero sample", self.name)
            return False
        self.previous = self.current
        self.current = sample
        self.last_refresh = now
        return True
