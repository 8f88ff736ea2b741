"""Debounced cache around a native instantaneous CPU load reading."""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 200.0


class NativeLoadCache:
    """Polls a native load source at most once per debounce interval.

    Native readings taken faster than the platform's own sampling interval
    are meaningless, so calls inside the interval return the cached value.
    The cache is primed with one poll on construction.

    *poll* returns a CPU load percentage (0-100); values are stored as a
    ratio clamped to ``[0, 1]``.
    """

    def __init__(
        self,
        poll: Callable[[], float | None],
        now: float,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._poll = poll
        self._debounce_ms = debounce_ms
        self._lock = threading.Lock()
        self.last_value = 0.0
        self.last_poll = now
        self.last_value = self._read()

    def load(self, now: float) -> float:
        with self._lock:
            if now - self.last_poll < self._debounce_ms:
                return self.last_value
            self.last_value = self._read()
            self.last_poll = now
            return self.last_value

    def _read(self) -> float:
        value = self._poll()
        if value is None or math.isnan(value):
            logger.debug("Native load reading unavailable, keeping %.3f", self.last_value)
            return self.last_value
        return min(max(value / 100.0, 0.0), 1.0)
