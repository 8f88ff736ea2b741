"""Tick source backed by psutil."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path

import psutil

from ..ticks import TickSnapshot, TickType
from .base import BaseTickSource, ProcessorIdentity
from .procfs import read_identity

logger = logging.getLogger(__name__)

# psutil reports cpu time in seconds; ticks are whole milliseconds
_TICKS_PER_SECOND = 1000


def _to_ticks(times: object) -> TickSnapshot:
    """Convert a psutil ``scputimes`` tuple to a tick snapshot.

    Fields a platform does not report (iowait on macOS, nice on Windows)
    count as zero.
    """
    return tuple(
        int(getattr(times, tick.name.lower(), 0.0) * _TICKS_PER_SECOND)
        for tick in TickType
    )


class PsutilTickSource(BaseTickSource):
    """Reads CPU times through :mod:`psutil` on any supported platform."""

    has_native_load = True

    def __init__(self) -> None:
        self._logical = psutil.cpu_count(logical=True) or 1
        self._physical = psutil.cpu_count(logical=False) or self._logical

    @property
    def name(self) -> str:
        return "psutil"

    @property
    def logical_processor_count(self) -> int:
        return self._logical

    @property
    def physical_processor_count(self) -> int:
        return self._physical

    def pull_aggregate_ticks(self) -> TickSnapshot:
        return _to_ticks(psutil.cpu_times())

    def pull_per_core_ticks(self) -> list[TickSnapshot]:
        return [_to_ticks(t) for t in psutil.cpu_times(percpu=True)]

    def native_instant_load(self) -> float:
        # non-blocking: compares against the previous call
        return psutil.cpu_percent(interval=None)

    def system_uptime(self) -> float:
        return time.time() - psutil.boot_time()

    def load_average(self, nelem: int = 3) -> list[float]:
        try:
            averages = list(psutil.getloadavg())
        except (AttributeError, OSError):
            logger.debug("Load average not available on this platform")
            averages = []
        averages.extend([-1.0] * (3 - len(averages)))
        return averages[:nelem]

    def processor_identity(self) -> ProcessorIdentity:
        fallback = super().processor_identity()
        if not sys.platform.startswith("linux"):
            return fallback
        # platform.processor() is usually empty on Linux
        return read_identity(
            Path("/proc/cpuinfo"),
            Path("/sys/class/dmi/id/product_serial"),
            fallback,
        )
