"""Stateful CPU load sampler.

:class:`CentralProcessor` keeps the two most recent tick samples for the
whole system and for every logical core.  A query pulls a new sample from
the tick source only when the stored one is older than the refresh
threshold, so callers polling about once a second always get a load figure
over roughly one second of counter time.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence

from .config import SamplerConfig
from .native import NativeLoadCache
from .source import BaseTickSource, get_source
from .source.base import ProcessorIdentity
from .state import TickState
from .ticks import TickSnapshot, as_snapshot, is_nonzero, load_ratio, zero_snapshot

logger = logging.getLogger(__name__)

PerCoreTicks = tuple[TickSnapshot, ...]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def _any_core_nonzero(rows: PerCoreTicks) -> bool:
    return any(is_nonzero(row) for row in rows)


class CentralProcessor:
    """System and per-core CPU load computed from tick deltas.

    When the source offers a native load reading and *use_native* is set,
    :meth:`get_system_cpu_load` returns the debounced native value instead
    of the tick-delta figure.  Per-core loads always come from ticks.
    """

    def __init__(
        self,
        source: BaseTickSource,
        refresh_threshold_ms: float = 950.0,
        native_debounce_ms: float = 200.0,
        use_native: bool = True,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._source = source
        self._clock = clock
        self._cores = source.logical_processor_count
        self._identity = source.processor_identity()
        now = clock()

        self._system = TickState[TickSnapshot](
            "system ticks", zero_snapshot(), is_nonzero, refresh_threshold_ms,
        )
        self._system.seed(now, self._pull_system())

        self._per_core = TickState[PerCoreTicks](
            "processor ticks",
            (zero_snapshot(),) * self._cores,
            _any_core_nonzero,
            refresh_threshold_ms,
        )
        self._per_core.seed(now, self._pull_per_core())

        self._native: NativeLoadCache | None = None
        if use_native and source.has_native_load:
            self._native = NativeLoadCache(source.native_instant_load, now, native_debounce_ms)
            logger.debug("Native CPU load detected on %s source", source.name)
        else:
            logger.debug("Native CPU load not used; falling back to tick deltas")

    @classmethod
    def from_config(cls, config: SamplerConfig) -> CentralProcessor:
        config.validate()
        return cls(
            get_source(config.source),
            refresh_threshold_ms=config.refresh_threshold_ms,
            native_debounce_ms=config.native_debounce_ms,
            use_native=config.use_native,
        )

    @property
    def source(self) -> BaseTickSource:
        return self._source

    @property
    def identity(self) -> ProcessorIdentity:
        return self._identity

    @property
    def vendor(self) -> str:
        return self._identity.vendor

    @property
    def name(self) -> str:
        return self._identity.name

    @property
    def identifier(self) -> str:
        return self._identity.identifier

    @property
    def is_64bit(self) -> bool:
        return self._identity.is_64bit

    @property
    def serial_number(self) -> str | None:
        return self._identity.serial_number

    @property
    def has_native_load(self) -> bool:
        return self._native is not None

    @property
    def logical_processor_count(self) -> int:
        return self._cores

    @property
    def physical_processor_count(self) -> int:
        return self._source.physical_processor_count

    def system_uptime(self) -> float:
        return self._source.system_uptime()

    def get_system_load_average(self, nelem: int = 1) -> list[float]:
        if not 1 <= nelem <= 3:
            raise ValueError("nelem must be between 1 and 3")
        return self._source.load_average(nelem)

    def get_system_cpu_load_ticks(self) -> TickSnapshot:
        """Current system ticks, read straight from the source."""
        return self._pull_system()

    def get_processor_cpu_load_ticks(self) -> PerCoreTicks:
        """Current per-core ticks, read straight from the source."""
        return self._pull_per_core()

    def get_system_cpu_load_between_ticks(self) -> float:
        """System load over the interval between the last two tick samples."""
        previous, current = self._system.maybe_refresh(self._clock(), self._pull_system)
        return load_ratio(previous, current)

    def get_system_cpu_load(self) -> float:
        """System load from the native source if present, else from ticks."""
        if self._native is not None:
            return self._native.load(self._clock())
        return self.get_system_cpu_load_between_ticks()

    def get_processor_cpu_load_between_ticks(self) -> list[float]:
        """Per-core load, one ratio per logical processor in index order."""
        previous, current = self._per_core.maybe_refresh(self._clock(), self._pull_per_core)
        return [load_ratio(prev, cur) for prev, cur in zip(previous, current)]

    def _pull_system(self) -> TickSnapshot:
        return as_snapshot(self._source.pull_aggregate_ticks())

    def _pull_per_core(self) -> PerCoreTicks:
        rows: Sequence[Sequence[int]] = self._source.pull_per_core_ticks()
        if len(rows) != self._cores:
            logger.warning(
                "Tick source returned %d processor rows, expected %d",
                len(rows),
                self._cores,
            )
        snapshots = [as_snapshot(row) for row in rows[: self._cores]]
        snapshots.extend([zero_snapshot()] * (self._cores - len(snapshots)))
        return tuple(snapshots)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return (
            f"CentralProcessor(name={self.name!r}, vendor={self.vendor!r}, "
            f"identifier={self.identifier!r}, source={self._source.name!r}, "
            f"logical={self._cores}, native={self.has_native_load})"
        )
