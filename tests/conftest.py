"""Shared test doubles for tickload."""

from __future__ import annotations

import pytest

from tickload.source.base import BaseTickSource, ProcessorIdentity


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 10_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class FakeTickSource(BaseTickSource):
    """Serves queued tick samples; the last sample repeats once the queue is drained."""

    def __init__(self, aggregate, per_core=None, native=None, cores: int = 2, identity=None) -> None:
        self._identity = identity
        self._aggregate = list(aggregate)
        self._per_core = list(per_core) if per_core is not None else [[[0] * 7] * cores]
        self._native = list(native) if native is not None else None
        self.has_native_load = native is not None
        self._cores = cores
        self.aggregate_pulls = 0
        self.per_core_pulls = 0
        self.native_polls = 0

    @property
    def name(self) -> str:
        return "fake"

    @property
    def logical_processor_count(self) -> int:
        return self._cores

    @staticmethod
    def _next(queue, index):
        return queue[min(index, len(queue) - 1)]

    def pull_aggregate_ticks(self):
        value = self._next(self._aggregate, self.aggregate_pulls)
        self.aggregate_pulls += 1
        if isinstance(value, Exception):
            raise value
        return value

    def pull_per_core_ticks(self):
        value = self._next(self._per_core, self.per_core_pulls)
        self.per_core_pulls += 1
        return value

    def native_instant_load(self):
        value = self._next(self._native, self.native_polls)
        self.native_polls += 1
        return value

    def load_average(self, nelem: int = 3):
        return [1.5, 1.0, 0.5][:nelem]

    def system_uptime(self) -> float:
        return 3600.0

    def processor_identity(self) -> ProcessorIdentity:
        if self._identity is None:
            return super().processor_identity()
        return self._identity


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
