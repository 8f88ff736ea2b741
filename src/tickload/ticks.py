"""Tick types, snapshots and the utilization ratio."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum

TickSnapshot = tuple[int, ...]


class TickType(IntEnum):
    """CPU states tracked by the tick counters.

    The value of each member is its offset in a tick array.
    """

    USER = 0
    NICE = 1
    SYSTEM = 2
    IDLE = 3
    IOWAIT = 4
    IRQ = 5
    SOFTIRQ = 6


TICK_COUNT = len(TickType)


def as_snapshot(ticks: Sequence[int]) -> TickSnapshot:
    """Coerce a raw tick sequence to exactly one int per :class:`TickType`.

    Extra trailing fields (steal, guest, ...) are dropped and missing ones
    count as zero.
    """
    values = [int(v) for v in ticks[:TICK_COUNT]]
    values.extend([0] * (TICK_COUNT - len(values)))
    return tuple(values)


def zero_snapshot() -> TickSnapshot:
    return (0,) * TICK_COUNT


def is_nonzero(ticks: Sequence[int]) -> bool:
    return any(v != 0 for v in ticks)


def load_ratio(previous: Sequence[int], current: Sequence[int]) -> float:
    """Return the busy fraction between two tick snapshots, in ``[0, 1]``.

    IOWAIT counts as idle. If the counters did not advance, or the idle
    counters went backwards (rollover or a reset source), the ratio is 0.
    """
    total = sum(current[t] - previous[t] for t in TickType)
    idle = (
        current[TickType.IDLE] + current[TickType.IOWAIT]
        - previous[TickType.IDLE] - previous[TickType.IOWAIT]
    )
    if total > 0 and idle >= 0:
        return (total - idle) / total
    return 0.0
