"""Base interface for CPU tick sources."""

from __future__ import annotations

import abc
import platform
from collections.abc import Sequence
from dataclasses import dataclass


def is_64bit_machine(machine: str) -> bool:
    return machine.endswith("64") or machine == "s390x"


@dataclass(frozen=True)
class ProcessorIdentity:
    """Vendor and model details of the installed processor."""

    vendor: str = "unknown"
    name: str = "unknown"
    family: str = "?"
    model: str = "?"
    stepping: str = "?"
    is_64bit: bool = False
    serial_number: str | None = None

    @property
    def identifier(self) -> str:
        """E.g. ``Intel64 Family 6 Model 158 Stepping 10``."""
        if self.vendor == "GenuineIntel":
            prefix = "Intel64" if self.is_64bit else "x86"
        else:
            prefix = self.vendor
        return f"{prefix} Family {self.family} Model {self.model} Stepping {self.stepping}"


class BaseTickSource(abc.ABC):
    """Abstract base for platform tick counter sources.

    Tick arrays are cumulative since boot and laid out by
    :class:`~tickload.ticks.TickType`.  A source that cannot read its
    counters on a given call should return all zeros rather than raise.
    """

    #: Whether :meth:`native_instant_load` returns real readings.
    has_native_load: bool = False

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Source name used in configuration."""

    @property
    @abc.abstractmethod
    def logical_processor_count(self) -> int:
        """Number of logical processors, fixed for the source's lifetime."""

    @property
    def physical_processor_count(self) -> int:
        return self.logical_processor_count

    @abc.abstractmethod
    def pull_aggregate_ticks(self) -> Sequence[int]:
        """Return the system-wide tick array."""

    @abc.abstractmethod
    def pull_per_core_ticks(self) -> Sequence[Sequence[int]]:
        """Return one tick array per logical processor."""

    def native_instant_load(self) -> float | None:
        """Return the platform's own CPU load percentage, if it has one."""
        return None

    def system_uptime(self) -> float:
        """Seconds since boot."""
        raise NotImplementedError(f"{self.name} source does not report uptime")

    def load_average(self, nelem: int = 3) -> list[float]:
        """Return up to three load averages (1, 5 and 15 minutes).

        Unavailable values are reported as negative numbers.
        """
        return [-1.0] * nelem

    def processor_identity(self) -> ProcessorIdentity:
        """Describe the processor; read once by the sampler."""
        machine = platform.machine()
        return ProcessorIdentity(
            name=platform.processor() or machine or "unknown",
            is_64bit=is_64bit_machine(machine),
        )
