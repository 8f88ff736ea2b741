"""CPU load collector."""

from __future__ import annotations

import time

from ..processor import CentralProcessor
from .base import BaseCollector, MetricSample


class CpuLoadCollector(BaseCollector):
    """Reports system and per-core load from a :class:`CentralProcessor`.

    ``system.cpu.load_ratio`` with ``cpu=total`` is the arbitrated figure
    (native when available); ``system.cpu.load_ratio_ticks`` is always the
    tick-delta figure so the two sources can be compared.
    """

    def __init__(self, processor: CentralProcessor, per_core: bool = True) -> None:
        self._processor = processor
        self._per_core = per_core

    @property
    def name(self) -> str:
        return "cpu"

    def collect(self) -> list[MetricSample]:
        now = time.time()
        proc = self._processor
        samples = [
            MetricSample(
                name="system.cpu.load_ratio",
                value=proc.get_system_cpu_load(),
                unit="1",
                timestamp=now,
                labels={"cpu": "total"},
                description="System CPU load",
            ),
            MetricSample(
                name="system.cpu.load_ratio_ticks",
                value=proc.get_system_cpu_load_between_ticks(),
                unit="1",
                timestamp=now,
                labels={"cpu": "total"},
                description="System CPU load between tick samples",
            ),
        ]

        if self._per_core:
            for idx, ratio in enumerate(proc.get_processor_cpu_load_between_ticks()):
                samples.append(MetricSample(
                    name="system.cpu.load_ratio",
                    value=ratio,
                    unit="1",
                    timestamp=now,
                    labels={"cpu": str(idx)},
                    description=f"CPU core {idx} load between tick samples",
                ))

        load1 = proc.get_system_load_average(1)[0]
        if load1 >= 0:
            samples.append(MetricSample(
                name="system.cpu.load_avg_1m",
                value=load1,
                unit="1",
                timestamp=now,
                description="Load average 1 minute",
            ))

        return samples
