"""Tests for the CPU load collector and the collector manager."""

import threading

from tickload.collector.base import BaseCollector, MetricSample
from tickload.collector.cpu import CpuLoadCollector
from tickload.collector.manager import CollectorManager
from tickload.config import CollectorConfig
from tickload.processor import CentralProcessor

from conftest import FakeTickSource

T0 = [100, 0, 50, 850, 0, 0, 0]
T1 = [110, 0, 60, 870, 0, 0, 0]


def _processor(clock, native=None):
    source = FakeTickSource([T0, T1], per_core=[[T0, T0], [T1, T0]], native=native)
    return CentralProcessor(source, clock=clock)


def test_cpu_collector(clock):
    collector = CpuLoadCollector(_processor(clock))
    assert collector.name == "cpu"

    clock.advance(1000)
    samples = collector.collect()

    total = [s for s in samples if s.name == "system.cpu.load_ratio" and s.labels["cpu"] == "total"]
    assert len(total) == 1
    assert total[0].value == 0.5
    cores = {s.labels["cpu"]: s.value for s in samples if s.name == "system.cpu.load_ratio"}
    assert cores["0"] == 0.5
    assert cores["1"] == 0.0
    load_avg = [s for s in samples if s.name == "system.cpu.load_avg_1m"]
    assert load_avg[0].value == 1.5


def test_cpu_collector_reports_both_sources(clock):
    collector = CpuLoadCollector(_processor(clock, native=[0.0, 80.0]), per_core=False)

    clock.advance(1000)
    samples = {s.name: s.value for s in collector.collect()}

    assert samples["system.cpu.load_ratio"] == 0.8
    assert samples["system.cpu.load_ratio_ticks"] == 0.5


def test_sample_to_dict():
    sample = MetricSample(name="system.cpu.load_ratio", value=0.25, unit="1", timestamp=1.0)
    assert sample.to_dict() == {
        "name": "system.cpu.load_ratio",
        "value": 0.25,
        "unit": "1",
        "timestamp": 1.0,
        "labels": {},
        "description": "",
    }


class _Broken(BaseCollector):
    @property
    def name(self) -> str:
        return "broken"

    def collect(self):
        raise RuntimeError("boom")


def test_collector_manager_skips_failed_collector(clock):
    manager = CollectorManager(CollectorConfig(), [_Broken(), CpuLoadCollector(_processor(clock))])
    samples = manager.collect_once()
    assert len(samples) > 0


def test_collector_manager_run(clock):
    manager = CollectorManager(
        CollectorConfig(interval_seconds=0.01),
        [CpuLoadCollector(_processor(clock))],
    )
    batches = []

    def failing_sink(_samples):
        raise RuntimeError("sink down")

    manager.add_sink(failing_sink)
    manager.add_sink(batches.append)

    rounds = manager.run(threading.Event(), iterations=3)
    assert rounds == 3
    assert len(batches) == 3


def test_collector_manager_stopped():
    manager = CollectorManager(CollectorConfig(), [])
    stop = threading.Event()
    stop.set()
    assert manager.run(stop) == 0
