"""Collector manager that drives collection from the calling thread."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from ..config import CollectorConfig
from .base import BaseCollector, MetricSample

logger = logging.getLogger(__name__)

Sink = Callable[[list[MetricSample]], None]


class CollectorManager:
    """Runs collectors on an interval and hands each batch to the sinks.

    There is no background thread: :meth:`run` blocks the caller until the
    stop event is set, so every sample is pulled by an explicit query.
    """

    def __init__(self, config: CollectorConfig, collectors: list[BaseCollector]) -> None:
        self._config = config
        self._collectors = list(collectors)
        self._sinks: list[Sink] = []

    def add_sink(self, sink: Sink) -> None:
        """Register a callback to receive collected samples."""
        self._sinks.append(sink)

    def collect_once(self) -> list[MetricSample]:
        """Run all collectors once and return aggregated samples."""
        all_samples: list[MetricSample] = []
        for collector in self._collectors:
            try:
                all_samples.extend(collector.collect())
            except Exception:
                logger.exception("Collector %s failed", collector.name)
        return all_samples

    def dispatch(self, samples: list[MetricSample]) -> None:
        for sink in self._sinks:
            try:
                sink(samples)
            except Exception:
                logger.exception("Sink failed")

    def run(self, stop_event: threading.Event, iterations: int | None = None) -> int:
        """Collect and dispatch until *stop_event* is set.

        Returns the number of completed rounds.  *iterations* caps the
        number of rounds.
        """
        logger.info("Collection started (interval=%.1fs)", self._config.interval_seconds)
        rounds = 0
        while not stop_event.is_set():
            self.dispatch(self.collect_once())
            rounds += 1
            if iterations is not None and rounds >= iterations:
                break
            stop_event.wait(self._config.interval_seconds)
        logger.info("Collection stopped after %d rounds", rounds)
        return rounds
