"""Base interface for sample exporters."""

from __future__ import annotations

import abc

from ..collector.base import MetricSample


class BaseExporter(abc.ABC):
    """Receives batches of samples from the collector manager."""

    @abc.abstractmethod
    def export(self, samples: list[MetricSample]) -> None:
        """Export a batch of metric samples."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Flush and release resources."""

    def __enter__(self) -> BaseExporter:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
