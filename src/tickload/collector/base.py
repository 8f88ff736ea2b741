"""Metric sample type and collector interface."""

from __future__ import annotations

import abc
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class MetricSample:
    """A single metric data point."""

    name: str
    value: float
    unit: str
    timestamp: float
    labels: dict[str, str] = field(default_factory=dict)
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class BaseCollector(abc.ABC):
    """Something that turns a query into a batch of metric samples."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Collector name used in log output."""

    @abc.abstractmethod
    def collect(self) -> list[MetricSample]:
        """Query current values and return them as samples."""
