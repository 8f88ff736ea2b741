"""OpenTelemetry exporter – publishes CPU load gauges over OTLP/HTTP."""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource

from ..collector.base import MetricSample
from ..config import OtelExporterConfig
from .base import BaseExporter

logger = logging.getLogger(__name__)


class OtelExporter(BaseExporter):
    """Records each sample as a gauge observation on a private meter provider.

    The SDK's periodic reader pushes the latest values to
    ``<endpoint>/v1/metrics`` every ``export_interval_ms``.
    """

    def __init__(self, config: OtelExporterConfig) -> None:
        metric_exporter = OTLPMetricExporter(
            endpoint=f"{config.endpoint.rstrip('/')}/v1/metrics",
            headers=config.headers or None,
        )
        reader = PeriodicExportingMetricReader(
            metric_exporter,
            export_interval_millis=config.export_interval_ms,
        )
        self._provider = MeterProvider(
            resource=Resource.create({SERVICE_NAME: config.service_name}),
            metric_readers=[reader],
        )
        self._meter = self._provider.get_meter("tickload.cpu")
        self._gauges: dict[str, Any] = {}
        logger.info("OtelExporter → %s (service=%s)", config.endpoint, config.service_name)

    def _gauge(self, sample: MetricSample) -> Any:
        gauge = self._gauges.get(sample.name)
        if gauge is None:
            gauge = self._meter.create_gauge(
                name=sample.name,
                unit=sample.unit,
                description=sample.description,
            )
            self._gauges[sample.name] = gauge
        return gauge

    def export(self, samples: list[MetricSample]) -> None:
        for sample in samples:
            self._gauge(sample).set(sample.value, attributes=sample.labels)

    def shutdown(self) -> None:
        self._provider.shutdown()
        logger.info("OtelExporter shut down")
