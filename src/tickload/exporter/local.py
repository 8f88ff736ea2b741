"""Local file exporter – appends CPU load samples to daily JSONL files."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TextIO

from ..collector.base import MetricSample
from ..config import ConfigError, LocalExporterConfig
from .base import BaseExporter

logger = logging.getLogger(__name__)


class LocalExporter(BaseExporter):
    """Writes one JSON object per sample to ``cpu-load-YYYY-MM-DD.jsonl``.

    The file rolls over at UTC midnight.
    """

    def __init__(self, config: LocalExporterConfig) -> None:
        if config.format != "jsonl":
            raise ConfigError(f"Unsupported local exporter format {config.format!r}")
        self._output_dir = Path(config.output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._fh: TextIO | None = None
        self._current_date: str | None = None
        logger.info("LocalExporter writing to %s", self._output_dir)

    @property
    def current_path(self) -> Path | None:
        if self._current_date is None:
            return None
        return self._output_dir / f"cpu-load-{self._current_date}.jsonl"

    def _file(self) -> TextIO:
        today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        if self._fh is None or self._current_date != today:
            if self._fh is not None:
                self._fh.close()
            self._current_date = today
            self._fh = open(self.current_path, "a", encoding="utf-8")  # noqa: SIM115
        return self._fh

    def export(self, samples: list[MetricSample]) -> None:
        if not samples:
            return
        fh = self._file()
        for sample in samples:
            record = sample.to_dict()
            record.pop("description", None)
            fh.write(json.dumps(record) + "\n")
        fh.flush()

    def shutdown(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        logger.info("LocalExporter closed")
