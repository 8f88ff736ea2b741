"""Tick source that parses ``/proc/stat`` directly (Linux)."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..ticks import TickSnapshot, as_snapshot, zero_snapshot
from .base import BaseTickSource, ProcessorIdentity

logger = logging.getLogger(__name__)


def parse_proc_stat(text: str) -> dict[str, TickSnapshot]:
    """Parse ``/proc/stat`` content into ``{"cpu": [...], "cpu0": [...], ...}``."""
    result: dict[str, TickSnapshot] = {}
    for line in text.splitlines():
        if not line.startswith("cpu"):
            continue
        parts = line.split()
        result[parts[0]] = as_snapshot([int(x) for x in parts[1:]])
    return result


def parse_cpuinfo(text: str) -> dict[str, str]:
    """Return the ``key: value`` fields of the first processor in ``/proc/cpuinfo``."""
    fields: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            if fields:
                break
            continue
        key, sep, value = line.partition(":")
        if sep:
            fields.setdefault(key.strip(), value.strip())
    return fields


def read_identity(
    cpuinfo_path: Path,
    serial_path: Path,
    fallback: ProcessorIdentity,
) -> ProcessorIdentity:
    """Build a :class:`ProcessorIdentity` from cpuinfo and the DMI serial.

    Fields the files do not provide keep the *fallback* values.
    """
    try:
        info = parse_cpuinfo(cpuinfo_path.read_text(encoding="utf-8"))
    except OSError as exc:
        logger.debug("Failed to read %s: %s", cpuinfo_path, exc)
        info = {}
    try:
        serial = serial_path.read_text(encoding="utf-8").strip() or None
    except OSError:
        # usually readable by root only
        serial = None

    flags = info.get("flags", "").split()
    return ProcessorIdentity(
        vendor=info.get("vendor_id", fallback.vendor),
        name=info.get("model name", fallback.name),
        family=info.get("cpu family", fallback.family),
        model=info.get("model", fallback.model),
        stepping=info.get("stepping", fallback.stepping),
        is_64bit="lm" in flags if flags else fallback.is_64bit,
        serial_number=serial or fallback.serial_number,
    )


class ProcStatTickSource(BaseTickSource):
    """Reads jiffies from ``/proc/stat``.

    An unreadable stat file yields all-zero ticks, which the sampler treats
    as a transient read failure.  Offline cores have no ``cpuN`` line and
    report a zero row.
    """

    def __init__(self, proc_root: str | Path = "/proc", sys_root: str | Path = "/sys") -> None:
        self._root = Path(proc_root)
        self._sys_root = Path(sys_root)
        self._logical = os.cpu_count() or 1

    @property
    def name(self) -> str:
        return "procfs"

    @property
    def logical_processor_count(self) -> int:
        return self._logical

    def _read_stat(self) -> dict[str, TickSnapshot]:
        try:
            text = (self._root / "stat").read_text(encoding="utf-8")
        except OSError as exc:
            logger.debug("Failed to read %s/stat: %s", self._root, exc)
            return {}
        return parse_proc_stat(text)

    def pull_aggregate_ticks(self) -> TickSnapshot:
        return self._read_stat().get("cpu", zero_snapshot())

    def pull_per_core_ticks(self) -> list[TickSnapshot]:
        stat = self._read_stat()
        return [stat.get(f"cpu{i}", zero_snapshot()) for i in range(self._logical)]

    def system_uptime(self) -> float:
        try:
            text = (self._root / "uptime").read_text(encoding="utf-8")
        except OSError:
            logger.debug("Failed to read %s/uptime", self._root)
            return 0.0
        return float(text.split()[0])

    def load_average(self, nelem: int = 3) -> list[float]:
        try:
            text = (self._root / "loadavg").read_text(encoding="utf-8")
        except OSError:
            return [-1.0] * nelem
        return [float(v) for v in text.split()[:3]][:nelem]

    def processor_identity(self) -> ProcessorIdentity:
        return read_identity(
            self._root / "cpuinfo",
            self._sys_root / "class" / "dmi" / "id" / "product_serial",
            super().processor_identity(),
        )
