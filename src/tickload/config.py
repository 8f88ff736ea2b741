"""Configuration loading and validation for tickload."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


class ConfigError(ValueError):
    """Raised for invalid tickload configuration."""


@dataclass
class SamplerConfig:
    """CPU load sampler settings."""

    source: str = "psutil"
    refresh_threshold_ms: float = 950.0
    native_debounce_ms: float = 200.0
    use_native: bool = True

    def validate(self) -> None:
        for key in ("refresh_threshold_ms", "native_debounce_ms"):
            try:
                value = float(getattr(self, key))
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"sampler.{key} must be a number, got {getattr(self, key)!r}") from exc
            if value <= 0:
                raise ConfigError(f"sampler.{key} must be positive")
            setattr(self, key, value)


@dataclass
class OtelExporterConfig:
    """OpenTelemetry exporter settings."""

    endpoint: str = "http://localhost:4318"
    service_name: str = "tickload"
    headers: dict[str, str] = field(default_factory=dict)
    export_interval_ms: int = 10000


@dataclass
class CollectorConfig:
    """Collection loop settings."""

    interval_seconds: float = 1.0
    per_core: bool = True


@dataclass
class LocalExporterConfig:
    """Local file exporter settings."""

    enabled: bool = True
    output_dir: str = "./tickload_data"
    format: str = "jsonl"


@dataclass
class TickloadConfig:
    """Top-level tickload configuration."""

    mode: str = "local"
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    collector: CollectorConfig = field(default_factory=CollectorConfig)
    local_exporter: LocalExporterConfig = field(default_factory=LocalExporterConfig)
    otel: OtelExporterConfig = field(default_factory=OtelExporterConfig)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


_ENV_MAP: dict[str, tuple[tuple[str, ...], Any]] = {
    "TICKLOAD_MODE": (("mode",), str),
    "TICKLOAD_SOURCE": (("sampler", "source"), str),
    "TICKLOAD_REFRESH_THRESHOLD_MS": (("sampler", "refresh_threshold_ms"), float),
    "TICKLOAD_NATIVE_DEBOUNCE_MS": (("sampler", "native_debounce_ms"), float),
    "TICKLOAD_USE_NATIVE": (("sampler", "use_native"), _parse_bool),
    "TICKLOAD_COLLECTOR_INTERVAL": (("collector", "interval_seconds"), float),
    "TICKLOAD_OTEL_ENDPOINT": (("otel", "endpoint"), str),
    "TICKLOAD_OTEL_SERVICE_NAME": (("otel", "service_name"), str),
    "TICKLOAD_LOCAL_OUTPUT_DIR": (("local_exporter", "output_dir"), str),
}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using the TICKLOAD_ prefix."""
    for env_key, (path, coerce) in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        obj = data
        for part in path[:-1]:
            if not isinstance(obj.get(part), dict):
                obj[part] = {}
            obj = obj[part]
        try:
            obj[path[-1]] = coerce(value)
        except ValueError as exc:
            raise ConfigError(f"Invalid value for {env_key}: {value!r}") from exc
    return data


def _section(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        data = {}
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _dict_to_config(data: dict[str, Any]) -> TickloadConfig:
    """Convert a raw dictionary to a :class:`TickloadConfig`."""
    cfg = TickloadConfig(
        mode=data.get("mode", "local"),
        sampler=_section(SamplerConfig, data.get("sampler")),
        collector=_section(CollectorConfig, data.get("collector")),
        local_exporter=_section(LocalExporterConfig, data.get("local_exporter")),
        otel=_section(OtelExporterConfig, data.get("otel")),
    )
    if cfg.mode not in ("local", "online"):
        raise ConfigError(f"mode must be 'local' or 'online', got {cfg.mode!r}")
    cfg.sampler.validate()
    return cfg


def load_config(path: str | Path | None = None) -> TickloadConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``tickload.yaml`` in the current directory if *path* is None.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("tickload.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            try:
                loaded = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise ConfigError(f"Cannot parse {path}: {exc}") from exc
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)
