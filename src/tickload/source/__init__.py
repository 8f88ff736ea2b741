"""Tick sources."""

from __future__ import annotations

from ..config import ConfigError
from .base import BaseTickSource, ProcessorIdentity
from .procfs import ProcStatTickSource
from .psutil_source import PsutilTickSource

_SOURCES: dict[str, type[BaseTickSource]] = {
    "psutil": PsutilTickSource,
    "procfs": ProcStatTickSource,
}


def get_source(name: str) -> BaseTickSource:
    """Instantiate a tick source by its configured name."""
    try:
        source_cls = _SOURCES[name]
    except KeyError:
        raise ConfigError(
            f"Unknown tick source {name!r} (expected one of {', '.join(sorted(_SOURCES))})"
        ) from None
    return source_cls()


__all__ = ["BaseTickSource", "ProcessorIdentity", "ProcStatTickSource", "PsutilTickSource", "get_source"]
