"""tickload – processor utilization from cumulative CPU tick counters."""

__version__ = "0.1.0"

from .processor import CentralProcessor
from .ticks import TickType, load_ratio

__all__ = ["CentralProcessor", "TickType", "load_ratio", "__version__"]
