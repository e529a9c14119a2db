from __future__ import annotations

from .config import SrtSuiteConfig
from .pipeline import SrtSuitePipeline

__all__ = ["SrtSuiteConfig", "SrtSuitePipeline"]

__version__ = "0.1.0"
