from __future__ import annotations

from .client import DEFAULT_MODEL, GeminiClient

__all__ = ["DEFAULT_MODEL", "GeminiClient"]
