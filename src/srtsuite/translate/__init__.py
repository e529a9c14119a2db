from __future__ import annotations

from .prompts import build_translation_prompt
from .translator import GeminiTranslator, TranslationEngine, TRANSLATION_ERROR_PLACEHOLDER

__all__ = [
    "GeminiTranslator",
    "TranslationEngine",
    "TRANSLATION_ERROR_PLACEHOLDER",
    "build_translation_prompt",
]
