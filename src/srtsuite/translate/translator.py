from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional

from srtsuite.errors import GeminiError
from srtsuite.gemini import GeminiClient
from srtsuite.logging_utils import get_logger
from srtsuite.options import Language, TranslationStyle
from srtsuite.subtitles import SubtitleBlock

from .prompts import build_translation_prompt


logger = get_logger(__name__)

TRANSLATION_ERROR_PLACEHOLDER = "Error: Could not translate."

ProgressCallback = Callable[[int, int], None]


class TranslationEngine(ABC):
    """
    翻译引擎抽象接口。

    translate_text 负责单条文本；translate_blocks 对整份字幕逐块调用，
    保持序号、时间轴与顺序不变，只替换 text。
    """

    @abstractmethod
    def translate_text(self, text: str, language: Language, style: TranslationStyle) -> str:
        """将一段字幕文本翻译为目标语言。"""

    def translate_blocks(
        self,
        blocks: List[SubtitleBlock],
        language: Language,
        style: TranslationStyle,
        progress: Optional[ProgressCallback] = None,
        max_workers: int = 1,
    ) -> List[SubtitleBlock]:
        total = len(blocks)
        results: List[Optional[SubtitleBlock]] = [None] * total
        if not blocks:
            return []

        worker_count = max(1, min(max_workers, total))

        if worker_count <= 1:
            for idx, block in enumerate(blocks):
                results[idx] = block.with_text(self.translate_text(block.text, language, style))
                if progress is not None:
                    progress(idx + 1, total)
            return [r for r in results if r is not None]

        # 并行模式：按块并发请求，完成顺序不影响输出顺序
        done = 0
        with ThreadPoolExecutor(max_workers=worker_count) as executor:
            future_to_idx = {
                executor.submit(self.translate_text, block.text, language, style): idx
                for idx, block in enumerate(blocks)
            }
            for future in as_completed(future_to_idx):
                idx = future_to_idx[future]
                results[idx] = blocks[idx].with_text(future.result())
                done += 1
                if progress is not None:
                    progress(done, total)
        return [r for r in results if r is not None]


class GeminiTranslator(TranslationEngine):
    """
    使用 Gemini 逐块翻译字幕。

    单块失败时返回占位文本 TRANSLATION_ERROR_PLACEHOLDER，
    不中断整份字幕的翻译。
    """

    def __init__(self, client: GeminiClient | None = None) -> None:
        self.client = client if client is not None else GeminiClient()

    def translate_text(self, text: str, language: Language, style: TranslationStyle) -> str:
        if not text.strip():
            return text
        prompt = build_translation_prompt(text, language, style)
        try:
            return self.client.generate_text(prompt).strip()
        except GeminiError as exc:
            logger.error("翻译失败，使用占位文本: %s", exc)
            return TRANSLATION_ERROR_PLACEHOLDER
