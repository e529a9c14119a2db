from __future__ import annotations

from srtsuite.errors import TranscriptionError
from srtsuite.gemini import GeminiClient
from srtsuite.logging_utils import get_logger
from srtsuite.options import Language
from srtsuite.subtitles import strip_code_fences


logger = get_logger(__name__)


def build_transcription_prompt(language: Language) -> str:
    return (
        f"This is an audio file in {language.value}.\n"
        "1. Transcribe the audio content accurately.\n"
        "2. After transcribing, format the entire transcript into a standard SRT "
        "(SubRip Text) file format.\n"
        "3. Create logical timestamps (HH:MM:SS,msl --> HH:MM:SS,msl) for each subtitle "
        "block based on natural speaking pauses.\n"
        "4. Ensure the output is ONLY the valid SRT content and nothing else. Do not include "
        "any extra text, explanations, or code fences like ```srt.\n"
    )


class GeminiTranscriber:
    """
    将 base64 WAV 音频交给 Gemini 转写，并返回 SRT 文本。

    与翻译不同，转写失败没有可用的部分结果，任何错误都会以
    TranscriptionError 整体抛出。
    """

    def __init__(self, client: GeminiClient | None = None) -> None:
        self.client = client if client is not None else GeminiClient()

    def transcribe(self, audio_base64: str, language: Language) -> str:
        prompt = build_transcription_prompt(language)
        try:
            raw = self.client.generate_with_audio(audio_base64, prompt, mime_type="audio/wav")
        except Exception as exc:
            logger.error("转写失败: %s", exc)
            raise TranscriptionError("Failed to transcribe audio and format to SRT.") from exc
        return strip_code_fences(raw)
