from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .audio import AudioDecoder, encode_audio_base64, save_wav
from .config import MODE_TRANSCRIBE, MODE_TRANSLATE, SrtSuiteConfig
from .gemini import GeminiClient
from .logging_utils import get_logger
from .subtitles import SubtitleBlock, parse_srt, read_srt, stringify_srt, write_srt
from .transcribe import GeminiTranscriber
from .translate import GeminiTranslator, TranslationEngine


logger = get_logger(__name__)

ProgressCallback = Callable[[float, str], None]


@dataclass
class TranslationResult:
    original: List[SubtitleBlock]
    translated: List[SubtitleBlock]
    srt_text: str
    output_path: Optional[Path] = None


@dataclass
class TranscriptionResult:
    blocks: List[SubtitleBlock]
    srt_text: str
    output_path: Optional[Path] = None
    wav_path: Optional[Path] = None
    duration: float = 0.0


class SrtSuitePipeline:
    """
    字幕翻译 / 视频转写的主流程。

    - run_translation: 读取 SRT -> 逐块翻译 -> 序列化 -> 写出文件；
    - run_transcription: 解码音频 -> 编码 WAV(base64) -> Gemini 转写 -> 解析 -> 写出文件。

    progress 回调接收 (百分比, 当前阶段说明)。
    """

    def __init__(
        self,
        config: SrtSuiteConfig,
        client: GeminiClient | None = None,
        translator: TranslationEngine | None = None,
        transcriber: GeminiTranscriber | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config
        self._client = client
        self._translator = translator
        self._transcriber = transcriber
        self._progress = progress

    def _get_client(self) -> GeminiClient:
        # 延迟创建，避免在仅需解析/编码时也要求 API Key
        if self._client is None:
            self._client = GeminiClient()
        return self._client

    def _report(self, percent: float, message: str) -> None:
        logger.debug("[%5.1f%%] %s", percent, message)
        if self._progress is not None:
            self._progress(percent, message)

    def run_translation(self) -> TranslationResult:
        if self.config.mode != MODE_TRANSLATE:
            raise ValueError(f"配置模式为 {self.config.mode}，无法执行翻译")
        input_path = self.config.input_path
        if input_path.suffix.lower() != ".srt":
            raise ValueError("Please upload a valid .srt file for translation.")
        if not input_path.is_file():
            raise FileNotFoundError(f"输入文件不存在: {input_path}")

        self._report(0.0, "Translating subtitles...")
        original = read_srt(input_path)
        logger.info("读取字幕 %d 条: %s", len(original), input_path.name)

        if self._translator is None:
            self._translator = GeminiTranslator(self._get_client())

        def on_block(done: int, total: int) -> None:
            self._report(done / total * 100.0, "Translating subtitles...")

        translated = self._translator.translate_blocks(
            original,
            language=self.config.language,
            style=self.config.style,
            progress=on_block,
            max_workers=self.config.translate_concurrency,
        )
        srt_text = stringify_srt(translated)

        output_path = None
        if self.config.output_srt_path is not None:
            output_path = write_srt(translated, self.config.output_srt_path)
        self._report(100.0, "Done")
        return TranslationResult(
            original=original,
            translated=translated,
            srt_text=srt_text,
            output_path=output_path,
        )

    def run_transcription(self) -> TranscriptionResult:
        if self.config.mode != MODE_TRANSCRIBE:
            raise ValueError(f"配置模式为 {self.config.mode}，无法执行转写")

        self._report(10.0, "Extracting audio from video...")
        with AudioDecoder(sample_rate=self.config.decode_sample_rate) as decoder:
            audio = decoder.decode(self.config.input_path)

        wav_path = None
        if self.config.output_wav_path is not None:
            wav_path = save_wav(audio, self.config.output_wav_path)

        self._report(30.0, "Encoding audio...")
        audio_base64 = encode_audio_base64(audio)

        self._report(50.0, "Transcribing and formatting SRT (this may take a while)...")
        if self._transcriber is None:
            self._transcriber = GeminiTranscriber(self._get_client())
        srt_text = self._transcriber.transcribe(audio_base64, self.config.language)
        blocks = parse_srt(srt_text)
        logger.info("转写得到字幕 %d 条", len(blocks))

        output_path = None
        if self.config.output_srt_path is not None:
            output_path = self.config.output_srt_path
            output_path.parent.mkdir(parents=True, exist_ok=True)
            # 保存模型返回的原始 SRT 文本（已去除代码块标记）
            output_path.write_text(srt_text, encoding="utf-8")
        self._report(100.0, "Done")
        return TranscriptionResult(
            blocks=blocks,
            srt_text=srt_text,
            output_path=output_path,
            wav_path=wav_path,
            duration=audio.duration,
        )
