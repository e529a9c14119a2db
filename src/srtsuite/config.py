from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from .options import DEFAULT_LANGUAGE, DEFAULT_STYLE, Language, TranslationStyle


MODE_TRANSLATE = "translate"
MODE_TRANSCRIBE = "transcribe"


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def default_output_path(input_path: Path, mode: str, language: Language) -> Path:
    """
    生成默认输出路径：与输入同目录，文件名为
      - 翻译：<原文件名去扩展名>_<目标语言>.srt
      - 转写：<原文件名去扩展名>_transcribed.srt
    """
    stem = input_path.stem
    # ".srt" 这类只有扩展名的文件名，pathlib 会把整个名字当作 stem
    if not input_path.suffix and stem.startswith("."):
        stem = ""
    stem = stem or "file"
    if mode == MODE_TRANSLATE:
        suffix = f"_{language.value}"
    elif mode == MODE_TRANSCRIBE:
        suffix = "_transcribed"
    else:
        raise ValueError(f"Unknown mode: {mode}")
    return input_path.with_name(f"{stem}{suffix}.srt")


@dataclass
class SrtSuiteConfig:
    """
    一次翻译或转写任务的配置对象。

    language 在翻译模式下表示目标语言，在转写模式下表示视频中的口语语言。
    """

    input_path: Path
    mode: str = MODE_TRANSLATE
    language: Language = DEFAULT_LANGUAGE
    style: TranslationStyle = DEFAULT_STYLE
    output_srt_path: Optional[Path] = None
    output_wav_path: Optional[Path] = None
    # None 表示保留源采样率
    decode_sample_rate: int | None = None
    translate_concurrency: int = 1

    @classmethod
    def from_paths(
        cls,
        input_path: str | Path,
        mode: str = MODE_TRANSLATE,
        language: str | Language | None = None,
        style: str | TranslationStyle | None = None,
        output_srt_path: Optional[str | Path] = None,
        output_wav_path: Optional[str | Path] = None,
        decode_sample_rate: int | None = None,
        translate_concurrency: int | None = None,
    ) -> "SrtSuiteConfig":
        if mode not in {MODE_TRANSLATE, MODE_TRANSCRIBE}:
            raise ValueError(f"Unknown mode: {mode}")

        input_path_obj = Path(input_path).expanduser().resolve()

        # 语言与风格：显式参数优先，其次读取环境变量，最后使用默认值
        if language is None:
            language = os.getenv("SRTSUITE_TARGET_LANGUAGE", "").strip() or DEFAULT_LANGUAGE
        language_value = Language.parse(language)
        if style is None:
            style = os.getenv("SRTSUITE_TRANSLATION_STYLE", "").strip() or DEFAULT_STYLE
        style_value = TranslationStyle.parse(style)

        if output_srt_path is not None:
            output_srt_obj = Path(output_srt_path).expanduser().resolve()
        else:
            output_srt_obj = default_output_path(input_path_obj, mode, language_value)

        output_wav_obj: Optional[Path] = None
        if output_wav_path is not None:
            output_wav_obj = Path(output_wav_path).expanduser().resolve()

        if decode_sample_rate is None:
            decode_sample_rate = _env_int("SRTSUITE_DECODE_SAMPLE_RATE", None)
        if decode_sample_rate is not None and decode_sample_rate <= 0:
            raise ValueError(f"decode_sample_rate must be positive, got {decode_sample_rate}")

        if translate_concurrency is None:
            translate_concurrency = _env_int("SRTSUITE_TRANSLATE_CONCURRENCY", 1) or 1

        return cls(
            input_path=input_path_obj,
            mode=mode,
            language=language_value,  # type: ignore[arg-type]
            style=style_value,  # type: ignore[arg-type]
            output_srt_path=output_srt_obj,
            output_wav_path=output_wav_obj,
            decode_sample_rate=decode_sample_rate,
            translate_concurrency=max(1, translate_concurrency),
        )
