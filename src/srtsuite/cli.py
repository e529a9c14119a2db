from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import MODE_TRANSCRIBE, MODE_TRANSLATE, SrtSuiteConfig
from .env import load_dotenv_if_present
from .logging_utils import setup_logging
from .options import Language, TranslationStyle
from .pipeline import SrtSuitePipeline


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srtsuite",
        description="srtsuite: 使用 Gemini 翻译 SRT 字幕，或从视频转写生成 SRT 字幕。",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="输出 DEBUG 级别日志。",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    translate = subparsers.add_parser(
        MODE_TRANSLATE,
        help="逐块翻译一个 .srt 字幕文件。",
    )
    translate.add_argument("input", type=str, help="输入 .srt 字幕文件路径。")
    translate.add_argument(
        "--lang",
        type=str,
        choices=Language.choices(),
        default=None,
        help="目标语言（默认 Vietnamese，可通过环境变量 SRTSUITE_TARGET_LANGUAGE 配置）。",
    )
    translate.add_argument(
        "--style",
        type=str,
        choices=TranslationStyle.choices(),
        default=None,
        help="翻译风格（默认 Neutral，可通过环境变量 SRTSUITE_TRANSLATION_STYLE 配置）。",
    )
    translate.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="并发翻译的字幕块数（默认 1，可通过环境变量 SRTSUITE_TRANSLATE_CONCURRENCY 配置）。",
    )
    translate.add_argument(
        "--output",
        type=str,
        default=None,
        help="输出 SRT 路径（默认: 与输入同目录，文件名加 _<目标语言> 后缀）。",
    )

    transcribe = subparsers.add_parser(
        MODE_TRANSCRIBE,
        help="从视频/音频中提取音频并转写为 SRT 字幕。",
    )
    transcribe.add_argument("input", type=str, help="输入视频或音频文件路径。")
    transcribe.add_argument(
        "--lang",
        type=str,
        choices=Language.choices(),
        default=None,
        help="视频中的口语语言。",
    )
    transcribe.add_argument(
        "--sample-rate",
        type=int,
        default=None,
        help="解码时重采样到的采样率（默认保留源采样率）。",
    )
    transcribe.add_argument(
        "--output",
        type=str,
        default=None,
        help="输出 SRT 路径（默认: 与输入同目录，文件名加 _transcribed 后缀）。",
    )
    transcribe.add_argument(
        "--output-wav",
        type=str,
        default=None,
        help="如果指定，额外保存发送给模型的 WAV 音频。",
    )
    return parser


def _print_progress(percent: float, message: str) -> None:
    print(f"[{percent:5.1f}%] {message}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    # 确保在解析参数和使用配置之前加载 .env 中的环境变量
    load_dotenv_if_present()
    if argv is None:
        argv = sys.argv[1:]

    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None, force=args.verbose)

    try:
        if args.command == MODE_TRANSLATE:
            config = SrtSuiteConfig.from_paths(
                input_path=args.input,
                mode=MODE_TRANSLATE,
                language=args.lang,
                style=args.style,
                output_srt_path=args.output,
                translate_concurrency=args.concurrency,
            )
            pipeline = SrtSuitePipeline(config, progress=_print_progress)
            result = pipeline.run_translation()
            print("字幕翻译完成")
            print(f"   输入: {Path(args.input)}")
            print(f"   目标语言: {config.language.value} ({config.style.value})")
            print(f"   字幕: {result.output_path}")
            print(f"   条目数: {len(result.translated)}")
        else:
            config = SrtSuiteConfig.from_paths(
                input_path=args.input,
                mode=MODE_TRANSCRIBE,
                language=args.lang,
                output_srt_path=args.output,
                output_wav_path=args.output_wav,
                decode_sample_rate=args.sample_rate,
            )
            pipeline = SrtSuitePipeline(config, progress=_print_progress)
            result = pipeline.run_transcription()
            print("视频转写完成")
            print(f"   输入: {Path(args.input)}")
            print(f"   音频时长: {result.duration:.2f} 秒")
            if result.wav_path:
                print(f"   音频: {result.wav_path}")
            print(f"   字幕: {result.output_path}")
            print(f"   条目数: {len(result.blocks)}")
        return 0
    except KeyboardInterrupt:
        print("\n用户中断")
        return 1
    except Exception as exc:
        print(f"处理失败: {exc}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
