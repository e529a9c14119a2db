from __future__ import annotations


class SrtSuiteError(Exception):
    """srtsuite 所有自定义异常的基类。"""


class ConfigError(SrtSuiteError):
    """配置缺失或取值非法（例如未设置 API Key）。"""


class GeminiError(SrtSuiteError):
    """调用 Gemini generateContent 接口失败，或响应中没有可用文本。"""


class AudioDecodeError(SrtSuiteError):
    """无法从输入的视频/音频容器中解码出音频。"""


class TranscriptionError(SrtSuiteError):
    """音频转写并生成 SRT 失败（整体失败，不产生部分结果）。"""
