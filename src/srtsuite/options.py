from __future__ import annotations

"""
翻译风格与语言的封闭取值集合。

非法取值在边界（CLI / Web 表单 / 配置）处被拒绝，而不是被原样拼进提示词。
"""

from enum import Enum
from typing import List


class _ParsableEnum(str, Enum):
    @classmethod
    def parse(cls, value: "str | _ParsableEnum") -> "_ParsableEnum":
        """
        按显示名称（不区分大小写）或成员名解析。

        未知取值抛出 ValueError，错误信息中列出全部可选项。
        """
        if isinstance(value, cls):
            return value
        raw = str(value).strip()
        lowered = raw.lower()
        for member in cls:
            if member.value.lower() == lowered or member.name.lower() == lowered:
                return member
        choices = ", ".join(cls.choices())
        raise ValueError(f"Unknown {cls.__name__} {raw!r}; expected one of: {choices}")

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]

    def __str__(self) -> str:
        return self.value


class TranslationStyle(_ParsableEnum):
    FORMAL = "Formal"
    INFORMAL = "Informal"
    NEUTRAL = "Neutral"
    TECHNICAL = "Technical"


class Language(_ParsableEnum):
    ENGLISH = "English"
    SPANISH = "Spanish"
    FRENCH = "French"
    GERMAN = "German"
    CHINESE_SIMPLIFIED = "Chinese (Simplified)"
    JAPANESE = "Japanese"
    KOREAN = "Korean"
    RUSSIAN = "Russian"
    ARABIC = "Arabic"
    PORTUGUESE = "Portuguese"
    ITALIAN = "Italian"
    VIETNAMESE = "Vietnamese"


DEFAULT_LANGUAGE = Language.VIETNAMESE
DEFAULT_STYLE = TranslationStyle.NEUTRAL
