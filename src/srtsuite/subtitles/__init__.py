from __future__ import annotations

from .types import SubtitleBlock
from .srt_codec import parse_srt, read_srt, stringify_srt, strip_code_fences, write_srt

__all__ = [
    "SubtitleBlock",
    "parse_srt",
    "stringify_srt",
    "strip_code_fences",
    "read_srt",
    "write_srt",
]
