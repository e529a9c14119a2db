from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SubtitleBlock:
    """
    单条字幕块，对应 SRT 中的一个时间轴块。

    start_time / end_time 保持 "HH:MM:SS,mmm" 原始文本，不在此处解析为数值。
    """

    index: int
    start_time: str
    end_time: str
    text: str

    def with_text(self, text: str) -> "SubtitleBlock":
        return replace(self, text=text)

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "text": self.text,
        }
