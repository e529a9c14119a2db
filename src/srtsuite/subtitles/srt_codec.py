from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Optional

from srtsuite.logging_utils import get_logger

from .types import SubtitleBlock


logger = get_logger(__name__)

TIMING_SEPARATOR = " --> "

# 序号只接受 ASCII 数字（不接受符号、下划线或全角数字）
_INDEX_RE = re.compile(r"[0-9]+")
# 空行（可含空白字符）分隔字幕块
_BLOCK_SPLIT_RE = re.compile(r"\n[ \t]*\n\s*")
_LEADING_FENCE_RE = re.compile(r"^```[A-Za-z]*[ \t]*\n")
_TRAILING_FENCE_RE = re.compile(r"\n```\s*$")


def _parse_block(chunk: str) -> Optional[SubtitleBlock]:
    lines = chunk.split("\n")
    index_text = lines[0].strip()
    if not _INDEX_RE.fullmatch(index_text):
        logger.debug("丢弃序号非法的字幕块: %r", lines[0])
        return None
    index = int(index_text)

    if len(lines) < 2 or TIMING_SEPARATOR not in lines[1]:
        # 时间轴行缺失或格式错误时整块丢弃，避免产生缺失的结束时间
        logger.debug("丢弃时间轴非法的字幕块 #%d: %r", index, lines[1:2])
        return None
    start_time, end_time = lines[1].split(TIMING_SEPARATOR, 1)

    return SubtitleBlock(
        index=index,
        start_time=start_time.strip(),
        end_time=end_time.strip(),
        text="\n".join(lines[2:]),
    )


def parse_srt(text: str) -> List[SubtitleBlock]:
    """
    将 SRT 文本解析为字幕块列表。

    - 以空行切分候选块，保持文档顺序，不重新编号；
    - 序号行不是整数、或时间轴行缺少 " --> " 的块会被跳过，其余块照常解析；
    - 空输入或仅含空白的输入返回空列表。
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    if not normalized:
        return []

    blocks: List[SubtitleBlock] = []
    for chunk in _BLOCK_SPLIT_RE.split(normalized):
        block = _parse_block(chunk)
        if block is not None:
            blocks.append(block)
    return blocks


def stringify_srt(blocks: Iterable[SubtitleBlock]) -> str:
    """
    将字幕块序列化为 SRT 文本，块之间以一个空行分隔，末尾不追加空行。
    """
    return "\n\n".join(
        f"{block.index}\n{block.start_time}{TIMING_SEPARATOR}{block.end_time}\n{block.text}"
        for block in blocks
    )


def strip_code_fences(text: str) -> str:
    """
    去掉模型输出中可能包裹的 ```srt ... ``` 代码块标记。
    """
    cleaned = text.strip()
    cleaned = _LEADING_FENCE_RE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE_RE.sub("", cleaned, count=1)
    return cleaned.strip()


def read_srt(path: str | Path) -> List[SubtitleBlock]:
    in_path = Path(path).expanduser().resolve()
    # utf-8-sig 兼容带 BOM 的字幕文件，非法字节替换为 U+FFFD 而不是整份失败
    return parse_srt(in_path.read_text(encoding="utf-8-sig", errors="replace"))


def write_srt(blocks: Iterable[SubtitleBlock], path: str | Path) -> Path:
    srt_text = stringify_srt(blocks)
    out_path = Path(path).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(srt_text, encoding="utf-8")
    return out_path
