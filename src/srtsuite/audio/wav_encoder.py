from __future__ import annotations

"""
将解码后的浮点音频编码为标准 16-bit PCM WAV（44 字节文件头 + 交错采样）。
"""

import base64
import struct
from typing import Sequence, Union

import numpy as np

from .types import DecodedAudio


WAV_HEADER_SIZE = 44
BYTES_PER_SAMPLE = 2
BITS_PER_SAMPLE = 16
PCM_FORMAT_TAG = 1

SamplesLike = Union[np.ndarray, Sequence[Sequence[float]]]


def _as_channel_matrix(samples: SamplesLike, channel_count: int) -> np.ndarray:
    data = np.asarray(samples, dtype=np.float64)
    if data.ndim == 1:
        data = data.reshape(1, -1)
    if data.ndim != 2:
        raise ValueError(f"samples must be (channels, frames), got shape {data.shape}")
    if data.shape[0] != channel_count:
        raise ValueError(
            f"channel_count={channel_count} does not match samples with {data.shape[0]} channels"
        )
    return data


def _to_pcm16(data: np.ndarray) -> np.ndarray:
    # NaN 视为静音，其余先截断到 [-1, 1]
    clipped = np.clip(np.nan_to_num(data, nan=0.0), -1.0, 1.0)
    # 负半轴乘 0x8000，正半轴乘 0x7FFF，向零取整
    scaled = np.where(clipped < 0, clipped * 0x8000, clipped * 0x7FFF)
    return np.trunc(scaled).astype("<i2")


def _build_header(data_size: int, sample_rate: int, channel_count: int) -> bytes:
    total_length = data_size + WAV_HEADER_SIZE
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        total_length - 8,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT_TAG,
        channel_count,
        sample_rate,
        sample_rate * BYTES_PER_SAMPLE * channel_count,
        channel_count * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def encode_wav(samples: SamplesLike, sample_rate: int, channel_count: int) -> bytes:
    """
    编码为 PCM WAV 字节串。

    samples 为按声道组织的浮点采样（每个声道长度相同，由调用方保证），
    超出 [-1, 1] 的值会被截断而不是报错。输出按帧交错排列各声道的
    little-endian int16 采样，相同输入总是得到相同字节。
    """
    data = _as_channel_matrix(samples, channel_count)
    pcm = _to_pcm16(data)
    # (channels, frames) -> (frames, channels)，按帧交错
    payload = np.ascontiguousarray(pcm.T).tobytes()
    header = _build_header(len(payload), sample_rate, channel_count)
    return header + payload


def encode_wav_base64(samples: SamplesLike, sample_rate: int, channel_count: int) -> str:
    """
    返回 encode_wav 结果的标准 base64 文本（无换行、无 data: 前缀）。
    """
    return base64.b64encode(encode_wav(samples, sample_rate, channel_count)).decode("ascii")


def encode_audio(audio: DecodedAudio) -> bytes:
    return encode_wav(audio.samples, audio.sample_rate, audio.channel_count)


def encode_audio_base64(audio: DecodedAudio) -> str:
    return encode_wav_base64(audio.samples, audio.sample_rate, audio.channel_count)
