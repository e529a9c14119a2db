from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import Optional

import librosa
import numpy as np
import soundfile as sf

from srtsuite.errors import AudioDecodeError
from srtsuite.logging_utils import get_logger

from .types import DecodedAudio
from .wav_encoder import encode_audio


logger = get_logger(__name__)


class AudioDecoder:
    """
    显式创建、显式释放的音频解码资源。

    - sample_rate 为 None 时保留源采样率，否则重采样到指定值；
    - mono=True 时下混为单声道，否则保留全部声道；
    - decode_bytes() 会在私有临时目录中落地上传内容，close()（或 with 退出）时清理。
    """

    def __init__(self, sample_rate: int | None = None, mono: bool = False) -> None:
        if sample_rate is not None and sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        self.sample_rate = sample_rate
        self.mono = mono
        self._temp_dir: Optional[Path] = None

    def __enter__(self) -> "AudioDecoder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._temp_dir is not None:
            shutil.rmtree(self._temp_dir, ignore_errors=True)
            self._temp_dir = None

    def _read_with_soundfile(self, path: Path) -> DecodedAudio | None:
        # 仅在不需要重采样/下混时直接用 libsndfile 读取，视频容器等交给 librosa
        if self.sample_rate is not None or self.mono:
            return None
        try:
            data, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
        except RuntimeError:
            return None
        return DecodedAudio(samples=np.ascontiguousarray(data.T), sample_rate=int(sample_rate))

    def decode(self, path: str | Path) -> DecodedAudio:
        """
        将视频/音频文件解码为按声道组织的浮点采样。
        """
        input_path = Path(path).expanduser().resolve()
        if not input_path.exists():
            raise FileNotFoundError(f"输入文件不存在: {input_path}")

        audio = self._read_with_soundfile(input_path)
        if audio is None:
            try:
                samples, sample_rate = librosa.load(
                    str(input_path),
                    sr=self.sample_rate,
                    mono=self.mono,
                )
            except Exception as exc:
                raise AudioDecodeError(f"Error decoding audio data: {exc}") from exc
            audio = DecodedAudio(samples=np.atleast_2d(samples), sample_rate=int(sample_rate))

        if audio.frame_count == 0:
            raise AudioDecodeError(f"输入文件中没有可用的音频数据: {input_path}")

        logger.info(
            "音频解码完成: %s (采样率 %d Hz, 声道数 %d, 时长 %.2f 秒)",
            input_path.name,
            audio.sample_rate,
            audio.channel_count,
            audio.duration,
        )
        return audio

    def decode_bytes(self, data: bytes, suffix: str = "") -> DecodedAudio:
        """
        解码内存中的文件内容；suffix（如 ".mp4"）用于帮助后端识别容器格式。
        """
        if self._temp_dir is None:
            self._temp_dir = Path(tempfile.mkdtemp(prefix="srtsuite_"))
        temp_path = self._temp_dir / f"upload{suffix}"
        temp_path.write_bytes(data)
        try:
            return self.decode(temp_path)
        finally:
            temp_path.unlink(missing_ok=True)


def extract_audio(
    input_path: str | Path,
    sample_rate: int | None = None,
    mono: bool = False,
) -> DecodedAudio:
    with AudioDecoder(sample_rate=sample_rate, mono=mono) as decoder:
        return decoder.decode(input_path)


def save_wav(audio: DecodedAudio, output_path: str | Path) -> Path:
    out_path = Path(output_path).expanduser().resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(encode_audio(audio))
    return out_path
