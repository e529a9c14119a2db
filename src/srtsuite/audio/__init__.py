from __future__ import annotations

from .types import DecodedAudio
from .wav_encoder import encode_audio, encode_audio_base64, encode_wav, encode_wav_base64
from .extractor import AudioDecoder, extract_audio, save_wav

__all__ = [
    "AudioDecoder",
    "DecodedAudio",
    "encode_audio",
    "encode_audio_base64",
    "encode_wav",
    "encode_wav_base64",
    "extract_audio",
    "save_wav",
]
