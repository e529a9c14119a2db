from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class DecodedAudio:
    """
    解码后的多声道浮点音频。

    samples 形状为 (channels, frames)，取值范围约为 [-1.0, 1.0]。
    """

    samples: np.ndarray
    sample_rate: int

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / float(self.sample_rate)
