from __future__ import annotations

from typing import Callable, List, Optional

import pytest

from srtsuite.errors import GeminiError


def source_text(prompt: str) -> str:
    """取出翻译提示词中 --- 包裹的原文。"""
    return prompt.split("---\n", 1)[1].rsplit("\n---\n", 1)[0]


class FakeGeminiClient:
    """替代 GeminiClient 的内存实现，不发起网络请求。"""

    def __init__(
        self,
        translate: Optional[Callable[[str], str]] = None,
        fail_on: Optional[str] = None,
        audio_response: str = "",
        audio_error: Optional[Exception] = None,
    ) -> None:
        self.translate = translate or (lambda text: f"[tr] {text}")
        self.fail_on = fail_on
        self.audio_response = audio_response
        self.audio_error = audio_error
        self.prompts: List[str] = []
        self.audio_calls: List[tuple[str, str, str]] = []

    def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        text = source_text(prompt)
        if self.fail_on is not None and self.fail_on in text:
            raise GeminiError("boom")
        return f"  {self.translate(text)}\n"

    def generate_with_audio(self, audio_base64: str, prompt: str, mime_type: str = "audio/wav") -> str:
        self.audio_calls.append((audio_base64, prompt, mime_type))
        if self.audio_error is not None:
            raise self.audio_error
        return self.audio_response


SAMPLE_SRT = (
    "1\n00:00:00,000 --> 00:00:02,000\nHi\n\n"
    "2\n00:00:02,000 --> 00:00:04,000\nBye\nsee you\n"
)


@pytest.fixture
def fake_client() -> FakeGeminiClient:
    return FakeGeminiClient()


@pytest.fixture
def sample_srt_path(tmp_path):
    path = tmp_path / "movie.srt"
    path.write_text(SAMPLE_SRT, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for name in (
        "SRTSUITE_TARGET_LANGUAGE",
        "SRTSUITE_TRANSLATION_STYLE",
        "SRTSUITE_TRANSLATE_CONCURRENCY",
        "SRTSUITE_DECODE_SAMPLE_RATE",
        "SRTSUITE_GEMINI_MODEL",
        "SRTSUITE_GEMINI_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SRTSUITE_WEB_JOBS_DIR", str(tmp_path / "web_jobs"))
