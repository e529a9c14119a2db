"""测试 Web API（不访问 Gemini）"""
import importlib

import numpy as np
import pytest
from fastapi.testclient import TestClient

from srtsuite.audio import encode_wav
from srtsuite.errors import GeminiError
from srtsuite.pipeline import SrtSuitePipeline

from .conftest import SAMPLE_SRT, FakeGeminiClient


@pytest.fixture
def web(monkeypatch):
    module = importlib.import_module("srtsuite.web.app")
    gemini = FakeGeminiClient(audio_response="```srt\n1\n00:00:00,000 --> 00:00:01,500\nHallo\n```")

    monkeypatch.setattr(
        module,
        "run_translation_for_web",
        lambda config: SrtSuitePipeline(config, client=gemini).run_translation(),
    )
    monkeypatch.setattr(
        module,
        "run_transcription_for_web",
        lambda config: SrtSuitePipeline(config, client=gemini).run_transcription(),
    )
    client = TestClient(module.create_app())
    client.gemini = gemini  # type: ignore[attr-defined]
    return client


def test_health_and_options(web):
    assert web.get("/health").json() == {"status": "ok"}
    options = web.get("/api/options").json()
    assert options["default_language"] == "Vietnamese"
    assert options["default_style"] == "Neutral"
    assert options["styles"] == ["Formal", "Informal", "Neutral", "Technical"]


def test_translate_and_download(web):
    resp = web.post(
        "/api/translate",
        files={"file": ("movie.srt", SAMPLE_SRT.encode("utf-8"), "application/x-subrip")},
        data={"language": "German", "style": "Technical"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_count"] == 2
    assert body["original"][0]["text"] == "Hi"
    assert body["translated"][1] == {
        "index": 2,
        "start_time": "00:00:02,000",
        "end_time": "00:00:04,000",
        "text": "[tr] Bye\nsee you",
    }

    download = web.get(body["download_url"])
    assert download.status_code == 200
    assert download.text == body["srt"]
    assert "movie_German.srt" in download.headers["content-disposition"]


def test_translate_rejects_wrong_extension(web):
    resp = web.post("/api/translate", files={"file": ("movie.txt", b"hello", "text/plain")})
    assert resp.status_code == 400


def test_translate_rejects_unknown_style(web):
    resp = web.post(
        "/api/translate",
        files={"file": ("movie.srt", SAMPLE_SRT.encode("utf-8"), "text/plain")},
        data={"style": "Pirate"},
    )
    assert resp.status_code == 400
    assert "Pirate" in resp.json()["detail"]


def test_translate_upload_too_large(web, monkeypatch):
    monkeypatch.setenv("SRTSUITE_WEB_MAX_UPLOAD_MB", "0")
    resp = web.post(
        "/api/translate",
        files={"file": ("movie.srt", SAMPLE_SRT.encode("utf-8"), "text/plain")},
    )
    assert resp.status_code == 413


def test_transcribe(web):
    wav = encode_wav(np.zeros((1, 160)), 16000, 1)
    resp = web.post(
        "/api/transcribe",
        files={"file": ("clip.wav", wav, "audio/wav")},
        data={"language": "German"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["blocks"] == [
        {"index": 1, "start_time": "00:00:00,000", "end_time": "00:00:01,500", "text": "Hallo"}
    ]
    assert web.get(body["download_url"]).text == "1\n00:00:00,000 --> 00:00:01,500\nHallo"


def test_transcribe_rejects_non_media(web):
    resp = web.post("/api/transcribe", files={"file": ("notes.txt", b"hi", "text/plain")})
    assert resp.status_code == 400


def test_transcribe_failure_is_single_error(web):
    web.gemini.audio_error = GeminiError("quota")
    wav = encode_wav(np.zeros((1, 16)), 16000, 1)
    resp = web.post("/api/transcribe", files={"file": ("clip.wav", wav, "audio/wav")})
    assert resp.status_code == 500
    assert resp.json()["error"] == "Failed to transcribe audio and format to SRT."


def test_download_unknown_job(web):
    assert web.get("/download/deadbeef").status_code == 404
    assert web.get("/download/not-a-job").status_code == 404
