"""测试命令行入口"""
import numpy as np
import pytest

from srtsuite import cli
from srtsuite.audio import encode_wav

from .conftest import FakeGeminiClient


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeGeminiClient(
        audio_response="1\n00:00:00,000 --> 00:00:01,000\nHola"
    )
    monkeypatch.setattr("srtsuite.pipeline.GeminiClient", lambda: client)
    return client


def test_translate_command(sample_srt_path, fake_client, capsys):
    code = cli.main(["translate", str(sample_srt_path), "--lang", "Spanish", "--style", "Informal"])
    assert code == 0
    out_path = sample_srt_path.with_name("movie_Spanish.srt")
    assert out_path.read_text(encoding="utf-8").startswith("1\n00:00:00,000 --> 00:00:02,000\n[tr] Hi")
    assert "条目数: 2" in capsys.readouterr().out


def test_translate_explicit_output(sample_srt_path, fake_client, tmp_path):
    out = tmp_path / "out" / "result.srt"
    assert cli.main(["translate", str(sample_srt_path), "--output", str(out)]) == 0
    assert out.is_file()


def test_transcribe_command(tmp_path, fake_client, capsys):
    clip = tmp_path / "clip.wav"
    clip.write_bytes(encode_wav(np.zeros((1, 80)), 8000, 1))
    wav_out = tmp_path / "sent.wav"
    code = cli.main(["transcribe", str(clip), "--lang", "Spanish", "--output-wav", str(wav_out)])
    assert code == 0
    assert clip.with_name("clip_transcribed.srt").read_text(encoding="utf-8").endswith("Hola")
    assert wav_out.is_file()
    assert "Spanish" in fake_client.audio_calls[0][1]


def test_failure_returns_one(tmp_path, fake_client, capsys):
    assert cli.main(["translate", str(tmp_path / "missing.srt")]) == 1
    assert "处理失败" in capsys.readouterr().out


def test_invalid_choice_exits(sample_srt_path):
    with pytest.raises(SystemExit):
        cli.main(["translate", str(sample_srt_path), "--style", "Pirate"])
