"""测试 SRT 解析与序列化"""
from srtsuite.subtitles import (
    SubtitleBlock,
    parse_srt,
    read_srt,
    stringify_srt,
    strip_code_fences,
    write_srt,
)


def test_parse_multiple_blocks():
    blocks = parse_srt(
        "1\n00:00:00,000 --> 00:00:02,000\nHi\n\n2\n00:00:02,000 --> 00:00:04,000\nBye"
    )
    assert [b.index for b in blocks] == [1, 2]
    assert [b.text for b in blocks] == ["Hi", "Bye"]
    assert blocks[0].start_time == "00:00:00,000"
    assert blocks[1].end_time == "00:00:04,000"


def test_non_numeric_index_is_dropped():
    assert parse_srt("abc\n00:00:01,000 --> 00:00:02,000\nHello") == []


def test_invalid_block_does_not_abort_document():
    text = (
        "x\n00:00:00,000 --> 00:00:01,000\nbad\n\n"
        "7\n00:00:01,000 --> 00:00:02,000\ngood"
    )
    blocks = parse_srt(text)
    assert blocks == [SubtitleBlock(7, "00:00:01,000", "00:00:02,000", "good")]


def test_missing_timing_separator_drops_block():
    text = "1\n00:00:00,000\nno arrow\n\n2\n00:00:01,000 --> 00:00:02,000\nok"
    blocks = parse_srt(text)
    assert [b.index for b in blocks] == [2]


def test_index_only_block_is_dropped():
    assert parse_srt("5") == []


def test_empty_and_whitespace_input():
    assert parse_srt("") == []
    assert parse_srt("  \n\n \t\n") == []


def test_block_without_text_lines():
    blocks = parse_srt("3\n00:00:00,000 --> 00:00:01,000")
    assert blocks == [SubtitleBlock(3, "00:00:00,000", "00:00:01,000", "")]


def test_multiline_text_and_crlf():
    text = "\r\n1\r\n00:00:00,000 --> 00:00:01,000\r\nline one\r\nline two\r\n\r\n\r\n"
    blocks = parse_srt(text)
    assert len(blocks) == 1
    assert blocks[0].text == "line one\nline two"


def test_order_and_numbering_preserved():
    text = (
        "10\n00:00:05,000 --> 00:00:06,000\nten\n\n"
        "3\n00:00:01,000 --> 00:00:02,000\nthree\n\n"
        "3\n00:00:02,000 --> 00:00:03,000\nagain"
    )
    assert [b.index for b in parse_srt(text)] == [10, 3, 3]


def test_stringify_format():
    blocks = [
        SubtitleBlock(1, "00:00:00,000", "00:00:02,000", "Hi"),
        SubtitleBlock(2, "00:00:02,000", "00:00:04,000", "Bye\nnow"),
    ]
    assert stringify_srt(blocks) == (
        "1\n00:00:00,000 --> 00:00:02,000\nHi\n\n"
        "2\n00:00:02,000 --> 00:00:04,000\nBye\nnow"
    )
    assert stringify_srt([]) == ""


def test_round_trip():
    blocks = [
        SubtitleBlock(4, "00:00:00,000", "00:00:01,500", "first\nsecond line"),
        SubtitleBlock(2, "00:01:00,250", "00:01:03,000", ""),
        SubtitleBlock(9, "01:00:00,000", "01:00:00,999", "last"),
    ]
    assert parse_srt(stringify_srt(blocks)) == blocks


def test_with_text_returns_copy():
    block = SubtitleBlock(1, "00:00:00,000", "00:00:01,000", "hello")
    changed = block.with_text("bonjour")
    assert changed.text == "bonjour"
    assert block.text == "hello"
    assert (changed.index, changed.start_time, changed.end_time) == (1, "00:00:00,000", "00:00:01,000")


def test_strip_code_fences():
    raw = "```srt\n1\n00:00:00,000 --> 00:00:01,000\nHi\n```"
    assert strip_code_fences(raw) == "1\n00:00:00,000 --> 00:00:01,000\nHi"
    assert strip_code_fences("```SRT\nabc\n```\n") == "abc"
    assert strip_code_fences("  plain text \n") == "plain text"


def test_read_and_write_srt(tmp_path):
    blocks = [SubtitleBlock(1, "00:00:00,000", "00:00:01,000", "héllo")]
    out = write_srt(blocks, tmp_path / "nested" / "out.srt")
    assert out.read_text(encoding="utf-8") == "1\n00:00:00,000 --> 00:00:01,000\nhéllo"

    bom_path = tmp_path / "bom.srt"
    bom_path.write_bytes("\ufeff1\n00:00:00,000 --> 00:00:01,000\nhi".encode("utf-8"))
    assert read_srt(bom_path)[0].index == 1


def test_read_srt_replaces_invalid_bytes(tmp_path):
    path = tmp_path / "latin1.srt"
    path.write_bytes(
        b"1\n00:00:00,000 --> 00:00:01,000\ncaf\xe9\n\n2\n00:00:01,000 --> 00:00:02,000\nok\n"
    )
    blocks = read_srt(path)
    assert [b.index for b in blocks] == [1, 2]
    assert blocks[0].text == "caf�"
    assert blocks[1].text == "ok"


def test_index_must_be_plain_digits():
    timing = "\n00:00:00,000 --> 00:00:01,000\ntext"
    for bad in ("1_0", "+3", "-2", "１２", "1.5"):
        assert parse_srt(bad + timing) == [], bad
    blocks = parse_srt(" 007 " + timing)
    assert [b.index for b in blocks] == [7]
