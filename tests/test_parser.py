from subtitlekit.services.parser import parse_captions, parse_plain_text, parse_srt, parse_vtt

SRT = "1\n00:00:01,000 --> 00:00:03,500\nHello world\n\n2\n00:00:04,000 --> 00:00:06,000\nSecond line\n"


def test_srt_scenario():
    parsed = parse_srt(SRT)
    assert [c.model_dump() for c in parsed.cues] == [
        {"id": 1, "start": 1.0, "end": 3.5, "text": "Hello world"},
        {"id": 2, "start": 4.0, "end": 6.0, "text": "Second line"},
    ]
    assert parsed.text == "Hello world\nSecond line"


def test_srt_markup_multiline_and_crlf():
    content = "\ufeff1\r\n00:00:01,000 --> 00:00:02,000\r\n<i>Hi</i>\r\nthere\r\n"
    parsed = parse_srt(content)
    assert len(parsed.cues) == 1
    assert parsed.cues[0].text == "Hi there"


def test_srt_skips_malformed_blocks():
    content = "garbage\nmore garbage\n\n7\n00:00:01,000 --> 00:00:02,000\nOk\n\n8\nnot a time\ntext\n"
    parsed = parse_srt(content)
    assert [(c.id, c.text) for c in parsed.cues] == [(1, "Ok")]


def test_srt_without_index_line():
    parsed = parse_srt("00:00:01,000 --> 00:00:02,000\nNo index\n")
    assert parsed.cues[0].text == "No index"


VTT = (
    "WEBVTT\n\n"
    "intro\n00:00:01.000 --> 00:00:02.500\n<b>Hello</b>\nworld\n\n"
    "00:01.000 --> 00:03.000 align:start\nShort form\n\n"
    "NOTE nothing\nhere\n\n"
    "00:00:05.000 --> 00:00:06.000\n<i></i>\n"
)


def test_vtt_identifiers_short_timestamps_and_empty_cues():
    parsed = parse_vtt(VTT)
    assert [(c.id, c.start, c.end, c.text) for c in parsed.cues] == [
        (1, 1.0, 2.5, "Hello world"),
        (2, 1.0, 3.0, "Short form"),
    ]
    assert parsed.text == "Hello world\nShort form"


def test_plain_text_fallback_one_cue_per_line():
    parsed = parse_plain_text("First line\n\n" + "word " * 40 + "\n")
    assert len(parsed.cues) == 2
    assert parsed.cues[0].start == 0 and parsed.cues[0].end == 2
    assert parsed.cues[1].start == 2 and parsed.cues[1].end == 7


def test_dispatch_by_extension():
    assert len(parse_captions("movie.SRT", SRT).cues) == 2
    assert len(parse_captions("movie.vtt", VTT).cues) == 2
    plain = parse_captions("notes.md", "Just one line of text")
    assert [c.text for c in plain.cues] == ["Just one line of text"]


def test_no_cues():
    assert parse_srt("").cues == []
    assert parse_vtt("WEBVTT\n\n").text == ""
