"""Caption parsing for SRT, WebVTT and plain text uploads.

Parsing is best-effort: a malformed block is skipped, never fatal. Every
parser returns a ParsedCaptions whose ``text`` is the newline-joined cue text,
the plain transcript used by proofreading and re-upload.
"""
import os
import re
from typing import Iterator, List, Tuple
from subtitlekit.config import settings
from subtitlekit.models.caption import CaptionItem, Dialect, ParsedCaptions
from subtitlekit.utils.logger import logger
from subtitlekit.utils.segmenter import layout
from subtitlekit.utils.timestamps import BOM, timestamp_to_seconds

TAG_RE = re.compile(r"</?[^>]+>")
_SRT_RANGE_RE = re.compile(
    r"(\d+:\d{1,2}:\d{1,2}[.,]\d{1,3})\s*-->\s*(\d+:\d{1,2}:\d{1,2}[.,]\d{1,3})"
)
_VTT_RANGE_RE = re.compile(r"(\S+)\s+-->\s+(\S+)")


def strip_markup(text: str) -> str:
    return TAG_RE.sub("", text)


def _normalize(content: str) -> str:
    return (content or "").replace("\r", "").lstrip(BOM)


def _finish(cues: List[CaptionItem]) -> ParsedCaptions:
    return ParsedCaptions(text="\n".join(c.text for c in cues), cues=cues)


def parse_srt(content: str) -> ParsedCaptions:
    cues: List[CaptionItem] = []
    for block in re.split(r"\n\s*\n", _normalize(content)):
        lines = [l.strip() for l in block.split("\n") if l.strip()]
        if len(lines) < 2:
            continue
        idx = next((i for i, l in enumerate(lines) if "-->" in l), None)
        m = _SRT_RANGE_RE.search(lines[idx]) if idx is not None else None
        if not m:
            logger.debug(f"Skipping SRT block without timestamp: {lines[0]!r}")
            continue
        start = timestamp_to_seconds(m.group(1), Dialect.SRT)
        end = timestamp_to_seconds(m.group(2), Dialect.SRT)
        if end < start:
            logger.debug(f"Skipping SRT block with inverted range: {lines[idx]!r}")
            continue
        text = strip_markup(" ".join(lines[idx + 1:])).strip()
        cues.append(CaptionItem(id=len(cues) + 1, start=start, end=end, text=text))
    return _finish(cues)


def iter_vtt_cues(content: str) -> Iterator[Tuple[float, float, str]]:
    """Yield (start, end, raw_text) for each WebVTT cue.

    A line that is not a timing line is treated as a cue identifier only if
    the next line is a timing line; otherwise it is skipped as noise.
    """
    lines = _normalize(content).split("\n")
    i = 0
    while i < len(lines):
        line = lines[i].strip()
        i += 1
        if not line or line.upper().startswith("WEBVTT"):
            continue
        if "-->" not in line:
            if i < len(lines) and "-->" in lines[i]:
                line = lines[i].strip()
                i += 1
            else:
                continue
        m = _VTT_RANGE_RE.search(line)
        if not m:
            continue
        start = timestamp_to_seconds(m.group(1), Dialect.VTT)
        end = timestamp_to_seconds(m.group(2), Dialect.VTT)
        text_lines = []
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i].strip())
            i += 1
        yield start, end, " ".join(text_lines)


def parse_vtt(content: str) -> ParsedCaptions:
    cues: List[CaptionItem] = []
    for start, end, raw in iter_vtt_cues(content):
        text = strip_markup(raw).strip()
        if not text or end < start:
            continue
        cues.append(CaptionItem(id=len(cues) + 1, start=start, end=end, text=text))
    return _finish(cues)


def parse_plain_text(content: str, max_seconds: int = None) -> ParsedCaptions:
    """One cue per non-empty line, timed by reading speed."""
    if max_seconds is None:
        max_seconds = settings.PLAIN_TEXT_MAX_SECONDS
    lines = [l.strip() for l in _normalize(content).split("\n") if l.strip()]
    return _finish(layout(lines, max_seconds))


def parse_captions(filename: str, content: str) -> ParsedCaptions:
    """Pick a parser from the file extension and parse ``content``."""
    ext = os.path.splitext((filename or "").lower())[1]
    if ext == ".vtt":
        return parse_vtt(content)
    if ext == ".srt":
        return parse_srt(content)
    return parse_plain_text(content)
