import math
import re
from typing import Iterable, List
from subtitlekit.config import settings
from subtitlekit.models.caption import CaptionItem

MIN_CUE_SECONDS = 2

_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def cue_duration(text: str, max_seconds: int) -> int:
    """Reading-speed duration, clamped to [MIN_CUE_SECONDS, max_seconds]."""
    estimate = math.ceil(len(text) / settings.READING_CHARS_PER_SECOND)
    return max(MIN_CUE_SECONDS, min(max_seconds, estimate))


def layout(units: Iterable[str], max_seconds: int) -> List[CaptionItem]:
    """Lay text units out back-to-back from t=0 with no gaps."""
    if max_seconds < MIN_CUE_SECONDS:
        raise ValueError(f"max_seconds must be >= {MIN_CUE_SECONDS}, got {max_seconds}")
    cues = []
    t = 0
    for unit in units:
        dur = cue_duration(unit, max_seconds)
        cues.append(CaptionItem(id=len(cues) + 1, start=float(t), end=float(t + dur), text=unit))
        t += dur
    return cues


def split_sentences(text: str) -> List[str]:
    return [p.strip() for p in _SENTENCE_BREAK.split(text or "") if p.strip()]


def segment(text: str, max_chunk_seconds: int = None) -> List[CaptionItem]:
    """Split unstructured text into sentence cues with approximated timing."""
    if max_chunk_seconds is None:
        max_chunk_seconds = settings.MAX_CHUNK_SECONDS
    return layout(split_sentences(text), max_chunk_seconds)


def with_text(cues: List[CaptionItem], texts: List[str]) -> List[CaptionItem]:
    """Keep cue timing but swap in new text; extra cues or lines are dropped."""
    n = min(len(cues), len(texts))
    return [
        CaptionItem(id=i + 1, start=c.start, end=c.end, text=texts[i])
        for i, c in enumerate(cues[:n])
    ]
