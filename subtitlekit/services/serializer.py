from typing import List
from subtitlekit.models.caption import CaptionItem, Dialect
from subtitlekit.utils.timestamps import seconds_to_timestamp


def _range(cue: CaptionItem, dialect: Dialect) -> str:
    return f"{seconds_to_timestamp(cue.start, dialect)} --> {seconds_to_timestamp(cue.end, dialect)}"


def to_srt(cues: List[CaptionItem]) -> str:
    return "\n".join(f"{c.id}\n{_range(c, Dialect.SRT)}\n{c.text}\n" for c in cues)


def to_vtt(cues: List[CaptionItem]) -> str:
    return "WEBVTT\n\n" + "\n".join(f"{_range(c, Dialect.VTT)}\n{c.text}\n" for c in cues)


def render(cues: List[CaptionItem], dialect: Dialect = Dialect.SRT) -> str:
    """Render cues in input order; ordering and overlap are not re-checked."""
    if Dialect(dialect) == Dialect.VTT:
        return to_vtt(cues)
    return to_srt(cues)
