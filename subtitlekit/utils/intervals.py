"""Interval scheduling shared by every suggestion producer.

Two passes exist. ``claim_spans`` is the priority-ordered greedy pass used
inside a sentence: earlier claims block any later overlapping candidate.
``resolve_overlaps`` is the final left-to-right sweep that every suggestion
set goes through before it leaves the engine.
"""
from typing import Iterable, List, NamedTuple, Sequence
from subtitlekit.models.suggestion import Suggestion


class Candidate(NamedTuple):
    priority: int
    order: int
    suggestion: Suggestion


def overlaps(a: Suggestion, b: Suggestion) -> bool:
    return a.start < b.end and b.start < a.end


def claim_spans(candidates: Iterable[Candidate]) -> List[Suggestion]:
    accepted: List[Suggestion] = []
    ranked = sorted(candidates, key=lambda c: (c.priority, c.order, c.suggestion.start))
    for cand in ranked:
        if any(overlaps(cand.suggestion, s) for s in accepted):
            continue
        accepted.append(cand.suggestion)
    return accepted


def resolve_overlaps(suggestions: Sequence[Suggestion]) -> List[Suggestion]:
    """Sort by start (longer span first on ties) and drop anything overlapping its predecessor."""
    ordered = sorted(suggestions, key=lambda s: (s.start, -(s.end - s.start)))
    kept: List[Suggestion] = []
    last_end = -1
    for s in ordered:
        if s.start >= last_end:
            kept.append(s)
            last_end = s.end
    return kept
