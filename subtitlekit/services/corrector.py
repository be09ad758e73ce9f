"""Offline, rule-based proofreading.

``CorrectionEngine.suggest`` returns non-overlapping, start-ascending
suggestions that can be applied to the exact input string in descending
``start`` order.
"""
import math
from typing import Any, Iterable, List, Optional, Sequence
from subtitlekit.models.suggestion import Suggestion
from subtitlekit.services import rules as R
from subtitlekit.utils.intervals import Candidate, claim_spans, resolve_overlaps
from subtitlekit.utils.logger import logger


def is_arabic(text: str) -> bool:
    return R.ARABIC_CHAR_RE.search(text) is not None


def _iter_lines(text: str):
    """Yield (offset, line) pairs for newline-delimited lines."""
    base = 0
    for line in text.split("\n"):
        yield base, line
        base += len(line) + 1


class CorrectionEngine:
    def __init__(
        self,
        english_rules: Optional[Sequence[R.Rule]] = None,
        arabic_rules: Optional[Sequence[R.Rule]] = None,
        context_rules: Optional[Sequence[R.ContextRule]] = None,
    ):
        self.english_rules = list(R.ENGLISH_RULES if english_rules is None else english_rules)
        self.arabic_rules = list(R.ARABIC_RULES if arabic_rules is None else arabic_rules)
        self.context_rules = list(R.ARABIC_CONTEXT_RULES if context_rules is None else context_rules)

    def suggest(self, text: str) -> List[Suggestion]:
        if not text or not text.strip():
            return []
        if is_arabic(text):
            found = self._arabic(text)
            found += self._multi_space(text)
        else:
            found = self._english(text)
            found += self._space_before_punct(text)
            found += self._multi_space(text)
        return resolve_overlaps(found)

    def _english(self, text: str) -> List[Suggestion]:
        out: List[Suggestion] = []
        for base, line in _iter_lines(text):
            for sentence in R.SENTENCE_RE.finditer(line):
                seg = sentence.group(0)
                if not seg.strip():
                    continue
                seg_start = base + sentence.start()
                candidates = []
                for order, rule in enumerate(self.english_rules):
                    for m in rule.pattern.finditer(seg):
                        s = Suggestion(
                            start=seg_start + m.start(),
                            end=seg_start + m.end(),
                            original=m.group(0),
                            replacement=rule.replacement,
                            reason=rule.reason,
                        )
                        candidates.append(Candidate(rule.priority, order, s))
                out.extend(claim_spans(candidates))
        return out

    def _arabic(self, text: str) -> List[Suggestion]:
        out: List[Suggestion] = []
        for base, line in _iter_lines(text):
            for rule in self.context_rules:
                if not rule.triggers.search(line):
                    continue
                for m in rule.target.finditer(line):
                    out.append(Suggestion(
                        start=base + m.start(),
                        end=base + m.end(),
                        original=m.group(0),
                        replacement=m.expand(rule.replacement),
                        reason=rule.reason,
                    ))
        for rule in self.arabic_rules:
            for m in rule.pattern.finditer(text):
                out.append(Suggestion(
                    start=m.start(), end=m.end(), original=m.group(0),
                    replacement=rule.replacement, reason=rule.reason,
                ))
        return out

    def _multi_space(self, text: str) -> List[Suggestion]:
        return [
            Suggestion(start=m.start(), end=m.end(), original=m.group(0), replacement=" ", reason="Extra spaces")
            for m in R.MULTI_SPACE_RE.finditer(text)
        ]

    def _space_before_punct(self, text: str) -> List[Suggestion]:
        return [
            Suggestion(start=m.start(), end=m.end(), original=m.group(0), replacement="", reason="Space before punctuation")
            for m in R.SPACE_BEFORE_PUNCT_RE.finditer(text)
        ]


def naive_suggestions(text: str) -> List[Suggestion]:
    return CorrectionEngine().suggest(text)


def _as_index(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return max(0, math.floor(value))


def sanitize_suggestions(raw: Iterable[Any], text: str) -> List[Suggestion]:
    """Validate untrusted suggestion dicts against ``text``.

    Items with non-finite, inverted or out-of-range indices, or without a
    string replacement, are dropped.
    """
    items = list(raw or [])
    out: List[Suggestion] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        start = _as_index(item.get("start"))
        end = _as_index(item.get("end"))
        replacement = item.get("replacement")
        if start is None or end is None or not isinstance(replacement, str):
            continue
        if end <= start or end > len(text):
            continue
        original = item.get("original")
        reason = item.get("reason")
        out.append(Suggestion(
            start=start,
            end=end,
            original=str(original) if original is not None else text[start:end],
            replacement=replacement,
            reason=str(reason) if reason else None,
        ))
    if len(out) < len(items):
        logger.debug(f"Dropped {len(items) - len(out)} malformed suggestion(s)")
    return out


def merge_suggestions(*groups: Sequence[Suggestion]) -> List[Suggestion]:
    """Combine suggestion sets; earlier groups win ties on identical spans."""
    combined: List[Suggestion] = []
    for group in groups:
        combined.extend(group)
    return resolve_overlaps(combined)


def apply_suggestions(text: str, suggestions: Sequence[Suggestion]) -> str:
    out = text
    for s in sorted(suggestions, key=lambda s: s.start, reverse=True):
        out = out[:s.start] + s.replacement + out[s.end:]
    return out
