import math
import re
import pytest
from subtitlekit.models.suggestion import Suggestion
from subtitlekit.services.corrector import (
    CorrectionEngine,
    apply_suggestions,
    is_arabic,
    merge_suggestions,
    naive_suggestions,
    sanitize_suggestions,
)
from subtitlekit.services.rules import ContextRule
from subtitlekit.utils.intervals import Candidate, claim_spans, resolve_overlaps


def spans(suggestions):
    return [(s.start, s.end, s.replacement) for s in suggestions]


def test_english_scenario():
    text = "teh cat sat.  It wont move."
    out = naive_suggestions(text)
    assert spans(out) == [(0, 3, "the"), (12, 14, " "), (17, 21, "won't")]
    assert apply_suggestions(text, out) == "the cat sat. It won't move."


def test_case_insensitive_match_keeps_original():
    out = naive_suggestions("Teh end")
    assert out[0].original == "Teh"
    assert out[0].replacement == "the"
    assert out[0].reason == "Spelling"


def test_higher_priority_claims_span_first():
    # "go market" (priority 3) beats the overlapping "today i go" (priority 4)
    out = naive_suggestions("today i go market")
    assert spans(out) == [(8, 17, "go to the market")]


def test_offsets_across_lines():
    text = "hallo\nteh end"
    assert spans(naive_suggestions(text)) == [(0, 5, "Hello"), (6, 9, "the")]


def test_space_before_punctuation():
    text = "Hello , world ."
    out = naive_suggestions(text)
    assert spans(out) == [(5, 6, ""), (13, 14, "")]
    assert apply_suggestions(text, out) == "Hello, world."


def test_space_run_before_punctuation_is_removed():
    text = "word  ."
    assert apply_suggestions(text, naive_suggestions(text)) == "word."


@pytest.mark.parametrize("text", ["", "   ", "\n\n"])
def test_empty_input(text):
    assert naive_suggestions(text) == []


def test_locale_detection():
    assert is_arabic("زهبت")
    assert not is_arabic("hello")


def test_arabic_spelling():
    text = "زهبت الى السوق"
    assert spans(naive_suggestions(text)) == [(0, 4, "ذهبت")]


def test_arabic_skips_english_rules_but_collapses_spaces():
    text = "teh  زهبت"
    out = naive_suggestions(text)
    assert spans(out) == [(3, 5, " "), (5, 9, "ذهبت")]


def test_arabic_context_rule_is_line_scoped():
    text = "اشتريت بندورة و سيارة\nركبت سيارة"
    out = naive_suggestions(text)
    pos = text.index("سيارة")
    assert spans(out) == [(pos, pos + 5, "بندورة")]


def test_arabic_context_rule_keeps_article():
    text = "البندورة في السيارة"
    out = naive_suggestions(text)
    pos = text.index("السيارة")
    assert spans(out) == [(pos, pos + 7, "البندورة")]


def test_context_rules_are_configurable():
    engine = CorrectionEngine(context_rules=[])
    assert engine.suggest("اشتريت بندورة و سيارة") == []
    custom = ContextRule(re.compile("شاي"), re.compile(r"\bسكر\b"), "عسل", "سياق")
    out = CorrectionEngine(context_rules=[custom]).suggest("شاي مع سكر")
    assert spans(out) == [(7, 10, "عسل")]


SAMPLES = [
    "teh cat sat.  It wont move.",
    "today i go market and sometime dont  go market .",
    "many car , sport car  and less repair!\nbattery finish? fuel is finish.",
    "I recieve alot of   mail , wich is definately seperate",
    "زهبت  الى السوق و ساءلت الباءع عن بندوره\nالسياره جديدة",
    "one friend buy a sport car. Today I go to work",
]


@pytest.mark.parametrize("text", SAMPLES)
def test_suggestions_are_valid_and_disjoint(text):
    out = naive_suggestions(text)
    for s in out:
        assert 0 <= s.start < s.end <= len(text)
        assert text[s.start:s.end] == s.original
    for prev, cur in zip(out, out[1:]):
        assert prev.start < cur.start
        assert prev.end <= cur.start
    expected_len = len(text) + sum(len(s.replacement) - (s.end - s.start) for s in out)
    assert len(apply_suggestions(text, out)) == expected_len


def test_claim_spans_rejects_overlap_with_any_accepted():
    a = Suggestion(start=0, end=4, original="", replacement="a")
    b = Suggestion(start=10, end=14, original="", replacement="b")
    c = Suggestion(start=3, end=11, original="", replacement="c")
    accepted = claim_spans([Candidate(1, 0, a), Candidate(1, 1, b), Candidate(2, 2, c)])
    assert accepted == [a, b]


def test_resolve_overlaps_prefers_longer_on_same_start():
    short = Suggestion(start=2, end=4, original="", replacement="s")
    long = Suggestion(start=2, end=8, original="", replacement="l")
    later = Suggestion(start=5, end=9, original="", replacement="x")
    after = Suggestion(start=8, end=9, original="", replacement="y")
    assert resolve_overlaps([later, short, after, long]) == [long, after]


def test_sanitize_filters_untrusted_items():
    text = "hello world"
    raw = [
        {"start": 0, "end": 5, "original": "hello", "replacement": "Hello", "reason": "Caps"},
        {"start": 6.7, "end": 11.2, "replacement": "World"},
        {"start": float("nan"), "end": 3, "replacement": "x"},
        {"start": 1, "end": math.inf, "replacement": "x"},
        {"start": 5, "end": 2, "replacement": "x"},
        {"start": 3, "end": 99, "replacement": "x"},
        {"start": "1", "end": "2", "replacement": "x"},
        {"start": True, "end": 2, "replacement": "x"},
        {"start": 1, "end": 2, "replacement": None},
        "not a dict",
    ]
    out = sanitize_suggestions(raw, text)
    assert spans(out) == [(0, 5, "Hello"), (6, 11, "World")]
    assert out[1].original == "world"
    assert out[1].reason is None


def test_sanitize_clamps_negative_start():
    out = sanitize_suggestions([{"start": -3, "end": 2, "replacement": "H"}], "hello")
    assert spans(out) == [(0, 2, "H")]


def test_merge_local_and_remote():
    local = [Suggestion(start=0, end=3, original="teh", replacement="the")]
    remote = [
        Suggestion(start=1, end=4, original="eh ", replacement="x"),
        Suggestion(start=0, end=3, original="teh", replacement="tea"),
        Suggestion(start=4, end=7, original="cat", replacement="dog"),
    ]
    merged = merge_suggestions(local, remote)
    assert spans(merged) == [(0, 3, "the"), (4, 7, "dog")]
