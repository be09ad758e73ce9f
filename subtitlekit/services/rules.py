"""Rule tables for the offline correction engine.

Rules are plain data: add or tune entries here rather than in the engine.
"""
import re
from typing import List, NamedTuple


class Rule(NamedTuple):
    pattern: re.Pattern
    replacement: str
    reason: str
    priority: int = 1


class ContextRule(NamedTuple):
    """Flag ``target`` on any line that also contains one of ``triggers``."""
    triggers: re.Pattern
    target: re.Pattern
    replacement: str
    reason: str


def _rule(pattern: str, replacement: str, reason: str, priority: int = 1, flags: int = re.IGNORECASE) -> Rule:
    return Rule(re.compile(pattern, flags), replacement, reason, priority)


ENGLISH_RULES: List[Rule] = [
    # Spelling
    _rule(r"\bteh\b", "the", "Spelling", 1),
    _rule(r"\bhte\b", "the", "Spelling", 1),
    _rule(r"\brecieve\b", "receive", "Spelling", 1),
    _rule(r"\bseperate\b", "separate", "Spelling", 1),
    _rule(r"\bdefinately\b", "definitely", "Spelling", 1),
    _rule(r"\bwich\b", "which", "Spelling", 1),
    _rule(r"\bthier\b", "their", "Spelling", 1),
    # Contractions and common phrases
    _rule(r"\balot\b", "a lot", "Common phrase", 2),
    _rule(r"\bdont\b", "don't", "Contraction", 2),
    _rule(r"\bcant\b", "can't", "Contraction", 2),
    _rule(r"\bwont\b", "won't", "Contraction", 2),
    _rule(r"\bive\b", "I've", "Contraction", 2),
    _rule(r"\bdoesnt\b", "doesn't", "Contraction", 2),
    _rule(r"\bdidnt\b", "didn't", "Contraction", 2),
    _rule(r"\bhallo\b", "Hello", "Spelling", 2),
    # Targeted phrasing
    _rule(r"\bmany\s+car\b", "many cars", "Plural noun", 3),
    _rule(r"\bpeople\s+scare\b", "people are scared", "Grammar", 3),
    _rule(r"\bgo\s+market\b", "go to the market", "Preposition", 3),
    _rule(r"\bsport\s+car\b", "sports car", "Noun form", 3),
    _rule(r"\bless\s+repair\b", "fewer repairs", "Countable noun", 3),
    _rule(r"\bsometime\b", "sometimes", "Frequency word", 3),
    _rule(r"\bfastly\b", "quickly", "Word choice", 3),
    _rule(r"\bsound\s+is\s+boom\b", "sounds loud", "Natural phrasing", 4),
    _rule(r"\bfuel\s+is\s+finish\b", "fuel runs out", "Natural phrasing", 4),
    _rule(r"\bbattery\s+finish\b", "battery runs out", "Natural phrasing", 4),
    _rule(r"\bvery\s+trust\b", "very reliable", "Word choice", 4),
    _rule(r"\bautomatic\s+easy\b", "automatic is easy", "Grammar", 4),
    _rule(r"\bmanual\s+cheap\b", "manual is cheaper", "Comparative", 4),
    _rule(r"\btoday\s+i\s+go\b", "today I went", "Tense", 4),
    _rule(r"\bone\s+friend\s+buy\b", "one friend bought", "Tense", 4),
]

ARABIC_SPELLING = "تصحيح إملائي"

ARABIC_RULES: List[Rule] = [
    _rule(r"\bزهبت\b", "ذهبت", ARABIC_SPELLING, flags=0),
    _rule(r"\bساءلت\b", "سألت", ARABIC_SPELLING, flags=0),
    _rule(r"\bالباءع\b", "البائع", ARABIC_SPELLING, flags=0),
    _rule(r"\bبندوره\b", "بندورة", ARABIC_SPELLING, flags=0),
    _rule(r"\bالسياره\b", "السيارة", ARABIC_SPELLING, flags=0),
]

# Dictation often hears "tomato" as "car"; only flagged when the same line
# already talks about tomatoes.
ARABIC_CONTEXT_RULES: List[ContextRule] = [
    ContextRule(
        triggers=re.compile(r"بندور[ةه]|طماطم"),
        target=re.compile(r"\b(ال)?سيار[ةه]\b"),
        replacement=r"\1بندورة",
        reason="تصحيح سياقي",
    ),
]

# Applied after the locale rules.
MULTI_SPACE_RE = re.compile(r" {2,}")
SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+(?=[.,!?;:])")

ARABIC_CHAR_RE = re.compile(r"[\u0600-\u06FF]")

# Sentence-like segments with their terminal punctuation.
SENTENCE_RE = re.compile(r"[^.!?\n]+[.!?]?")

