from __future__ import annotations

import re
from typing import Iterable, List, NamedTuple, Optional

from wordwise.models.suggestion import RawSuggestion


class Rule(NamedTuple):
    pattern: str
    replacement: str
    explanation: str
    category: str = "spelling"
    severity: str = "error"
    confidence: Optional[float] = None


# Common ESL misspellings and irregular-verb slips.
SPELLING_GRAMMAR_RULES: List[Rule] = [
    Rule(r"\bsumer\b", "summer", 'Spelling error - missing double "m"'),
    Rule(r"\bgoed\b", "went", 'Past tense of "go" is "went"', "grammar"),
    Rule(r"\bwekend\b", "weekend", 'Spelling error - missing double "e"'),
    Rule(r"\brealy\b", "really", 'Spelling error - missing double "l"'),
    Rule(r"\bwaked\b", "woke", 'Past tense of "wake" is "woke"', "grammar"),
    Rule(r"\bdrived\b", "drove", 'Past tense of "drive" is "drove"', "grammar"),
    Rule(r"\bminits\b", "minutes", "Spelling error"),
    Rule(r"\bfinaly\b", "finally", 'Spelling error - missing double "l"'),
    Rule(r"\balot\b", "a lot", "Two separate words"),
    Rule(r"\brecieve\b", "receive", "I before E except after C"),
    Rule(r"\btheir\s+are\b", "there are", "Wrong homophone"),
    Rule(r"\bthier\b", "their", "Spelling error"),
    Rule(r"\bdefinately\b", "definitely", "Spelling error"),
    Rule(r"\bseperate\b", "separate", "Spelling error"),
    Rule(r"\boccured\b", "occurred", 'Double "r"'),
    Rule(r"\bneccesary\b", "necessary", 'One "c", double "s"'),
    Rule(r"\bshineing\b", "shining", 'Drop "e" before adding "ing"'),
    Rule(r"\bbrite\b", "bright", "Spelling error"),
    Rule(r"\bsandwitch\b", "sandwich", "Spelling error"),
    Rule(r"\bseagul\b", "seagull", 'Double "l"'),
    Rule(r"\btryed\b", "tried", 'Change "y" to "i" before "ed"'),
    Rule(r"\bteh\b", "the", "Spelling error"),
    Rule(r"\bfalled\b", "fell", 'Past tense of "fall" is "fell"', "grammar"),
    Rule(r"\bcamed\b", "came", 'Past tense of "come" is "came"', "grammar"),
    Rule(r"\beated\b", "ate", 'Past tense of "eat" is "ate"', "grammar"),
    Rule(r"\bfeeled\b", "felt", 'Past tense of "feel" is "felt"', "grammar"),
    Rule(r"\bbuilded\b", "built", 'Past tense of "build" is "built"', "grammar"),
    Rule(r"\bbrang\b", "brought", 'Past tense of "bring" is "brought"', "grammar"),
    Rule(r"\bbestest\b", "best", '"Best" is already superlative', "grammar"),
    Rule(r"\bto\s+fast\b", "too fast", 'Use "too" for "excessively"', "grammar"),
    Rule(r"\bmore\s+longer\b", "longer", 'Use either "more" or "longer", not both', "grammar"),
    Rule(r"\bme\s+and\s+my\s+family\b", "my family and I", 'Use "my family and I" as subject', "grammar"),
    Rule(r"\bthere\s+is\s+many\b", "there are many", "Subject-verb agreement error", "grammar"),
    Rule(r"\bthere\s+are\s+much\b", "there is much", "Subject-verb agreement error", "grammar"),
    Rule(r"\bhole\b(?=\s+(sumer|summer|vacation|day))", "whole", 'Did you mean "whole"? Hole is a gap.'),
    Rule(r"\byour\s+welcome\b", "you're welcome", "Contraction: you are welcome"),
    Rule(r"\bits\s+raining\b", "it's raining", "Contraction: it is raining"),
    Rule(r"\bwhos\s+car\b", "whose car", "Possessive form"),
    Rule(r"\ba\s+exciting\b", "an exciting", 'Use "an" before vowel sounds', "grammar"),
    Rule(r"\ba\s+hour\b", "an hour", 'Use "an" before vowel sounds', "grammar"),
    Rule(r"\bin\s+the\s+beach\b", "to the beach", 'Use "to" for destinations', "grammar"),
    Rule(r"\bvery\s+much\s+enjoyed\b", "really enjoyed", "More natural word order", "structure", "warning"),
]

# Academic vocabulary upgrades; advisory only.
VOCABULARY_RULES: List[Rule] = [
    Rule(r"\bvery good\b", "excellent", "Use more precise academic vocabulary", "vocabulary", "suggestion", 0.8),
    Rule(r"\bvery bad\b", "poor", "More formal academic term", "vocabulary", "suggestion", 0.8),
    Rule(r"\bvery important\b", "crucial", "More impactful academic language", "vocabulary", "suggestion", 0.8),
    Rule(r"\bvery big\b", "substantial", "More sophisticated description", "vocabulary", "suggestion", 0.8),
    Rule(r"\bvery small\b", "minimal", "More precise academic term", "vocabulary", "suggestion", 0.8),
    Rule(r"\bbig\s+problem\b", "significant issue", "More formal academic terminology", "vocabulary", "suggestion", 0.8),
    Rule(r"\bshow\b", "demonstrate", "Better for academic writing", "vocabulary", "suggestion", 0.8),
    Rule(r"\bthing\b", "aspect", "More specific academic term", "vocabulary", "suggestion", 0.8),
    Rule(r"\bstuff\b", "materials", "More formal academic language", "vocabulary", "suggestion", 0.8),
    Rule(r"\bget\b", "obtain", "More formal verb choice", "vocabulary", "suggestion", 0.8),
    Rule(r"\bmake\s+sure\b", "ensure", "More concise academic language", "vocabulary", "suggestion", 0.8),
    Rule(r"\ba lot of\b", "numerous", "More formal quantifier", "vocabulary", "suggestion", 0.8),
    Rule(r"\blots of\b", "many", "More formal quantifier", "vocabulary", "suggestion", 0.8),
    Rule(r"\bthink\s+about\b", "consider", "More precise academic verb", "vocabulary", "suggestion", 0.8),
    Rule(r"\btalk\s+about\b", "discuss", "More formal verb for academic writing", "vocabulary", "suggestion", 0.8),
    Rule(r"\bfind\s+out\b", "discover", "More elegant academic expression", "vocabulary", "suggestion", 0.8),
    Rule(r"\bfigure\s+out\b", "determine", "More academic problem-solving term", "vocabulary", "suggestion", 0.8),
    Rule(r"\bcome\s+up\s+with\b", "develop", "More concise academic language", "vocabulary", "suggestion", 0.8),
    Rule(r"\bpoint\s+out\b", "highlight", "More formal academic verb", "vocabulary", "suggestion", 0.8),
]


def _match_case(found: str, replacement: str) -> str:
    if found[:1].isupper() and replacement:
        return replacement[0].upper() + replacement[1:]
    return replacement


def scan(text: str, rules: Iterable[Rule]) -> List[RawSuggestion]:
    """Run every rule over `text` (case-insensitive) and report each hit with its offsets."""
    out: List[RawSuggestion] = []
    for rule in rules:
        for m in re.finditer(rule.pattern, text, flags=re.IGNORECASE):
            if m.end() <= m.start():
                continue
            out.append(RawSuggestion(
                category=rule.category,
                severity=rule.severity,
                original_text=m.group(0),
                replacement_text=_match_case(m.group(0), rule.replacement),
                explanation=rule.explanation,
                reported_start=m.start(),
                reported_end=m.end(),
                confidence=rule.confidence if rule.confidence is not None else 0.95,
                rule=rule.pattern,
            ))
    return out
