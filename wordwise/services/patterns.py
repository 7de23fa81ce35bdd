from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from wordwise.core.config import MAX_EXAMPLES, MAX_RECENT_ERRORS
from wordwise.models.events import LifecycleEvent
from wordwise.models.report import CategoryAccuracy, ErrorPattern, PatternReport, RecentError

log = logging.getLogger("patterns")

# Declaration order doubles as the tie-break order in snapshot().
ERROR_CATEGORIES: List[Tuple[str, List[str]]] = [
    ("Articles", ["Missing Article", "Wrong Article", "Unnecessary Article"]),
    ("Verb Tenses", ["Past Tense", "Present Tense", "Future Tense", "Perfect Tenses", "Progressive Tenses"]),
    ("Prepositions", ["Time Prepositions", "Place Prepositions", "Direction Prepositions", "Other Prepositions"]),
    ("Subject-Verb Agreement", ["Singular/Plural Mismatch", "Third Person Singular"]),
    ("Plurals", ["Regular Plurals", "Irregular Plurals", "Uncountable Nouns"]),
    ("Word Order", ["Adjective Order", "Question Formation", "Adverb Placement"]),
    ("Punctuation", ["Commas", "Periods", "Question Marks", "Apostrophes"]),
    ("Spelling", ["Common Misspellings", "Homophones", "Double Letters"]),
]
CATEGORY_ORDER = {name: i for i, (name, _) in enumerate(ERROR_CATEGORIES)}

ARTICLES = {"a", "an", "the"}
PREPOSITIONS = {
    "in", "on", "at", "by", "for", "with", "to", "from", "of", "about", "under",
    "over", "into", "onto", "towards", "toward", "during", "since", "until", "through",
}
DIRECTION_PREPOSITIONS = {"to", "into", "onto", "towards", "toward", "from", "through"}
TIME_WORDS = {
    "morning", "afternoon", "evening", "night", "monday", "tuesday", "wednesday",
    "thursday", "friday", "saturday", "sunday", "january", "february", "march",
    "april", "june", "july", "august", "september", "october", "november",
    "december", "today", "tomorrow", "yesterday", "week", "month", "year",
    "weekend", "time", "hour", "minute", "o'clock", "christmas", "summer", "winter",
}
HOMOPHONES = [
    {"their", "there", "they're"},
    {"your", "you're"},
    {"its", "it's"},
    {"whose", "who's"},
    {"to", "too", "two"},
    {"hole", "whole"},
    {"then", "than"},
    {"hear", "here"},
    {"know", "no"},
    {"weather", "whether"},
]
TENSE_KEYWORDS = [
    ("perfect", "Perfect Tenses"),
    ("progressive", "Progressive Tenses"),
    ("continuous", "Progressive Tenses"),
    ("future", "Future Tense"),
    ("past", "Past Tense"),
    ("present", "Present Tense"),
]

_WORD = re.compile(r"[a-z']+")
_PUNCT = re.compile(r"[.,;:!?'\"()]")


def _tokens(text: str) -> List[str]:
    return _WORD.findall(text.lower())


def _squeeze(word: str) -> str:
    return re.sub(r"(.)\1+", r"\1", word)


def _bare(text: str) -> str:
    return re.sub(r"[\W_]+", "", text).lower()


def _fields(item) -> Tuple[str, str, str, str]:
    explanation = getattr(item, "explanation", "")
    primary = getattr(explanation, "primary", explanation) or ""
    return (
        (getattr(item, "category", "") or "").lower(),
        (getattr(item, "original_text", "") or ""),
        (getattr(item, "replacement_text", "") or ""),
        str(primary).lower(),
    )


# ---- rule table -------------------------------------------------------------
# Each rule takes (original, replacement, explanation) and returns a
# (category, subcategory) pair or None.

def _article_rule(orig: str, repl: str, expl: str):
    a, b = set(_tokens(orig)) & ARTICLES, set(_tokens(repl)) & ARTICLES
    if "article" not in expl and a == b:
        return None
    if not a and b:
        return "Articles", "Missing Article"
    if a and not b:
        return "Articles", "Unnecessary Article"
    return "Articles", "Wrong Article"


def _agreement_rule(orig: str, repl: str, expl: str):
    if "agreement" in expl or ("subject" in expl and "verb" in expl):
        if "third person" in expl or re.search(r"\b(he|she|it)\b", repl.lower()):
            return "Subject-Verb Agreement", "Third Person Singular"
        return "Subject-Verb Agreement", "Singular/Plural Mismatch"
    return None


def _tense_rule(orig: str, repl: str, expl: str):
    if not any(k in expl for k in ("tense", "verb", "past", "present", "future")):
        return None
    for keyword, sub in TENSE_KEYWORDS:
        if keyword in expl:
            return "Verb Tenses", sub
    words = _tokens(repl)
    if "will" in words:
        return "Verb Tenses", "Future Tense"
    if any(w in ("have", "has", "had") for w in words):
        return "Verb Tenses", "Perfect Tenses"
    if any(w.endswith("ing") for w in words):
        return "Verb Tenses", "Progressive Tenses"
    return None


def _homophone_swap(orig: str, repl: str) -> bool:
    changed = set(_tokens(orig)) ^ set(_tokens(repl))
    return len(changed) >= 2 and any(changed <= group for group in HOMOPHONES)


def _homophone_rule(orig: str, repl: str, expl: str):
    if "homophone" in expl or _homophone_swap(orig, repl):
        return "Spelling", "Homophones"
    return None


def _preposition_rule(orig: str, repl: str, expl: str):
    if _homophone_swap(orig, repl):
        return None
    a, b = set(_tokens(orig)), set(_tokens(repl))
    changed = (a ^ b) & PREPOSITIONS
    if "preposition" not in expl and not changed:
        return None
    context = a | b
    if changed & DIRECTION_PREPOSITIONS:
        return "Prepositions", "Direction Prepositions"
    if context & TIME_WORDS:
        return "Prepositions", "Time Prepositions"
    if changed & {"in", "on", "at", "under", "over"}:
        return "Prepositions", "Place Prepositions"
    return "Prepositions", "Other Prepositions"


def _plural_rule(orig: str, repl: str, expl: str):
    if "irregular" in expl and "plural" in expl:
        return "Plurals", "Irregular Plurals"
    if "uncountable" in expl:
        return "Plurals", "Uncountable Nouns"
    if "plural" in expl or "singular" in expl:
        return "Plurals", "Regular Plurals"
    a, b = _tokens(orig), _tokens(repl)
    if len(a) == 1 and len(b) == 1 and a != b:
        x, y = sorted((a[0], b[0]), key=len)
        if y in (x + "s", x + "es"):
            return "Plurals", "Regular Plurals"
    return None


def _punctuation_rule(orig: str, repl: str, expl: str):
    if orig == repl or not (_PUNCT.search(orig) or _PUNCT.search(repl)):
        return None
    if _bare(orig) != _bare(repl):
        return None
    marks = set(_PUNCT.findall(orig)) ^ set(_PUNCT.findall(repl))
    if not marks:
        return None
    if "," in marks:
        return "Punctuation", "Commas"
    if "?" in marks:
        return "Punctuation", "Question Marks"
    if "'" in marks:
        return "Punctuation", "Apostrophes"
    return "Punctuation", "Periods"


def _word_order_rule(orig: str, repl: str, expl: str):
    a, b = _tokens(orig), _tokens(repl)
    moved = len(a) > 1 and sorted(a) == sorted(b) and a != b
    if not moved and "order" not in expl:
        return None
    if "adjective" in expl:
        return "Word Order", "Adjective Order"
    if "question" in expl or repl.rstrip().endswith("?"):
        return "Word Order", "Question Formation"
    if "adverb" in expl or (moved and any(w.endswith("ly") or w in ("always", "never", "often") for w in a)):
        return "Word Order", "Adverb Placement"
    return None


def _spelling_rule(orig: str, repl: str, expl: str):
    a, b = orig.lower().strip(), repl.lower().strip()
    if "homophone" in expl or _homophone_swap(orig, repl):
        return "Spelling", "Homophones"
    if a != b and _squeeze(a) == _squeeze(b):
        return "Spelling", "Double Letters"
    return "Spelling", "Common Misspellings"


GRAMMAR_RULES = [
    _article_rule,
    _agreement_rule,
    _tense_rule,
    _homophone_rule,
    _preposition_rule,
    _plural_rule,
    _punctuation_rule,
    _word_order_rule,
]

RULES_BY_CATEGORY = {
    "spelling": [_spelling_rule],
    "grammar": GRAMMAR_RULES,
    "style": [_punctuation_rule, _word_order_rule],
    "clarity": [_word_order_rule],
    "structure": [_word_order_rule, _punctuation_rule],
    # vocabulary upgrades are not errors
    "vocabulary": [],
}


def categorize(item) -> Optional[Tuple[str, str]]:
    """
    Map a suggestion (or accepted event) onto (category, subcategory).
    None means no rule claimed it; such items are left out of statistics.
    """
    category, orig, repl, expl = _fields(item)
    for rule in RULES_BY_CATEGORY.get(category, []):
        hit = rule(orig, repl, expl)
        if hit is not None:
            return hit
    return None


def _accuracy(count: int, opportunities: int) -> float:
    if opportunities <= 0:
        return 100.0
    return round(min(100.0, max(0.0, 100.0 * (1 - count / opportunities))), 2)


class ErrorPatternAggregator:
    """Longitudinal accuracy per (category, subcategory)."""

    def __init__(self, records: Optional[Iterable[dict]] = None):
        self._patterns: Dict[Tuple[str, str], ErrorPattern] = {}
        self._init_defaults()
        if records:
            self.load_records(records)
        self.last_updated = datetime.now(timezone.utc)

    def _init_defaults(self) -> None:
        for category, subs in ERROR_CATEGORIES:
            for sub in subs:
                self._patterns.setdefault((category, sub), ErrorPattern(category=category, subcategory=sub))

    def pattern(self, category: str, subcategory: str) -> Optional[ErrorPattern]:
        return self._patterns.get((category, subcategory))

    @property
    def patterns(self) -> List[ErrorPattern]:
        return list(self._patterns.values())

    def _touch(self, p: ErrorPattern) -> None:
        p.accuracy = _accuracy(p.count, p.total_opportunities)
        self.last_updated = datetime.now(timezone.utc)

    def record_fixed(self, category: str, subcategory: str, original_text: str, correction: str) -> bool:
        p = self.pattern(category, subcategory)
        if p is None:
            log.warning("Unknown error pattern %s / %s", category, subcategory)
            return False
        p.count += 1
        p.fixed_count += 1
        p.total_opportunities += 1
        if original_text not in p.examples and len(p.examples) < MAX_EXAMPLES:
            p.examples.append(original_text)
        p.recent_errors.insert(0, RecentError(
            text=original_text, correction=correction, timestamp=datetime.now(timezone.utc),
        ))
        del p.recent_errors[MAX_RECENT_ERRORS:]
        self._touch(p)
        return True

    def record_opportunities(self, category: str, subcategory: str, n: int) -> bool:
        p = self.pattern(category, subcategory)
        if p is None or n <= 0:
            return False
        p.total_opportunities += int(n)
        self._touch(p)
        return True

    def record_opportunity_counts(self, counts: Dict[Tuple[str, str], int]) -> None:
        for (category, sub), n in counts.items():
            self.record_opportunities(category, sub, n)

    def handle_event(self, event: LifecycleEvent) -> None:
        if event.kind != "accepted":
            log.debug("Dismissed %s (%s); not counted", event.suggestion_id, event.category)
            return
        hit = categorize(event)
        if hit is None:
            log.debug("Uncategorized suggestion %s: %r -> %r",
                      event.suggestion_id, event.original_text, event.replacement_text)
            return
        self.record_fixed(hit[0], hit[1], event.original_text, event.replacement_text)

    def snapshot(self) -> PatternReport:
        with_data = [p for p in self._patterns.values() if p.total_opportunities > 0]
        total_errors = sum(p.count for p in self._patterns.values())

        by_cat: Dict[str, List[int]] = {}
        for p in with_data:
            c = by_cat.setdefault(p.category, [0, 0])
            c[0] += p.count
            c[1] += p.total_opportunities
        categories = [
            CategoryAccuracy(category=name, accuracy=_accuracy(c, o), count=c, total_opportunities=o)
            for name, (c, o) in sorted(by_cat.items(), key=lambda kv: CATEGORY_ORDER[kv[0]])
        ]

        overall = _accuracy(
            sum(p.count for p in with_data),
            sum(p.total_opportunities for p in with_data),
        )
        if categories:
            worst = min(categories, key=lambda c: (c.accuracy, CATEGORY_ORDER[c.category])).category
            best = min(categories, key=lambda c: (-c.accuracy, CATEGORY_ORDER[c.category])).category
        else:
            worst = best = "None"

        return PatternReport(
            patterns=[p.model_copy(deep=True) for p in with_data],
            categories=categories,
            overall_accuracy=overall,
            total_errors=total_errors,
            most_problematic_area=worst,
            strongest_area=best,
            last_updated=self.last_updated,
        )

    def reset(self) -> None:
        self._patterns.clear()
        self._init_defaults()
        self.last_updated = datetime.now(timezone.utc)

    # ---- persistence ----------------------------------------------------

    def to_records(self) -> List[dict]:
        return [p.model_dump(mode="json") for p in self._patterns.values()]

    def load_records(self, records: Iterable[dict]) -> None:
        for rec in records:
            try:
                p = ErrorPattern.model_validate(rec)
            except ValueError as e:
                log.warning("Skipping malformed pattern record: %s", e)
                continue
            if (p.category, p.subcategory) not in self._patterns:
                continue
            p.accuracy = _accuracy(p.count, p.total_opportunities)
            self._patterns[(p.category, p.subcategory)] = p
