from __future__ import annotations
from typing import Dict, List
import logging
import re
import textstat
from wordwise.models.feedback import (
    Level,
    VocabularyFeedback,
    VocabularyRecommendation,
    VocabularySuggestion,
    VocabularyWord,
)
from wordwise.models.suggestion import Span

log = logging.getLogger("vocabulary")

_WORD = re.compile(r"[A-Za-z][A-Za-z'-]*")

# syllables at which a word counts as too hard for the level; advanced has no ceiling
COMPLEX_SYLLABLES: Dict[str, int] = {"beginner": 4, "intermediate": 5}
MIN_COMPLEX_LENGTH = 8

# plain words a confident writer can replace with something more precise
SIMPLE_WORDS: Dict[str, List[str]] = {
    "good": ["excellent", "effective", "beneficial"],
    "nice": ["pleasant", "impressive", "remarkable"],
    "bad": ["poor", "harmful", "unpleasant"],
    "big": ["large", "significant", "substantial"],
    "small": ["minor", "slight", "compact"],
    "thing": ["item", "aspect", "factor"],
    "things": ["items", "aspects", "factors"],
    "stuff": ["material", "belongings", "items"],
    "get": ["obtain", "receive", "acquire"],
    "got": ["obtained", "received", "acquired"],
    "show": ["demonstrate", "illustrate", "reveal"],
    "happy": ["delighted", "pleased", "cheerful"],
    "sad": ["unhappy", "disappointed", "upset"],
}
CHECK_SIMPLE = {"intermediate", "advanced"}

BASE_RECOMMENDATIONS: Dict[str, List[VocabularyRecommendation]] = {
    "beginner": [
        VocabularyRecommendation(
            type="learn",
            message='Focus on learning common academic words like "analyze", "compare", "evaluate"',
            examples=["analyze", "compare", "evaluate", "describe"],
        ),
        VocabularyRecommendation(
            type="context",
            message="Practice using new words in different contexts to improve retention",
        ),
    ],
    "intermediate": [
        VocabularyRecommendation(
            type="enhance",
            message="Expand your vocabulary with more sophisticated adjectives and adverbs",
            examples=["remarkable", "substantial", "considerable", "significantly"],
        ),
        VocabularyRecommendation(
            type="context",
            message="Use transition words to connect ideas more effectively",
        ),
    ],
    "advanced": [
        VocabularyRecommendation(
            type="enhance",
            message="Incorporate more nuanced vocabulary to express subtle differences in meaning",
            examples=["compelling", "profound", "comprehensive", "intricate"],
        ),
        VocabularyRecommendation(
            type="context",
            message="Focus on domain-specific terminology for your field of study",
        ),
    ],
}
SUGGESTION_CONTEXT: Dict[str, tuple] = {
    "beginner": ("More specific and academic", "academic writing"),
    "intermediate": ("More precise and professional", "formal writing"),
    "advanced": ("More sophisticated and academic", "scholarly writing"),
}

MAX_COMPLEX = 5
MAX_SIMPLE = 5
MAX_RECOMMENDATIONS = 3
MAX_SUGGESTED = 3


def _too_complex(word: str, level: str) -> bool:
    ceiling = COMPLEX_SYLLABLES.get(level)
    if ceiling is None or len(word) < MIN_COMPLEX_LENGTH:
        return False
    return textstat.syllable_count(word) >= ceiling


def analyze_vocabulary(text: str, level: Level = "intermediate") -> VocabularyFeedback:
    """
    Judge word choice against the writer's proficiency level.

    Long many-syllable words are flagged as too complex for beginner and
    intermediate writers; plain everyday words are flagged as too simple for
    intermediate and advanced writers. The score falls by two points for every
    percent of flagged words.
    """
    if level not in BASE_RECOMMENDATIONS:
        log.warning("Unknown level %r; using intermediate", level)
        level = "intermediate"

    complex_words: List[VocabularyWord] = []
    simple_words: List[VocabularyWord] = []
    total = 0
    for m in _WORD.finditer(text):
        total += 1
        word = m.group(0)
        lower = word.lower()
        span = Span(start=m.start(), end=m.end())
        if _too_complex(word, level):
            complex_words.append(VocabularyWord(
                word=word, span=span, complexity="too-complex",
                explanation=f'"{word}" may be hard for a {level} reader; a shorter word keeps the sentence clear.',
            ))
        elif level in CHECK_SIMPLE and lower in SIMPLE_WORDS:
            alts = SIMPLE_WORDS[lower]
            simple_words.append(VocabularyWord(
                word=word, span=span, complexity="too-simple",
                explanation=f'Try a more specific word, such as "{alts[0]}" or "{alts[1]}".',
            ))

    flagged = len(complex_words) + len(simple_words)
    if total == 0:
        score = 100
    else:
        score = max(0, int(round(100 - flagged / total * 200)))

    recommendations: List[VocabularyRecommendation] = []
    if complex_words:
        recommendations.append(VocabularyRecommendation(
            type="simplify",
            message="Prefer common words where they carry the same meaning",
            examples=list(dict.fromkeys(w.word.lower() for w in complex_words))[:3],
        ))
    recommendations.extend(BASE_RECOMMENDATIONS[level])

    reason, context = SUGGESTION_CONTEXT[level]
    suggested: List[VocabularySuggestion] = []
    for lower in dict.fromkeys(w.word.lower() for w in simple_words):
        suggested.append(VocabularySuggestion(
            original=lower, suggested=SIMPLE_WORDS[lower], reason=reason, context=context,
        ))

    return VocabularyFeedback(
        level=level,
        overall_score=score,
        complex_words=complex_words[:MAX_COMPLEX],
        simple_words=simple_words[:MAX_SIMPLE],
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
        level_appropriate=total > 10 and flagged / total <= 0.1,
        suggested_words=suggested[:MAX_SUGGESTED],
    )
