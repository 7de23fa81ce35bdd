from __future__ import annotations
from typing import List, Sequence
import re
import textstat
from wordwise.core.config import COMPLEX_WORD_LENGTH, ERROR_RATE_PENALTY, MIN_SCORE
from wordwise.models.report import WritingMetrics
from wordwise.models.suggestion import Suggestion

_PASSIVE = re.compile(r"\b(is|are|was|were|been|being|be)\s+\w+ed\b", re.IGNORECASE)

def words_of(text: str) -> List[str]:
    return [w for w in text.split() if w]

def sentences_of(text: str) -> List[str]:
    return [s for s in re.split(r"[.!?]+", text) if s.strip()]

def readability(text: str) -> float:
    if not words_of(text):
        return 100.0
    # Flesch reading ease can run negative or past 100 on odd input
    return round(max(0.0, min(100.0, textstat.flesch_reading_ease(text))), 1)

def compute_metrics(text: str) -> WritingMetrics:
    words = words_of(text)
    sentences = sentences_of(text)
    paragraphs = [p for p in re.split(r"\n\s*\n", text) if p.strip()]
    return WritingMetrics(
        word_count=len(words),
        sentence_count=len(sentences),
        paragraph_count=max(len(paragraphs), 1),
        readability_score=readability(text),
        average_words_per_sentence=round(len(words) / len(sentences), 2) if sentences else 0.0,
        complex_words=len([w for w in words if len(re.sub(r"\W", "", w)) > COMPLEX_WORD_LENGTH]),
        passive_voice_count=len(_PASSIVE.findall(text)),
    )

def overall_score(text: str, suggestions: Sequence[Suggestion]) -> int:
    # Start at 100 and subtract by error density
    word_count = len(words_of(text))
    if word_count == 0:
        return 100
    errors = len([s for s in suggestions if s.severity == "error"])
    error_rate = errors / word_count
    return int(round(max(MIN_SCORE, min(100.0, 100 - error_rate * ERROR_RATE_PENALTY))))

def strengths(suggestions: Sequence[Suggestion], score: int) -> List[str]:
    out = []
    if score >= 90:
        out.append("Excellent grammar and spelling")
    elif score >= 80:
        out.append("Good overall writing quality")
    if not any(s.severity == "error" for s in suggestions):
        out.append("No critical errors detected")
    if not any(s.category == "vocabulary" for s in suggestions):
        out.append("Good vocabulary usage")
    return out or ["Keep up the good work!"]

def areas_for_improvement(suggestions: Sequence[Suggestion]) -> List[str]:
    cats = {s.category for s in suggestions}
    out = []
    if "grammar" in cats:
        out.append("Focus on grammar accuracy")
    if "spelling" in cats:
        out.append("Check spelling carefully")
    if "vocabulary" in cats:
        out.append("Consider more advanced vocabulary")
    if cats & {"style", "clarity", "structure"}:
        out.append("Review sentence structure and clarity")
    return out or ["Continue practicing to improve further"]
