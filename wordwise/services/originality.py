from __future__ import annotations
from typing import List, Tuple
import re
from wordwise.models.feedback import OriginalityMatch, OriginalityReport
from wordwise.models.suggestion import Span

MIN_CHARS = 50
MIN_SENTENCE_CHARS = 30
MAX_MATCHES = 5
MAX_RECOMMENDATIONS = 4

# stock phrasing that often travels with copied text, weighted by how strongly it suggests it
STOCK_PHRASES: List[Tuple[re.Pattern, float]] = [
    (re.compile(r"\b(according to|as stated by|research shows)\b", re.IGNORECASE), 0.5),
    (re.compile(r"\b(it is important to note|it should be noted)\b", re.IGNORECASE), 0.4),
    (re.compile(r"\b(therefore|furthermore|moreover|consequently)\b", re.IGNORECASE), 0.3),
    (re.compile(r"\b(a significant amount|a large number|the majority)\b", re.IGNORECASE), 0.3),
    (re.compile(r"\b(in conclusion|to summarize|in summary)\b", re.IGNORECASE), 0.2),
]
_SENTENCE = re.compile(r"[^.!?]+")


def _sentence_spans(text: str):
    for m in _SENTENCE.finditer(text):
        raw = m.group(0)
        stripped = raw.strip()
        if len(stripped) < MIN_SENTENCE_CHARS:
            continue
        start = m.start() + (len(raw) - len(raw.lstrip()))
        yield stripped, Span(start=start, end=start + len(stripped))


def check_originality(text: str) -> OriginalityReport:
    """
    Flag sentences built on stock academic phrasing and estimate how much of
    the text leans on it. Each sentence is matched at most once, by its
    highest-risk phrase. Similarity is the risk-weighted share of words in
    flagged sentences.
    """
    word_count = len(text.split())
    if len(text.strip()) < MIN_CHARS:
        return OriginalityReport(
            word_count=word_count,
            recommendations=["Add more content to perform a meaningful originality check."],
        )

    matches: List[OriginalityMatch] = []
    for sentence, span in _sentence_spans(text):
        for pattern, risk in STOCK_PHRASES:
            hit = pattern.search(sentence)
            if hit:
                matches.append(OriginalityMatch(matched_text=sentence, span=span, phrase=hit.group(0), risk=risk))
                break

    weighted = sum(len(m.matched_text.split()) * m.risk for m in matches)
    similarity = int(round(min(100.0, weighted / word_count * 100))) if word_count else 0

    recommendations = []
    if similarity > 50:
        recommendations.append("Review flagged sections for potential plagiarism")
    if similarity > 30:
        recommendations.append("Ensure all sources are properly cited")
    if len(matches) > 3:
        recommendations.append("Consider paraphrasing similar content")
    recommendations.extend(["Add original analysis and personal insights",
                            "Use this check as a learning tool, not a verdict"])

    return OriginalityReport(
        overall_similarity=similarity,
        unique_content=100 - similarity,
        total_matches=len(matches),
        word_count=word_count,
        matches=matches[:MAX_MATCHES],
        recommendations=recommendations[:MAX_RECOMMENDATIONS],
    )
