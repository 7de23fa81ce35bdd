from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from wordwise.core.config import DEFAULT_CONFIDENCE, NEAR_MISS_WINDOW
from wordwise.models.suggestion import Explanation, RawSuggestion, Span, Suggestion
from wordwise.services.offsets import is_valid

log = logging.getLogger("normalize")

# process-wide so an id is never handed out twice, even across documents
_serial = itertools.count(1)


@dataclass
class Normalized:
    suggestions: List[Suggestion] = field(default_factory=list)
    unlocatable: int = 0


def _reported_span(item: RawSuggestion) -> Optional[Span]:
    if item.reported_start is None:
        return None
    end = item.reported_end
    if end is None:
        end = item.reported_start + len(item.original_text)
    return Span(start=item.reported_start, end=end)


def locate(text: str, item: RawSuggestion) -> Optional[Span]:
    """
    Find where `item` lives in the current text. Tries, in order:
    reported offsets, the nearest exact match within NEAR_MISS_WINDOW of the
    reported start, exact search, and case-insensitive search.
    """
    snippet = item.original_text
    if not snippet:
        return None

    reported = _reported_span(item)
    if reported is not None:
        if is_valid(text, reported, snippet):
            return reported
        # nearest offset first
        for delta in sorted(range(-NEAR_MISS_WINDOW, NEAR_MISS_WINDOW + 1), key=abs):
            start = reported.start + delta
            candidate = Span(start=start, end=start + len(snippet))
            if is_valid(text, candidate, snippet):
                return candidate

    pos = text.find(snippet)
    if pos >= 0:
        return Span(start=pos, end=pos + len(snippet))

    # str.lower() can change length for a few code points; only trust it when it doesn't
    lowered, needle = text.lower(), snippet.lower()
    if len(lowered) == len(text) and len(needle) == len(snippet):
        pos = lowered.find(needle)
        if pos >= 0:
            return Span(start=pos, end=pos + len(snippet))
    return None


def _confidence(item: RawSuggestion, severity: str) -> float:
    if item.confidence is None:
        return DEFAULT_CONFIDENCE[severity]
    return min(1.0, max(0.0, float(item.confidence)))


def normalize(provider: str, rank: int, items: Iterable[RawSuggestion], text: str) -> Normalized:
    """Turn one provider's raw output into canonical suggestions against `text`."""
    out = Normalized()
    for index, item in enumerate(items):
        span = locate(text, item)
        if span is None:
            out.unlocatable += 1
            log.warning("Unlocatable suggestion from %s: %r", provider, item.original_text)
            continue
        severity = item.severity or ("suggestion" if item.category == "vocabulary" else "error")
        out.suggestions.append(Suggestion(
            id=f"{provider}-{index}-{span.start}-{next(_serial)}",
            category=item.category,
            severity=severity,
            span=span,
            # the case-insensitive rung may land on differently-cased text
            original_text=text[span.start:span.end],
            replacement_text=item.replacement_text,
            explanation=Explanation.parse(item.explanation),
            confidence=_confidence(item, severity),
            source_rank=rank,
            provider=provider,
            rule=item.rule,
        ))
    out.suggestions.sort(key=lambda s: s.start)
    if out.unlocatable:
        log.info("%s: %d located, %d unlocatable", provider, len(out.suggestions), out.unlocatable)
    return out
