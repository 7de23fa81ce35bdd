from __future__ import annotations

from typing import Iterable, List

from wordwise.models.suggestion import Suggestion


def resolve_overlaps(candidates: Iterable[Suggestion]) -> List[Suggestion]:
    """
    Greedy, priority-first selection of non-overlapping suggestions.

    Candidates are visited by (source_rank, start); the sort is stable so the
    first of two identical spans from one provider wins. Losers are dropped,
    never merged. The result is ordered by start.
    """
    ordered = sorted(candidates, key=lambda s: (s.source_rank, s.start))
    accepted: List[Suggestion] = []
    for cand in ordered:
        if any(cand.span.overlaps(kept.span) for kept in accepted):
            continue
        accepted.append(cand)
    accepted.sort(key=lambda s: s.start)
    return accepted
