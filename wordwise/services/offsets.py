from __future__ import annotations

from typing import NamedTuple, Optional

from wordwise.models.suggestion import Span


class Edit(NamedTuple):
    """[start, end) of the old text was replaced by `inserted_length` code points."""
    start: int
    end: int
    inserted_length: int

    @property
    def delta(self) -> int:
        return self.inserted_length - (self.end - self.start)


def is_valid(text: str, span: Optional[Span], expected_text: str) -> bool:
    if span is None:
        return False
    start, end = span.start, span.end
    if not (0 <= start < end <= len(text)):
        return False
    return text[start:end] == expected_text


def shift(span: Span, edit_start: int, edit_end: int, inserted_length: int) -> Optional[Span]:
    """
    Re-anchor `span` after [edit_start, edit_end) was replaced.
    Returns None when the span overlaps the edited region; an insertion
    strictly inside the span counts as overlap.
    """
    if edit_start < 0 or edit_end < edit_start or inserted_length < 0:
        return None
    if span.end <= edit_start:
        return span
    if span.start >= edit_end:
        delta = inserted_length - (edit_end - edit_start)
        return Span(start=span.start + delta, end=span.end + delta)
    return None


def apply_edit(span: Span, edit: Edit) -> Optional[Span]:
    return shift(span, edit.start, edit.end, edit.inserted_length)


def diff_edit(old: str, new: str) -> Optional[Edit]:
    """
    Single-edit description of old -> new via common prefix and suffix.
    Not a minimal diff: two distant edits collapse into one spanning both.
    """
    if old == new:
        return None
    limit = min(len(old), len(new))
    prefix = 0
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1
    # suffix may not eat into the prefix of either string
    suffix = 0
    while (
        suffix < limit - prefix
        and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]
    ):
        suffix += 1
    return Edit(start=prefix, end=len(old) - suffix, inserted_length=len(new) - suffix - prefix)


def splice(text: str, span: Span, replacement: str) -> str:
    return text[:span.start] + replacement + text[span.end:]
