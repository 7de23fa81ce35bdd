from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from wordwise.models.events import (
    AcceptAllResult,
    LifecycleEvent,
    OperationResult,
    SuggestionAccepted,
    SuggestionDismissed,
)
from wordwise.models.suggestion import DocumentState, Suggestion
from wordwise.services.offsets import Edit, apply_edit, diff_edit, is_valid, splice
from wordwise.services.resolve import resolve_overlaps

log = logging.getLogger("store")

Listener = Callable[[LifecycleEvent], None]


class SuggestionStore:
    """
    Owns one document's text buffer and its live suggestion set.

    After every public call the live set is non-overlapping and every span
    slices to its original_text. Nothing here raises on bad input; problems
    are reported through OperationResult.outcome.
    """

    def __init__(self, document_id: str, text: str = "", listeners: Optional[Iterable[Listener]] = None):
        self.document_id = document_id
        self._text = text
        self._live: List[Suggestion] = []
        self.listeners: List[Listener] = list(listeners or [])

    @property
    def text(self) -> str:
        return self._text

    @property
    def suggestions(self) -> List[Suggestion]:
        return list(self._live)

    def get(self, suggestion_id: str) -> Optional[Suggestion]:
        for s in self._live:
            if s.id == suggestion_id:
                return s
        return None

    def snapshot_state(self) -> DocumentState:
        return DocumentState(document_id=self.document_id, text=self._text, suggestions=self.suggestions)

    # ---- buffer ---------------------------------------------------------

    def load(self, text: str) -> None:
        """Swap in a different document; old suggestions can't apply to it."""
        self._text = text
        self._live = []

    def edit_text(self, new_text: str) -> Optional[Edit]:
        edit = diff_edit(self._text, new_text)
        if edit is None:
            return None
        before = len(self._live)
        self._live = self.reanchor(self._live, edit, new_text)
        self._text = new_text
        dropped = before - len(self._live)
        if dropped:
            log.info("Edit %s invalidated %d suggestion(s)", tuple(edit), dropped)
        return edit

    # ---- live set -------------------------------------------------------

    def replace_suggestions(self, new_set: Iterable[Suggestion]) -> List[Suggestion]:
        incoming = list(new_set)
        valid = [s for s in incoming if is_valid(self._text, s.span, s.original_text)]
        if len(valid) != len(incoming):
            log.warning("Dropped %d suggestion(s) stale against current text", len(incoming) - len(valid))
        self._live = resolve_overlaps(valid)
        return self.suggestions

    def accept_suggestion(self, suggestion_id: str) -> OperationResult:
        target = self.get(suggestion_id)
        if target is None:
            return OperationResult(outcome="not_found", suggestion_id=suggestion_id, text=self._text)

        if not is_valid(self._text, target.span, target.original_text):
            log.warning("Suggestion %s is stale; clearing %d live suggestion(s)", suggestion_id, len(self._live))
            self._live = []
            return OperationResult(outcome="stale", suggestion_id=suggestion_id, text=self._text, suggestion=target)

        new_text = splice(self._text, target.span, target.replacement_text)
        edit = Edit(target.start, target.end, len(target.replacement_text))
        rest = [s for s in self._live if s.id != suggestion_id]
        self._live = self.reanchor(rest, edit, new_text)
        self._text = new_text

        self._emit(self._accepted_event(target))
        return OperationResult(outcome="accepted", suggestion_id=suggestion_id, text=self._text, suggestion=target)

    def accept_all(self) -> AcceptAllResult:
        """
        Apply every live suggestion right-to-left. Working from the end means
        earlier spans never move, so no re-anchoring is needed between steps.
        """
        result = AcceptAllResult(text=self._text)
        text = self._text
        events = []
        for s in sorted(self._live, key=lambda s: s.start, reverse=True):
            if not is_valid(text, s.span, s.original_text):
                result.skipped.append(s.id)
                continue
            text = splice(text, s.span, s.replacement_text)
            result.applied.append(s.id)
            events.append(self._accepted_event(s))

        self._text = text
        self._live = []
        result.text = text
        if result.skipped:
            log.warning("accept_all skipped %d suggestion(s)", len(result.skipped))
        for event in events:
            self._emit(event)
        return result

    def dismiss_suggestion(self, suggestion_id: str) -> OperationResult:
        target = self.get(suggestion_id)
        if target is None:
            return OperationResult(outcome="not_found", suggestion_id=suggestion_id, text=self._text)
        self._live = [s for s in self._live if s.id != suggestion_id]
        self._emit(SuggestionDismissed(
            suggestion_id=target.id,
            category=target.category,
            original_text=target.original_text,
        ))
        return OperationResult(outcome="dismissed", suggestion_id=suggestion_id, text=self._text, suggestion=target)

    # ---- helpers --------------------------------------------------------

    @staticmethod
    def reanchor(live: List[Suggestion], edit: Edit, new_text: str) -> List[Suggestion]:
        kept: List[Suggestion] = []
        for s in live:
            span = apply_edit(s.span, edit)
            if span is None:
                continue
            moved = s if span == s.span else s.model_copy(update={"span": span})
            # a shifted span must still read its original text
            if is_valid(new_text, moved.span, moved.original_text):
                kept.append(moved)
        return kept

    @staticmethod
    def _accepted_event(s: Suggestion) -> SuggestionAccepted:
        return SuggestionAccepted(
            suggestion_id=s.id,
            category=s.category,
            original_text=s.original_text,
            replacement_text=s.replacement_text,
            explanation=s.explanation,
        )

    def _emit(self, event: LifecycleEvent) -> None:
        for listener in self.listeners:
            try:
                listener(event)
            except Exception:
                log.exception("Listener failed for %s event %s", event.kind, event.suggestion_id)
