from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from wordwise.models.suggestion import Category, Explanation, Suggestion

Outcome = Literal["accepted", "dismissed", "not_found", "stale"]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SuggestionAccepted(BaseModel):
    kind: Literal["accepted"] = "accepted"
    suggestion_id: str
    category: Category
    original_text: str
    replacement_text: str
    explanation: Explanation
    timestamp: datetime = Field(default_factory=_now)


class SuggestionDismissed(BaseModel):
    kind: Literal["dismissed"] = "dismissed"
    suggestion_id: str
    category: Category
    original_text: str
    timestamp: datetime = Field(default_factory=_now)


LifecycleEvent = Union[SuggestionAccepted, SuggestionDismissed]


class OperationResult(BaseModel):
    outcome: Outcome
    suggestion_id: str
    text: str
    suggestion: Optional[Suggestion] = None


class AcceptAllResult(BaseModel):
    text: str
    applied: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
