from __future__ import annotations

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field

from wordwise.core.config import EXPLANATION_DELIMITER

Category = Literal["grammar", "spelling", "vocabulary", "style", "clarity", "structure"]
Severity = Literal["error", "warning", "suggestion"]


class Span(BaseModel):
    """Half-open [start, end) range of code points."""
    start: int
    end: int

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def __len__(self) -> int:
        return self.end - self.start


class Explanation(BaseModel):
    primary: str
    secondary: Optional[str] = None

    @classmethod
    def parse(cls, value: Union[str, dict, "Explanation", None]) -> "Explanation":
        """
        Accepts the delimited "english | native" string used on the wire,
        a {primary, secondary} mapping, or an existing Explanation.
        """
        if isinstance(value, Explanation):
            return value
        if isinstance(value, dict):
            return cls(
                primary=str(value.get("primary") or ""),
                secondary=value.get("secondary") or None,
            )
        text = (value or "").strip()
        head, sep, tail = text.partition(EXPLANATION_DELIMITER.strip())
        if sep and head.strip() and tail.strip():
            return cls(primary=head.strip(), secondary=tail.strip())
        return cls(primary=text)

    def render(self) -> str:
        if self.secondary:
            return f"{self.primary}{EXPLANATION_DELIMITER}{self.secondary}"
        return self.primary


class RawSuggestion(BaseModel):
    """What a provider hands back; offsets may be stale or plain wrong."""
    category: Category
    severity: Optional[Severity] = None
    original_text: str
    replacement_text: str = ""
    explanation: Union[str, Explanation] = ""
    reported_start: Optional[int] = None
    reported_end: Optional[int] = None
    confidence: Optional[float] = None
    rule: Optional[str] = None


class Suggestion(BaseModel):
    id: str
    category: Category
    severity: Severity
    span: Span
    original_text: str
    replacement_text: str
    explanation: Explanation
    confidence: float = Field(ge=0.0, le=1.0)
    source_rank: int = 0
    provider: str = ""
    rule: Optional[str] = None

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def public(self) -> dict:
        data = self.model_dump()
        data["explanation"] = self.explanation.render()
        return data


class DocumentState(BaseModel):
    document_id: str
    text: str
    suggestions: List[Suggestion] = Field(default_factory=list)

    def public(self) -> dict:
        return {
            "document_id": self.document_id,
            "text": self.text,
            "suggestions": [s.public() for s in self.suggestions],
        }
