from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from wordwise.models.suggestion import Span

Level = Literal["beginner", "intermediate", "advanced"]
WritingType = Literal["essay", "email", "letter", "report", "creative", "conversation"]
Complexity = Literal["too-simple", "appropriate", "too-complex"]


class VocabularyWord(BaseModel):
    word: str
    span: Span
    complexity: Complexity
    explanation: str


class VocabularyRecommendation(BaseModel):
    type: Literal["simplify", "enhance", "learn", "context"]
    message: str
    examples: List[str] = Field(default_factory=list)


class VocabularySuggestion(BaseModel):
    original: str
    suggested: List[str]
    reason: str
    context: str


class VocabularyFeedback(BaseModel):
    level: Level
    overall_score: int
    complex_words: List[VocabularyWord] = Field(default_factory=list)
    simple_words: List[VocabularyWord] = Field(default_factory=list)
    recommendations: List[VocabularyRecommendation] = Field(default_factory=list)
    level_appropriate: bool = False
    suggested_words: List[VocabularySuggestion] = Field(default_factory=list)


class WritingGoal(BaseModel):
    type: WritingType
    description: str
    key_focus_areas: List[str]
    target_audience: str
    formality: Literal["formal", "semi-formal", "informal"]
    min_words: int
    max_words: int


class GoalAssessment(BaseModel):
    goal: str
    assessment: str
    suggestions: List[str] = Field(default_factory=list)
    score: int


class GoalFeedback(BaseModel):
    writing_type: WritingType
    overall_assessment: str
    specific_goals: List[GoalAssessment] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)
    strengths_identified: List[str] = Field(default_factory=list)


class OriginalityMatch(BaseModel):
    matched_text: str
    span: Span
    phrase: str
    risk: float


class OriginalityReport(BaseModel):
    """Heuristic indication only; nothing is compared against outside sources."""
    overall_similarity: int = 0
    unique_content: int = 100
    total_matches: int = 0
    word_count: int = 0
    matches: List[OriginalityMatch] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
