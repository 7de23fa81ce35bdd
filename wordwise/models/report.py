from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from wordwise.models.feedback import GoalFeedback, OriginalityReport, VocabularyFeedback


class RecentError(BaseModel):
    text: str
    correction: str
    timestamp: datetime


class ErrorPattern(BaseModel):
    category: str
    subcategory: str
    count: int = 0
    fixed_count: int = 0
    total_opportunities: int = 0
    accuracy: float = 100.0
    examples: List[str] = Field(default_factory=list)
    recent_errors: List[RecentError] = Field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.category}_{self.subcategory}"


class CategoryAccuracy(BaseModel):
    category: str
    accuracy: float
    count: int
    total_opportunities: int


class PatternReport(BaseModel):
    patterns: List[ErrorPattern]
    categories: List[CategoryAccuracy]
    overall_accuracy: float
    total_errors: int
    most_problematic_area: str
    strongest_area: str
    last_updated: datetime


class WritingMetrics(BaseModel):
    word_count: int
    sentence_count: int
    paragraph_count: int
    readability_score: float
    average_words_per_sentence: float
    complex_words: int
    passive_voice_count: int


class AnalysisReport(BaseModel):
    document_id: str
    issue_seq: int
    overall_score: int
    metrics: WritingMetrics
    strengths: List[str]
    areas_for_improvement: List[str]
    vocabulary: VocabularyFeedback
    goals: GoalFeedback
    originality: OriginalityReport
    providers_failed: List[str] = Field(default_factory=list)
    unlocatable: int = 0
