"""
models/result_model.py

Finished-session output: the persisted result, the profile aggregate it
updates, and the presentation shapes built from them.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TestResult(BaseModel):
    """One finished session. Created exactly once per session."""

    id: Optional[str] = Field(
        None,
        description="Assigned by the store on persist"
    )
    user_id: str
    test_id: str
    score: int = Field(..., ge=0, le=100)
    total_questions: int = Field(..., gt=0)
    time_taken: int = Field(
        ...,
        ge=0,
        description="Elapsed seconds"
    )
    answers: Dict[str, int] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class ProfileAggregate(BaseModel):
    """Running totals owned by the profile store."""

    user_id: str
    total_score: int = 0
    tests_taken: int = 0


class QuestionReview(BaseModel):
    """Per-question review row. Pure derived data."""

    index: int
    question_id: str
    question: str
    options: List[str]
    chosen_option: Optional[int] = Field(
        None,
        description="None when unanswered"
    )
    correct_option: int
    is_correct: bool
    explanation: Optional[str] = None

    @property
    def answered(self) -> bool:
        return self.chosen_option is not None


class ResultSummary(BaseModel):
    """Everything the result screen shows."""

    result: TestResult
    correct_count: int
    incorrect_count: int
    unanswered_count: int
    time_taken_display: str
    score_message: str
    score_tier: str
    review: List[QuestionReview]
    saved: bool
    saving: bool = False
    notice: Optional[str] = None
