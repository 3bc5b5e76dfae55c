"""
models/session_state.py

In-progress test session model.
Pydantic BaseModel; holds state only, no UI code and no I/O.
"""

from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, Field

from timed_quiz.models.question_model import Question, Test


class SessionStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"
    ABANDONED = "abandoned"


class SessionState(BaseModel):
    """
    One user's attempt at a test.

    Attributes:
        test:              The test being taken.
        questions:         Questions fetched at open. Order is fixed for the session.
        user_id:           Test taker.
        current_index:     Index of the question on screen (0-based).
        answers:           {question.id: chosen option index}. Partial.
        remaining_seconds: Countdown value, whole seconds.
        status:            active -> finished | abandoned. Never leaves a terminal state.
    """

    test: Test
    questions: Tuple[Question, ...] = Field(..., min_length=1)
    user_id: str
    current_index: int = Field(
        default=0,
        ge=0,
        description="Current question index (0-based)"
    )
    answers: Dict[str, int] = Field(
        default_factory=dict,
        description="key: question.id, value: chosen option index"
    )
    remaining_seconds: int = Field(default=0, ge=0)
    status: SessionStatus = SessionStatus.ACTIVE

    @property
    def time_limit_seconds(self) -> int:
        return self.test.time_limit_seconds

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    @property
    def current_question(self) -> Question:
        return self.questions[self.current_index]
