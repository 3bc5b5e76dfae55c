from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Question(BaseModel):
    """
    Multiple-choice question.
    Pydantic v2, immutable once loaded.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Question identifier"
    )
    test_id: Optional[str] = Field(
        None,
        description="Owning test"
    )
    question: str = Field(
        ...,
        min_length=1,
        description="Prompt text"
    )
    options: List[str] = Field(
        ...,
        description="Answer options in display order"
    )
    correct_answer: int = Field(
        ...,
        description="Index of the correct option"
    )
    explanation: Optional[str] = Field(
        None,
        description="Shown on the review screen when present"
    )

    @field_validator('options')
    @classmethod
    def validate_options_length(cls, v: List[str]) -> List[str]:
        """
        A question needs between 2 and 6 options.
        """
        if not 2 <= len(v) <= 6:
            raise ValueError(f"options must have 2 to 6 entries, got {len(v)}")
        return v

    @model_validator(mode='after')
    def validate_correct_answer_index(self) -> 'Question':
        """
        The correct-answer index must point into options.
        """
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(
                f"correct_answer {self.correct_answer} is out of range for {len(self.options)} options"
            )
        return self


class Test(BaseModel):
    """
    Test metadata.

    questions_count is denormalized and kept by the content store; the engine
    only displays it and always navigates over the fetched questions.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    subject_id: Optional[str] = None
    title: str = Field(..., min_length=1)
    description: Optional[str] = ""
    difficulty: Difficulty = Difficulty.MEDIUM
    time_limit: int = Field(
        ...,
        gt=0,
        description="Time limit in minutes"
    )
    questions_count: int = Field(default=0, ge=0)

    @property
    def time_limit_seconds(self) -> int:
        return self.time_limit * 60
