"""
services/session_controller.py

Navigation and answer capture for an open session.
Functions mutate the SessionState they are given and never touch the timer
or the store.
"""

import logging
from typing import List, Sequence

from timed_quiz.errors import EmptyQuestionSet, InvalidOptionIndex
from timed_quiz.models.question_model import Question, Test
from timed_quiz.models.session_state import SessionState, SessionStatus

logger = logging.getLogger(__name__)


def open_session(test: Test, questions: Sequence[Question], user_id: str) -> SessionState:
    """
    Start a session at question 0 with the full time limit.

    Raises:
        EmptyQuestionSet: the test has no questions. Callers show the
            "no content" view and must not start a timer.
    """
    if not questions:
        raise EmptyQuestionSet(test.id)

    if test.questions_count and test.questions_count != len(questions):
        logger.info(
            f"Test {test.id}: questions_count={test.questions_count}, fetched {len(questions)}"
        )

    return SessionState(
        test=test,
        questions=tuple(questions),
        user_id=user_id,
        remaining_seconds=test.time_limit_seconds,
    )


def select_answer(state: SessionState, question_id: str, option_index: int) -> bool:
    """
    Record (or overwrite) the answer for one question.

    Returns:
        True if the answer was recorded, False if the session is not active.

    Raises:
        InvalidOptionIndex: unknown question or option out of range. State is unchanged.
    """
    if not state.is_active:
        return False

    question = next((q for q in state.questions if q.id == question_id), None)
    if question is None or not 0 <= option_index < len(question.options):
        raise InvalidOptionIndex(question_id, option_index)

    state.answers[question_id] = option_index
    return True


def go_to(state: SessionState, index: int) -> int:
    """Jump to a question, clamped to the valid range. Returns the new index."""
    if state.is_active:
        state.current_index = max(0, min(index, state.total - 1))
    return state.current_index


def go_next(state: SessionState) -> int:
    return go_to(state, state.current_index + 1)


def go_previous(state: SessionState) -> int:
    return go_to(state, state.current_index - 1)


def progress_fraction(state: SessionState) -> float:
    """Display-only progress: (current_index + 1) / total."""
    return (state.current_index + 1) / state.total


def answered_flags(state: SessionState) -> List[bool]:
    """Answered/unanswered indicator per question, in session order."""
    return [q.id in state.answers for q in state.questions]


def answered_count(state: SessionState) -> int:
    return sum(answered_flags(state))


def abandon(state: SessionState) -> bool:
    """
    Leave an active session without finishing it.
    An abandoned session never produces a result.

    Returns:
        True if the session was active and is now abandoned.
    """
    if not state.is_active:
        return False
    state.status = SessionStatus.ABANDONED
    logger.info(f"Session for test {state.test.id} abandoned by {state.user_id}")
    return True
