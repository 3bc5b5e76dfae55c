"""
services/finalizer.py

One-time transition of a session from active to finished.

Finalizing happens in two steps:
  - seal(state)     : precondition check + status flip + scoring. Never awaits,
                      so on one event loop the first trigger (finish click or
                      deadline) wins and every later trigger sees "finished".
  - persist(fin)    : store the result and add its score to the profile
                      aggregate. Blocking I/O; callers on the loop run it via
                      asyncio.to_thread after sealing.

A failed persist leaves the session finished and keeps the computed result.
persist() may be called again for a manual retry; it only repeats the steps
that have not succeeded yet.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from timed_quiz.errors import DuplicateFinalize, PersistenceFailure, SessionNotActive
from timed_quiz.models.result_model import ResultSummary, TestResult
from timed_quiz.models.session_state import SessionState, SessionStatus
from timed_quiz.services.deadline_timer import format_remaining
from timed_quiz.services.exam_service import (
    build_review, calculate_score, count_correct,
    elapsed_seconds, score_message, score_tier,
)
from timed_quiz.services.store import QuizStore

logger = logging.getLogger(__name__)

NOT_SAVED_NOTICE = "Result not saved. Your score is shown below; you can retry saving."


@dataclass
class Finalization:
    """Sealed outcome of one session."""

    state: SessionState
    result: TestResult
    result_saved: bool = False
    profile_updated: bool = False
    saving: bool = False
    error: Optional[str] = None

    @property
    def saved(self) -> bool:
        return self.result_saved and self.profile_updated

    @property
    def notice(self) -> Optional[str]:
        if self.saved or self.saving:
            return None
        return NOT_SAVED_NOTICE


class Finalizer:
    def __init__(self, store: QuizStore) -> None:
        self._store = store

    def seal(self, state: SessionState) -> Finalization:
        """
        Flip an active session to finished and compute its result.

        Raises:
            DuplicateFinalize: the session is already finished.
            SessionNotActive:  the session was abandoned.
        """
        if state.status is SessionStatus.FINISHED:
            raise DuplicateFinalize(f"Session for test {state.test.id} is already finished")
        if state.status is not SessionStatus.ACTIVE:
            raise SessionNotActive(f"Session for test {state.test.id} is {state.status.value}")

        state.status = SessionStatus.FINISHED

        result = TestResult(
            user_id=state.user_id,
            test_id=state.test.id,
            score=calculate_score(state.questions, state.answers),
            total_questions=state.total,
            time_taken=elapsed_seconds(state.time_limit_seconds, state.remaining_seconds),
            answers=dict(state.answers),
        )
        logger.info(
            f"Session sealed: test={result.test_id} user={result.user_id} "
            f"score={result.score} time_taken={result.time_taken}s"
        )
        return Finalization(state=state, result=result)

    def persist(self, fin: Finalization) -> Finalization:
        """
        Save the sealed result, then add its score to the profile aggregate.
        Each step runs at most once successfully; failures are recorded on fin.
        """
        try:
            if not fin.result_saved:
                fin.result = self._store.persist_result(fin.result)
                fin.result_saved = True
            if not fin.profile_updated:
                self._store.increment_profile_aggregate(fin.result.user_id, fin.result.score)
                fin.profile_updated = True
        except PersistenceFailure as e:
            fin.error = str(e)
            logger.error(f"Persisting result for test {fin.result.test_id} failed: {e}")
            return fin

        fin.error = None
        return fin

    def finalize(self, state: SessionState) -> Optional[Finalization]:
        """
        seal + persist. A second call on the same session is a logged no-op
        returning None.
        """
        try:
            fin = self.seal(state)
        except DuplicateFinalize as e:
            logger.warning(f"Ignoring duplicate finalize: {e}")
            return None
        return self.persist(fin)


def summarize(fin: Finalization) -> ResultSummary:
    """Shape a finalization for the result screen. Pure; recomputable."""
    questions = fin.state.questions
    answers = fin.result.answers
    correct = count_correct(questions, answers)
    unanswered = sum(1 for q in questions if q.id not in answers)
    return ResultSummary(
        result=fin.result,
        correct_count=correct,
        incorrect_count=len(questions) - correct,
        unanswered_count=unanswered,
        time_taken_display=format_remaining(fin.result.time_taken),
        score_message=score_message(fin.result.score),
        score_tier=score_tier(fin.result.score),
        review=build_review(questions, answers),
        saved=fin.saved,
        saving=fin.saving,
        notice=fin.notice,
    )
