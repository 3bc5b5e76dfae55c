"""
services/exam_runner.py

Ties one session to its deadline timer and the finalizer.

All calls happen on the event loop that owns the session: navigation and
answer events from the API, the timer's tick task, finish and abandon.
"""

import asyncio
import logging
from typing import Optional

from config import TICK_INTERVAL_SECONDS
from timed_quiz.errors import DuplicateFinalize
from timed_quiz.models.result_model import ResultSummary
from timed_quiz.models.session_state import SessionState
from timed_quiz.services import session_controller
from timed_quiz.services.deadline_timer import DeadlineTimer
from timed_quiz.services.finalizer import Finalization, Finalizer, summarize
from timed_quiz.services.store import QuizStore

logger = logging.getLogger(__name__)


class ExamRunner:
    def __init__(
        self,
        state: SessionState,
        finalizer: Finalizer,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> None:
        self.state = state
        self.finalization: Optional[Finalization] = None
        self._saving: Optional[asyncio.Task] = None
        self._finalizer = finalizer
        self.timer = DeadlineTimer(state, self._on_deadline, interval=tick_interval)

    @classmethod
    def open(
        cls,
        store: QuizStore,
        test_id: str,
        user_id: str,
        tick_interval: float = TICK_INTERVAL_SECONDS,
    ) -> "ExamRunner":
        """
        Fetch the test and its questions once and build a runner.
        The timer is not started; call start() from the event loop.

        Raises:
            LookupError:        unknown test.
            ContentUnavailable: the store failed to load the test or its questions.
            EmptyQuestionSet:   the test has no questions.
        """
        test = store.fetch_test(test_id)
        if test is None:
            raise LookupError(f"Test {test_id} not found")
        questions = store.fetch_questions(test_id)
        state = session_controller.open_session(test, questions, user_id)
        return cls(state, Finalizer(store), tick_interval=tick_interval)

    def start(self) -> None:
        self.timer.start()

    async def finish(self) -> Optional[Finalization]:
        """
        Finish the session (explicit click or deadline).
        Only the first call seals and persists; later calls wait for that
        save to complete and return the existing finalization.
        """
        try:
            fin = self._finalizer.seal(self.state)
        except DuplicateFinalize as e:
            logger.warning(f"Ignoring duplicate finish: {e}")
            await self._wait_for_save()
            return self.finalization

        self.finalization = fin
        self.timer.cancel()
        await self._save(fin)
        return fin

    async def retry_save(self) -> Optional[Finalization]:
        """
        Re-attempt a failed save with the already computed result.
        A save still in progress is awaited, not repeated.
        """
        await self._wait_for_save()
        fin = self.finalization
        if fin is None or fin.saved:
            return fin
        await self._save(fin)
        return fin

    def abandon(self) -> bool:
        """Stop the timer and drop the session without a result."""
        self.timer.cancel()
        return session_controller.abandon(self.state)

    def summary(self) -> Optional[ResultSummary]:
        if self.finalization is None:
            return None
        return summarize(self.finalization)

    async def _on_deadline(self) -> None:
        await self.finish()

    async def _save(self, fin: Finalization) -> None:
        """Run one persist at a time; the write survives a cancelled caller."""
        if self._saving is None or self._saving.done():
            fin.saving = True
            self._saving = asyncio.get_running_loop().create_task(self._persist(fin))
        await asyncio.shield(self._saving)

    async def _wait_for_save(self) -> None:
        if self._saving is not None and not self._saving.done():
            await asyncio.shield(self._saving)

    async def _persist(self, fin: Finalization) -> None:
        try:
            await asyncio.to_thread(self._finalizer.persist, fin)
        finally:
            fin.saving = False
