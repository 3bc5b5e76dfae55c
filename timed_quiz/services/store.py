"""
services/store.py

Boundary to the content and profile stores.

The engine needs four operations: fetch a test, fetch its ordered questions,
persist one result, and add one result's score to the user's profile
aggregate. InMemoryStore serves the sample content and the test suite;
SupabaseStore (services/supabase_store.py) talks to the hosted database.
"""

import threading
import uuid
from typing import Dict, Iterable, List, Optional, Protocol

from timed_quiz.models.question_model import Question, Test
from timed_quiz.models.result_model import ProfileAggregate, TestResult


class QuizStore(Protocol):
    def fetch_test(self, test_id: str) -> Optional[Test]:
        ...

    def fetch_questions(self, test_id: str) -> List[Question]:
        ...

    def persist_result(self, result: TestResult) -> TestResult:
        ...

    def increment_profile_aggregate(self, user_id: str, score_delta: int) -> ProfileAggregate:
        ...


class InMemoryStore:
    """Process-local store. Profile increments are atomic under one lock."""

    def __init__(
        self,
        tests: Iterable[Test] = (),
        questions: Iterable[Question] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._tests: Dict[str, Test] = {t.id: t for t in tests}
        self._questions: List[Question] = list(questions)
        self._results: Dict[str, TestResult] = {}
        self._profiles: Dict[str, ProfileAggregate] = {}

    def fetch_test(self, test_id: str) -> Optional[Test]:
        with self._lock:
            return self._tests.get(test_id)

    def fetch_questions(self, test_id: str) -> List[Question]:
        """Questions of one test in insertion order."""
        with self._lock:
            return [q for q in self._questions if q.test_id == test_id]

    def persist_result(self, result: TestResult) -> TestResult:
        stored = result.model_copy(update={"id": uuid.uuid4().hex})
        with self._lock:
            self._results[stored.id] = stored
        return stored

    def increment_profile_aggregate(self, user_id: str, score_delta: int) -> ProfileAggregate:
        with self._lock:
            current = self._profiles.get(user_id) or ProfileAggregate(user_id=user_id)
            updated = ProfileAggregate(
                user_id=user_id,
                total_score=current.total_score + score_delta,
                tests_taken=current.tests_taken + 1,
            )
            self._profiles[user_id] = updated
            return updated

    # ── inspection ───────────────────────────────────────────────────────────

    def results(self) -> List[TestResult]:
        with self._lock:
            return list(self._results.values())

    def profile(self, user_id: str) -> ProfileAggregate:
        with self._lock:
            return self._profiles.get(user_id) or ProfileAggregate(user_id=user_id)
