"""
Shared fixtures for the session engine tests.
"""

import time

import pytest

import api.session as session
from timed_quiz.errors import PersistenceFailure
from timed_quiz.models.question_model import Difficulty, Question, Test
from timed_quiz.services.session_controller import open_session
from timed_quiz.services.store import InMemoryStore


class RecordingStore(InMemoryStore):
    """Counting InMemoryStore with injectable write delays and failures."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.persist_calls = 0
        self.increment_calls = 0
        self.fail_persist = 0
        self.fail_increment = 0
        self.persist_delay = 0.0

    def persist_result(self, result):
        self.persist_calls += 1
        if self.persist_delay:
            time.sleep(self.persist_delay)
        if self.fail_persist:
            self.fail_persist -= 1
            raise PersistenceFailure("storage unavailable")
        return super().persist_result(result)

    def increment_profile_aggregate(self, user_id, score_delta):
        self.increment_calls += 1
        if self.fail_increment:
            self.fail_increment -= 1
            raise PersistenceFailure("profile update failed")
        return super().increment_profile_aggregate(user_id, score_delta)


@pytest.fixture
def quiz_test():
    """Four questions, ten minutes."""
    return Test(
        id="t1",
        subject_id="s1",
        title="Arithmetic",
        difficulty=Difficulty.EASY,
        time_limit=10,
        questions_count=4,
    )


@pytest.fixture
def short_test():
    """One-minute test over the same four questions."""
    return Test(id="t-short", title="Quick round", time_limit=1, questions_count=4)


@pytest.fixture
def empty_test():
    return Test(id="t-empty", title="Nothing yet", time_limit=5)


@pytest.fixture
def questions():
    return [
        Question(id="q0", test_id="t1", question="1 + 1?", options=["1", "2", "3"], correct_answer=1,
                 explanation="Basic addition."),
        Question(id="q1", test_id="t1", question="2 * 3?", options=["5", "6"], correct_answer=1),
        Question(id="q2", test_id="t1", question="9 - 4?", options=["5", "4", "3", "6"], correct_answer=0),
        Question(id="q3", test_id="t1", question="8 / 2?", options=["2", "4", "6"], correct_answer=1),
    ]


@pytest.fixture
def state(quiz_test, questions):
    return open_session(quiz_test, questions, user_id="u1")


@pytest.fixture
def store(quiz_test, short_test, empty_test, questions):
    short_questions = [q.model_copy(update={"test_id": short_test.id}) for q in questions]
    return RecordingStore(
        tests=[quiz_test, short_test, empty_test],
        questions=questions + short_questions,
    )


@pytest.fixture(autouse=True)
def clear_sessions():
    yield
    session._sessions.clear()
    session._timestamps.clear()
