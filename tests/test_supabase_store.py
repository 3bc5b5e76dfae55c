"""
Tests for the Supabase adapter against a stubbed client.
"""

from unittest.mock import MagicMock

import pytest

from timed_quiz.errors import ContentUnavailable, PersistenceFailure
from timed_quiz.models.result_model import TestResult as QuizResult
from timed_quiz.services.supabase_store import SupabaseStore


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def supabase_store(client):
    return SupabaseStore(client=client)


@pytest.fixture
def result():
    return QuizResult(
        user_id="u1",
        test_id="t1",
        score=50,
        total_questions=4,
        time_taken=120,
        answers={"q0": 1, "q2": 0},
    )


def _test_query(client):
    return client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute


def _questions_query(client):
    return client.table.return_value.select.return_value.eq.return_value.order.return_value.execute


def _insert(client):
    return client.table.return_value.insert.return_value.execute


def _profile_select(client):
    return client.table.return_value.select.return_value.eq.return_value.single.return_value.execute


def _profile_update(client):
    return client.table.return_value.update.return_value.eq.return_value.execute


class TestFetchTest:
    def test_found(self, client, supabase_store):
        _test_query(client).return_value = MagicMock(
            data=[{"id": "t1", "title": "Arithmetic", "time_limit": 10, "difficulty": "easy",
                   "description": None, "created_at": "2026-01-01T00:00:00+00:00"}]
        )
        test = supabase_store.fetch_test("t1")

        assert test.id == "t1"
        assert test.time_limit_seconds == 600
        client.table.assert_called_with("tests")

    def test_missing(self, client, supabase_store):
        _test_query(client).return_value = MagicMock(data=[])
        assert supabase_store.fetch_test("nope") is None

    def test_malformed_row(self, client, supabase_store):
        _test_query(client).return_value = MagicMock(data=[{"id": "t1", "title": "Broken", "time_limit": 0}])
        with pytest.raises(ContentUnavailable):
            supabase_store.fetch_test("t1")

    def test_client_error(self, client, supabase_store):
        _test_query(client).side_effect = ConnectionError("network down")
        with pytest.raises(ContentUnavailable):
            supabase_store.fetch_test("t1")


class TestFetchQuestions:
    def test_ordered_rows_and_malformed_skipped(self, client, supabase_store):
        _questions_query(client).return_value = MagicMock(
            data=[
                {"id": "q0", "test_id": "t1", "question": "1 + 1?", "options": ["1", "2"], "correct_answer": 1},
                {"id": "bad", "test_id": "t1", "question": "?", "options": ["a", "b"], "correct_answer": 5},
                {"id": "q1", "test_id": "t1", "question": "2 * 3?", "options": ["5", "6"], "correct_answer": 1},
            ]
        )
        questions = supabase_store.fetch_questions("t1")

        assert [q.id for q in questions] == ["q0", "q1"]
        client.table.return_value.select.return_value.eq.return_value.order.assert_called_with("created_at")

    def test_client_error(self, client, supabase_store):
        _questions_query(client).side_effect = ConnectionError("network down")
        with pytest.raises(ContentUnavailable):
            supabase_store.fetch_questions("t1")


class TestPersistResult:
    def test_insert_assigns_id(self, client, supabase_store, result):
        _insert(client).return_value = MagicMock(
            data=[{"id": "r-1", "created_at": "2026-01-01T00:00:00+00:00", **result.model_dump(exclude={"id", "created_at"})}]
        )
        stored = supabase_store.persist_result(result)

        assert stored.id == "r-1"
        assert stored.score == 50
        assert stored.answers == {"q0": 1, "q2": 0}
        row = client.table.return_value.insert.call_args.args[0]
        assert "id" not in row
        assert row["time_taken"] == 120
        client.table.assert_called_with("test_results")

    def test_insert_raises(self, client, supabase_store, result):
        _insert(client).side_effect = RuntimeError("insert rejected")
        with pytest.raises(PersistenceFailure):
            supabase_store.persist_result(result)

    def test_insert_returns_no_row(self, client, supabase_store, result):
        _insert(client).return_value = MagicMock(data=[])
        with pytest.raises(PersistenceFailure):
            supabase_store.persist_result(result)


class TestIncrementProfile:
    def test_adds_score_and_one_test(self, client, supabase_store):
        _profile_select(client).return_value = MagicMock(data={"total_score": 120, "tests_taken": 3})

        updated = supabase_store.increment_profile_aggregate("u1", 50)

        assert updated.total_score == 170
        assert updated.tests_taken == 4
        client.table.return_value.update.assert_called_once_with({"total_score": 170, "tests_taken": 4})

    def test_fresh_profile(self, client, supabase_store):
        _profile_select(client).return_value = MagicMock(data={"total_score": None, "tests_taken": None})
        updated = supabase_store.increment_profile_aggregate("u1", 30)
        assert (updated.total_score, updated.tests_taken) == (30, 1)

    def test_update_fails(self, client, supabase_store):
        _profile_select(client).return_value = MagicMock(data={"total_score": 0, "tests_taken": 0})
        _profile_update(client).side_effect = RuntimeError("update rejected")
        with pytest.raises(PersistenceFailure):
            supabase_store.increment_profile_aggregate("u1", 50)

    def test_read_fails(self, client, supabase_store):
        _profile_select(client).side_effect = RuntimeError("select rejected")
        with pytest.raises(PersistenceFailure):
            supabase_store.increment_profile_aggregate("u1", 50)
        client.table.return_value.update.assert_not_called()
