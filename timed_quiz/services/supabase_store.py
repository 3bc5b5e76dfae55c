"""Supabase-backed store over the tests, questions, test_results and profiles tables."""
import logging
from typing import List, Optional

from pydantic import ValidationError
from supabase import Client, create_client

from config import SUPABASE_KEY, SUPABASE_URL
from timed_quiz.errors import ContentUnavailable, PersistenceFailure
from timed_quiz.models.question_model import Question, Test
from timed_quiz.models.result_model import ProfileAggregate, TestResult

logger = logging.getLogger(__name__)


def _env_client() -> Client:
    if not SUPABASE_URL or not SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(SUPABASE_URL, SUPABASE_KEY)


class SupabaseStore:
    def __init__(self, client: Optional[Client] = None) -> None:
        self._client = client or _env_client()

    def fetch_test(self, test_id: str) -> Optional[Test]:
        try:
            r = self._client.table("tests").select("*").eq("id", test_id).limit(1).execute()
        except Exception as e:
            raise ContentUnavailable(f"Could not load test {test_id}: {e}") from e
        rows = r.data or []
        if not rows:
            return None
        try:
            return Test.model_validate(rows[0])
        except ValidationError as e:
            raise ContentUnavailable(f"Test {test_id} is malformed: {e}") from e

    def fetch_questions(self, test_id: str) -> List[Question]:
        """Questions ordered by created_at; the order fetched here is used for the whole session."""
        try:
            r = (
                self._client.table("questions")
                .select("*")
                .eq("test_id", test_id)
                .order("created_at")
                .execute()
            )
        except Exception as e:
            raise ContentUnavailable(f"Could not load questions for test {test_id}: {e}") from e
        questions = []
        for row in r.data or []:
            try:
                questions.append(Question.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed question %s: %s", row.get("id"), e)
        return questions

    def persist_result(self, result: TestResult) -> TestResult:
        row = {
            "user_id": result.user_id,
            "test_id": result.test_id,
            "score": result.score,
            "total_questions": result.total_questions,
            "time_taken": result.time_taken,
            "answers": result.answers,
        }
        try:
            r = self._client.table("test_results").insert(row).execute()
        except Exception as e:
            raise PersistenceFailure(f"Could not save result for test {result.test_id}: {e}") from e
        data = r.data or []
        if not data:
            raise PersistenceFailure(f"Result insert for test {result.test_id} returned no row")
        return TestResult.model_validate({**result.model_dump(), **data[0]})

    def increment_profile_aggregate(self, user_id: str, score_delta: int) -> ProfileAggregate:
        """Read-modify-write of profiles.total_score / tests_taken for one user."""
        try:
            r = (
                self._client.table("profiles")
                .select("total_score", "tests_taken")
                .eq("id", user_id)
                .single()
                .execute()
            )
            current = r.data or {}
            updated = ProfileAggregate(
                user_id=user_id,
                total_score=(current.get("total_score") or 0) + score_delta,
                tests_taken=(current.get("tests_taken") or 0) + 1,
            )
            (
                self._client.table("profiles")
                .update({"total_score": updated.total_score, "tests_taken": updated.tests_taken})
                .eq("id", user_id)
                .execute()
            )
        except Exception as e:
            raise PersistenceFailure(f"Could not update profile {user_id}: {e}") from e
        return updated
