"""
Tests for opening sessions, navigation and answer capture.
"""

import pytest
from pydantic import ValidationError

from timed_quiz.errors import EmptyQuestionSet, InvalidOptionIndex
from timed_quiz.models.question_model import Question
from timed_quiz.models.session_state import SessionStatus
from timed_quiz.services import session_controller as ctl


class TestOpenSession:
    def test_initial_state(self, state):
        assert state.current_index == 0
        assert state.answers == {}
        assert state.remaining_seconds == 600
        assert state.status is SessionStatus.ACTIVE

    def test_empty_question_set(self, empty_test):
        with pytest.raises(EmptyQuestionSet) as exc:
            ctl.open_session(empty_test, [], user_id="u1")
        assert exc.value.test_id == "t-empty"

    def test_question_order_is_fixed(self, quiz_test, questions):
        state = ctl.open_session(quiz_test, questions, user_id="u1")
        questions.reverse()
        assert [q.id for q in state.questions] == ["q0", "q1", "q2", "q3"]

    def test_question_count_is_informational(self, quiz_test, questions):
        state = ctl.open_session(quiz_test, questions[:2], user_id="u1")
        assert state.total == 2


class TestSelectAnswer:
    def test_overwrite(self, state):
        ctl.select_answer(state, "q0", 2)
        ctl.select_answer(state, "q0", 0)
        assert state.answers == {"q0": 0}

    @pytest.mark.parametrize("option_index", [-1, 3, 10])
    def test_out_of_range_rejected(self, state, option_index):
        ctl.select_answer(state, "q0", 1)
        with pytest.raises(InvalidOptionIndex):
            ctl.select_answer(state, "q0", option_index)
        assert state.answers == {"q0": 1}

    def test_unknown_question_rejected(self, state):
        with pytest.raises(InvalidOptionIndex):
            ctl.select_answer(state, "nope", 0)
        assert state.answers == {}

    def test_ignored_when_finished(self, state):
        state.status = SessionStatus.FINISHED
        assert ctl.select_answer(state, "q0", 1) is False
        assert state.answers == {}


class TestNavigation:
    def test_previous_at_start_is_noop(self, state):
        assert ctl.go_previous(state) == 0

    def test_next_clamps_at_end(self, state):
        for _ in range(10):
            ctl.go_next(state)
        assert state.current_index == 3

    def test_walk_without_answering(self, state):
        ctl.go_next(state)
        ctl.go_next(state)
        ctl.go_previous(state)
        assert state.current_index == 1
        assert state.answers == {}

    @pytest.mark.parametrize("index, expected", [(-4, 0), (2, 2), (99, 3)])
    def test_go_to_clamps(self, state, index, expected):
        assert ctl.go_to(state, index) == expected

    def test_frozen_after_finish(self, state):
        ctl.go_next(state)
        state.status = SessionStatus.FINISHED
        ctl.go_next(state)
        ctl.go_previous(state)
        assert state.current_index == 1


class TestProgress:
    def test_progress_fraction(self, state):
        assert ctl.progress_fraction(state) == 0.25
        ctl.go_to(state, 3)
        assert ctl.progress_fraction(state) == 1.0

    def test_answered_flags(self, state):
        ctl.select_answer(state, "q1", 0)
        ctl.select_answer(state, "q3", 2)
        assert ctl.answered_flags(state) == [False, True, False, True]
        assert ctl.answered_count(state) == 2


class TestAbandon:
    def test_abandon_active(self, state):
        assert ctl.abandon(state) is True
        assert state.status is SessionStatus.ABANDONED

    def test_abandon_finished_is_noop(self, state):
        state.status = SessionStatus.FINISHED
        assert ctl.abandon(state) is False
        assert state.status is SessionStatus.FINISHED


class TestQuestionModel:
    def test_correct_answer_must_index_options(self):
        with pytest.raises(ValidationError):
            Question(id="x", question="?", options=["a", "b"], correct_answer=2)

    def test_needs_two_options(self):
        with pytest.raises(ValidationError):
            Question(id="x", question="?", options=["a"], correct_answer=0)
