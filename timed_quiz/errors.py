"""
errors.py

Exceptions raised by the test-session engine.
Every failure mode here is recoverable at the UI layer.
"""


class QuizSessionError(Exception):
    """Base exception for session engine errors."""

    pass


class EmptyQuestionSet(QuizSessionError):
    """The test has no questions; show the "no content" view and start no timer."""

    def __init__(self, test_id: str) -> None:
        super().__init__(f"Test {test_id} has no questions")
        self.test_id = test_id


class InvalidOptionIndex(QuizSessionError):
    """Selected option lies outside the question's options (or the question is unknown)."""

    def __init__(self, question_id: str, option_index: int) -> None:
        super().__init__(f"Option {option_index} is not valid for question {question_id}")
        self.question_id = question_id
        self.option_index = option_index


class SessionNotActive(QuizSessionError):
    """The session was already finished or abandoned."""

    pass


class DuplicateFinalize(SessionNotActive):
    """A second finalize attempt on a finished session. Logged, never re-scored."""

    pass


class PersistenceFailure(QuizSessionError):
    """The store failed to save the result or update the profile aggregate."""

    pass


class ContentUnavailable(QuizSessionError):
    """The content store could not return a test or its questions."""

    pass
