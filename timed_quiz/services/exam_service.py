"""
services/exam_service.py

Scoring and result-analysis business logic.
Pure Python functions — no UI code, no global state, no I/O.
"""

from typing import Dict, List, Sequence, Tuple

from timed_quiz.models.question_model import Question
from timed_quiz.models.result_model import QuestionReview

# (minimum score, message) from best to worst
_SCORE_MESSAGES: Tuple[Tuple[int, str], ...] = (
    (90, "Excellent! You showed an outstanding result!"),
    (80, "Good! You showed a good result!"),
    (60, "Satisfactory. Keep trying!"),
    (0, "Not bad. Practice more!"),
)


def count_correct(
    questions: Sequence[Question],
    answers: Dict[str, int],
) -> int:
    """
    Number of questions whose recorded answer equals the correct option.
    A question without an entry in answers is never correct.
    """
    return sum(
        1
        for q in questions
        if answers.get(q.id) == q.correct_answer
    )


def round_half_up_percent(correct: int, total: int) -> int:
    """
    round(correct / total * 100) with halves rounded up, in integer arithmetic.

    floor(100c/t + 1/2) == (200c + t) // 2t, so 1/8 -> 13 and 1/3 -> 33.
    """
    if total <= 0:
        raise ValueError("total must be positive")
    return (200 * correct + total) // (2 * total)


def calculate_score(
    questions: Sequence[Question],
    answers: Dict[str, int],
) -> int:
    """
    Score the answer map on a 0..100 scale.

    Unanswered questions count as incorrect and stay in the denominator.

    Args:
        questions: The session's question sequence (never empty).
        answers:   {question.id: chosen option index}

    Returns:
        Integer percentage, rounded half up.
    """
    return round_half_up_percent(count_correct(questions, answers), len(questions))


def elapsed_seconds(time_limit_seconds: int, remaining_seconds: int) -> int:
    """
    Seconds used, clamped to [0, time_limit_seconds].
    remaining 0 (timeout) -> the full limit.
    """
    return max(0, min(time_limit_seconds, time_limit_seconds - remaining_seconds))


def build_review(
    questions: Sequence[Question],
    answers: Dict[str, int],
) -> List[QuestionReview]:
    """
    Per-question breakdown for the result screen, in session order.
    Safe to call any number of times after finish.
    """
    review: List[QuestionReview] = []
    for index, q in enumerate(questions):
        chosen = answers.get(q.id)
        review.append(
            QuestionReview(
                index=index,
                question_id=q.id,
                question=q.question,
                options=list(q.options),
                chosen_option=chosen,
                correct_option=q.correct_answer,
                is_correct=chosen == q.correct_answer,
                explanation=q.explanation or None,
            )
        )
    return review


def score_message(score: int) -> str:
    """Encouragement line shown above the result numbers."""
    for threshold, message in _SCORE_MESSAGES:
        if score >= threshold:
            return message
    return _SCORE_MESSAGES[-1][1]


def score_tier(score: int) -> str:
    """
    Colour tier of the score badge.

    Returns:
        "good" for 80 and above, "fair" for 60 and above, otherwise "poor".
    """
    if score >= 80:
        return "good"
    if score >= 60:
        return "fair"
    return "poor"
