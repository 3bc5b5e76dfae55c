"""
api/sample_questions.py — built-in content served when no database is configured
"""

from timed_quiz.models.question_model import Difficulty, Question, Test

SAMPLE_TESTS = [
    Test(
        id="python-basics",
        subject_id="programming",
        title="Python basics",
        description="Syntax and built-in types",
        difficulty=Difficulty.EASY,
        time_limit=10,
        questions_count=4,
    ),
    Test(
        id="world-capitals",
        subject_id="geography",
        title="World capitals",
        description="Capitals of selected countries",
        difficulty=Difficulty.MEDIUM,
        time_limit=5,
        questions_count=3,
    ),
    Test(
        id="coming-soon",
        subject_id="history",
        title="Ancient history",
        description="Questions are being prepared",
        difficulty=Difficulty.HARD,
        time_limit=15,
        questions_count=0,
    ),
]

SAMPLE_QUESTIONS = [
    Question(
        id="py-1",
        test_id="python-basics",
        question="Which type is immutable?",
        options=["list", "dict", "tuple", "set"],
        correct_answer=2,
        explanation="Tuples cannot be changed after creation.",
    ),
    Question(
        id="py-2",
        test_id="python-basics",
        question="What does len('abc') return?",
        options=["2", "3", "4"],
        correct_answer=1,
    ),
    Question(
        id="py-3",
        test_id="python-basics",
        question="Which keyword defines a function?",
        options=["func", "def", "lambda", "fn"],
        correct_answer=1,
        explanation="'lambda' creates an anonymous function expression; 'def' defines a named function.",
    ),
    Question(
        id="py-4",
        test_id="python-basics",
        question="What is 7 // 2?",
        options=["3", "3.5", "4"],
        correct_answer=0,
        explanation="// is floor division.",
    ),
    Question(
        id="geo-1",
        test_id="world-capitals",
        question="Capital of Uzbekistan?",
        options=["Samarkand", "Tashkent", "Bukhara"],
        correct_answer=1,
    ),
    Question(
        id="geo-2",
        test_id="world-capitals",
        question="Capital of Australia?",
        options=["Sydney", "Melbourne", "Canberra", "Perth"],
        correct_answer=2,
    ),
    Question(
        id="geo-3",
        test_id="world-capitals",
        question="Capital of Canada?",
        options=["Ottawa", "Toronto"],
        correct_answer=0,
    ),
]
