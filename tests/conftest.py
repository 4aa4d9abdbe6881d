import pytest

from quiz_runner.core.models import Question, QuizSet


def make_question(index: int, correct: str = "b") -> Question:
    return Question(
        id=f"q{index}",
        question_text=f"Question {index}?",
        options={"a": "first", "b": "second", "c": "third"},
        correct_answer=correct,
        explanation=f"Because of reason {index}.",
        subject="Math",
    )


@pytest.fixture
def questions():
    return [make_question(0, "a"), make_question(1, "b"), make_question(2, "c")]


@pytest.fixture
def quiz_set(questions):
    return QuizSet(id="set-1", topic="Integers", questions=tuple(questions), subject="Math")
