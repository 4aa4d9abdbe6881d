"""Domain models for the quiz application."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from quiz_runner.constants.quiz_constants import (
    EXCELLENT_SCORE_THRESHOLD,
    FAIR_SCORE_THRESHOLD,
)


@dataclass(frozen=True, slots=True)
class Question:
    """Multiple-choice question with keyed options and a single correct key."""

    id: str
    question_text: str
    options: dict[str, str]
    correct_answer: str
    explanation: str = ""
    subject: str = ""
    question_type: str | None = None

    def has_option(self, option_key: str) -> bool:
        return option_key in self.options


@dataclass(frozen=True, slots=True)
class QuizSet:
    """Ordered set of questions as delivered by a question source."""

    id: str
    topic: str
    questions: tuple[Question, ...]
    subject: str = ""
    description: str | None = None


@dataclass(frozen=True, slots=True)
class QuizSetSummary:
    """Row shown in the quiz list before a quiz is opened."""

    id: str
    topic: str
    subject: str
    description: str | None
    question_count: int


@dataclass(frozen=True, slots=True)
class ConfirmationResult:
    """Outcome of locking in the answer to the current question."""

    question_index: int
    selected_answer: str | None
    correct_answer: str
    explanation: str

    @property
    def is_correct(self) -> bool:
        return self.selected_answer == self.correct_answer


class AdvanceOutcome(Enum):
    """Result of the "next" action once the current question is confirmed."""

    MOVED = "moved"
    ALL_COMPLETE = "all_complete"


@dataclass(frozen=True, slots=True)
class QuestionResult:
    """Per-question line of the final summary."""

    index: int
    question: str
    user_answer: str
    correct_answer: str
    is_correct: bool
    subject: str

    def to_dict(self) -> dict[str, object]:
        return {
            "index": self.index,
            "question": self.question,
            "userAnswer": self.user_answer,
            "correctAnswer": self.correct_answer,
            "isCorrect": self.is_correct,
            "subject": self.subject,
        }


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Scored outcome of a completed session."""

    topic: str
    total_questions: int
    correct_count: int
    question_results: tuple[QuestionResult, ...] = field(default_factory=tuple)

    @property
    def incorrect_count(self) -> int:
        return self.total_questions - self.correct_count

    @property
    def percentage(self) -> int:
        if self.total_questions <= 0:
            return 0
        # Half-up rounding of the ratio scaled to percent, as the score is displayed.
        return math.floor(self.correct_count / self.total_questions * 100 + 0.5)

    @property
    def score_band(self) -> str:
        if self.percentage >= EXCELLENT_SCORE_THRESHOLD:
            return "excellent"
        if self.percentage >= FAIR_SCORE_THRESHOLD:
            return "fair"
        return "poor"

    def to_summary(self) -> dict[str, object]:
        """Return the result summary payload handed to the presentation layer."""
        return {
            "topic": self.topic,
            "totalQuestions": self.total_questions,
            "correctCount": self.correct_count,
            "perQuestionResults": [result.to_dict() for result in self.question_results],
        }
