"""Exceptions raised by the quiz engine and its collaborators."""

from __future__ import annotations


class QuizSessionError(Exception):
    """Base class for contract violations detected by a quiz session."""


class EmptyQuestionSetError(QuizSessionError, ValueError):
    """Raised when a session is created without any questions."""


class IndexOutOfRangeError(QuizSessionError, IndexError):
    """Raised when navigating to a question index that does not exist."""

    def __init__(self, index: int, question_count: int) -> None:
        super().__init__(f"Question index {index} out of range (0..{question_count - 1})")
        self.index = index
        self.question_count = question_count


class NotConfirmedError(QuizSessionError, RuntimeError):
    """Raised when advancing before the current answer has been confirmed."""


class SessionIncompleteError(QuizSessionError, RuntimeError):
    """Raised when finalizing a session that still has unanswered questions."""

    def __init__(self, answered: int, total: int) -> None:
        super().__init__(f"Only {answered} of {total} questions have been answered.")
        self.answered = answered
        self.total = total


class QuestionSourceError(Exception):
    """Raised when quiz data cannot be fetched or understood."""


class QuizImportError(Exception):
    """Raised when a quiz definition cannot be parsed."""
