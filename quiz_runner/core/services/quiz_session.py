"""Service tracking progression through a single quiz attempt."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from quiz_runner.core.errors import (
    EmptyQuestionSetError,
    IndexOutOfRangeError,
    NotConfirmedError,
    SessionIncompleteError,
)
from quiz_runner.core.models import (
    AdvanceOutcome,
    ConfirmationResult,
    Question,
    QuestionResult,
    QuizResult,
)

logger = logging.getLogger(__name__)


class QuizSession:
    """State machine for one learner working through an ordered question list.

    Each question slot moves from unanswered to selected to confirmed. The
    session as a whole is ready to finalize once every slot has been
    confirmed at least once. The object performs no locking; callers that
    share it across threads must serialize access themselves.
    """

    def __init__(self, questions: Sequence[Question], topic: str = "") -> None:
        if not questions:
            raise EmptyQuestionSetError("A quiz session needs at least one question.")
        self._questions: tuple[Question, ...] = tuple(questions)
        self._topic: str = topic
        self._current_index: int = 0
        self._selected_answer: str | None = None
        self._confirmed: bool = False
        self._answered: set[int] = set()
        # None marks a slot confirmed without a selection.
        self._user_answers: dict[int, str | None] = {}

    # --- Queries ---

    def get_topic(self) -> str:
        return self._topic

    def get_question_count(self) -> int:
        return len(self._questions)

    def get_questions(self) -> list[Question]:
        return list(self._questions)

    def get_current_index(self) -> int:
        return self._current_index

    def get_current_question(self) -> Question:
        return self._questions[self._current_index]

    def get_selected_answer(self) -> str | None:
        return self._selected_answer

    def is_confirmed(self) -> bool:
        return self._confirmed

    def get_answered_indices(self) -> set[int]:
        return set(self._answered)

    def get_user_answers(self) -> dict[int, str | None]:
        return dict(self._user_answers)

    def get_recorded_answer(self, index: int) -> str | None:
        return self._user_answers.get(index)

    def is_answered(self, index: int) -> bool:
        return index in self._answered

    def is_complete(self) -> bool:
        return len(self._answered) == len(self._questions)

    def find_first_unanswered(self) -> int | None:
        return next(
            (i for i in range(len(self._questions)) if i not in self._answered),
            None,
        )

    def progress(self) -> list[str]:
        """Return a status per question slot: current, answered or unanswered."""
        statuses: list[str] = []
        for index in range(len(self._questions)):
            if index == self._current_index:
                statuses.append("current")
            elif index in self._answered:
                statuses.append("answered")
            else:
                statuses.append("unanswered")
        return statuses

    # --- Commands ---

    def select_answer(self, option_key: str) -> bool:
        """Mark an option as selected. Returns False when the selection was ignored."""
        if self._confirmed:
            return False
        if not self.get_current_question().has_option(option_key):
            logger.debug(
                "Ignoring unknown option %r for question %d", option_key, self._current_index
            )
            return False
        self._selected_answer = option_key
        return True

    def confirm_answer(self) -> ConfirmationResult:
        """Lock in the current selection and report whether it was correct.

        Calling this again on an already confirmed question changes nothing
        and returns the same result.
        """
        index = self._current_index
        if not self._confirmed:
            self._confirmed = True
            self._answered.add(index)
            if self._selected_answer is not None:
                self._user_answers[index] = self._selected_answer
            else:
                self._user_answers.setdefault(index, None)
            logger.debug("Confirmed question %d with answer %r", index, self._selected_answer)

        question = self._questions[index]
        return ConfirmationResult(
            question_index=index,
            selected_answer=self._user_answers.get(index),
            correct_answer=question.correct_answer,
            explanation=question.explanation,
        )

    def advance(self) -> AdvanceOutcome:
        """Move to the next unanswered question, or report that all are done."""
        if not self._confirmed:
            raise NotConfirmedError("Confirm the current answer before moving on.")
        if self.is_complete():
            return AdvanceOutcome.ALL_COMPLETE
        next_index = self._find_next_unanswered()
        if next_index is None:
            return AdvanceOutcome.ALL_COMPLETE
        self.navigate_to(next_index)
        return AdvanceOutcome.MOVED

    def navigate_to(self, index: int) -> None:
        """Jump to any question, restoring its recorded answer if it has one."""
        if not 0 <= index < len(self._questions):
            raise IndexOutOfRangeError(index, len(self._questions))
        self._current_index = index
        saved_answer = self._user_answers.get(index)
        if saved_answer is not None:
            self._selected_answer = saved_answer
            self._confirmed = True
        else:
            self._selected_answer = None
            self._confirmed = False
        logger.debug("Navigated to question %d (confirmed=%s)", index, self._confirmed)

    def skip(self) -> bool:
        """Leave the current question unanswered and move to the next open one.

        Returns False when nothing happened: the question is already
        confirmed, or no other unanswered question exists.
        """
        if self._confirmed:
            return False
        next_index = self._find_next_unanswered()
        if next_index is None:
            return False
        self.navigate_to(next_index)
        return True

    def reopen(self) -> bool:
        """Unlock a confirmed question so that its answer can be changed.

        The question stays counted as answered and keeps its recorded answer
        until it is confirmed again.
        """
        if not self._confirmed:
            return False
        self._confirmed = False
        logger.debug("Reopened question %d", self._current_index)
        return True

    def finalize_session(self) -> QuizResult:
        """Score every question. Requires all questions to be answered."""
        if not self.is_complete():
            raise SessionIncompleteError(len(self._answered), len(self._questions))

        results: list[QuestionResult] = []
        correct_count = 0
        for index, question in enumerate(self._questions):
            user_answer = self._user_answers.get(index) or ""
            is_correct = user_answer == question.correct_answer
            if is_correct:
                correct_count += 1
            results.append(
                QuestionResult(
                    index=index,
                    question=question.question_text,
                    user_answer=user_answer,
                    correct_answer=question.correct_answer,
                    is_correct=is_correct,
                    subject=question.subject,
                )
            )
        logger.debug("Finalized session: %d/%d correct", correct_count, len(self._questions))
        return QuizResult(
            topic=self._topic,
            total_questions=len(self._questions),
            correct_count=correct_count,
            question_results=tuple(results),
        )

    def snapshot(self) -> dict[str, object]:
        """Return a serializable view of the session for display."""
        question = self.get_current_question()
        payload: dict[str, object] = {
            "topic": self._topic,
            "current_index": self._current_index,
            "question_count": len(self._questions),
            "question_id": question.id,
            "question": question.question_text,
            "subject": question.subject,
            "question_type": question.question_type,
            "options": dict(question.options),
            "selected_answer": self._selected_answer,
            "confirmed": self._confirmed,
            "answered_indices": sorted(self._answered),
            "progress": self.progress(),
            "is_complete": self.is_complete(),
            "correct_answer": None,
            "explanation": None,
            "is_correct": None,
        }
        if self._confirmed:
            payload["correct_answer"] = question.correct_answer
            payload["explanation"] = question.explanation
            payload["is_correct"] = self._selected_answer == question.correct_answer
        return payload

    # --- Internal helpers ---

    def _find_next_unanswered(self) -> int | None:
        """Circular forward search for an unanswered slot other than the current one."""
        count = len(self._questions)
        candidate = (self._current_index + 1) % count
        while candidate != self._current_index:
            if candidate not in self._answered:
                return candidate
            candidate = (candidate + 1) % count
        return None
