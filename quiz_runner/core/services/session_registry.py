"""Thread-safe owner of the quiz sessions currently in progress."""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Lock
from typing import TypeVar
from uuid import uuid4

from quiz_runner.core.models import (
    AdvanceOutcome,
    ConfirmationResult,
    QuizResult,
    QuizSet,
)
from quiz_runner.core.services.quiz_session import QuizSession

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionRegistry:
    """Facade that serializes every operation on the sessions it holds."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: dict[str, QuizSession] = {}

    def create_session(self, quiz_set: QuizSet) -> str:
        session = QuizSession(quiz_set.questions, topic=quiz_set.topic)
        session_id = uuid4().hex
        with self._lock:
            self._sessions[session_id] = session
        logger.info(
            "Created session %s for quiz %s (%d questions)",
            session_id,
            quiz_set.id,
            session.get_question_count(),
        )
        return session_id

    def has_session(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get_session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def discard_session(self, session_id: str) -> None:
        with self._lock:
            self._get(session_id)
            del self._sessions[session_id]
        logger.info("Discarded session %s", session_id)

    def snapshot(self, session_id: str) -> dict[str, object]:
        with self._lock:
            return self._get(session_id).snapshot()

    def select_answer(self, session_id: str, option_key: str) -> bool:
        with self._lock:
            return self._get(session_id).select_answer(option_key)

    def confirm_answer(self, session_id: str) -> ConfirmationResult:
        with self._lock:
            return self._get(session_id).confirm_answer()

    def advance(self, session_id: str) -> AdvanceOutcome:
        with self._lock:
            return self._get(session_id).advance()

    def navigate_to(self, session_id: str, index: int) -> None:
        with self._lock:
            self._get(session_id).navigate_to(index)

    def skip(self, session_id: str) -> bool:
        with self._lock:
            return self._get(session_id).skip()

    def reopen(self, session_id: str) -> bool:
        with self._lock:
            return self._get(session_id).reopen()

    def run_with_snapshot(
        self, session_id: str, operation: Callable[[QuizSession], T]
    ) -> tuple[T, dict[str, object]]:
        """Apply an operation and capture the resulting state under one lock."""
        with self._lock:
            session = self._get(session_id)
            return operation(session), session.snapshot()

    def finalize_session(self, session_id: str) -> QuizResult:
        """Score a completed session and drop it from the registry."""
        with self._lock:
            result = self._get(session_id).finalize_session()
            del self._sessions[session_id]
        logger.info(
            "Finalized session %s: %d/%d correct",
            session_id,
            result.correct_count,
            result.total_questions,
        )
        return result

    def _get(self, session_id: str) -> QuizSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Unknown session id {session_id}")
        return session
