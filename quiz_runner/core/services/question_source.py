"""Client for the remote service that supplies quiz question sets."""

from __future__ import annotations

import logging
from typing import Any

import requests

from quiz_runner.constants.network_constants import (
    REQUEST_TIMEOUT_SECONDS,
    resolve_api_base_url,
)
from quiz_runner.core.errors import QuestionSourceError
from quiz_runner.core.models import Question, QuizSet, QuizSetSummary

logger = logging.getLogger(__name__)


class QuestionSource:
    """Fetches quiz sets over HTTP and converts them into domain models."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or resolve_api_base_url()).rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def get_base_url(self) -> str:
        return self._base_url

    def fetch_quiz_set(self, quiz_id: str) -> QuizSet:
        """Load one quiz set with all of its questions."""
        logger.info("Fetching quiz set %s from %s", quiz_id, self._base_url)
        payload = self._get_json(f"/mcqsets/{quiz_id}")
        return parse_quiz_set(payload)

    def list_quiz_sets(self) -> list[QuizSetSummary]:
        """Load the list of available quiz sets."""
        payload = self._get_json("/mcqsets")
        data = payload.get("data", payload) if isinstance(payload, dict) else payload
        if not isinstance(data, list):
            raise QuestionSourceError("Quiz list payload must be a list.")
        return [_parse_summary(item) for item in data]

    def _get_json(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.get(url, timeout=self._timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise QuestionSourceError(f"Failed to fetch {url}: {exc}") from exc
        except ValueError as exc:
            logger.warning("Response from %s was not valid JSON", url)
            raise QuestionSourceError(f"Invalid JSON returned by {url}") from exc


def parse_quiz_set(payload: Any) -> QuizSet:
    """Convert a quiz set payload into a QuizSet.

    Accepts the ``mcqset_questions`` layout used by the quiz API as well as a
    flat ``questions`` list, either optionally wrapped in a ``data`` envelope.
    """
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        payload = payload["data"]
    if not isinstance(payload, dict):
        raise QuestionSourceError("Quiz set payload must be an object.")

    if "mcqset_questions" in payload:
        raw_questions = [_unwrap_set_question(item) for item in _require_list(payload, "mcqset_questions")]
    elif "questions" in payload:
        raw_questions = _require_list(payload, "questions")
    else:
        raise QuestionSourceError("Quiz set payload has no questions field.")

    return QuizSet(
        id=str(_require(payload, "id")),
        topic=str(payload.get("topic") or ""),
        subject=str(payload.get("subject") or ""),
        description=payload.get("description"),
        questions=tuple(_parse_question(raw) for raw in raw_questions),
    )


def _unwrap_set_question(item: Any) -> Any:
    if isinstance(item, dict) and isinstance(item.get("mcqs"), dict):
        return item["mcqs"]
    raise QuestionSourceError("Each set question must contain an 'mcqs' object.")


def _parse_question(raw: Any) -> Question:
    if not isinstance(raw, dict):
        raise QuestionSourceError("Question entry must be an object.")
    options = _require(raw, "options")
    if not isinstance(options, dict) or not options:
        raise QuestionSourceError(f"Question {raw.get('id')!r} has no options.")
    question_type = raw.get("question_types")
    if isinstance(question_type, dict):
        question_type = question_type.get("name")
    return Question(
        id=str(_require(raw, "id")),
        question_text=str(_require(raw, "question")),
        options={str(key): str(value) for key, value in options.items()},
        correct_answer=str(_require(raw, "correct_answer")),
        explanation=str(raw.get("explanation") or ""),
        subject=str(raw.get("subject") or ""),
        question_type=question_type,
    )


def _parse_summary(item: Any) -> QuizSetSummary:
    if not isinstance(item, dict):
        raise QuestionSourceError("Quiz list entry must be an object.")
    questions = item.get("mcqset_questions", item.get("questions"))
    if isinstance(questions, list):
        question_count = len(questions)
    else:
        raw_count = item.get("question_count") or 0
        if isinstance(raw_count, bool) or not isinstance(raw_count, int) or raw_count < 0:
            raise QuestionSourceError(f"Invalid question_count {raw_count!r} for quiz {item.get('id')!r}.")
        question_count = raw_count
    return QuizSetSummary(
        id=str(_require(item, "id")),
        topic=str(item.get("topic") or ""),
        subject=str(item.get("subject") or ""),
        description=item.get("description"),
        question_count=question_count,
    )


def _require(raw: dict[str, Any], key: str) -> Any:
    value = raw.get(key)
    if value is None:
        raise QuestionSourceError(f"Missing required field '{key}'.")
    return value


def _require_list(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise QuestionSourceError(f"Field '{key}' must be a list.")
    return value


class StaticQuestionSource:
    """In-memory source serving quiz sets loaded ahead of time, e.g. from files."""

    def __init__(self, quiz_sets: list[QuizSet]) -> None:
        self._quiz_sets: dict[str, QuizSet] = {quiz_set.id: quiz_set for quiz_set in quiz_sets}

    def fetch_quiz_set(self, quiz_id: str) -> QuizSet:
        quiz_set = self._quiz_sets.get(quiz_id)
        if quiz_set is None:
            raise QuestionSourceError(f"Quiz set {quiz_id!r} not found.")
        return quiz_set

    def list_quiz_sets(self) -> list[QuizSetSummary]:
        return [
            QuizSetSummary(
                id=quiz_set.id,
                topic=quiz_set.topic,
                subject=quiz_set.subject,
                description=quiz_set.description,
                question_count=len(quiz_set.questions),
            )
            for quiz_set in self._quiz_sets.values()
        ]
