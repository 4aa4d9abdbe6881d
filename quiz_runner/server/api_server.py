"""FastAPI server that exposes quiz sessions to clients."""

from __future__ import annotations

import logging
from typing import Protocol

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel
import uvicorn

from quiz_runner.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_runner.core.errors import QuestionSourceError
from quiz_runner.core.markdown_math_renderer import renderer
from quiz_runner.core.models import AdvanceOutcome, ConfirmationResult, QuizSet, QuizSetSummary
from quiz_runner.core.services.quiz_session import QuizSession
from quiz_runner.core.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


class QuizSetProvider(Protocol):
    def fetch_quiz_set(self, quiz_id: str) -> QuizSet: ...

    def list_quiz_sets(self) -> list[QuizSetSummary]: ...


class CreateSessionPayload(BaseModel):
    """Payload schema for opening a quiz."""

    quiz_id: str


class SelectPayload(BaseModel):
    """Payload schema for choosing an option."""

    option_key: str


class NavigatePayload(BaseModel):
    """Payload schema for jumping to a question."""

    index: int


def _get_registry_dependency(registry: SessionRegistry):
    def dependency() -> SessionRegistry:
        return registry

    return dependency


def _session_view(snapshot: dict[str, object], session_id: str) -> dict[str, object]:
    view = dict(snapshot)
    view["session_id"] = session_id
    view["question_html"] = renderer.render_fragment(str(view["question"]))
    view["options_html"] = renderer.render_options(view["options"])  # type: ignore[arg-type]
    explanation = view.get("explanation")
    view["explanation_html"] = renderer.render_fragment(str(explanation)) if explanation else None
    return view


def _confirmation_view(result: ConfirmationResult) -> dict[str, object]:
    return {
        "question_index": result.question_index,
        "selected_answer": result.selected_answer,
        "correct_answer": result.correct_answer,
        "is_correct": result.is_correct,
        "explanation": result.explanation,
        "explanation_html": renderer.render_fragment(result.explanation),
    }


def _run(operation, *args):
    """Invoke a registry operation, translating engine errors to HTTP errors."""
    try:
        return operation(*args)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Session not found.") from exc
    except (ValueError, IndexError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except RuntimeError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


def create_api_app(source: QuizSetProvider, registry: SessionRegistry | None = None) -> FastAPI:
    """Create a FastAPI application wired to a question source and session registry."""
    app = FastAPI(title="QuizRunner API", version="0.1.0")
    registry = registry or SessionRegistry()
    registry_dep = _get_registry_dependency(registry)

    @app.get("/quizzes")
    def list_quizzes() -> list[dict[str, object]]:
        try:
            summaries = source.list_quiz_sets()
        except QuestionSourceError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return [
            {
                "id": summary.id,
                "topic": summary.topic,
                "subject": summary.subject,
                "description": summary.description,
                "question_count": summary.question_count,
            }
            for summary in summaries
        ]

    @app.post("/sessions", status_code=201)
    def create_session(
        payload: CreateSessionPayload,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        try:
            quiz_set = source.fetch_quiz_set(payload.quiz_id)
        except QuestionSourceError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        session_id = _run(manager.create_session, quiz_set)
        return _session_view(_run(manager.snapshot, session_id), session_id)

    @app.get("/sessions/{session_id}")
    def get_session(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        return _session_view(_run(manager.snapshot, session_id), session_id)

    @app.delete("/sessions/{session_id}", status_code=204)
    def discard_session(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> None:
        _run(manager.discard_session, session_id)

    @app.post("/sessions/{session_id}/select")
    def select_answer(
        session_id: str,
        payload: SelectPayload,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        accepted, snapshot = _run(
            manager.run_with_snapshot,
            session_id,
            lambda session: session.select_answer(payload.option_key),
        )
        view = _session_view(snapshot, session_id)
        view["accepted"] = accepted
        return view

    @app.post("/sessions/{session_id}/confirm")
    def confirm_answer(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        result = _run(manager.confirm_answer, session_id)
        return _confirmation_view(result)

    @app.post("/sessions/{session_id}/advance")
    def advance(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        outcome, snapshot = _run(manager.run_with_snapshot, session_id, QuizSession.advance)
        view = _session_view(snapshot, session_id)
        view["all_complete"] = outcome is AdvanceOutcome.ALL_COMPLETE
        return view

    @app.post("/sessions/{session_id}/skip")
    def skip(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        moved, snapshot = _run(manager.run_with_snapshot, session_id, QuizSession.skip)
        view = _session_view(snapshot, session_id)
        view["moved"] = moved
        return view

    @app.post("/sessions/{session_id}/reopen")
    def reopen(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        _, snapshot = _run(manager.run_with_snapshot, session_id, QuizSession.reopen)
        return _session_view(snapshot, session_id)

    @app.post("/sessions/{session_id}/navigate")
    def navigate(
        session_id: str,
        payload: NavigatePayload,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        _, snapshot = _run(
            manager.run_with_snapshot,
            session_id,
            lambda session: session.navigate_to(payload.index),
        )
        return _session_view(snapshot, session_id)

    @app.post("/sessions/{session_id}/finalize")
    def finalize(
        session_id: str,
        manager: SessionRegistry = Depends(registry_dep),
    ) -> dict[str, object]:
        result = _run(manager.finalize_session, session_id)
        summary = result.to_summary()
        summary["incorrectCount"] = result.incorrect_count
        summary["percentage"] = result.percentage
        summary["scoreBand"] = result.score_band
        return summary

    return app


def run_api_server(
    source: QuizSetProvider,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API until the process is interrupted."""
    app = create_api_app(source)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    logger.info("Serving quiz sessions on http://%s:%d/", host, port)
    server.run()
