from threading import Thread

import pytest

from quiz_runner.core.errors import EmptyQuestionSetError
from quiz_runner.core.models import AdvanceOutcome, QuizSet
from quiz_runner.core.services.session_registry import SessionRegistry


def test_create_and_discard_session(quiz_set):
    registry = SessionRegistry()

    session_id = registry.create_session(quiz_set)

    assert registry.has_session(session_id)
    assert registry.snapshot(session_id)["topic"] == "Integers"
    registry.discard_session(session_id)
    assert not registry.has_session(session_id)


def test_unknown_session_raises_key_error():
    registry = SessionRegistry()

    with pytest.raises(KeyError):
        registry.snapshot("missing")
    with pytest.raises(KeyError):
        registry.discard_session("missing")


def test_empty_quiz_set_is_rejected():
    registry = SessionRegistry()

    with pytest.raises(EmptyQuestionSetError):
        registry.create_session(QuizSet(id="empty", topic="Empty", questions=()))
    assert registry.get_session_count() == 0


def test_full_flow_finalizes_and_discards(quiz_set):
    registry = SessionRegistry()
    session_id = registry.create_session(quiz_set)

    for question in quiz_set.questions:
        registry.select_answer(session_id, question.correct_answer)
        assert registry.confirm_answer(session_id).is_correct
        outcome = registry.advance(session_id)
    assert outcome is AdvanceOutcome.ALL_COMPLETE

    result = registry.finalize_session(session_id)

    assert result.correct_count == 3
    assert not registry.has_session(session_id)


def test_concurrent_sessions_are_isolated(quiz_set):
    registry = SessionRegistry()
    session_ids = [registry.create_session(quiz_set) for _ in range(8)]

    def play(session_id):
        registry.skip(session_id)
        registry.select_answer(session_id, "b")
        registry.confirm_answer(session_id)

    threads = [Thread(target=play, args=(sid,)) for sid in session_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for session_id in session_ids:
        view = registry.snapshot(session_id)
        assert view["current_index"] == 1
        assert view["answered_indices"] == [1]
        assert view["is_correct"] is True


def test_run_with_snapshot_returns_state_after_operation(quiz_set):
    registry = SessionRegistry()
    session_id = registry.create_session(quiz_set)

    moved, view = registry.run_with_snapshot(session_id, lambda session: session.skip())

    assert moved is True
    assert view["current_index"] == 1
    assert view["answered_indices"] == []


def test_run_with_snapshot_on_discarded_session_raises_key_error(quiz_set):
    registry = SessionRegistry()
    session_id = registry.create_session(quiz_set)
    registry.discard_session(session_id)

    with pytest.raises(KeyError):
        registry.run_with_snapshot(session_id, lambda session: session.reopen())
