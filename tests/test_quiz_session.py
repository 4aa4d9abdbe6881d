import pytest

from quiz_runner.core.errors import (
    EmptyQuestionSetError,
    IndexOutOfRangeError,
    NotConfirmedError,
    SessionIncompleteError,
)
from quiz_runner.core.models import AdvanceOutcome
from quiz_runner.core.services.quiz_session import QuizSession

from conftest import make_question


def answer(session, key):
    session.select_answer(key)
    return session.confirm_answer()


@pytest.mark.parametrize("count", [1, 2, 5])
def test_new_session_starts_at_first_question(count):
    session = QuizSession([make_question(i) for i in range(count)])

    assert session.get_current_index() == 0
    assert session.get_answered_indices() == set()
    assert session.get_user_answers() == {}
    assert session.get_selected_answer() is None
    assert not session.is_confirmed()


def test_empty_question_list_is_rejected():
    with pytest.raises(EmptyQuestionSetError):
        QuizSession([])


def test_select_answer_ignores_unknown_keys(questions):
    session = QuizSession(questions)

    assert session.select_answer("z") is False
    assert session.get_selected_answer() is None
    assert session.select_answer("c") is True
    assert session.get_selected_answer() == "c"


def test_selection_is_locked_after_confirmation(questions):
    session = QuizSession(questions)
    answer(session, "a")

    assert session.select_answer("b") is False
    assert session.get_selected_answer() == "a"


def test_confirm_reports_correctness(questions):
    session = QuizSession(questions)
    session.select_answer("b")

    result = session.confirm_answer()

    assert result.question_index == 0
    assert result.selected_answer == "b"
    assert result.correct_answer == "a"
    assert not result.is_correct
    assert result.explanation == "Because of reason 0."


def test_confirm_is_idempotent(questions):
    session = QuizSession(questions)
    first = answer(session, "a")
    answers_after_first = session.get_user_answers()
    answered_after_first = session.get_answered_indices()

    second = session.confirm_answer()

    assert second == first
    assert session.get_user_answers() == answers_after_first
    assert session.get_answered_indices() == answered_after_first


def test_confirm_without_selection_marks_answered_but_incorrect(questions):
    session = QuizSession(questions)

    result = session.confirm_answer()

    assert result.selected_answer is None
    assert not result.is_correct
    assert session.is_answered(0)
    assert session.get_recorded_answer(0) is None
    assert len(session.get_answered_indices()) == len(session.get_user_answers())


def test_advance_requires_confirmation(questions):
    session = QuizSession(questions)

    with pytest.raises(NotConfirmedError):
        session.advance()


def test_advance_moves_to_next_unanswered(questions):
    session = QuizSession(questions)
    answer(session, "a")

    assert session.advance() is AdvanceOutcome.MOVED
    assert session.get_current_index() == 1
    assert not session.is_confirmed()
    assert session.get_selected_answer() is None


def test_advance_wraps_around_to_earlier_question(questions):
    session = QuizSession(questions)
    session.navigate_to(1)
    answer(session, "b")
    session.advance()
    assert session.get_current_index() == 2
    answer(session, "c")

    session.advance()

    assert session.get_current_index() == 0


def test_skipped_question_is_revisited_before_completion(questions):
    session = QuizSession(questions)
    answer(session, "a")
    session.advance()
    assert session.skip() is True
    assert session.get_current_index() == 2
    answer(session, "a")

    assert session.advance() is AdvanceOutcome.MOVED
    assert session.get_current_index() == 1
    assert not session.is_complete()

    answer(session, "b")
    assert session.advance() is AdvanceOutcome.ALL_COMPLETE


def test_single_question_completes_immediately():
    session = QuizSession([make_question(0)])
    answer(session, "b")

    assert session.advance() is AdvanceOutcome.ALL_COMPLETE
    assert session.get_current_index() == 0


def test_advance_search_always_lands_on_unanswered_question():
    session = QuizSession([make_question(i) for i in range(6)])
    for index in (0, 2, 3, 5):
        session.navigate_to(index)
        answer(session, "b")

    session.navigate_to(5)
    session.advance()
    assert session.get_current_index() == 1
    answer(session, "b")
    session.advance()
    assert session.get_current_index() == 4
    assert not session.is_answered(4)


def test_skip_never_marks_current_question_answered(questions):
    session = QuizSession(questions)
    session.select_answer("a")

    session.skip()

    assert not session.is_answered(0)
    assert session.get_user_answers() == {}
    assert session.get_current_index() == 1


def test_skip_is_noop_when_confirmed(questions):
    session = QuizSession(questions)
    answer(session, "a")

    assert session.skip() is False
    assert session.get_current_index() == 0


def test_skip_is_noop_on_last_remaining_question(questions):
    session = QuizSession(questions)
    answer(session, "a")
    session.advance()
    answer(session, "b")
    session.advance()
    assert session.get_current_index() == 2

    assert session.skip() is False
    assert session.get_current_index() == 2


def test_skip_in_single_question_session_is_noop():
    session = QuizSession([make_question(0)])

    assert session.skip() is False


def test_navigate_restores_previous_answer(questions):
    session = QuizSession(questions)
    answer(session, "c")
    session.advance()

    session.navigate_to(0)

    assert session.is_confirmed()
    assert session.get_selected_answer() == "c"


def test_navigate_to_unanswered_clears_selection(questions):
    session = QuizSession(questions)
    session.select_answer("a")

    session.navigate_to(2)

    assert session.get_selected_answer() is None
    assert not session.is_confirmed()


def test_navigate_to_question_confirmed_without_answer_is_unlocked(questions):
    session = QuizSession(questions)
    session.confirm_answer()
    session.advance()

    session.navigate_to(0)

    assert not session.is_confirmed()
    assert session.is_answered(0)


@pytest.mark.parametrize("index", [-1, 3, 10])
def test_navigate_rejects_out_of_range(questions, index):
    session = QuizSession(questions)

    with pytest.raises(IndexOutOfRangeError):
        session.navigate_to(index)
    assert session.get_current_index() == 0


def test_reopen_allows_overwriting_answer(questions):
    session = QuizSession(questions)
    answer(session, "b")
    session.advance()
    session.navigate_to(0)

    assert session.reopen() is True
    assert session.select_answer("a") is True
    result = session.confirm_answer()

    assert result.is_correct
    assert session.get_recorded_answer(0) == "a"
    assert session.get_answered_indices() == {0}
    assert len(session.get_user_answers()) == 1


def test_reopen_keeps_previous_answer_until_reconfirmed(questions):
    session = QuizSession(questions)
    answer(session, "b")

    session.reopen()
    session.select_answer("c")

    assert session.get_recorded_answer(0) == "b"
    assert session.is_answered(0)


def test_reopen_is_noop_when_not_confirmed(questions):
    session = QuizSession(questions)

    assert session.reopen() is False


def test_finalize_requires_every_question(questions):
    session = QuizSession(questions)
    answer(session, "a")

    with pytest.raises(SessionIncompleteError) as excinfo:
        session.finalize_session()
    assert excinfo.value.answered == 1
    assert excinfo.value.total == 3


def test_finalize_counts_correct_answers(questions):
    session = QuizSession(questions, topic="Integers")
    answer(session, "a")
    session.advance()
    session.confirm_answer()
    session.advance()
    answer(session, "a")

    result = session.finalize_session()

    assert result.topic == "Integers"
    assert result.total_questions == 3
    assert result.correct_count == 1
    assert result.incorrect_count == 2
    assert [r.is_correct for r in result.question_results] == [True, False, False]
    assert result.question_results[1].user_answer == ""
    assert result.question_results[2].user_answer == "a"
    assert result.question_results[2].correct_answer == "c"


def test_finalize_all_correct_scores_full_marks(questions):
    session = QuizSession(questions)
    for question in questions:
        answer(session, question.correct_answer)
        session.advance()

    result = session.finalize_session()

    assert result.correct_count == len(questions)
    assert result.percentage == 100
    assert result.score_band == "excellent"


def test_finalize_is_pure(questions):
    session = QuizSession(questions)
    for key in ("a", "a", "a"):
        answer(session, key)
        session.advance()

    assert session.finalize_session() == session.finalize_session()


def test_progress_marks_current_answered_and_unanswered(questions):
    session = QuizSession(questions)
    answer(session, "a")
    session.advance()

    assert session.progress() == ["answered", "current", "unanswered"]
    assert session.find_first_unanswered() == 1


def test_snapshot_hides_answer_until_confirmed(questions):
    session = QuizSession(questions)
    session.select_answer("b")

    before = session.snapshot()
    session.confirm_answer()
    after = session.snapshot()

    assert before["correct_answer"] is None
    assert before["explanation"] is None
    assert after["correct_answer"] == "a"
    assert after["is_correct"] is False
    assert after["answered_indices"] == [0]
