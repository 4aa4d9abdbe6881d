import pytest

from quiz_runner.core.models import QuizResult


@pytest.mark.parametrize(
    "correct, total, expected",
    [
        (29, 200, 14),
        (1, 8, 13),
        (2, 3, 67),
        (1, 3, 33),
        (0, 5, 0),
        (5, 5, 100),
    ],
)
def test_percentage_rounds_scaled_ratio_half_up(correct, total, expected):
    result = QuizResult(topic="T", total_questions=total, correct_count=correct)

    assert result.percentage == expected


@pytest.mark.parametrize(
    "correct, total, band",
    [(4, 5, "excellent"), (3, 5, "fair"), (2, 5, "poor")],
)
def test_score_band_thresholds(correct, total, band):
    assert QuizResult(topic="T", total_questions=total, correct_count=correct).score_band == band


def test_percentage_of_empty_result_is_zero():
    assert QuizResult(topic="T", total_questions=0, correct_count=0).percentage == 0
