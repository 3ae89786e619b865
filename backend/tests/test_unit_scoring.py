import pytest

from app.components.evaluations.scoring import maturity_level, score_answers
from app.models.evaluation import EvaluationType


def test_score_is_sum_of_answer_values():
    assert score_answers({"q1": 1, "q2": 2, "q3": 3}) == 6


def test_empty_answers_score_zero():
    assert score_answers({}) == 0


def test_score_does_not_validate_ranges():
    # Out-of-range and negative values are summed as given.
    assert score_answers({"q1": 100, "q2": -4}) == 96


@pytest.mark.parametrize(
    "score,expected_level",
    [(0, 1), (9, 1), (10, 2), (19, 2), (20, 3), (29, 3), (30, 4), (39, 4), (40, 5), (400, 5)],
)
def test_initial_maturity_thresholds(score, expected_level):
    assert maturity_level(EvaluationType.INITIAL, score).level == expected_level


@pytest.mark.parametrize(
    "score,expected_level",
    [(20, 1), (21, 2), (45, 2), (46, 3), (68, 3), (69, 4), (88, 4), (89, 5)],
)
def test_advanced_maturity_thresholds(score, expected_level):
    assert maturity_level(EvaluationType.ADVANCED, score).level == expected_level


def test_maturity_accepts_plain_type_string():
    level = maturity_level("ADVANCED", 10)
    assert level.level == 1
    assert level.as_dict()["label"] == "Initial / Ad-hoc"
    assert "ISO 27001" in level.advice
