import pytest

from hireloop.core.scoring import (
    build_skill_matrix,
    final_round_average,
    round_half_up,
    weighted_conversation_score,
)
from hireloop.models.report import HiringVerdict


def test_headline_is_plain_mean_of_five_rounds():
    assert final_round_average([80, 70, 90, 85, 75]) == 80


def test_headline_rounds_half_up():
    assert final_round_average([50, 60, 70, 82.5, 80]) == 69
    assert final_round_average([0, 0, 0, 0, 2.5]) == 1
    assert round_half_up(68.49) == 68


def test_headline_requires_five_scores():
    with pytest.raises(ValueError):
        final_round_average([90, 90])


@pytest.mark.parametrize("score,verdict", [
    (100, HiringVerdict.STRONG_HIRE),
    (85, HiringVerdict.STRONG_HIRE),
    (84, HiringVerdict.HIRE),
    (70, HiringVerdict.HIRE),
    (69, HiringVerdict.BORDERLINE),
    (55, HiringVerdict.BORDERLINE),
    (54, HiringVerdict.NO_HIRE),
    (0, HiringVerdict.NO_HIRE),
])
def test_verdict_thresholds(score, verdict):
    assert HiringVerdict.from_score(score) == verdict


def test_weighted_conversation_score():
    assert weighted_conversation_score(80, 70, 60) == 71.0
    assert weighted_conversation_score(100, 100, 100) == 100.0
    assert weighted_conversation_score(150, 100, 100) == 100.0


def test_skill_matrix_maps_rounds_to_traits():
    matrix = build_skill_matrix([80, 65, 72.4, 100, 0])

    assert matrix.logic == 8.0
    assert matrix.technical == 6.5
    assert matrix.experience == 7.2
    assert matrix.problem_solving == 10.0
    assert matrix.communication == 0.0
    assert matrix.cultural == 7.0
