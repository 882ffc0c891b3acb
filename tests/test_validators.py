import pytest

from warplan.config import WarPlanSettings
from warplan.game_models import AttackVector
from warplan.validators import InputLimitError, validate_run_parameters, validate_vectors


def test_vectors_within_limits_pass():
    validate_vectors([AttackVector.from_counts(3, [1, 2])], WarPlanSettings())


def test_too_many_vectors_rejected():
    vectors = [AttackVector.from_counts(3, [1]) for _ in range(3)]
    with pytest.raises(InputLimitError):
        validate_vectors(vectors, WarPlanSettings(max_vectors=2))


def test_too_many_territories_rejected():
    with pytest.raises(InputLimitError):
        validate_vectors([AttackVector.from_counts(3, [1] * 5)], WarPlanSettings(max_territories=4))


def test_empty_inputs_rejected():
    with pytest.raises(InputLimitError):
        validate_vectors([], WarPlanSettings())
    with pytest.raises(InputLimitError):
        validate_vectors([AttackVector(units_on_front=3, territories=())], WarPlanSettings())


@pytest.mark.parametrize("iterations,bonus", [(0, 0), (-5, 2), (10, -1)])
def test_bad_run_parameters_rejected(iterations, bonus):
    with pytest.raises(InputLimitError):
        validate_run_parameters(iterations, bonus)


def test_bonus_pool_limit():
    validate_run_parameters(10, 256, 256)
    with pytest.raises(InputLimitError, match="at most 256"):
        validate_run_parameters(10, 257, 256)
