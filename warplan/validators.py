from __future__ import annotations

from typing import Optional, Sequence

from .config import WarPlanSettings
from .game_models import AttackVector


class InputLimitError(ValueError):
    pass


def validate_vectors(attack_vectors: Sequence[AttackVector], settings: WarPlanSettings) -> None:
    """
    Enforce the configured input bounds.

    The simulation code itself assumes vectors that already passed parsing;
    this only guards the sizes that make the planner's search explode.
    """
    if not attack_vectors:
        raise InputLimitError("At least one attack vector is required")
    if len(attack_vectors) > settings.max_vectors:
        raise InputLimitError(
            f"{len(attack_vectors)} attack vectors given, at most {settings.max_vectors} allowed"
        )
    for vector in attack_vectors:
        if vector.territory_count == 0:
            raise InputLimitError(f"Attack vector '{vector.label}' has no territories")
        if vector.territory_count > settings.max_territories:
            raise InputLimitError(
                f"Attack vector '{vector.label}' has {vector.territory_count} territories, "
                f"at most {settings.max_territories} allowed"
            )
        if vector.units_on_front < 1:
            raise InputLimitError(f"Attack vector '{vector.label}' needs at least 1 unit on the front")


def validate_run_parameters(iterations: int, bonus_units: int, max_bonus_units: Optional[int] = None) -> None:
    if iterations < 1:
        raise InputLimitError(f"Simulation iterations must be positive, got {iterations}")
    if bonus_units < 0:
        raise InputLimitError(f"Bonus units must not be negative, got {bonus_units}")
    # setup precomputation runs one prediction per vector per bonus level
    if max_bonus_units is not None and bonus_units > max_bonus_units:
        raise InputLimitError(f"{bonus_units} bonus units given, at most {max_bonus_units} allowed")


__all__ = ["InputLimitError", "validate_vectors", "validate_run_parameters"]
