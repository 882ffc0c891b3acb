"""Monte Carlo outcome prediction for a single attack vector."""
from __future__ import annotations

import logging
import math
from typing import Optional

from .game_models import AttackPrediction, AttackVector
from .simulators.combat import CombatResolver
from .simulators.dice import DiceRoller

log = logging.getLogger(__name__)


def predict_attack(
    attack_vector: AttackVector,
    bonus_units: int,
    iterations: int,
    dice: Optional[DiceRoller] = None,
    debug: bool = False,
) -> AttackPrediction:
    """Simulate ``iterations`` independent traversals of ``attack_vector``.

    Every run starts from the vector's original defender counts with
    ``units_on_front + bonus_units`` attackers.  A run is a win when the last
    territory it attacked was emptied.  For a loss, the enemies still to beat
    are the survivors on the territory that held plus every territory behind
    it, and the remaining territory count includes the one that held.
    """
    resolver = CombatResolver(dice, debug=debug)
    units_on_front = attack_vector.units_on_front + bonus_units
    territory_count = attack_vector.territory_count

    win_count = 0
    loss_count = 0
    total_units_on_front = 0
    total_enemy_units_remaining = 0
    total_territories_remaining = 0

    for _ in range(iterations):
        if debug:
            log.debug("Beginning simulation of attack vector '%s'", attack_vector.label)
            log.debug("------------------------------------------")

        result = resolver.resolve_vector(units_on_front, attack_vector.territories)

        if result.won:
            win_count += 1
            total_units_on_front += result.units_on_front
            continue

        stopped_at = result.conquered_territory_count
        loss_count += 1
        total_enemy_units_remaining += result.enemy_units_on_front + attack_vector.enemy_units_after(stopped_at)
        total_territories_remaining += territory_count - stopped_at

    return _build_prediction(
        win_count,
        loss_count,
        total_units_on_front,
        total_enemy_units_remaining,
        total_territories_remaining,
    )


def _ratio(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return math.nan
    return numerator / denominator


def _build_prediction(
    win_count: int,
    loss_count: int,
    total_units_on_front: int,
    total_enemy_units_remaining: int,
    total_territories_remaining: int,
) -> AttackPrediction:
    return AttackPrediction(
        win_count=win_count,
        loss_count=loss_count,
        win_likelihood=_ratio(win_count, win_count + loss_count),
        estimated_remaining_units_if_win=_ratio(total_units_on_front, win_count),
        estimated_remaining_enemies_if_loss=_ratio(total_enemy_units_remaining, loss_count),
        estimated_remaining_territories_if_loss=_ratio(total_territories_remaining, loss_count),
    )


__all__ = ["predict_attack"]
