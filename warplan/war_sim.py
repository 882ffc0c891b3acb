"""Direct simulation of independent attack vectors, no allocation search."""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .game_models import AttackPrediction, AttackVector
from .predictor import predict_attack
from .simulators.dice import DiceRoller

log = logging.getLogger(__name__)


def simulate_war(
    attack_vectors: Sequence[AttackVector],
    iterations: int,
    bonus_units: int = 0,
    dice: Optional[DiceRoller] = None,
    debug: bool = False,
) -> List[AttackPrediction]:
    """Predict every vector on its own; output order matches input order."""
    dice = dice if dice is not None else DiceRoller()
    predictions: List[AttackPrediction] = []
    for attack_vector in attack_vectors:
        log.info("Simulating attack vector '%s' (%d iterations)", attack_vector.label, iterations)
        predictions.append(
            predict_attack(attack_vector, bonus_units, iterations, dice=dice, debug=debug)
        )
    return predictions


__all__ = ["simulate_war"]
