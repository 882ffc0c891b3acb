"""Entry points shared by the CLI and the HTTP API.

:func:`recommend` picks the mode the same way the command line always has:
a bonus pool of zero just reports each vector's prediction, anything larger
runs the allocation search.
"""
from __future__ import annotations

import random
from typing import List, Optional, Sequence, Union

from .config import WarPlanSettings
from .game_models import AttackPrediction, AttackVector
from .planners.allocation import AllocationPlanner, PlanningResult
from .reports.run_report import PlanReport, WarReport, build_plan_report, build_war_report
from .simulators.dice import DiceRoller
from .validators import validate_run_parameters, validate_vectors
from .war_sim import simulate_war


def make_dice(settings: WarPlanSettings) -> DiceRoller:
    """A ``None`` seed draws fresh OS entropy, so every run differs."""
    return DiceRoller(random.Random(settings.seed))


def run_simulation(
    attack_vectors: Sequence[AttackVector],
    settings: WarPlanSettings,
    dice: Optional[DiceRoller] = None,
) -> List[AttackPrediction]:
    return simulate_war(
        attack_vectors,
        settings.iterations,
        bonus_units=settings.bonus_units,
        dice=dice or make_dice(settings),
        debug=settings.debug,
    )


def run_planning(
    attack_vectors: Sequence[AttackVector],
    settings: WarPlanSettings,
    dice: Optional[DiceRoller] = None,
) -> PlanningResult:
    planner = AllocationPlanner(
        total_bonus=settings.bonus_units,
        likelihood_threshold=settings.likelihood_threshold,
        iterations=settings.iterations,
        dice=dice or make_dice(settings),
        debug=settings.debug,
        workers=settings.workers,
        deadline_seconds=settings.deadline_seconds,
    )
    return planner.plan(attack_vectors)


def recommend(
    attack_vectors: Sequence[AttackVector],
    settings: WarPlanSettings,
    dice: Optional[DiceRoller] = None,
) -> Union[WarReport, PlanReport]:
    """Validate, run the mode selected by ``settings.bonus_units`` and build its report."""
    validate_run_parameters(settings.iterations, settings.bonus_units, settings.max_bonus_units)
    validate_vectors(attack_vectors, settings)

    if settings.bonus_units == 0:
        predictions = run_simulation(attack_vectors, settings, dice)
        return build_war_report(attack_vectors, predictions, settings.iterations, settings.bonus_units)

    result = run_planning(attack_vectors, settings, dice)
    return build_plan_report(
        result,
        settings.iterations,
        settings.bonus_units,
        settings.likelihood_threshold,
    )


__all__ = ["make_dice", "run_simulation", "run_planning", "recommend"]
