"""Dice combat for sequential territory assaults.

One round pits up to three attacking dice against up to two defending dice;
sorted faces are compared pairwise and ties go to the defender.  A territory
assault repeats rounds until the front is down to the unit that must stay
home or the territory is empty, and a vector traversal chains territory
assaults, leaving one unit behind in every conquered territory.  The driver is
:class:`CombatResolver`; the module-level functions wrap it for one-off use.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..game_models import AttackResult, Territory
from .dice import DiceRoller

log = logging.getLogger(__name__)

MIN_TERRITORY_UNITS = 1
MAX_ATTACK_DICE_COUNT = 3
MAX_DEFEND_DICE_COUNT = 2

# =============================
# Dice helpers
# =============================


def attack_dice_count(units_on_front: int) -> int:
    """One unit always stays behind, so only the rest may roll."""

    return max(0, min(units_on_front - MIN_TERRITORY_UNITS, MAX_ATTACK_DICE_COUNT))


def defend_dice_count(territory_units: int) -> int:
    return max(0, min(territory_units, MAX_DEFEND_DICE_COUNT))


def compare_dice(attack_dice: Sequence[int], defend_dice: Sequence[int]) -> Tuple[int, int]:
    """Return ``(attacker_losses, defender_losses)`` for two descending rolls."""

    lost_attack_units = 0
    lost_defend_units = 0
    for att, dfd in zip(attack_dice, defend_dice):
        if att > dfd:
            lost_defend_units += 1
        else:
            lost_attack_units += 1
    return lost_attack_units, lost_defend_units


def _dice_str(dice: Sequence[int]) -> str:
    return ", ".join(str(d) for d in dice)


# =============================
# Core combat driver
# =============================


class CombatResolver:
    def __init__(self, dice: Optional[DiceRoller] = None, debug: bool = False, keep_trace: bool = False):
        self.dice = dice if dice is not None else DiceRoller()
        self.debug = debug
        self.trace: Optional[List[Dict[str, Any]]] = [] if keep_trace else None

    # ----- Public API -----

    def resolve_round(self, attacker_units: int, defender_units: int) -> Tuple[int, int]:
        attack_dice = self.dice.roll(attack_dice_count(attacker_units))
        defend_dice = self.dice.roll(defend_dice_count(defender_units))
        lost_attack_units, lost_defend_units = compare_dice(attack_dice, defend_dice)

        if self.debug:
            log.debug(
                "%d [%s] vs %d [%s] = %d front units lost and %d defending units lost",
                attacker_units,
                _dice_str(attack_dice),
                defender_units,
                _dice_str(defend_dice),
                lost_attack_units,
                lost_defend_units,
            )
        if self.trace is not None:
            self.trace.append(
                {
                    "event": "round",
                    "units_on_front": attacker_units,
                    "attack_dice": attack_dice,
                    "territory_units": defender_units,
                    "defend_dice": defend_dice,
                    "attacker_losses": lost_attack_units,
                    "defender_losses": lost_defend_units,
                }
            )
        return lost_attack_units, lost_defend_units

    def resolve_territory(self, units_on_front: int, territory: Territory) -> Tuple[int, int]:
        front_units = units_on_front
        territory_units = territory.units
        while front_units > MIN_TERRITORY_UNITS and territory_units > 0:
            lost_attack, lost_defend = self.resolve_round(front_units, territory_units)
            front_units -= lost_attack
            territory_units -= lost_defend
        return front_units, territory_units

    def resolve_vector(self, units_on_front: int, territories: Sequence[Territory]) -> AttackResult:
        front_units = units_on_front
        remaining_territory_units = 0
        conquered = 0

        for territory in territories:
            if self.debug:
                log.debug("Attacking %d vs %d", front_units, territory.units)
                log.debug("------------------")
            if self.trace is not None:
                self.trace.append(
                    {"event": "territory", "units_on_front": front_units, "territory_units": territory.units}
                )

            remaining_front, remaining_territory_units = self.resolve_territory(front_units, territory)

            if remaining_territory_units > 0:
                front_units = remaining_front
                if self.debug:
                    log.debug(
                        "Attack failed with %d vs %d remaining",
                        front_units,
                        remaining_territory_units,
                    )
                if self.trace is not None:
                    self.trace.append(
                        {
                            "event": "failed",
                            "units_on_front": front_units,
                            "territory_units": remaining_territory_units,
                        }
                    )
                break

            # Empty territories can be walked into with no units left to garrison.
            front_units = max(0, remaining_front - MIN_TERRITORY_UNITS)
            conquered += 1

        return AttackResult(
            conquered_territory_count=conquered,
            units_on_front=front_units,
            enemy_units_on_front=remaining_territory_units,
        )


def resolve_round(
    attacker_units: int, defender_units: int, dice: Optional[DiceRoller] = None, debug: bool = False
) -> Tuple[int, int]:
    return CombatResolver(dice, debug=debug).resolve_round(attacker_units, defender_units)


def resolve_territory(
    units_on_front: int, territory: Territory, dice: Optional[DiceRoller] = None, debug: bool = False
) -> Tuple[int, int]:
    return CombatResolver(dice, debug=debug).resolve_territory(units_on_front, territory)


def resolve_vector(
    units_on_front: int,
    territories: Sequence[Territory],
    dice: Optional[DiceRoller] = None,
    debug: bool = False,
) -> AttackResult:
    return CombatResolver(dice, debug=debug).resolve_vector(units_on_front, territories)


__all__ = [
    "CombatResolver",
    "MIN_TERRITORY_UNITS",
    "MAX_ATTACK_DICE_COUNT",
    "MAX_DEFEND_DICE_COUNT",
    "attack_dice_count",
    "defend_dice_count",
    "compare_dice",
    "resolve_round",
    "resolve_territory",
    "resolve_vector",
]
