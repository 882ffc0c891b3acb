"""
Unit tests for dice combat.

Covers the three layers of the resolver:
- single rounds (dice counts, pairwise comparison, ties to the defender)
- territory assaults (termination floors)
- vector traversals (garrison units, stopping at the first failure)
"""
import logging
import random

import pytest

from warplan.game_models import Territory
from warplan.simulators.combat import (
    CombatResolver,
    attack_dice_count,
    compare_dice,
    defend_dice_count,
    resolve_round,
    resolve_territory,
    resolve_vector,
)
from warplan.simulators.dice import DiceRoller


class ScriptedDice:
    """Returns pre-arranged rolls; fails loudly if asked for anything else."""

    def __init__(self, rolls):
        self.rolls = [list(r) for r in rolls]

    def roll(self, count):
        assert self.rolls, "unexpected roll"
        dice = self.rolls.pop(0)
        assert len(dice) == count
        return sorted(dice, reverse=True)


def seeded(seed: int = 7) -> DiceRoller:
    return DiceRoller(random.Random(seed))


def territories(*counts):
    return tuple(Territory(units=c) for c in counts)


@pytest.mark.parametrize(
    "units,expected",
    [(1, 0), (2, 1), (3, 2), (4, 3), (10, 3)],
)
def test_attack_dice_leave_one_unit_behind(units, expected):
    assert attack_dice_count(units) == expected


@pytest.mark.parametrize("units,expected", [(0, 0), (1, 1), (2, 2), (9, 2)])
def test_defender_rolls_at_most_two(units, expected):
    assert defend_dice_count(units) == expected


def test_compare_dice_ties_favor_defender():
    assert compare_dice([6, 5, 4], [6, 5]) == (2, 0)
    assert compare_dice([6, 5, 4], [5, 4]) == (0, 2)
    assert compare_dice([3, 3], [3]) == (1, 0)


def test_extra_attack_dice_are_ignored():
    assert resolve_round(4, 1, dice=ScriptedDice([[6, 1, 1], [5]])) == (0, 1)


def test_round_four_vs_two_always_costs_two_units():
    dice = seeded()
    for _ in range(500):
        att_loss, def_loss = resolve_round(4, 2, dice=dice)
        assert att_loss + def_loss == 2
        before = (4 - 1) + 2
        after = (4 - att_loss - 1) + (2 - def_loss)
        assert before - after == 2


def test_round_two_vs_many_compares_one_pair():
    dice = seeded(3)
    for _ in range(200):
        assert sum(resolve_round(2, 5, dice=dice)) == 1


def test_territory_ends_on_a_floor():
    dice = seeded(5)
    for front in range(1, 12):
        for defenders in range(0, 8):
            remaining_front, remaining_def = resolve_territory(front, Territory(defenders), dice=dice)
            assert remaining_front == 1 or remaining_def == 0
            assert remaining_front >= 1 and remaining_def >= 0


def test_territory_with_single_front_unit_never_rolls():
    assert resolve_territory(1, Territory(3), dice=ScriptedDice([])) == (1, 3)


def test_empty_vector_territory_is_taken_without_combat():
    result = resolve_vector(5, territories(0), dice=ScriptedDice([]))
    assert result.won
    assert result.conquered_territory_count == 1
    assert result.units_on_front == 4
    assert result.enemy_units_on_front == 0


def test_vector_stops_at_first_failed_territory():
    dice = ScriptedDice([[1], [6]])
    result = resolve_vector(2, territories(1, 3), dice=dice)
    assert not result.won
    assert result.conquered_territory_count == 0
    assert result.units_on_front == 1
    assert result.enemy_units_on_front == 1


def test_conquest_leaves_garrison_and_advances():
    dice = ScriptedDice([
        [6, 5], [1],  # 3 vs 1: territory falls, 2 move on
        [4], [4],     # 2 vs 1: tie, attacker loses
    ])
    result = resolve_vector(3, territories(1, 1), dice=dice)
    assert result.conquered_territory_count == 1
    assert result.units_on_front == 1
    assert result.enemy_units_on_front == 1


def test_full_conquest_reports_zero_enemies():
    dice = ScriptedDice([[6, 6, 6], [1, 1], [6, 6, 6], [2]])
    result = resolve_vector(6, territories(2, 1), dice=dice)
    assert result.won
    assert result.conquered_territory_count == 2
    # 6 -> 5 after the first garrison, 5 -> 4 after the second
    assert result.units_on_front == 4


def test_debug_trace_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="warplan.simulators.combat")
    resolve_vector(4, territories(2), dice=ScriptedDice([[6, 5, 4], [3, 2]]), debug=True)
    text = caplog.text
    assert "Attacking 4 vs 2" in text
    assert "4 [6, 5, 4] vs 2 [3, 2] = 0 front units lost and 2 defending units lost" in text


def test_no_trace_logged_without_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="warplan.simulators.combat")
    resolve_vector(4, territories(2), dice=ScriptedDice([[6, 5, 4], [3, 2]]))
    assert caplog.text == ""


def test_resolver_keeps_structured_trace():
    resolver = CombatResolver(ScriptedDice([[1], [6]]), keep_trace=True)
    resolver.resolve_vector(2, territories(1))
    events = [e["event"] for e in resolver.trace]
    assert events == ["territory", "round", "failed"]
    assert resolver.trace[1]["attacker_losses"] == 1
