"""Six-sided dice for combat rounds.

Faces come from 32-bit raw draws. Raw values at or above the largest multiple
of six that fits in 32 bits are rejected and redrawn, so each face is equally
likely whatever the generator.
"""
from __future__ import annotations

import random
from typing import List, Optional

DICE_SIDES = 6
MAX_DICE_COUNT = 3
RAW_BITS = 32
MAX_DICE_RAW_VALUE = ((1 << RAW_BITS) // DICE_SIDES) * DICE_SIDES


class DiceRoller:
    """Rolls sorted dice from an injected ``random.Random`` stream."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def roll_die(self) -> int:
        raw = self.rng.getrandbits(RAW_BITS)
        while raw >= MAX_DICE_RAW_VALUE:
            raw = self.rng.getrandbits(RAW_BITS)
        return (raw % DICE_SIDES) + 1

    def roll(self, count: int) -> List[int]:
        if count < 0 or count > MAX_DICE_COUNT:
            raise ValueError(f"dice count must be in 0..{MAX_DICE_COUNT}, got {count}")
        dice = [self.roll_die() for _ in range(count)]
        dice.sort(reverse=True)
        return dice


__all__ = ["DiceRoller", "DICE_SIDES", "MAX_DICE_COUNT", "MAX_DICE_RAW_VALUE"]
