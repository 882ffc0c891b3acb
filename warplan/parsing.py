"""Parse attack vector strings such as ``10:3,2,99``.

The number before the colon is the attacker's front-line units; the
comma-separated numbers after it are the defenders in each territory, in the
order they will be attacked.
"""
from __future__ import annotations

from typing import Iterable, List

from .game_models import AttackVector


class VectorParseError(ValueError):
    pass


def _parse_count(text: str, what: str, spec: str) -> int:
    raw = text.strip()
    try:
        value = int(raw)
    except ValueError:
        raise VectorParseError(f"Malformed attack vector '{spec}': {what} {raw!r} is not an integer") from None
    if value < 0:
        raise VectorParseError(f"Malformed attack vector '{spec}': {what} must not be negative")
    return value


def parse_attack_vector(spec: str) -> AttackVector:
    front, sep, rest = spec.partition(":")
    if not sep:
        raise VectorParseError(f"Malformed attack vector '{spec}': expected '<front units>:<units>,<units>...'")

    units_on_front = _parse_count(front, "front units", spec)
    if units_on_front < 1:
        raise VectorParseError(f"Malformed attack vector '{spec}': front units must be at least 1")

    if not rest.strip():
        raise VectorParseError(f"Malformed attack vector '{spec}': no territories to attack")
    counts = [_parse_count(part, "territory units", spec) for part in rest.split(",")]

    return AttackVector.from_counts(units_on_front, counts, label=spec)


def parse_attack_vectors(specs: Iterable[str]) -> List[AttackVector]:
    return [parse_attack_vector(s) for s in specs]


__all__ = ["VectorParseError", "parse_attack_vector", "parse_attack_vectors"]
