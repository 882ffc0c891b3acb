from __future__ import annotations
import math
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Tuple, Any, Sequence


def _finite_or_none(value: float) -> float | None:
    """JSON has no NaN; undefined statistics travel as ``null``."""
    if value is None or math.isnan(value):
        return None
    return value


@dataclass(frozen=True)
class Territory:
    units: int


@dataclass(frozen=True)
class AttackVector:
    """Front-line units plus the chain of enemy territories to assault in order."""

    units_on_front: int
    territories: Tuple[Territory, ...]
    label: str = ""

    @classmethod
    def from_counts(cls, units_on_front: int, counts: Sequence[int], label: str | None = None) -> "AttackVector":
        territories = tuple(Territory(units=int(c)) for c in counts)
        if label is None:
            label = f"{units_on_front}:" + ",".join(str(t.units) for t in territories)
        return cls(units_on_front=int(units_on_front), territories=territories, label=label)

    @property
    def territory_count(self) -> int:
        return len(self.territories)

    def enemy_units_after(self, index: int) -> int:
        """Total defenders on every territory strictly after ``index``."""
        return sum(t.units for t in self.territories[index + 1:])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "units_on_front": self.units_on_front,
            "territories": [t.units for t in self.territories],
        }


@dataclass
class AttackResult:
    conquered_territory_count: int
    units_on_front: int
    enemy_units_on_front: int

    @property
    def won(self) -> bool:
        return self.enemy_units_on_front == 0


@dataclass
class AttackPrediction:
    """Aggregate of many simulated traversals of one vector at one bonus level.

    Win-conditioned fields are NaN when ``win_count`` is zero and
    loss-conditioned fields are NaN when ``loss_count`` is zero; check the
    counts (or :attr:`has_wins` / :attr:`has_losses`) before using them.
    """

    win_count: int = 0
    loss_count: int = 0
    win_likelihood: float = math.nan
    estimated_remaining_units_if_win: float = math.nan
    estimated_remaining_enemies_if_loss: float = math.nan
    estimated_remaining_territories_if_loss: float = math.nan

    @property
    def total(self) -> int:
        return self.win_count + self.loss_count

    @property
    def has_wins(self) -> bool:
        return self.win_count > 0

    @property
    def has_losses(self) -> bool:
        return self.loss_count > 0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        for k, v in d.items():
            if isinstance(v, float):
                d[k] = _finite_or_none(v)
        return d


@dataclass(frozen=True)
class AttackSetup:
    vector_index: int
    attack_vector: AttackVector
    bonus: int
    prediction: AttackPrediction
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vector_index": self.vector_index,
            "vector": self.attack_vector.to_dict(),
            "bonus": self.bonus,
            "score": self.score,
            "prediction": self.prediction.to_dict(),
        }


@dataclass
class AttackPlan:
    setups: List[AttackSetup] = field(default_factory=list)
    total_score: float = 0.0

    @property
    def bonuses(self) -> Tuple[int, ...]:
        return tuple(s.bonus for s in self.setups)

    @property
    def total_bonus(self) -> int:
        return sum(s.bonus for s in self.setups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_score": self.total_score,
            "bonuses": list(self.bonuses),
            "setups": [s.to_dict() for s in self.setups],
        }


__all__ = [
    "Territory",
    "AttackVector",
    "AttackResult",
    "AttackPrediction",
    "AttackSetup",
    "AttackPlan",
]
