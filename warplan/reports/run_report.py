from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime, timezone
import json

from ..game_models import AttackPrediction, AttackSetup, AttackVector


def format_prediction(label: str, prediction: AttackPrediction) -> str:
    lines = [
        f"Attack vector '{label}' prediction",
        f"\tWin count: {prediction.win_count} Loss count: {prediction.loss_count}",
    ]
    if prediction.has_wins:
        lines.append(
            f"\tWin likelihood: {prediction.win_likelihood:.2f} "
            f"with {prediction.estimated_remaining_units_if_win:.2f} units remaining"
        )
    else:
        lines.append("\tWin likelihood: 0 this is a debo move")
    if prediction.has_losses:
        lines.append(
            f"\t\tIf loss, {prediction.estimated_remaining_territories_if_loss:.2f} remaining territories "
            f"with {prediction.estimated_remaining_enemies_if_loss:.2f} enemies total"
        )
    return "\n".join(lines)


def format_setup(setup: AttackSetup) -> str:
    label = setup.attack_vector.label
    return (
        f"{setup.bonus} bonus armies to attack vector '{label}'\n"
        + format_prediction(label, setup.prediction)
    )


def _fmt_or_na(value: Optional[float], spec: str = ".2f") -> str:
    return "n/a" if value is None else format(value, spec)


@dataclass
class PredictionDiag:
    label: str
    bonus: int
    win_count: int
    loss_count: int
    win_likelihood: Optional[float]
    remaining_units_if_win: Optional[float]
    remaining_enemies_if_loss: Optional[float]
    remaining_territories_if_loss: Optional[float]
    score: Optional[float] = None

    @classmethod
    def build(cls, label: str, bonus: int, prediction: AttackPrediction, score: Optional[float] = None) -> "PredictionDiag":
        d = prediction.to_dict()
        return cls(
            label=label,
            bonus=bonus,
            win_count=d["win_count"],
            loss_count=d["loss_count"],
            win_likelihood=d["win_likelihood"],
            remaining_units_if_win=d["estimated_remaining_units_if_win"],
            remaining_enemies_if_loss=d["estimated_remaining_enemies_if_loss"],
            remaining_territories_if_loss=d["estimated_remaining_territories_if_loss"],
            score=score,
        )


@dataclass
class WarReport:
    timestamp: str
    iterations: int
    bonus_units: int
    predictions: List[PredictionDiag]
    # kept for the text rendering, not serialised
    _blocks: List[str] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop("_blocks", None)
        d["mode"] = "simulate"
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=False)

    def to_text(self) -> str:
        return "\n\n".join(self._blocks)

    def to_markdown(self) -> str:
        lines = []
        lines.append("# WarPlan Simulation Report")
        lines.append(f"- **Timestamp:** {self.timestamp}")
        lines.append(f"- **Iterations:** {self.iterations}  |  **Bonus units:** {self.bonus_units}")
        lines.append("\n## Predictions")
        lines.append("| vector | wins | losses | win likelihood | units if win | territories if loss | enemies if loss |")
        lines.append("|---|---|---|---|---|---|---|")
        for p in self.predictions:
            lines.append(
                f"| `{p.label}` | {p.win_count} | {p.loss_count} | {_fmt_or_na(p.win_likelihood)} "
                f"| {_fmt_or_na(p.remaining_units_if_win)} | {_fmt_or_na(p.remaining_territories_if_loss)} "
                f"| {_fmt_or_na(p.remaining_enemies_if_loss)} |"
            )
        return "\n".join(lines)


@dataclass
class PlanReport:
    timestamp: str
    iterations: int
    bonus_units: int
    likelihood_threshold: float
    total_score: float
    plan_count: int
    elapsed_seconds: float
    setups: List[PredictionDiag]
    _blocks: List[str] = field(default_factory=list, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d.pop("_blocks", None)
        d["mode"] = "plan"
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, sort_keys=False)

    def to_text(self) -> str:
        return "Highest scoring setup is below\n" + "\n".join(self._blocks)

    def to_markdown(self) -> str:
        lines = []
        lines.append("# WarPlan Allocation Report")
        lines.append(f"- **Timestamp:** {self.timestamp}")
        lines.append(
            f"- **Iterations:** {self.iterations}  |  **Bonus units:** {self.bonus_units}"
            f"  |  **Threshold:** {self.likelihood_threshold:.2f}"
        )
        lines.append(
            f"- **Plans ranked:** {self.plan_count}  |  **Best total score:** {self.total_score:.3f}"
            f"  |  **Elapsed:** {self.elapsed_seconds:.2f}s"
        )
        if self.total_score == 0:
            lines.append("- no vector reaches the threshold; this allocation is arbitrary")
        lines.append("\n## Recommended Allocation")
        for i, s in enumerate(self.setups, 1):
            lines.append(
                f"{i}. `{s.label}` +{s.bonus} bonus  | score={_fmt_or_na(s.score, '.3f')}"
                f"  | win={_fmt_or_na(s.win_likelihood)}  | units if win={_fmt_or_na(s.remaining_units_if_win)}"
            )
        return "\n".join(lines)


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")


def build_war_report(
    attack_vectors: Sequence[AttackVector],
    predictions: Sequence[AttackPrediction],
    iterations: int,
    bonus_units: int = 0,
) -> WarReport:
    diags: List[PredictionDiag] = []
    blocks: List[str] = []
    for vector, prediction in zip(attack_vectors, predictions):
        diags.append(PredictionDiag.build(vector.label, bonus_units, prediction))
        blocks.append(format_prediction(vector.label, prediction))
    return WarReport(
        timestamp=_timestamp(),
        iterations=int(iterations),
        bonus_units=int(bonus_units),
        predictions=diags,
        _blocks=blocks,
    )


def build_plan_report(
    result: Any,
    iterations: int,
    bonus_units: int,
    likelihood_threshold: float,
) -> PlanReport:
    """``result`` is a :class:`warplan.planners.allocation.PlanningResult`."""
    best = result.best
    diags = [
        PredictionDiag.build(s.attack_vector.label, s.bonus, s.prediction, score=s.score)
        for s in best.setups
    ]
    return PlanReport(
        timestamp=_timestamp(),
        iterations=int(iterations),
        bonus_units=int(bonus_units),
        likelihood_threshold=float(likelihood_threshold),
        total_score=float(best.total_score),
        plan_count=int(result.plan_count),
        elapsed_seconds=float(result.elapsed_seconds),
        setups=diags,
        _blocks=[format_setup(s) for s in best.setups],
    )


def save_report(report: WarReport | PlanReport, path: str) -> None:
    if path.endswith(".json"):
        text = report.to_json()
    elif path.endswith(".md"):
        text = report.to_markdown()
    else:
        text = report.to_text()
    with open(path, "w", encoding="utf-8") as f:
        f.write(text + "\n")


__all__ = [
    "format_prediction",
    "format_setup",
    "PredictionDiag",
    "WarReport",
    "PlanReport",
    "build_war_report",
    "build_plan_report",
    "save_report",
]
