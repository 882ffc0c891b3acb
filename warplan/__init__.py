"""WarPlan: estimate Risk-style attack outcomes and plan bonus army placement."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "Territory",
    "AttackVector",
    "AttackResult",
    "AttackPrediction",
    "AttackSetup",
    "AttackPlan",
    "DiceRoller",
    "CombatResolver",
    "predict_attack",
    "simulate_war",
    "AllocationPlanner",
    "PlanningResult",
    "iter_bonus_combinations",
    "parse_attack_vector",
    "parse_attack_vectors",
    "WarPlanSettings",
    "load_settings",
    "recommend",
    "__version__",
]

_EXPORTS = {
    "Territory": ("game_models", "Territory"),
    "AttackVector": ("game_models", "AttackVector"),
    "AttackResult": ("game_models", "AttackResult"),
    "AttackPrediction": ("game_models", "AttackPrediction"),
    "AttackSetup": ("game_models", "AttackSetup"),
    "AttackPlan": ("game_models", "AttackPlan"),
    "DiceRoller": ("simulators.dice", "DiceRoller"),
    "CombatResolver": ("simulators.combat", "CombatResolver"),
    "predict_attack": ("predictor", "predict_attack"),
    "simulate_war": ("war_sim", "simulate_war"),
    "AllocationPlanner": ("planners.allocation", "AllocationPlanner"),
    "PlanningResult": ("planners.allocation", "PlanningResult"),
    "iter_bonus_combinations": ("planners.allocation", "iter_bonus_combinations"),
    "parse_attack_vector": ("parsing", "parse_attack_vector"),
    "parse_attack_vectors": ("parsing", "parse_attack_vectors"),
    "WarPlanSettings": ("config", "WarPlanSettings"),
    "load_settings": ("config", "load_settings"),
    "recommend": ("main", "recommend"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr_name = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        attr = getattr(module, attr_name)
        globals()[name] = attr
        return attr
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def __dir__() -> list[str]:
    return sorted(set(list(globals().keys()) + list(__all__)))
