"""Exhaustive bonus-unit allocation planner.

Phase A predicts every (vector, bonus amount) pair once and gates each
prediction against the likelihood threshold.  Phase B walks every way of
splitting the bonus pool across the vectors, scores each split from the
Phase A table, and ranks them.  Scores are not monotonic in enumeration
order, so every admissible plan is kept until the final sort.
"""
from __future__ import annotations

import logging
import random
import time
from concurrent.futures import ProcessPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from ..game_models import AttackPlan, AttackPrediction, AttackSetup, AttackVector
from ..predictor import predict_attack
from ..simulators.dice import DiceRoller

log = logging.getLogger(__name__)

Predictor = Callable[..., AttackPrediction]

# Deadline is polled once per this many counter steps during enumeration.
_DEADLINE_POLL_INTERVAL = 4096


class PlanningError(RuntimeError):
    pass


class PlanningTimeout(PlanningError):
    pass


class PlanStorageError(PlanningError):
    pass


def score_prediction(prediction: AttackPrediction, likelihood_threshold: float) -> float:
    """Win likelihood if it reaches the threshold, otherwise zero."""

    win_likelihood = prediction.win_likelihood
    # NaN (no iterations) compares false and scores zero
    if win_likelihood >= likelihood_threshold:
        return win_likelihood
    return 0.0


def iter_bonus_combinations(
    vector_count: int,
    total_bonus: int,
    poll: Optional[Callable[[], None]] = None,
) -> Iterator[Tuple[int, ...]]:
    """Yield every per-vector bonus tuple whose parts sum to ``total_bonus``.

    Counts through all ``(total_bonus + 1) ** vector_count`` digit tuples with
    digit 0 least significant and carries on overflow; exhausting the last
    digit ends the walk.  Only the tuples with the right sum are yielded.
    ``poll`` is called once per ``_DEADLINE_POLL_INTERVAL`` counter steps,
    admissible or not, and may raise to stop the walk.
    """
    if vector_count <= 0 or total_bonus < 0:
        return
    indices = [0] * vector_count
    total = 0
    steps = 0
    while True:
        if poll is not None and steps % _DEADLINE_POLL_INTERVAL == 0:
            poll()
        steps += 1
        if total == total_bonus:
            yield tuple(indices)
        index = 0
        while index < vector_count:
            indices[index] += 1
            total += 1
            if indices[index] <= total_bonus:
                break
            indices[index] = 0
            total -= total_bonus + 1
            index += 1
        else:
            return


class _Deadline:
    def __init__(self, seconds: Optional[float]):
        self.seconds = seconds
        self.start = time.monotonic()

    def elapsed(self) -> float:
        return time.monotonic() - self.start

    def remaining(self) -> Optional[float]:
        if self.seconds is None:
            return None
        return max(0.0, self.seconds - self.elapsed())

    def expired(self, phase: str) -> PlanningTimeout:
        return PlanningTimeout(f"planning exceeded its {self.seconds:g}s deadline during {phase}")

    def check(self, phase: str) -> None:
        if self.seconds is not None and self.elapsed() > self.seconds:
            raise self.expired(phase)


def _predict_task(task: Tuple[Predictor, AttackVector, int, int, int, bool]) -> AttackPrediction:
    predictor, attack_vector, bonus, iterations, seed, debug = task
    dice = DiceRoller(random.Random(seed))
    return predictor(attack_vector, bonus, iterations, dice=dice, debug=debug)


def precompute_setups(
    attack_vectors: Sequence[AttackVector],
    total_bonus: int,
    likelihood_threshold: float,
    iterations: int,
    dice: Optional[DiceRoller] = None,
    debug: bool = False,
    predictor: Predictor = predict_attack,
    workers: int = 1,
    deadline: Optional[_Deadline] = None,
) -> List[List[AttackSetup]]:
    """Build the ``[vector][bonus]`` table of scored setups."""
    dice = dice if dice is not None else DiceRoller()
    pairs = [(vi, bonus) for vi in range(len(attack_vectors)) for bonus in range(total_bonus + 1)]

    if workers > 1 and len(pairs) > 1:
        # each task draws its own stream from the parent one
        tasks = [
            (predictor, attack_vectors[vi], bonus, iterations, dice.rng.getrandbits(64), debug)
            for vi, bonus in pairs
        ]
        pool = ProcessPoolExecutor(max_workers=workers)
        try:
            futures = [pool.submit(_predict_task, task) for task in tasks]
            _, pending = wait(futures, timeout=deadline.remaining() if deadline is not None else None)
            if pending:
                raise deadline.expired("setup precomputation")
            predictions = [future.result() for future in futures]
        finally:
            # queued tasks are dropped; at most one running task per worker finishes
            pool.shutdown(wait=False, cancel_futures=True)
    else:
        predictions = []
        for vi, bonus in pairs:
            if deadline is not None:
                deadline.check("setup precomputation")
            predictions.append(predictor(attack_vectors[vi], bonus, iterations, dice=dice, debug=debug))

    table: List[List[AttackSetup]] = [[] for _ in attack_vectors]
    for (vi, bonus), prediction in zip(pairs, predictions):
        table[vi].append(
            AttackSetup(
                vector_index=vi,
                attack_vector=attack_vectors[vi],
                bonus=bonus,
                prediction=prediction,
                score=score_prediction(prediction, likelihood_threshold),
            )
        )
    return table


def enumerate_plans(
    setups: Sequence[Sequence[AttackSetup]],
    total_bonus: int,
    deadline: Optional[_Deadline] = None,
) -> List[AttackPlan]:
    """Materialise every admissible plan from a precomputed setup table."""
    plans: List[AttackPlan] = []
    poll = (lambda: deadline.check("plan enumeration")) if deadline is not None else None
    try:
        for bonuses in iter_bonus_combinations(len(setups), total_bonus, poll=poll):
            chosen = [setups[vi][bonus] for vi, bonus in enumerate(bonuses)]
            plans.append(AttackPlan(setups=chosen, total_score=sum(s.score for s in chosen)))
    except MemoryError as exc:
        plans.clear()
        raise PlanStorageError("Error growing storage for attack plans") from exc
    return plans


def rank_plans(plans: List[AttackPlan]) -> List[AttackPlan]:
    plans.sort(key=lambda p: p.total_score, reverse=True)
    return plans


@dataclass
class PlanningResult:
    best: AttackPlan
    plans: List[AttackPlan] = field(default_factory=list)
    setups: List[List[AttackSetup]] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def plan_count(self) -> int:
        return len(self.plans)


class AllocationPlanner:
    """Searches every split of ``total_bonus`` across the given vectors."""

    def __init__(
        self,
        total_bonus: int,
        likelihood_threshold: float,
        iterations: int,
        dice: Optional[DiceRoller] = None,
        debug: bool = False,
        workers: int = 1,
        deadline_seconds: Optional[float] = None,
        predictor: Predictor = predict_attack,
    ) -> None:
        self.total_bonus = total_bonus
        self.likelihood_threshold = likelihood_threshold
        self.iterations = iterations
        self.dice = dice if dice is not None else DiceRoller()
        self.debug = debug
        self.workers = workers
        self.deadline_seconds = deadline_seconds
        self.predictor = predictor

    def plan(self, attack_vectors: Sequence[AttackVector]) -> PlanningResult:
        if not attack_vectors:
            raise PlanningError("no attack vectors to plan")
        deadline = _Deadline(self.deadline_seconds)

        log.info(
            "Precomputing %d setups (%d vectors x %d bonus levels, %d iterations each)",
            len(attack_vectors) * (self.total_bonus + 1),
            len(attack_vectors),
            self.total_bonus + 1,
            self.iterations,
        )
        setups = precompute_setups(
            attack_vectors,
            self.total_bonus,
            self.likelihood_threshold,
            self.iterations,
            dice=self.dice,
            debug=self.debug,
            predictor=self.predictor,
            workers=self.workers,
            deadline=deadline,
        )

        plans = rank_plans(enumerate_plans(setups, self.total_bonus, deadline))
        log.info("Ranked %d admissible plans in %.2fs", len(plans), deadline.elapsed())
        if not plans:
            raise PlanningError("no admissible plan found")
        return PlanningResult(
            best=plans[0],
            plans=plans,
            setups=setups,
            elapsed_seconds=deadline.elapsed(),
        )


__all__ = [
    "AllocationPlanner",
    "PlanningResult",
    "PlanningError",
    "PlanningTimeout",
    "PlanStorageError",
    "score_prediction",
    "iter_bonus_combinations",
    "precompute_setups",
    "enumerate_plans",
    "rank_plans",
]
