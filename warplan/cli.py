from __future__ import annotations
import argparse, logging, sys
from typing import Any, Dict

from .config import ConfigError, DEFAULT_ENV_PREFIX, WarPlanSettings, load_settings
from .main import recommend
from .parsing import VectorParseError, parse_attack_vectors
from .planners.allocation import PlanningError
from .reports.run_report import PlanReport, save_report
from .validators import InputLimitError, validate_run_parameters, validate_vectors

_EPILOG = """\
Attack vectors are formatted as: [units on front]:[enemy territory 1 units],[enemy territory n units]

Examples:

  Just simulate a single attack vector, no planning:
    warplan 1000 0 0 7:3,3,1

  Simulate multiple attack vectors, no planning:
    warplan 1000 0 0 7:1,1,2 4:5,1

  Given 10 bonus armies, plan an attack across multiple vectors requiring a win likelihood of 0.8:
    warplan 1000 10 0.8 3:2,2 4:1,1,1,1 2:2,1,2

Set DEBUG_WARPLAN in the environment (or pass --debug) to trace every dice roll.
"""


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="warplan",
        description="Estimate outcomes of attack plans and the best placement of bonus armies",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("iterations", type=int, help="Simulation iterations per prediction")
    p.add_argument("bonus_units", type=int, help="Bonus armies to allocate (0 = just simulate)")
    p.add_argument("likelihood_threshold", type=float, help="Minimum win likelihood a vector must reach to score")
    p.add_argument("vectors", nargs="+", metavar="VECTOR", help="Attack vector, e.g. 10:3,2,99")
    p.add_argument("--config", type=str, action="append", default=[], help="YAML/JSON config files (merged)")
    p.add_argument("--env-prefix", type=str, default=DEFAULT_ENV_PREFIX, help="Env prefix for overrides")
    p.add_argument("--workers", type=int, default=None, help="Processes for setup precomputation")
    p.add_argument("--seed", type=int, default=None, help="Seed the dice (default: fresh entropy)")
    p.add_argument("--deadline", type=float, default=None, help="Abort planning after this many seconds")
    p.add_argument("--format", choices=["text", "markdown", "json"], default="text")
    p.add_argument("--report", type=str, default=None, help="Also save the report (.json, .md or text)")
    p.add_argument("--debug", action="store_true", help="Trace every combat round")
    return p.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    simulation: Dict[str, Any] = {"iterations": args.iterations}
    planner: Dict[str, Any] = {
        "bonus_units": args.bonus_units,
        "likelihood_threshold": args.likelihood_threshold,
    }
    if args.seed is not None:
        simulation["seed"] = args.seed
    if args.debug:
        simulation["debug"] = True
    if args.workers is not None:
        planner["workers"] = args.workers
    if args.deadline is not None:
        planner["deadline_seconds"] = args.deadline
    return {"simulation": simulation, "planner": planner}


def _configure_logging(settings: WarPlanSettings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(message)s",
        stream=sys.stdout,
    )


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        settings = load_settings(args.config, args.env_prefix, _cli_overrides(args))
        vectors = parse_attack_vectors(args.vectors)
        validate_run_parameters(settings.iterations, settings.bonus_units, settings.max_bonus_units)
        validate_vectors(vectors, settings)
    except (ConfigError, VectorParseError, InputLimitError, OSError) as exc:
        print(f"warplan: {exc}", file=sys.stderr)
        return 2

    _configure_logging(settings)

    if settings.bonus_units == 0:
        print("Simulating simple war and printing predictions\n")
    else:
        print("Attempting to plan war for specified vectors\n")

    try:
        report = recommend(vectors, settings)
    except PlanningError as exc:
        print(f"Aborting: {exc}")
        return 1

    if args.format == "json":
        print(report.to_json())
    elif args.format == "markdown":
        print(report.to_markdown())
    else:
        print(report.to_text())
        if isinstance(report, PlanReport) and report.total_score == 0:
            print("\nNo vector reaches the likelihood threshold; the allocation above is arbitrary.")

    if args.report:
        save_report(report, args.report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
