import json
import math

from warplan.game_models import AttackPlan, AttackPrediction, AttackSetup, AttackVector
from warplan.planners.allocation import PlanningResult
from warplan.reports.run_report import (
    build_plan_report,
    build_war_report,
    format_prediction,
    format_setup,
    save_report,
)


def winning():
    return AttackPrediction(
        win_count=3,
        loss_count=1,
        win_likelihood=0.75,
        estimated_remaining_units_if_win=2.5,
        estimated_remaining_enemies_if_loss=4.0,
        estimated_remaining_territories_if_loss=2.0,
    )


def hopeless():
    return AttackPrediction(
        win_count=0,
        loss_count=4,
        win_likelihood=0.0,
        estimated_remaining_enemies_if_loss=6.0,
        estimated_remaining_territories_if_loss=1.0,
    )


def plan_result():
    v1 = AttackVector.from_counts(3, [2, 2])
    v2 = AttackVector.from_counts(2, [5])
    s1 = AttackSetup(0, v1, 2, winning(), 0.75)
    s2 = AttackSetup(1, v2, 0, hopeless(), 0.0)
    best = AttackPlan(setups=[s1, s2], total_score=0.75)
    return PlanningResult(best=best, plans=[best], setups=[[s1], [s2]], elapsed_seconds=0.5)


def test_prediction_block_with_wins_and_losses():
    text = format_prediction("7:3,3,1", winning())
    assert text.splitlines() == [
        "Attack vector '7:3,3,1' prediction",
        "\tWin count: 3 Loss count: 1",
        "\tWin likelihood: 0.75 with 2.50 units remaining",
        "\t\tIf loss, 2.00 remaining territories with 4.00 enemies total",
    ]


def test_prediction_block_without_wins():
    text = format_prediction("2:5", hopeless())
    assert "Win likelihood: 0 this is a debo move" in text


def test_prediction_block_without_losses_skips_loss_line():
    p = AttackPrediction(win_count=2, loss_count=0, win_likelihood=1.0, estimated_remaining_units_if_win=4.0)
    assert "If loss" not in format_prediction("5:0", p)


def test_setup_block_names_bonus_and_vector():
    result = plan_result()
    text = format_setup(result.best.setups[0])
    assert text.startswith("2 bonus armies to attack vector '3:2,2'\n")


def test_war_report_json_uses_null_for_undefined():
    vectors = [AttackVector.from_counts(2, [5])]
    report = build_war_report(vectors, [hopeless()], iterations=4)
    d = json.loads(report.to_json())
    assert d["mode"] == "simulate"
    assert d["predictions"][0]["remaining_units_if_win"] is None
    assert "_blocks" not in d


def test_war_report_text_and_markdown():
    vectors = [AttackVector.from_counts(3, [2, 2]), AttackVector.from_counts(2, [5])]
    report = build_war_report(vectors, [winning(), hopeless()], iterations=4)
    text = report.to_text()
    assert text.index("'3:2,2'") < text.index("'2:5'")
    md = report.to_markdown()
    assert "| `2:5` | 0 | 4 | 0.00 | n/a |" in md


def test_plan_report_contents():
    report = build_plan_report(plan_result(), iterations=4, bonus_units=2, likelihood_threshold=0.5)
    assert report.to_text().startswith("Highest scoring setup is below\n")
    d = report.to_dict()
    assert d["mode"] == "plan"
    assert d["plan_count"] == 1
    assert [s["bonus"] for s in d["setups"]] == [2, 0]
    assert d["setups"][0]["score"] == 0.75
    assert "Recommended Allocation" in report.to_markdown()


def test_save_report_picks_format_from_suffix(tmp_path):
    report = build_plan_report(plan_result(), iterations=4, bonus_units=2, likelihood_threshold=0.5)
    js = tmp_path / "r.json"
    md = tmp_path / "r.md"
    txt = tmp_path / "r.txt"
    save_report(report, str(js))
    save_report(report, str(md))
    save_report(report, str(txt))
    assert json.loads(js.read_text(encoding="utf-8"))["total_score"] == 0.75
    assert md.read_text(encoding="utf-8").startswith("# WarPlan Allocation Report")
    assert txt.read_text(encoding="utf-8").startswith("Highest scoring setup")
