import json

import pytest

from warplan.config import (
    ConfigError,
    WarPlanSettings,
    _deep_merge,
    build_settings,
    debug_from_env,
    env_overrides,
    load_configs,
    load_settings,
)

def test_deep_merge_simple():
    a = {"planner": {"workers": 1, "bonus_units": 3}, "limits": {"max_vectors": 16}}
    b = {"planner": {"workers": 4}, "limits": {"max_territories": 64}}
    c = _deep_merge(a, b)
    assert c["planner"]["bonus_units"] == 3 and c["planner"]["workers"] == 4
    assert c["limits"]["max_vectors"] == 16 and c["limits"]["max_territories"] == 64

def test_env_overrides_parsing(monkeypatch):
    monkeypatch.setenv("WARPLAN__PLANNER__WORKERS", "4")
    monkeypatch.setenv("WARPLAN__PLANNER__LIKELIHOOD_THRESHOLD", "0.75")
    monkeypatch.setenv("WARPLAN__SIMULATION__DEBUG", "true")
    d = env_overrides()
    assert d["planner"]["workers"] == 4
    assert d["planner"]["likelihood_threshold"] == 0.75
    assert d["simulation"]["debug"] is True

def test_load_yaml_and_json_files_merge_in_order(tmp_path):
    y = tmp_path / "base.yaml"
    y.write_text("simulation:\n  iterations: 500\nplanner:\n  workers: 2\n", encoding="utf-8")
    j = tmp_path / "override.json"
    j.write_text(json.dumps({"planner": {"workers": 3}}), encoding="utf-8")
    cfg = load_configs([str(y), str(j)])
    assert cfg == {"simulation": {"iterations": 500}, "planner": {"workers": 3}}

def test_empty_file_is_an_empty_config(tmp_path):
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    assert load_configs([str(p)]) == {}

def test_non_mapping_file_is_rejected(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_configs([str(p)])

def test_build_settings_defaults():
    s = build_settings({}, environ={})
    assert s == WarPlanSettings()
    assert s.max_vectors == 16 and s.max_territories == 128
    assert s.max_bonus_units == 256

def test_build_settings_coerces_section_values():
    s = build_settings(
        {
            "simulation": {"iterations": "250", "seed": "9"},
            "planner": {"likelihood_threshold": "0.8", "deadline_seconds": 30},
            "limits": {"max_vectors": 4},
        },
        environ={},
    )
    assert s.iterations == 250 and s.seed == 9
    assert s.likelihood_threshold == 0.8 and s.deadline_seconds == 30.0
    assert s.max_vectors == 4

def test_invalid_values_raise_config_error():
    with pytest.raises(ConfigError):
        build_settings({"simulation": {"iterations": "lots"}}, environ={})

def test_debug_env_toggle_needs_only_presence():
    assert debug_from_env({"DEBUG_WARPLAN": ""})
    assert not debug_from_env({})
    assert build_settings({}, environ={"DEBUG_WARPLAN": "1"}).debug is True

def test_load_settings_layers_files_env_and_overrides(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("planner:\n  workers: 2\n  bonus_units: 5\n", encoding="utf-8")
    env = {"WARPLAN__PLANNER__WORKERS": "6"}
    s = load_settings([str(p)], overrides={"planner": {"bonus_units": 1}}, environ=env)
    assert s.workers == 6
    assert s.bonus_units == 1
