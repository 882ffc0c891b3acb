from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, Mapping, Optional
import os, json

import yaml

DEBUG_ENV_NAME = "DEBUG_WARPLAN"
DEFAULT_ENV_PREFIX = "WARPLAN__"


class ConfigError(ValueError):
    pass


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    # YAML first, JSON for the odd file YAML refuses (tabs)
    try:
        d = yaml.safe_load(text)
    except yaml.YAMLError:
        try:
            d = json.loads(text)
        except ValueError as exc:
            raise ConfigError(f"{path}: neither YAML nor JSON ({exc})") from exc
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(d).__name__}")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = DEFAULT_ENV_PREFIX, environ: Mapping[str, str] | None = None) -> Dict[str, Any]:
    # Nested via double underscores: WARPLAN__PLANNER__WORKERS=4
    out: Dict[str, Any] = {}
    env = os.environ if environ is None else environ
    for k, v in env.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    if t in ("none", "null"):
        return None
    try:
        if "." in t or "e" in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})

def debug_from_env(environ: Mapping[str, str] | None = None) -> bool:
    """Any value, even empty, switches the combat trace on."""
    env = os.environ if environ is None else environ
    return DEBUG_ENV_NAME in env


@dataclass
class WarPlanSettings:
    iterations: int = 1000
    seed: Optional[int] = None
    debug: bool = False
    bonus_units: int = 0
    likelihood_threshold: float = 0.0
    workers: int = 1
    deadline_seconds: Optional[float] = None
    max_vectors: int = 16
    max_territories: int = 128
    max_bonus_units: int = 256

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _optional(conv: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda v: None if v is None else conv(v)

def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("1", "true", "yes", "on")
    return bool(v)

_SECTIONS: Dict[str, Dict[str, Callable[[Any], Any]]] = {
    "simulation": {"iterations": int, "seed": _optional(int), "debug": _as_bool},
    "planner": {
        "bonus_units": int,
        "likelihood_threshold": float,
        "workers": int,
        "deadline_seconds": _optional(float),
    },
    "limits": {"max_vectors": int, "max_territories": int, "max_bonus_units": int},
}

def build_settings(cfg: Mapping[str, Any] | None, environ: Mapping[str, str] | None = None) -> WarPlanSettings:
    kwargs: Dict[str, Any] = {}
    for section, keys in _SECTIONS.items():
        block = (cfg or {}).get(section) or {}
        if not isinstance(block, dict):
            raise ConfigError(f"config section '{section}' must be a mapping")
        for key, conv in keys.items():
            if key not in block:
                continue
            try:
                kwargs[key] = conv(block[key])
            except (TypeError, ValueError) as exc:
                raise ConfigError(f"{section}.{key}: invalid value {block[key]!r}") from exc
    settings = WarPlanSettings(**kwargs)
    if debug_from_env(environ):
        settings.debug = True
    return settings

def load_settings(
    paths: Iterable[str] | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    overrides: Dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> WarPlanSettings:
    """Defaults, then config files, then environment, then ``overrides``."""
    cfg = load_configs(paths)
    cfg = apply_cli_overrides(cfg, env_overrides(env_prefix, environ))
    cfg = apply_cli_overrides(cfg, overrides or {})
    return build_settings(cfg, environ)

__all__ = [
    "ConfigError",
    "WarPlanSettings",
    "DEBUG_ENV_NAME",
    "DEFAULT_ENV_PREFIX",
    "load_configs",
    "env_overrides",
    "apply_cli_overrides",
    "build_settings",
    "load_settings",
    "debug_from_env",
    "_deep_merge",
]
