"""Engine configuration: defaults, YAML settings, and difficulty presets."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

import yaml

from ..ai.strategies import STRATEGIES
from ..errors import InvalidConfiguration

PROJECT_DIR = Path(__file__).resolve().parents[1]

DEFAULT_DIFFICULTIES = {
    "easy": {"strategy": "random", "depth": 1},
    "medium": {"strategy": "threats", "depth": 3},
    "hard": {"strategy": "minimax", "depth": 5},
    "expert": {"strategy": "minimax", "depth": 7},
}


def resolve_project_path(path: str | Path) -> Path:
    """Resolve a package-relative path when invoked from outside `Connect4_AI/`."""
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p
    candidate = PROJECT_DIR / p
    return candidate if candidate.exists() else p


def load_settings(path="config/settings.yaml"):
    path = resolve_project_path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(f"settings file {path} must contain a mapping")
    return data


@dataclass(frozen=True)
class EngineConfig:
    max_depth: int = 5
    time_budget: Optional[float] = 2.0
    node_budget: Optional[int] = None
    win_length: Optional[int] = None
    strategy: str = "minimax"
    use_transposition: bool = True
    fork_min_moves: int = 8
    seed: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: dict | None = None, **overrides) -> "EngineConfig":
        settings = settings or {}
        config = cls(
            max_depth=settings.get("search_depth", cls.max_depth),
            time_budget=settings.get("move_timeout_seconds", cls.time_budget),
            node_budget=settings.get("node_budget", cls.node_budget),
            win_length=settings.get("win_length", cls.win_length),
            strategy=settings.get("strategy", cls.strategy),
            use_transposition=settings.get("transposition", cls.use_transposition),
            fork_min_moves=settings.get("fork_min_moves", cls.fork_min_moves),
            seed=settings.get("seed", cls.seed),
        )
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(config, **overrides).validate()

    @classmethod
    def for_difficulty(cls, name: str, settings: dict | None = None, **overrides) -> "EngineConfig":
        settings = settings or {}
        presets = settings.get("difficulties") or DEFAULT_DIFFICULTIES
        preset = presets.get(name)
        if preset is None:
            raise InvalidConfiguration(f"unknown difficulty {name!r}; expected one of {sorted(presets)}")
        merged = dict(settings)
        merged["strategy"] = preset.get("strategy", cls.strategy)
        merged["search_depth"] = preset.get("depth", cls.max_depth)
        return cls.from_settings(merged, **overrides)

    def validate(self) -> "EngineConfig":
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth < 1:
            raise InvalidConfiguration(f"max_depth must be a positive integer, got {self.max_depth!r}")
        if self.time_budget is not None and (
            isinstance(self.time_budget, bool)
            or not isinstance(self.time_budget, (int, float))
            or self.time_budget <= 0
        ):
            raise InvalidConfiguration(f"time_budget must be positive seconds or None, got {self.time_budget!r}")
        if self.node_budget is not None and (
            isinstance(self.node_budget, bool) or not isinstance(self.node_budget, int) or self.node_budget < 1
        ):
            raise InvalidConfiguration(f"node_budget must be a positive integer or None, got {self.node_budget!r}")
        if self.win_length is not None and (
            isinstance(self.win_length, bool) or not isinstance(self.win_length, int) or self.win_length < 2
        ):
            raise InvalidConfiguration(f"win_length must be an integer >= 2, got {self.win_length!r}")
        if self.strategy not in STRATEGIES:
            raise InvalidConfiguration(f"unknown strategy {self.strategy!r}; expected one of {sorted(STRATEGIES)}")
        if not isinstance(self.fork_min_moves, int) or self.fork_min_moves < 0:
            raise InvalidConfiguration(f"fork_min_moves must be a non-negative integer, got {self.fork_min_moves!r}")
        return self
