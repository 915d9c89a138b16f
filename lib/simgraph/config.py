# lib/simgraph/config.py
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .errors import ConfigError

NEIGHBORHOODS = ("knn", "clique", "random", "pixel")
KERNELS = ("self_tuning", "gaussian")


def _expect(name: str, value: Any, types) -> None:
    # bool is an int subclass; "k: yes" in YAML must not pass as 1
    if isinstance(value, bool) or not isinstance(value, types):
        raise ConfigError(f"{name} has the wrong type: {value!r}")


@dataclass(frozen=True)
class GraphConfig:
    neighborhood: str = "knn"
    k: int = 7
    radius: int = 1
    max_workers: Optional[int] = None
    seed: Optional[int] = None
    kernel: str = "self_tuning"
    scale_k: int = 7
    sigma: float = 1.0

    def __post_init__(self):
        for name in ("k", "radius", "scale_k"):
            _expect(name, getattr(self, name), int)
        for name in ("max_workers", "seed"):
            if getattr(self, name) is not None:
                _expect(name, getattr(self, name), int)
        _expect("sigma", self.sigma, (int, float))
        _expect("neighborhood", self.neighborhood, str)
        _expect("kernel", self.kernel, str)
        if self.neighborhood not in NEIGHBORHOODS:
            raise ConfigError(f"neighborhood must be one of {NEIGHBORHOODS}, got {self.neighborhood!r}")
        if self.kernel not in KERNELS:
            raise ConfigError(f"kernel must be one of {KERNELS}, got {self.kernel!r}")
        if self.k < 1 or self.scale_k < 1:
            raise ConfigError("k and scale_k must be >= 1")
        if self.radius < 0:
            raise ConfigError("radius must be >= 0")
        if self.sigma <= 0:
            raise ConfigError("sigma must be positive")

    def to_dict(self) -> dict:
        return asdict(self)


def find_defaults_yaml(start: Path) -> Optional[Path]:
    """
    Walk upward from 'start' to locate <root>/config/defaults.yaml.
    Stop at filesystem root if not found.
    """
    cur = Path(start).resolve()
    for _ in range(12):
        candidate = cur / "config" / "defaults.yaml"
        if candidate.exists():
            return candidate
        nxt = cur.parent
        if nxt == cur:
            break
        cur = nxt
    return None


def load_yaml(p: Path) -> dict:
    try:
        raw = yaml.safe_load(Path(p).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config at {p} must be a mapping/dict.")
    return raw


def _flatten(raw: Mapping[str, Any]) -> dict:
    # accepts both the sectioned file layout and flat overrides
    flat: dict = {}
    for key, value in raw.items():
        if key in ("graph", "affinity"):
            if not isinstance(value, dict):
                raise ConfigError(f"section {key!r} must be a mapping")
            flat.update(value)
        else:
            flat[key] = value
    known = {f.name for f in fields(GraphConfig)}
    unknown = sorted(set(flat) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")
    return flat


def load_config(
    path: Path | str | None = None,
    overrides: Mapping[str, Any] | None = None,
    *,
    search_from: Path | str | None = None,
) -> GraphConfig:
    """
    Build a GraphConfig from an explicit YAML file, or from the first
    config/defaults.yaml found above 'search_from' (cwd by default), then
    apply overrides whose value is not None.
    """
    if path is not None:
        p = Path(path)
        if not p.exists():
            raise ConfigError(f"config file not found: {p}")
        cfg = GraphConfig(**_flatten(load_yaml(p)))
    else:
        found = find_defaults_yaml(Path(search_from) if search_from else Path.cwd())
        cfg = GraphConfig(**_flatten(load_yaml(found))) if found else GraphConfig()
    if overrides:
        cfg = replace(cfg, **_flatten({k: v for k, v in overrides.items() if v is not None}))
    return cfg
