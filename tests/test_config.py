from pathlib import Path

import pytest

from simgraph import ConfigError, GraphConfig, load_config
from simgraph.config import find_defaults_yaml

REPO_DEFAULTS = Path(__file__).resolve().parents[1] / "config" / "defaults.yaml"


def _write(p: Path, text: str) -> Path:
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def test_repo_defaults_load():
    cfg = load_config(REPO_DEFAULTS)
    assert cfg.neighborhood == "knn"
    assert cfg.k == 7
    assert cfg.scale_k == 7
    assert cfg.kernel == "self_tuning"


def test_find_defaults_walks_upward(tmp_path):
    target = _write(tmp_path / "config" / "defaults.yaml", "graph:\n  k: 3\n")
    deep = tmp_path / "a" / "b" / "c"
    deep.mkdir(parents=True)
    assert find_defaults_yaml(deep) == target.resolve()
    cfg = load_config(search_from=deep)
    assert cfg.k == 3


def test_missing_defaults_fall_back_to_dataclass(tmp_path):
    cfg = load_config(search_from=tmp_path)
    assert cfg == GraphConfig()


def test_overrides_ignore_none(tmp_path):
    p = _write(tmp_path / "c.yaml", "graph:\n  neighborhood: clique\n  k: 4\n")
    cfg = load_config(p, {"k": 9, "seed": None, "sigma": 0.5})
    assert cfg.neighborhood == "clique"
    assert cfg.k == 9
    assert cfg.sigma == 0.5
    assert cfg.seed is None


def test_flat_layout_accepted(tmp_path):
    p = _write(tmp_path / "c.yaml", "neighborhood: random\nseed: 5\n")
    cfg = load_config(p)
    assert (cfg.neighborhood, cfg.seed) == ("random", 5)


@pytest.mark.parametrize(
    "text",
    [
        "graph:\n  bogus: 1\n",
        "graph:\n  neighborhood: star\n",
        "graph:\n  k: 0\n",
        "affinity:\n  kernel: laplace\n",
        "- just\n- a list\n",
        "graph: [1, 2]\n",
        "graph: {k: 3\n",
        "graph:\n  k: \"7\"\n",
        "graph:\n  k: true\n",
        "graph:\n  seed: 1.5\n",
        "affinity:\n  sigma: wide\n",
    ],
)
def test_bad_config(tmp_path, text):
    p = _write(tmp_path / "bad.yaml", text)
    with pytest.raises(ConfigError):
        load_config(p)


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")
