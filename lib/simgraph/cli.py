# lib/simgraph/cli.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np
import scipy.sparse as sp

from .accessors import FeatureMatrix, PixelGrid
from .config import GraphConfig, load_config
from .creation import create
from .errors import SimGraphError
from .neighborhoods import (
    CliqueNeighborhood,
    KNNNeighborhood,
    PixelNeighborhood,
    RandomNeighborhood,
)
from .scale import local_scale
from .weights import euclidean, gaussian, self_tuning

logger = logging.getLogger("simgraph")


def parse_args(argv=None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        prog="simgraph",
        description="Build a similarity graph from a feature matrix (.npy or .csv).",
    )
    ap.add_argument("data", type=Path, help="patterns, one per row (.npy/.csv); for --neighborhood pixel an image array (.npy)")
    ap.add_argument("--config", type=Path, default=None, help="YAML config (default: nearest config/defaults.yaml)")
    ap.add_argument("--neighborhood", choices=["knn", "clique", "random", "pixel"], default=None)
    ap.add_argument("--k", type=int, default=None)
    ap.add_argument("--radius", type=int, default=None)
    ap.add_argument("--kernel", choices=["self_tuning", "gaussian"], default=None)
    ap.add_argument("--scale-k", dest="scale_k", type=int, default=None)
    ap.add_argument("--sigma", type=float, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--workers", dest="max_workers", type=int, default=None)
    ap.add_argument("--out", type=Path, default=None, help="save the adjacency matrix as .npz")
    ap.add_argument("--progress", action="store_true")
    ap.add_argument("-v", "--verbose", action="count", default=0)
    return ap.parse_args(argv)


def load_data(p: Path) -> np.ndarray:
    if not p.exists():
        raise SimGraphError(f"data file not found: {p}")
    if p.suffix == ".npy":
        return np.load(p)
    if p.suffix == ".csv":
        return np.loadtxt(p, delimiter=",", ndmin=2)
    raise SimGraphError(f"unsupported data format {p.suffix!r} (expected .npy or .csv)")


def make_neighborhood(cfg: GraphConfig, X):
    if cfg.neighborhood == "knn":
        return KNNNeighborhood.from_data(X, cfg.k)
    if cfg.neighborhood == "clique":
        return CliqueNeighborhood()
    if cfg.neighborhood == "random":
        return RandomNeighborhood(cfg.k, rng=cfg.seed)
    return PixelNeighborhood(cfg.radius)


def smallest_neighbourhood(cfg: GraphConfig, X) -> int:
    """Fewest neighbours any vertex gets under cfg (a corner pixel for grids)."""
    n = X.number_of_patterns()
    if cfg.neighborhood == "pixel":
        rows, cols = X.shape
        return min(cfg.radius + 1, rows) * min(cfg.radius + 1, cols)
    if cfg.neighborhood == "clique":
        return n - 1
    return min(cfg.k, n - 1)


def make_oracle(cfg: GraphConfig, neighborhood, X):
    if cfg.kernel == "gaussian":
        return gaussian(cfg.sigma)
    scale_k = min(cfg.scale_k, smallest_neighbourhood(cfg, X))
    if scale_k < 1:
        raise SimGraphError("self_tuning kernel needs at least one neighbour per vertex")
    if scale_k < cfg.scale_k:
        logger.warning("scale_k=%d exceeds the smallest neighbourhood; using %d", cfg.scale_k, scale_k)
    scales = local_scale(neighborhood, euclidean, X, k=scale_k, kind="distance", max_workers=cfg.max_workers)
    return self_tuning(scales)


def run(cfg: GraphConfig, data: np.ndarray, progress: bool = False):
    X = PixelGrid(data) if cfg.neighborhood == "pixel" else FeatureMatrix(data)
    neighborhood = make_neighborhood(cfg, X)
    oracle = make_oracle(cfg, neighborhood, X)
    g = create(neighborhood, oracle, X, max_workers=cfg.max_workers, progress=progress)
    w = np.array([wt for _, _, wt in g.edges()], dtype=np.float64)
    summary = {
        "vertices": g.number_of_vertices,
        "edges": g.number_of_edges,
        "mean_out_degree": (g.number_of_edges / g.number_of_vertices) if g.number_of_vertices else 0.0,
        "weight_min": float(w.min()) if w.size else None,
        "weight_max": float(w.max()) if w.size else None,
        "config": cfg.to_dict(),
    }
    return g, summary


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.WARNING - 10 * min(args.verbose, 2),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    overrides = {k: getattr(args, k) for k in
                 ("neighborhood", "k", "radius", "kernel", "scale_k", "sigma", "seed", "max_workers")}
    try:
        cfg = load_config(args.config, overrides)
        g, summary = run(cfg, load_data(args.data), progress=args.progress)
    except SimGraphError as e:
        logger.error("%s", e)
        return 2
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        sp.save_npz(args.out, sp.csr_matrix(g.adjacency_matrix()))
        summary["adjacency"] = args.out.as_posix()
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
