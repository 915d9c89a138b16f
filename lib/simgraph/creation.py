"""
creation.py — similarity-graph construction.

create(neighborhood, oracle, X) visits every vertex j independently:

    neigh   = neighborhood.neighbors(j, X)
    weights = oracle(j, neigh, x_j, x_neigh)
    graph.connect(j, neigh, weights)

Vertices are processed on a thread pool. Each vertex writes only its own
out-edges, so the resulting graph does not depend on scheduling order.
Any failure aborts the build and propagates; no partial graph is returned.

create(RandomKGraph(n, k)) builds a dataset-free random graph instead.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from functools import singledispatch
from typing import Optional

import numpy as np

from .accessors import as_dataset
from .graph import WeightedGraph
from .neighborhoods import VertexNeighborhood
from .parallel import map_threads
from .rng import make_rng, random_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RandomKGraph:
    """
    Every vertex makes k connection attempts to uniformly drawn other
    vertices, each with a uniform weight in [0, 1). Repeated partners are
    not merged, so a vertex can hold several edges to the same target.
    """

    number_of_vertices: int
    k: int
    seed: Optional[int] = None

    def __post_init__(self):
        if self.number_of_vertices < 0 or self.k < 0:
            raise ValueError("number_of_vertices and k must be non-negative")
        if self.k > 0 and self.number_of_vertices < 2:
            raise ValueError("a random k-graph with k > 0 needs at least 2 vertices")


@singledispatch
def create(neighborhood, oracle=None, X=None, **kwargs) -> WeightedGraph:
    raise TypeError(f"cannot create a graph from {type(neighborhood).__name__}")


@create.register(VertexNeighborhood)
def _create_similarity(
    neighborhood: VertexNeighborhood,
    oracle,
    X,
    *,
    weight_type=np.float64,
    max_workers: int | None = None,
    progress: bool = False,
) -> WeightedGraph:
    ds = as_dataset(X)
    n = ds.number_of_patterns()
    g = WeightedGraph(n, weight_type=weight_type)
    t0 = time.perf_counter()

    def _vertex(j: int) -> None:
        neigh = np.asarray(neighborhood.neighbors(j, ds), dtype=np.intp)
        x_j = ds.get_element(j)
        x_neigh = ds.get_element(neigh)
        weights = np.atleast_1d(np.asarray(oracle(j, neigh, x_j, x_neigh)))
        if weights.size != neigh.size:
            raise ValueError(
                f"oracle returned {weights.size} weights for {neigh.size} neighbours of vertex {j}"
            )
        g.connect(j, neigh, weights)

    map_threads(_vertex, range(n), max_workers=max_workers, desc="graph", progress=progress)
    logger.info(
        "built %s graph: %d vertices, %d edges in %.3fs",
        type(neighborhood).__name__, n, g.number_of_edges, time.perf_counter() - t0,
    )
    return g


@create.register(RandomKGraph)
def _create_random_k(cfg: RandomKGraph, oracle=None, X=None, *, weight_type=np.float64, rng=None) -> WeightedGraph:
    rng = make_rng(rng if rng is not None else cfg.seed)
    n = cfg.number_of_vertices
    g = WeightedGraph(n, weight_type=weight_type)
    for i in range(n):
        cant = 0
        while cant < cfg.k:
            selected = random_index(rng, n, skip=i)
            g.connect(i, selected, rng.random())
            cant += 1
    logger.info("built random k-graph: %d vertices, k=%d, %d edges", n, cfg.k, g.number_of_edges)
    return g
