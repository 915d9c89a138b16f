# lib/simgraph/graph.py
from __future__ import annotations

import threading
from typing import Iterable, List, Tuple

import networkx as nx
import numpy as np
import scipy.sparse as sp


class WeightedGraph:
    """
    Directed weighted graph with a fixed vertex set 0..n-1.

    Edges are stored in a networkx MultiDiGraph, so repeated connections
    between the same pair and self-loops are all kept. connect() inserts a
    whole neighbour row in one call and is safe to call from several
    threads at once.
    """

    def __init__(self, number_of_vertices: int, weight_type=np.float64):
        if number_of_vertices < 0:
            raise ValueError("number_of_vertices must be non-negative")
        self.weight_type = np.dtype(weight_type)
        self._G = nx.MultiDiGraph()
        self._G.add_nodes_from(range(number_of_vertices))
        self._n = int(number_of_vertices)
        self._lock = threading.Lock()

    @property
    def nx_graph(self) -> nx.MultiDiGraph:
        return self._G

    @property
    def number_of_vertices(self) -> int:
        return self._n

    @property
    def number_of_edges(self) -> int:
        return self._G.number_of_edges()

    def _check_vertex(self, v: int) -> None:
        if not 0 <= v < self._n:
            raise ValueError(f"vertex {v} out of range [0, {self._n})")

    def connect(self, source: int, targets, weights) -> None:
        source = int(source)
        targets = np.atleast_1d(np.asarray(targets, dtype=np.intp))
        weights = np.atleast_1d(np.asarray(weights, dtype=self.weight_type)).ravel()
        if targets.ndim != 1 or targets.shape[0] != weights.shape[0]:
            raise ValueError(
                f"vertex {source}: {targets.size} targets but {weights.size} weights"
            )
        self._check_vertex(source)
        for t in targets:
            self._check_vertex(int(t))
        edges = [(source, int(t), w) for t, w in zip(targets, weights.tolist())]
        with self._lock:
            self._G.add_weighted_edges_from(edges)

    def out_edges(self, v: int) -> List[Tuple[int, float]]:
        self._check_vertex(v)
        return [(t, w) for _, t, w in self._G.out_edges(v, data="weight")]

    def out_degree(self, v: int) -> int:
        self._check_vertex(v)
        return self._G.out_degree(v)

    def edges(self) -> List[Tuple[int, int, float]]:
        """All edges as sorted (source, target, weight) triples."""
        return sorted(self._G.edges(data="weight"))

    def adjacency_matrix(self) -> sp.csr_array:
        """n x n CSR matrix; parallel edges are summed."""
        rows, cols, vals = [], [], []
        for u, v, w in self._G.edges(data="weight"):
            rows.append(u)
            cols.append(v)
            vals.append(w)
        A = sp.coo_array(
            (np.asarray(vals, dtype=self.weight_type), (np.asarray(rows, dtype=np.intp), np.asarray(cols, dtype=np.intp))),
            shape=(self._n, self._n),
        )
        return A.tocsr()

    def __iter__(self) -> Iterable[int]:
        return iter(range(self._n))

    def __len__(self) -> int:
        return self._n

    def __repr__(self) -> str:
        return (
            f"WeightedGraph(vertices={self._n}, edges={self.number_of_edges}, "
            f"weight_type={self.weight_type.name})"
        )
