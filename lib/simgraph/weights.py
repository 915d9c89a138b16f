# lib/simgraph/weights.py
"""
Stock oracles.

A full oracle is called as oracle(j, neigh, x_j, x_neigh) and returns one
weight per entry of neigh, in the same order. A distance-style oracle
only takes the feature payloads: oracle(x_j, x_neigh).
"""
from __future__ import annotations

import numpy as np

from .accessors import as_dataset


def weight(oracle, i: int, j: int, X):
    """Evaluate the oracle on the single pair (i, j)."""
    ds = as_dataset(X)
    x_i = ds.get_element(i)
    x_j = ds.get_element(j)
    return oracle(i, j, x_i, x_j)


def _count(neigh_data) -> int:
    m = np.asarray(neigh_data)
    return m.shape[0] if m.ndim >= 2 else 1


def constant(value: float):
    """Oracle returning `value` for every neighbour."""
    def _constant(i, neigh, x_i, x_neigh):
        return np.ones(_count(x_neigh)) * value
    return _constant


def ones(i, neigh, x_i, x_neigh):
    return np.ones(_count(x_neigh))


def euclidean(x_i, x_neigh) -> np.ndarray:
    """Distance from x_i to each row of x_neigh."""
    x_i = np.atleast_1d(np.asarray(x_i, dtype=np.float64)).ravel()
    m = np.asarray(x_neigh, dtype=np.float64).reshape(-1, x_i.shape[0])
    return np.linalg.norm(m - x_i, axis=1)


def gaussian(sigma: float):
    """exp(-d^2 / (2 sigma^2)) on Euclidean distance."""
    if sigma <= 0:
        raise ValueError("sigma must be positive")
    two_s2 = 2.0 * sigma * sigma

    def _gaussian(i, neigh, x_i, x_neigh):
        d = euclidean(x_i, x_neigh)
        return np.exp(-(d * d) / two_s2)
    return _gaussian


def self_tuning(scales):
    """
    Zelnik-Manor & Perona affinity exp(-d^2 / (s_i s_j)) where s is one
    local scale per pattern (first row of local_scale() output).
    """
    s = np.asarray(scales, dtype=np.float64)
    if s.ndim == 2:
        s = s[0]
    s = np.where(s > 0, s, np.finfo(np.float64).eps)

    def _self_tuning(i, neigh, x_i, x_neigh):
        d = euclidean(x_i, x_neigh)
        return np.exp(-(d * d) / (s[i] * s[np.asarray(neigh, dtype=np.intp)]))
    return _self_tuning
