"""
scale.py — per-pattern local scale for self-tuning affinities.

Zelnik-Manor & Perona, "Self-Tuning Spectral Clustering" (NIPS 2004):
sigma_i = d(s_i, s_K), the distance from pattern i to its K-th neighbour,
with K = 7 as the recommended default.

The oracle handed in here must produce distances, in either form:
  - "distance": oracle(x_j, x_neigh)
  - "full":     oracle(j, neigh, x_j, x_neigh)
Pass kind= to say which. Without it the form is read from the oracle's
signature and, if that is not inspectable, found by trying the distance
form on patterns 0 and 1 first and falling back to the full form.
"""

from __future__ import annotations

import inspect
import logging
from typing import Callable, Optional

import numpy as np

from .accessors import as_dataset
from .errors import CallingConventionError, InsufficientDataError
from .neighborhoods import VertexNeighborhood
from .parallel import map_threads

logger = logging.getLogger(__name__)

DISTANCE = "distance"
FULL = "full"
_ARITY_KIND = {2: DISTANCE, 4: FULL}


def _required_positional(fn) -> Optional[int]:
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    required = 0
    for p in sig.parameters.values():
        if p.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD) \
                and p.default is inspect.Parameter.empty:
            required += 1
    return required


def _probe(oracle, ds) -> str:
    if ds.number_of_patterns() < 2:
        raise InsufficientDataError("need at least 2 patterns to probe the oracle")
    x_1 = ds.get_element(0)
    x_12 = ds.get_element(np.array([0, 1], dtype=np.intp))
    try:
        oracle(x_1, x_12)
        return DISTANCE
    except Exception as e:
        logger.debug("distance-form probe failed (%s); trying full form", e)
    try:
        oracle(0, np.array([0], dtype=np.intp), x_1, x_12)
    except Exception as e:
        raise CallingConventionError(
            "oracle accepts neither (x_j, x_neigh) nor (j, neigh, x_j, x_neigh)"
        ) from e
    return FULL


def resolve_oracle_kind(oracle, X, kind: Optional[str] = None) -> str:
    if kind is not None:
        if kind not in (DISTANCE, FULL):
            raise ValueError(f"kind must be {DISTANCE!r} or {FULL!r}, got {kind!r}")
        return kind
    arity = _required_positional(oracle)
    if arity in _ARITY_KIND:
        return _ARITY_KIND[arity]
    return _probe(oracle, as_dataset(X))


def distance_function(oracle, X, kind: Optional[str] = None) -> Callable:
    """Return oracle adapted to the full (j, neigh, x_j, x_neigh) form."""
    if resolve_oracle_kind(oracle, X, kind) == DISTANCE:
        return lambda j, neigh, x_j, x_neigh: oracle(x_j, x_neigh)
    return oracle


def local_scale(
    neighborhood: VertexNeighborhood,
    oracle,
    X,
    *,
    k: int = 7,
    sort_dim: int = 0,
    kind: Optional[str] = None,
    max_workers: int | None = None,
) -> np.ndarray:
    """
    Distance from every pattern to its k-th nearest neighbour.

    Returns an (r, n) array: column j holds the scale of pattern j, r is 1
    for a 1-D distance vector, or the column count of a 2-D distance output.
    Raises InsufficientDataError when a neighbour set has fewer than k entries.
    """
    if k < 1:
        raise ValueError("k must be >= 1")
    ds = as_dataset(X)
    dist = distance_function(oracle, ds, kind)
    n = ds.number_of_patterns()

    def _scale(j: int) -> np.ndarray:
        neigh = np.asarray(neighborhood.neighbors(j, ds), dtype=np.intp)
        d = np.atleast_1d(np.asarray(dist(j, neigh, ds.get_element(j), ds.get_element(neigh))))
        d = np.sort(d, axis=sort_dim if d.ndim > 1 else -1)
        try:
            return np.atleast_1d(d[k - 1])
        except IndexError as e:
            raise InsufficientDataError(
                f"vertex {j} has {d.shape[0]} neighbours, cannot take the k={k}-th"
            ) from e

    columns = map_threads(_scale, range(n), max_workers=max_workers, desc="local_scale")
    if not columns:
        return np.zeros((1, 0))
    return np.column_stack(columns).astype(np.float64)
