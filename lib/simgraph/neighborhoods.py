"""
neighborhoods.py — who counts as a neighbour of vertex j.

Every strategy implements neighbors(j, X) and returns an int array of
pattern indices. Strategies are built once and then only read, so one
instance can be queried from many threads.

  - PixelNeighborhood(e):  square window of half-width e on a PixelGrid,
                           clamped to the image; includes j itself
  - CliqueNeighborhood():  every other vertex
  - KNNNeighborhood:       k nearest patterns through a cKDTree
  - RandomNeighborhood(k): k distinct random vertices other than j
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np
from scipy.spatial import cKDTree

from .accessors import PixelGrid, as_dataset
from .errors import InsufficientDataError, InvalidGeometryError
from .rng import child_rng, seed_sequence

logger = logging.getLogger(__name__)


class VertexNeighborhood(ABC):
    @abstractmethod
    def neighbors(self, j: int, X) -> np.ndarray:
        """Return the neighbour indices of vertex j in dataset X."""


def neighbors(neighborhood: VertexNeighborhood, j: int, X) -> np.ndarray:
    return neighborhood.neighbors(j, X)


@dataclass(frozen=True)
class PixelNeighborhood(VertexNeighborhood):
    e: int

    def __post_init__(self):
        if self.e < 0:
            raise ValueError("radius e must be >= 0")

    def neighbors(self, j: int, X) -> np.ndarray:
        if not isinstance(X, PixelGrid):
            raise InvalidGeometryError(
                f"PixelNeighborhood needs a PixelGrid dataset, got {type(X).__name__}"
            )
        rows, cols = X.shape
        r, c = np.unravel_index(int(j), (rows, cols))
        w_r = np.arange(max(r - self.e, 0), min(r + self.e, rows - 1) + 1)
        w_c = np.arange(max(c - self.e, 0), min(c + self.e, cols - 1) + 1)
        rr, cc = np.meshgrid(w_r, w_c, indexing="ij")
        return np.ravel_multi_index((rr.ravel(), cc.ravel()), (rows, cols)).astype(np.intp)


@dataclass(frozen=True)
class CliqueNeighborhood(VertexNeighborhood):
    def neighbors(self, j: int, X) -> np.ndarray:
        n = as_dataset(X).number_of_patterns()
        idx = np.arange(n, dtype=np.intp)
        return idx[idx != j]


def _identity(x):
    return x


@dataclass(frozen=True, eq=False)
class KNNNeighborhood(VertexNeighborhood):
    """
    k nearest neighbours under the Euclidean metric of a cKDTree built
    over transform(pattern) for every pattern. Use from_data() to build it.
    """

    k: int
    tree: cKDTree = field(repr=False)
    transform: Callable = _identity

    def __post_init__(self):
        if self.k < 1:
            raise ValueError("k must be >= 1")

    @classmethod
    def from_data(cls, X, k: int, transform: Optional[Callable] = None) -> "KNNNeighborhood":
        ds = as_dataset(X)
        t = transform or _identity
        n = ds.number_of_patterns()
        if n == 0:
            raise InsufficientDataError("cannot build a KNN index over an empty dataset")
        points = np.vstack([np.atleast_1d(np.asarray(t(ds.get_element(j)), dtype=np.float64)).ravel() for j in range(n)])
        logger.debug("KNN index: %d points, dim=%d, k=%d", n, points.shape[1], k)
        return cls(k=k, tree=cKDTree(points), transform=t)

    def _nearest(self, point, count: int):
        q = np.atleast_1d(np.asarray(self.transform(point), dtype=np.float64)).ravel()
        count = min(count, self.tree.n)
        dists, _ = self.tree.query(q, k=count)
        radius = float(np.atleast_1d(dists)[-1])
        # re-collect everything at the cut-off distance so ties go to the lower index
        cand = np.asarray(self.tree.query_ball_point(q, radius * (1 + 1e-9) + 1e-12), dtype=np.intp)
        d = np.linalg.norm(self.tree.data[cand] - q, axis=1)
        order = np.lexsort((cand, d))
        return cand[order][:count]

    def neighbors(self, j: int, X) -> np.ndarray:
        ds = as_dataset(X)
        idxs = self._nearest(ds.get_element(int(j)), self.k + 1)
        hit = idxs == j
        if hit.any():
            return idxs[~hit][: self.k]
        return idxs[: self.k]

    def query(self, point) -> np.ndarray:
        """k nearest patterns to an arbitrary point, skipping the closest hit."""
        return self._nearest(point, self.k + 1)[1 : self.k + 1]


@dataclass(frozen=True, eq=False)
class RandomNeighborhood(VertexNeighborhood):
    """
    k distinct random vertices other than j. Vertex j always draws from its
    own child stream of the seed, so a seeded strategy gives the same
    neighbours however the vertices are scheduled across threads.
    """

    k: int
    rng: int | np.random.Generator | np.random.SeedSequence | None = field(default=None, repr=False)
    _seq: np.random.SeedSequence = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if self.k < 1:
            raise ValueError("k must be >= 1")
        object.__setattr__(self, "_seq", seed_sequence(self.rng))

    def neighbors(self, j: int, X) -> np.ndarray:
        n = as_dataset(X).number_of_patterns()
        if self.k > n - 1:
            raise InsufficientDataError(
                f"RandomNeighborhood: k={self.k} but only {n - 1} other vertices"
            )
        rng = child_rng(self._seq, j)
        samples = rng.choice(n, size=self.k, replace=False)
        samples = samples[samples != j]
        if samples.size < self.k:
            # j was drawn: refill with one index that is not already present
            while True:
                s = int(rng.integers(0, n))
                if s != j and s not in samples:
                    samples = np.append(samples, s)
                    break
        return samples.astype(np.intp)
