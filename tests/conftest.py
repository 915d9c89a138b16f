from __future__ import annotations

import numpy as np
import pytest

from simgraph import FeatureMatrix, PixelGrid


def inverse_distance(j, neigh, x_j, x_neigh):
    d = np.linalg.norm(np.asarray(x_neigh, dtype=float) - np.asarray(x_j, dtype=float), axis=1)
    return 1.0 / d


@pytest.fixture
def line_points():
    # 0, 1, 2, 3 and an outlier at 10
    return FeatureMatrix(np.array([[0.0], [1.0], [2.0], [3.0], [10.0]]))


@pytest.fixture
def blobs():
    rng = np.random.default_rng(7)
    a = rng.normal(0.0, 0.3, size=(20, 2))
    b = rng.normal(5.0, 0.3, size=(20, 2))
    return FeatureMatrix(np.vstack([a, b]))


@pytest.fixture
def grid3():
    return PixelGrid(np.arange(9, dtype=float).reshape(3, 3))


@pytest.fixture
def oracle_inverse_distance():
    return inverse_distance
