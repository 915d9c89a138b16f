# lib/simgraph/__init__.py
"""Similarity-graph construction for spectral clustering."""
from __future__ import annotations

from .accessors import (
    Dataset,
    FeatureMatrix,
    PatternList,
    PixelGrid,
    as_dataset,
    get_element,
    number_of_patterns,
)
from .config import GraphConfig, load_config
from .creation import RandomKGraph, create
from .errors import (
    CallingConventionError,
    ConfigError,
    InsufficientDataError,
    InvalidGeometryError,
    SimGraphError,
)
from .graph import WeightedGraph
from .neighborhoods import (
    CliqueNeighborhood,
    KNNNeighborhood,
    PixelNeighborhood,
    RandomNeighborhood,
    VertexNeighborhood,
    neighbors,
)
from .scale import local_scale
from .weights import constant, euclidean, gaussian, ones, self_tuning, weight

__version__ = "0.1.0"

__all__ = [
    "Dataset", "FeatureMatrix", "PatternList", "PixelGrid",
    "as_dataset", "get_element", "number_of_patterns",
    "GraphConfig", "load_config",
    "RandomKGraph", "create",
    "SimGraphError", "InsufficientDataError", "InvalidGeometryError",
    "CallingConventionError", "ConfigError",
    "WeightedGraph",
    "VertexNeighborhood", "PixelNeighborhood", "CliqueNeighborhood",
    "KNNNeighborhood", "RandomNeighborhood", "neighbors",
    "local_scale",
    "weight", "constant", "ones", "euclidean", "gaussian", "self_tuning",
]
