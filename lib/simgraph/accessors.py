"""
accessors.py — uniform read access to the patterns of a dataset.

Three concrete shapes are supported:
  - FeatureMatrix: (n_patterns, n_features) array, one row per pattern
  - PixelGrid:     (rows, cols) or (rows, cols, channels) image, pixels
                   numbered in row-major order
  - PatternList:   any indexable collection of equally shaped items

Graph construction only ever calls number_of_patterns() and get_element().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np


@runtime_checkable
class Dataset(Protocol):
    def number_of_patterns(self) -> int: ...

    def get_element(self, index) -> np.ndarray: ...


def _as_index(index):
    if np.isscalar(index):
        return int(index)
    return np.asarray(index, dtype=np.intp)


@dataclass(frozen=True, eq=False)
class FeatureMatrix:
    data: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.data)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise ValueError(f"FeatureMatrix needs a 2-D array, got shape {arr.shape}")
        object.__setattr__(self, "data", arr)

    def number_of_patterns(self) -> int:
        return self.data.shape[0]

    def get_element(self, index) -> np.ndarray:
        return self.data[_as_index(index)]


@dataclass(frozen=True, eq=False)
class PixelGrid:
    image: np.ndarray
    _flat: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        img = np.asarray(self.image)
        if img.ndim not in (2, 3):
            raise ValueError(f"PixelGrid needs a (rows, cols[, channels]) array, got shape {img.shape}")
        object.__setattr__(self, "image", img)
        object.__setattr__(self, "_flat", img.reshape(img.shape[0] * img.shape[1], -1))

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.image.shape[0], self.image.shape[1])

    def number_of_patterns(self) -> int:
        rows, cols = self.shape
        return rows * cols

    def get_element(self, index) -> np.ndarray:
        return self._flat[_as_index(index)]


@dataclass(frozen=True, eq=False)
class PatternList:
    items: Sequence[Any]

    def number_of_patterns(self) -> int:
        return len(self.items)

    def get_element(self, index) -> np.ndarray:
        idx = _as_index(index)
        if isinstance(idx, int):
            return np.atleast_1d(np.asarray(self.items[idx]))
        if len(idx) == 0:
            item_shape = np.atleast_1d(np.asarray(self.items[0])).shape if len(self.items) else (0,)
            return np.empty((0,) + item_shape)
        return np.stack([np.atleast_1d(np.asarray(self.items[int(i)])) for i in idx])


def as_dataset(X) -> Dataset:
    """Wrap raw input into one of the accessors; datasets pass through."""
    if isinstance(X, Dataset):
        return X
    if isinstance(X, np.ndarray):
        if X.ndim in (1, 2):
            return FeatureMatrix(X)
        raise TypeError(f"cannot infer a dataset from an array of shape {X.shape}; wrap it in PixelGrid")
    if isinstance(X, (list, tuple)):
        return PatternList(X)
    raise TypeError(f"unsupported dataset type {type(X).__name__}")


def number_of_patterns(X) -> int:
    return as_dataset(X).number_of_patterns()


def get_element(X, index) -> np.ndarray:
    return as_dataset(X).get_element(index)
