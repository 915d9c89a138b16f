# lib/simgraph/errors.py
from __future__ import annotations


class SimGraphError(Exception):
    """Base class for every error raised by simgraph."""


class InsufficientDataError(SimGraphError, ValueError):
    """The dataset is too small for the requested neighbour count."""


class InvalidGeometryError(SimGraphError, ValueError):
    """A grid neighbourhood was asked about data that is not a 2-D grid."""


class CallingConventionError(SimGraphError, TypeError):
    """An oracle could not be called with either supported signature."""


class ConfigError(SimGraphError):
    """Malformed or missing configuration."""
