"""Frontier value types and attempted-frontier bookkeeping."""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, Sequence, Union

import numpy as np

PointLike = Union[np.ndarray, Sequence[float]]

# Decimal places kept in a cell quotient before flooring.
CELL_ROUNDING_DIGITS = 9


def as_point(value: PointLike) -> np.ndarray:
    """Coerce a tuple/list/array into a float (3,) array."""
    point = np.asarray(value, dtype=float).reshape(-1)
    if point.shape != (3,):
        raise ValueError(f"Expected a 3D point, got shape {point.shape}")
    return point


@dataclass(frozen=True, eq=False)
class Frontier:
    """A candidate unexplored region reported by the frontier detector."""
    center: np.ndarray
    size: int = 0  # number of voxels in the frontier cluster
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "center", as_point(self.center))


@dataclass(frozen=True)
class FrontierKey:
    """Integer cell index of a point on a regular grid."""
    ix: int
    iy: int
    iz: int


def frontier_key(point: PointLike, cell_size: float) -> FrontierKey:
    """
    Bucket a point into its grid cell.

    Every point in the half-open cube [i*cell, (i+1)*cell) on each axis maps
    to the same key, so a frontier re-reported a few centimetres away from
    where it was last seen still counts as the same frontier.
    """
    if cell_size <= 0:
        raise ValueError("cell_size must be positive")
    x, y, z = as_point(point)
    return FrontierKey(_cell_index(x, cell_size), _cell_index(y, cell_size), _cell_index(z, cell_size))


def _cell_index(value: float, cell_size: float) -> int:
    # 0.6 / 0.2 is 2.9999999999999996 in floating point.
    return int(math.floor(round(value / cell_size, CELL_ROUNDING_DIGITS)))


class AttemptedSet:
    """Append-only memory of frontiers already pursued or rejected."""

    def __init__(self, cell_size: float):
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        self.cell_size = cell_size
        self._entries: Dict[FrontierKey, np.ndarray] = {}

    def key_for(self, point: PointLike) -> FrontierKey:
        return frontier_key(point, self.cell_size)

    def mark(self, point: PointLike) -> FrontierKey:
        """Record a point as attempted. Re-marking overwrites the stored point."""
        point = as_point(point)
        key = self.key_for(point)
        self._entries[key] = point.copy()
        return key

    def contains(self, point: PointLike) -> bool:
        return self.key_for(point) in self._entries

    def get(self, key: FrontierKey):
        return self._entries.get(key)

    def __contains__(self, item) -> bool:
        if isinstance(item, FrontierKey):
            return item in self._entries
        return self.contains(item)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FrontierKey]:
        return iter(self._entries)
