"""Pending exploration targets."""

from typing import List

import numpy as np

from .errors import EmptyQueueError
from .frontier import PointLike, as_point


class WaypointQueue:
    """
    Last-in-first-out queue of target points.

    The most recently decided target runs next, so a replan target pushed
    after an abort takes priority over anything older. Duplicates are kept.
    """

    def __init__(self):
        self._items: List[np.ndarray] = []

    def push(self, point: PointLike) -> None:
        self._items.append(as_point(point).copy())

    def pop_next(self) -> np.ndarray:
        if not self._items:
            raise EmptyQueueError("Waypoint queue is empty")
        return self._items.pop()

    def peek(self) -> np.ndarray:
        if not self._items:
            raise EmptyQueueError("Waypoint queue is empty")
        return self._items[-1]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)
