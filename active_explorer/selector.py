"""Forward-facing frontier selection with revisit avoidance."""

import math
import sys
from typing import Iterable

import numpy as np

from .frontier import AttemptedSet, Frontier, PointLike, as_point

# Returned when no frontier qualifies.
NO_TARGET = np.zeros(3)


def is_no_target(point: PointLike, tolerance: float) -> bool:
    """True if the point is close enough to the origin to be the sentinel."""
    return float(np.linalg.norm(as_point(point))) < tolerance


def score_frontier(position: np.ndarray, heading: float, center: np.ndarray) -> float:
    """Projection of the offset to a frontier onto the heading direction."""
    offset = center - position
    return math.cos(heading) * offset[0] + math.sin(heading) * offset[1]


def select_best(
    position: PointLike,
    heading: float,
    frontiers: Iterable[Frontier],
    attempted: AttemptedSet,
    min_score: float = sys.float_info.min,
) -> np.ndarray:
    """
    Pick the frontier lying furthest ahead along the current heading.

    Args:
        position: Current vehicle position
        heading: Current yaw in radians
        frontiers: Candidates in scan order
        attempted: Frontiers that must never be proposed again
        min_score: A frontier has to score strictly above this to win

    Returns:
        Center of the winning frontier, or a copy of NO_TARGET.
        Ties go to the first frontier in scan order.
    """
    position = as_point(position)
    best_score = min_score
    best = NO_TARGET.copy()

    for frontier in frontiers:
        score = score_frontier(position, heading, frontier.center)
        if score > best_score and frontier.center not in attempted:
            best_score = score
            best = frontier.center.copy()

    return best


class FrontierSelector:
    """Binds the selection rule to the supervisor's attempted set."""

    def __init__(self, attempted: AttemptedSet, min_score: float = sys.float_info.min):
        self.attempted = attempted
        self.min_score = min_score

    def select(self, position: PointLike, heading: float, frontiers: Iterable[Frontier]) -> np.ndarray:
        return select_best(position, heading, frontiers, self.attempted, self.min_score)
