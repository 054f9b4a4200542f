"""Lookahead collision check for a trajectory being executed."""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
from rich.console import Console

from .errors import SensorUnavailableError
from .interfaces import NullVisualizer, Pathfinder, Visualizer
from .trajectory import Trajectory

console = Console()


@dataclass
class LookaheadResult:
    """Occupied and free samples seen by one abort check."""
    occupied: List[np.ndarray] = field(default_factory=list)
    free: List[np.ndarray] = field(default_factory=list)

    @property
    def need_abort(self) -> bool:
        return len(self.occupied) > 0


class CollisionMonitor:
    """Checks the next few trajectory samples against the live distance field."""

    def __init__(
        self,
        pathfinder: Pathfinder,
        robot_radius: float,
        lookahead: int = 4,
        visualizer: Optional[Visualizer] = None,
        visualize: bool = False,
    ):
        self.pathfinder = pathfinder
        self.robot_radius = robot_radius
        self.lookahead = lookahead
        self.visualizer = visualizer or NullVisualizer()
        self.visualize = visualize
        self.last_result = LookaheadResult()

    def is_occupied(self, point: np.ndarray) -> bool:
        """A failed or missing distance reading counts as clear."""
        try:
            found, distance = self.pathfinder.get_map_distance(point)
        except SensorUnavailableError:
            return False
        return bool(found) and distance < self.robot_radius

    def scan(self, index: int, trajectory: Trajectory) -> LookaheadResult:
        result = LookaheadResult()
        for sample in trajectory[index:index + self.lookahead]:
            if self.is_occupied(sample.position):
                result.occupied.append(sample.position)
            else:
                result.free.append(sample.position)
        return result

    def check_for_abort(self, index: int, trajectory: Trajectory) -> bool:
        """
        Check whether the trajectory is blocked just ahead of sample `index`.

        Any occupied sample in the lookahead window triggers an abort.
        """
        result = self.scan(index, trajectory)
        self.last_result = result

        if self.visualize:
            self.visualizer.visualize_points("occupied_path", result.occupied, "red", 1.0)
            self.visualizer.visualize_points("free_path", result.free, "green", 0.5)

        return result.need_abort
