"""Point-mass simulation implementing every external interface."""

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .frontier import Frontier, PointLike, as_point
from .interfaces import Pose


@dataclass
class Obstacle:
    """Spherical obstacle."""
    center: np.ndarray
    radius: float
    appears_after: int = 0  # pose commands before it is observed

    def __post_init__(self):
        self.center = as_point(self.center)


class SimulatedWorld:
    """
    Minimal world for exercising the supervisor without hardware.

    The vehicle moves up to `step` meters toward each commanded position.
    Frontiers within `discover_radius` of the vehicle count as explored and
    stop being reported. Obstacles with `appears_after` > 0 only show up in
    the distance field once that many commands have been sent.
    """

    def __init__(
        self,
        frontiers: Iterable[PointLike] = (),
        obstacles: Sequence[Obstacle] = (),
        start: PointLike = (0.0, 0.0, 1.0),
        start_yaw: float = 0.0,
        step: float = 0.25,
        path_resolution: float = 0.5,
        sensor_range: float = 5.0,
        discover_radius: float = 1.0,
    ):
        self.frontiers: List[Frontier] = [Frontier(center=f) for f in frontiers]
        self.obstacles: List[Obstacle] = list(obstacles)
        self.position = as_point(start)
        self.yaw = start_yaw
        self.step = step
        self.path_resolution = path_resolution
        self.sensor_range = sensor_range
        self.discover_radius = discover_radius

        self.command_count: int = 0
        self.commands: List[Tuple[np.ndarray, float]] = []
        self._path: List[np.ndarray] = []

    # --- Vehicle ---

    def get_pose(self) -> Optional[Pose]:
        return Pose(position=self.position.copy(), yaw=self.yaw)

    def send_pose_command(self, position: np.ndarray, yaw: float) -> None:
        target = as_point(position)
        self.command_count += 1
        self.commands.append((target.copy(), yaw))

        offset = target - self.position
        distance = float(np.linalg.norm(offset))
        if distance <= self.step:
            self.position = target.copy()
        else:
            self.position = self.position + offset / distance * self.step
        self.yaw = yaw
        self._discover()

    def _discover(self) -> None:
        self.frontiers = [
            f for f in self.frontiers
            if np.linalg.norm(f.center - self.position) > self.discover_radius
        ]

    # --- Frontier source ---

    def get_frontiers(self) -> List[Frontier]:
        return list(self.frontiers)

    # --- Pathfinder ---

    def visible_obstacles(self) -> List[Obstacle]:
        return [o for o in self.obstacles if self.command_count >= o.appears_after]

    def _inside_obstacle(self, point: np.ndarray) -> bool:
        return any(np.linalg.norm(point - o.center) < o.radius for o in self.visible_obstacles())

    def find_path(self, start: np.ndarray, goal: np.ndarray) -> None:
        """Straight line from start to goal, empty if it crosses a known obstacle."""
        start = as_point(start)
        goal = as_point(goal)
        length = float(np.linalg.norm(goal - start))
        count = max(1, int(math.ceil(length / self.path_resolution)))
        path = [start + (goal - start) * (k / count) for k in range(1, count + 1)]

        if any(self._inside_obstacle(p) for p in path):
            self._path = []
        else:
            self._path = path

    def get_path(self) -> List[np.ndarray]:
        return [p.copy() for p in self._path]

    def get_map_distance(self, point: np.ndarray) -> Tuple[bool, float]:
        """Distance to the nearest visible obstacle surface within sensor range."""
        point = as_point(point)
        best = math.inf
        for obstacle in self.visible_obstacles():
            best = min(best, float(np.linalg.norm(point - obstacle.center)) - obstacle.radius)
        if best > self.sensor_range:
            return False, 0.0
        return True, max(0.0, best)


class SimClock:
    """Manually advanced clock so simulated runs do not wait in real time."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def demo_world() -> SimulatedWorld:
    """Four frontiers, the furthest ahead blocked by an obstacle that shows up mid-flight."""
    return SimulatedWorld(
        frontiers=[(8.0, 0.0, 1.0), (6.0, 3.0, 1.0), (5.0, -3.0, 1.0), (-4.0, 2.0, 1.0)],
        obstacles=[Obstacle(center=(4.0, 0.0, 1.0), radius=0.6, appears_after=3)],
    )
