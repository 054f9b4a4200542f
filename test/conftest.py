"""Shared fakes for the exploration core tests."""

from typing import Callable, List, Optional, Tuple

import numpy as np
import pytest

from active_explorer.errors import SensorUnavailableError
from active_explorer.frontier import Frontier
from active_explorer.interfaces import Pose
from active_explorer.sim import SimClock


class FakeVehicle:
    """Vehicle that optionally jumps straight to each commanded position."""

    def __init__(self, position=(0.0, 0.0, 0.0), yaw: float = 0.0, follow: bool = True):
        self.position = np.asarray(position, dtype=float)
        self.yaw = yaw
        self.follow = follow
        self.commands: List[Tuple[np.ndarray, float]] = []
        self.available = True
        self.failures = 0

    def get_pose(self) -> Optional[Pose]:
        if not self.available:
            self.failures += 1
            raise SensorUnavailableError("odometry timeout")
        return Pose(position=self.position.copy(), yaw=self.yaw)

    def send_pose_command(self, position, yaw: float) -> None:
        self.commands.append((np.asarray(position, dtype=float).copy(), yaw))
        if self.follow:
            self.position = np.asarray(position, dtype=float).copy()
            self.yaw = yaw


class FakePathfinder:
    """Returns a canned path and answers distance queries with a callable."""

    def __init__(
        self,
        path=None,
        distance_fn: Optional[Callable[[np.ndarray], Tuple[bool, float]]] = None,
    ):
        self.path = [np.asarray(p, dtype=float) for p in (path or [])]
        self.distance_fn = distance_fn or (lambda point: (False, 0.0))
        self.requests: List[Tuple[np.ndarray, np.ndarray]] = []
        self.distance_queries: List[np.ndarray] = []

    def find_path(self, start, goal) -> None:
        self.requests.append((np.asarray(start).copy(), np.asarray(goal).copy()))

    def get_path(self):
        return [p.copy() for p in self.path]

    def get_map_distance(self, point):
        self.distance_queries.append(np.asarray(point).copy())
        return self.distance_fn(point)


class FakeFrontierSource:
    def __init__(self, centers=()):
        self.frontiers = [Frontier(center=c) for c in centers]
        self.calls = 0

    def get_frontiers(self):
        self.calls += 1
        return list(self.frontiers)


class RecordingVisualizer:
    def __init__(self):
        self.calls = []

    def visualize_points(self, channel, points, color, scale) -> None:
        self.calls.append((channel, [np.asarray(p).copy() for p in points], color, scale))

    def visualize_trajectory(self, channel, trajectory, color, scale) -> None:
        self.calls.append((channel, [s.position.copy() for s in trajectory], color, scale))


@pytest.fixture
def clock():
    return SimClock()


@pytest.fixture
def vehicle():
    return FakeVehicle()


@pytest.fixture
def visualizer():
    return RecordingVisualizer()
