"""Contracts for the collaborators the exploration core depends on."""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from .frontier import Frontier, as_point
from .trajectory import Trajectory


@dataclass
class Pose:
    """Vehicle position and heading."""
    position: np.ndarray
    yaw: float = 0.0  # radians

    def __post_init__(self):
        self.position = as_point(self.position)


class FrontierSource(Protocol):
    """Frontier detector/evaluator."""

    def get_frontiers(self) -> Iterable[Frontier]: ...


class Pathfinder(Protocol):
    """Geometric planner and obstacle distance field."""

    def find_path(self, start: np.ndarray, goal: np.ndarray) -> None: ...
    def get_path(self) -> List[np.ndarray]: ...
    def get_map_distance(self, point: np.ndarray) -> Tuple[bool, float]: ...


class Vehicle(Protocol):
    """Odometry feed and pose command sink."""

    def get_pose(self) -> Optional[Pose]: ...
    def send_pose_command(self, position: np.ndarray, yaw: float) -> None: ...


class Visualizer(Protocol):
    """Diagnostic output sink."""

    def visualize_points(self, channel: str, points: Sequence[np.ndarray], color: str, scale: float) -> None: ...
    def visualize_trajectory(self, channel: str, trajectory: Trajectory, color: str, scale: float) -> None: ...


class LoggerProtocol(Protocol):
    """Protocol for session loggers."""
    session_dir: Optional[object]

    def start_session(self, explorer_config: Optional[dict] = None) -> object: ...
    def log_event(self, event_type: str, details: Optional[dict] = None) -> None: ...
    def end_session(self, summary: Optional[dict] = None) -> dict: ...


class NullVisualizer:
    """Visualizer that drops everything."""

    def visualize_points(self, channel, points, color, scale) -> None:
        pass

    def visualize_trajectory(self, channel, trajectory, color, scale) -> None:
        pass


class NullLogger:
    """Logger that records nothing."""
    session_dir = None

    def start_session(self, explorer_config: Optional[dict] = None) -> None:
        return None

    def log_event(self, event_type: str, details: Optional[dict] = None) -> None:
        pass

    def end_session(self, summary: Optional[dict] = None) -> dict:
        return {}
