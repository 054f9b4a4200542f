"""Frontier exploration decision core for an autonomous aerial vehicle."""

from .config import ExplorerConfig, LogConfig, load_config
from .errors import ExplorerError, ConfigError, EmptyQueueError, SensorUnavailableError
from .frontier import Frontier, FrontierKey, AttemptedSet, frontier_key, as_point
from .selector import FrontierSelector, NO_TARGET, is_no_target, select_best
from .waypoints import WaypointQueue
from .trajectory import TrajectoryPoint, YawPolicy, apply_yaw, synthesize
from .collision_monitor import CollisionMonitor
from .recovery import RecoveryManeuver
from .interfaces import Pose, FrontierSource, Pathfinder, Vehicle, Visualizer
from .data_logger import DataLogger
from .supervisor import ExplorationSupervisor, SupervisorState, Rate

__all__ = [
    # Configuration
    "ExplorerConfig",
    "LogConfig",
    "load_config",
    # Errors
    "ExplorerError",
    "ConfigError",
    "EmptyQueueError",
    "SensorUnavailableError",
    # Frontier model
    "Frontier",
    "FrontierKey",
    "AttemptedSet",
    "frontier_key",
    "as_point",
    # Selection
    "FrontierSelector",
    "NO_TARGET",
    "is_no_target",
    "select_best",
    "WaypointQueue",
    # Trajectories
    "TrajectoryPoint",
    "YawPolicy",
    "apply_yaw",
    "synthesize",
    # Execution
    "CollisionMonitor",
    "RecoveryManeuver",
    "ExplorationSupervisor",
    "SupervisorState",
    "Rate",
    # Interfaces
    "Pose",
    "FrontierSource",
    "Pathfinder",
    "Vehicle",
    "Visualizer",
    # Logging
    "DataLogger",
]
