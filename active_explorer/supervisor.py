"""Exploration state machine: select, plan, execute, abort."""

import math
import time
from collections import deque
from enum import Enum, auto
from typing import Callable, Deque, List, Optional, Tuple

import numpy as np
from rich.console import Console

from .collision_monitor import CollisionMonitor
from .config import ExplorerConfig
from .errors import SensorUnavailableError
from .frontier import AttemptedSet, Frontier
from .interfaces import (
    FrontierSource,
    LoggerProtocol,
    NullLogger,
    NullVisualizer,
    Pathfinder,
    Pose,
    Vehicle,
    Visualizer,
)
from .recovery import RecoveryManeuver
from .selector import FrontierSelector, is_no_target
from .trajectory import Trajectory, synthesize
from .waypoints import WaypointQueue

console = Console()


class SupervisorState(Enum):
    """Explicit states of the exploration loop."""
    IDLE = auto()
    RECOVERING = auto()  # No frontier found, looking around
    PLANNING = auto()
    EXECUTING = auto()
    ABORTING = auto()


class ExecutionOutcome(Enum):
    """How streaming a trajectory ended."""
    COMPLETED = auto()
    ABORTED = auto()  # Obstacle ahead
    TIMED_OUT = auto()  # Sample not reached in time


class Rate:
    """Fixed-rate suspend point for polling loops."""

    def __init__(
        self,
        hz: float,
        time_func: Callable[[], float] = time.monotonic,
        sleep_func: Callable[[float], None] = time.sleep,
    ):
        self.period = 1.0 / hz
        self._time = time_func
        self._sleep = sleep_func
        self._last = time_func()

    def sleep(self) -> None:
        """Sleep until the next period boundary. Falling behind resets the schedule."""
        now = self._time()
        remaining = self._last + self.period - now
        if remaining > 0:
            self._sleep(remaining)
            self._last += self.period
        else:
            self._last = now


class ExplorationSupervisor:
    """
    Drives one exploration step per control tick.

    Owns the waypoint queue and the attempted-frontier set. Each call to
    run() either picks a new frontier (or looks around if there is none),
    or pops the queued target, plans a trajectory to it and streams it to
    the vehicle while watching for obstacles ahead.
    """

    def __init__(
        self,
        frontier_source: FrontierSource,
        pathfinder: Pathfinder,
        vehicle: Vehicle,
        config: Optional[ExplorerConfig] = None,
        visualizer: Optional[Visualizer] = None,
        logger: Optional[LoggerProtocol] = None,
        time_func: Callable[[], float] = time.monotonic,
        sleep_func: Callable[[float], None] = time.sleep,
    ):
        self.config = config or ExplorerConfig()
        self.frontier_source = frontier_source
        self.pathfinder = pathfinder
        self.vehicle = vehicle
        self.visualizer = visualizer or NullVisualizer()
        self.logger: LoggerProtocol = logger or NullLogger()
        self._time = time_func
        self._sleep = sleep_func

        # Components
        self.attempted = AttemptedSet(self.config.voxel_size)
        self.selector = FrontierSelector(self.attempted, self.config.min_score)
        self.queue = WaypointQueue()
        self.monitor = CollisionMonitor(
            pathfinder,
            robot_radius=self.config.robot_radius,
            lookahead=self.config.abort_lookahead,
            visualizer=self.visualizer,
            visualize=self.config.visualize,
        )
        self.recovery = RecoveryManeuver(
            vehicle,
            pause=self.config.recovery_pause,
            sleep_func=sleep_func,
            verbose=self.config.verbose,
        )

        # State
        self.state = SupervisorState.IDLE
        self.pose: Optional[Pose] = None
        self.current_target: Optional[np.ndarray] = None
        self.path: List[np.ndarray] = []
        self.trajectory: Trajectory = []
        self.transitions: Deque[Tuple[SupervisorState, SupervisorState]] = deque(maxlen=64)

        # Stats
        self.tick_count: int = 0
        self.completed_count: int = 0
        self.abort_count: int = 0
        self.timeout_count: int = 0
        self.infeasible_count: int = 0

    # --- Helpers ---

    def _log(self, message: str) -> None:
        if self.config.verbose:
            console.print(message)

    def _set_state(self, state: SupervisorState) -> None:
        if state != self.state:
            self.transitions.append((self.state, state))
            self._log(f"[dim]{self.state.name} -> {state.name}[/dim]")
        self.state = state

    def refresh_pose(self) -> Optional[Pose]:
        """Poll odometry. A missing reading keeps the last known pose."""
        try:
            pose = self.vehicle.get_pose()
        except SensorUnavailableError:
            pose = None
        if pose is not None:
            self.pose = pose
        return self.pose

    def _snapshot_frontiers(self) -> List[Frontier]:
        return list(self.frontier_source.get_frontiers())

    def _select(self, pose: Pose) -> np.ndarray:
        frontiers = self._snapshot_frontiers()
        self._log(f"Found {len(frontiers)} frontiers")
        return self.selector.select(pose.position, pose.yaw, frontiers)

    # --- Control tick ---

    def run(self) -> SupervisorState:
        """Execute one control tick and return the state it ends in."""
        self.tick_count += 1
        self.trajectory = []
        self.path = []

        pose = self.refresh_pose()
        if pose is None:
            self._log("[yellow]No odometry yet, skipping tick[/yellow]")
            return self.state

        if self.queue.is_empty():
            self._choose_next_frontier(pose)
        else:
            self._pursue_next_target(pose)
        return self.state

    def _choose_next_frontier(self, pose: Pose) -> None:
        waypoint = self._select(pose)

        if is_no_target(waypoint, self.config.voxel_size):
            self.attempted.mark(waypoint)
            self._set_state(SupervisorState.RECOVERING)
            self.logger.log_event("recovery", {"position": pose.position, "yaw": pose.yaw})
            self.recovery.execute(pose, on_pause=self.refresh_pose)
        else:
            self._log(f"[green]Pursuing new frontier:[/green] {np.round(waypoint, 2)}")
            self.queue.push(waypoint)
            self.logger.log_event("frontier_selected", {"target": waypoint})

        self._set_state(SupervisorState.IDLE)

    def _pursue_next_target(self, pose: Pose) -> None:
        target = self.queue.pop_next()
        self.current_target = target
        self._set_state(SupervisorState.PLANNING)

        # Marked before planning so an unreachable target is never retried.
        self.attempted.mark(target)

        self.pathfinder.find_path(pose.position.copy(), target)
        self.path = list(self.pathfinder.get_path())
        self.trajectory = synthesize(
            self.path,
            self.config.yaw_policy,
            pose.yaw,
            constant_yaw=self.config.constant_yaw,
            min_velocity_norm=self.config.min_velocity_norm,
            nominal_speed=self.config.nominal_speed,
        )
        self._log(f"Generated {len(self.trajectory)} waypoints")
        self.logger.log_event("plan", {"target": target, "samples": len(self.trajectory)})

        if not self.trajectory:
            self._log("[yellow]Current frontier not feasible[/yellow]")
            self.infeasible_count += 1
            self.logger.log_event("infeasible", {"target": target})
            self.current_target = None
            self._set_state(SupervisorState.IDLE)
            return

        if self.config.visualize:
            self.visualizer.visualize_trajectory("trajectory", self.trajectory, "black", 0.2)

        self._set_state(SupervisorState.EXECUTING)
        outcome = self._execute_trajectory()

        if outcome is ExecutionOutcome.COMPLETED:
            self.completed_count += 1
            self.logger.log_event("trajectory_complete", {"target": target})
            self._log("Looking for next frontier")
        else:
            self._abort(target, outcome)

        self.current_target = None
        self._set_state(SupervisorState.IDLE)

    # --- Execution ---

    def _distance_to(self, point: np.ndarray) -> float:
        return float(np.linalg.norm(self.pose.position - point))

    def _execute_trajectory(self) -> ExecutionOutcome:
        """Stream samples one at a time, waiting for arrival at each."""
        rate = Rate(self.config.command_rate_hz, self._time, self._sleep)

        for i, sample in enumerate(self.trajectory):
            self.vehicle.send_pose_command(sample.position.copy(), sample.yaw)
            self._log("[dim]Published next waypoint[/dim]")
            started = self._time()

            while True:
                self.refresh_pose()
                if self._distance_to(sample.position) <= self.config.voxel_size:
                    break
                if self.monitor.check_for_abort(i, self.trajectory):
                    return ExecutionOutcome.ABORTED
                if self._time() - started > self.config.convergence_timeout:
                    return ExecutionOutcome.TIMED_OUT
                self.vehicle.send_pose_command(sample.position.copy(), sample.yaw)
                rate.sleep()

        return ExecutionOutcome.COMPLETED

    def check_for_abort(self, index: int, trajectory: Trajectory) -> bool:
        return self.monitor.check_for_abort(index, trajectory)

    def _abort(self, target: np.ndarray, outcome: ExecutionOutcome) -> None:
        """Hold position, drop the plan and queue a replacement frontier."""
        self._set_state(SupervisorState.ABORTING)
        if outcome is ExecutionOutcome.TIMED_OUT:
            self.timeout_count += 1
            self._log("[yellow]Waypoint not reached in time, aborting current trajectory[/yellow]")
        else:
            self.abort_count += 1
            self._log("[yellow]Aborting current trajectory[/yellow]")

        pose = self.refresh_pose()
        self.vehicle.send_pose_command(pose.position.copy(), pose.yaw)

        self.trajectory = []
        self.path = []

        waypoint = self._select(pose)
        replacement = None
        # Strictly beyond the tolerance, unlike the no-target test in IDLE.
        if float(np.linalg.norm(waypoint)) > self.config.voxel_size:
            self._log(f"[green]Pursuing new frontier:[/green] {np.round(waypoint, 2)}")
            self.queue.push(waypoint)
            replacement = waypoint

        self.attempted.mark(target)
        self.logger.log_event("abort", {
            "target": target,
            "reason": outcome.name,
            "occupied": len(self.monitor.last_result.occupied),
            "replacement": replacement,
        })
        self._log("Aborted. Looking for next frontier")

    def get_status(self) -> dict:
        """Get supervisor status for logging."""
        pose = self.pose
        return {
            "state": self.state.name,
            "ticks": self.tick_count,
            "queued": len(self.queue),
            "attempted": len(self.attempted),
            "current_target": None if self.current_target is None else self.current_target.tolist(),
            "pose": None if pose is None else {
                "position": [round(float(v), 3) for v in pose.position],
                "yaw_deg": round(math.degrees(pose.yaw), 1),
            },
            "completed": self.completed_count,
            "aborted": self.abort_count,
            "timed_out": self.timeout_count,
            "infeasible": self.infeasible_count,
            "recoveries": self.recovery.count,
        }
