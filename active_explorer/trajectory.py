"""Trajectory synthesis from geometric paths and yaw assignment."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .frontier import PointLike, as_point

# Planar components below this count as "no horizontal motion".
PLANAR_EPSILON = 1e-4


class YawPolicy(Enum):
    """How headings are derived from a geometric path."""
    POINT_FACING = "point_facing"
    FOLLOW_VELOCITY = "follow_velocity"
    ANTICIPATE_VELOCITY = "anticipate_velocity"
    CONSTANT = "constant"


@dataclass
class TrajectoryPoint:
    """One trajectory sample."""
    position: np.ndarray
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    yaw: float = 0.0  # radians

    def __post_init__(self):
        self.position = as_point(self.position)
        self.velocity = as_point(self.velocity)

    @property
    def planar_speed(self) -> float:
        return math.hypot(self.velocity[0], self.velocity[1])

    @property
    def velocity_yaw(self) -> float:
        return math.atan2(self.velocity[1], self.velocity[0])


Trajectory = List[TrajectoryPoint]


def _point_facing(trajectory: Trajectory, initial_yaw: float, **_) -> None:
    last_yaw = initial_yaw
    for current, following in zip(trajectory, trajectory[1:]):
        delta = following.position - current.position
        length = float(np.linalg.norm(delta))
        if length > 0.0:
            heading = delta / length
        else:
            heading = delta
        if abs(heading[0]) > PLANAR_EPSILON or abs(heading[1]) > PLANAR_EPSILON:
            plane = np.array([heading[0], heading[1], 0.0])
            cosine = float(np.dot(heading, plane / np.linalg.norm(plane)))
            desired_yaw = math.acos(max(-1.0, min(1.0, cosine)))
        else:
            desired_yaw = last_yaw
        current.yaw = desired_yaw
        last_yaw = desired_yaw
    # Final sample has no successor; it keeps the last heading.
    if trajectory:
        trajectory[-1].yaw = last_yaw


def _scan_heading(samples: Sequence[TrajectoryPoint], fallback: float, min_velocity_norm: float) -> float:
    """
    Heading of the first sample whose planar speed is not below the
    threshold, or `fallback` if that speed is exactly the threshold or no
    such sample exists.
    """
    for sample in samples:
        if sample.planar_speed >= min_velocity_norm:
            if sample.planar_speed > min_velocity_norm:
                return sample.velocity_yaw
            break
    return fallback


def _follow_velocity(trajectory: Trajectory, initial_yaw: float, min_velocity_norm: float, **_) -> None:
    last_yaw = initial_yaw
    for i, sample in enumerate(trajectory):
        desired_yaw = _scan_heading(trajectory[i:], last_yaw, min_velocity_norm)
        sample.yaw = desired_yaw
        last_yaw = desired_yaw


def _anticipate_velocity(trajectory: Trajectory, initial_yaw: float, min_velocity_norm: float, **_) -> None:
    last_yaw = initial_yaw
    for i in range(len(trajectory) - 1, -1, -1):
        desired_yaw = _scan_heading(trajectory[i::-1], last_yaw, min_velocity_norm)
        trajectory[i].yaw = desired_yaw
        last_yaw = desired_yaw
    if trajectory:
        trajectory[0].yaw = initial_yaw


def _constant(trajectory: Trajectory, constant_yaw: float, **_) -> None:
    for sample in trajectory:
        sample.yaw = constant_yaw


_YAW_HANDLERS: Dict[YawPolicy, Callable[..., None]] = {
    YawPolicy.POINT_FACING: _point_facing,
    YawPolicy.FOLLOW_VELOCITY: _follow_velocity,
    YawPolicy.ANTICIPATE_VELOCITY: _anticipate_velocity,
    YawPolicy.CONSTANT: _constant,
}


def apply_yaw(
    trajectory: Trajectory,
    policy: YawPolicy,
    initial_yaw: float,
    *,
    constant_yaw: float = 0.0,
    min_velocity_norm: float = 0.1,
) -> Trajectory:
    """
    Fill in the yaw of every sample in place.

    Args:
        trajectory: Samples to modify
        policy: Which heading rule to use
        initial_yaw: Vehicle heading when the trajectory starts (radians)
        constant_yaw: Heading used by YawPolicy.CONSTANT
        min_velocity_norm: Planar speed below which a velocity has no heading

    Returns:
        The same trajectory, for chaining
    """
    _YAW_HANDLERS[policy](
        trajectory,
        initial_yaw=initial_yaw,
        constant_yaw=constant_yaw,
        min_velocity_norm=min_velocity_norm,
    )
    return trajectory


def assign_velocities(trajectory: Trajectory, speed: float) -> None:
    """Set each sample moving at `speed` toward its successor."""
    if len(trajectory) < 2 or speed <= 0:
        return
    direction = np.zeros(3)
    for current, following in zip(trajectory, trajectory[1:]):
        delta = following.position - current.position
        length = float(np.linalg.norm(delta))
        if length > 0.0:
            direction = delta / length
        current.velocity = direction * speed
    trajectory[-1].velocity = direction * speed


def synthesize(
    path: Sequence[PointLike],
    policy: YawPolicy = YawPolicy.POINT_FACING,
    initial_yaw: float = 0.0,
    *,
    constant_yaw: float = 0.0,
    min_velocity_norm: float = 0.1,
    nominal_speed: float = 0.0,
) -> Trajectory:
    """
    Turn a geometric path into a trajectory, one sample per path point.

    An empty path gives an empty trajectory, which callers treat as
    "no feasible motion".
    """
    trajectory: Trajectory = [TrajectoryPoint(position=point) for point in path]
    if not trajectory:
        return trajectory

    assign_velocities(trajectory, nominal_speed)
    return apply_yaw(
        trajectory,
        policy,
        initial_yaw,
        constant_yaw=constant_yaw,
        min_velocity_norm=min_velocity_norm,
    )


def parse_yaw_policy(value: Optional[str]) -> YawPolicy:
    """Accept either a member name (POINT_FACING) or its value (point_facing)."""
    if value is None:
        return YawPolicy.POINT_FACING
    text = value.strip()
    try:
        return YawPolicy[text.upper()]
    except KeyError:
        return YawPolicy(text.lower())
