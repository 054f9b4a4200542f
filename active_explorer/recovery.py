"""Look-around maneuver used when no frontier can be selected."""

import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from rich.console import Console

from .interfaces import Pose, Vehicle

console = Console()


def wrap_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi)."""
    return (angle + math.pi) % (2 * math.pi) - math.pi


@dataclass
class RecoveryResult:
    """Headings commanded by one recovery maneuver."""
    original_yaw: float
    reversed_yaw: float


class RecoveryManeuver:
    """
    Turns the vehicle around in place and back again.

    Facing the opposite way for a moment lets the frontier detector see
    what was behind the vehicle, which is where a forward-facing selector
    cannot look.
    """

    def __init__(
        self,
        vehicle: Vehicle,
        pause: float = 1.0,
        sleep_func: Callable[[float], None] = time.sleep,
        verbose: bool = False,
    ):
        self.vehicle = vehicle
        self.pause = pause
        self.sleep = sleep_func
        self.verbose = verbose
        self.count: int = 0

    def execute(self, pose: Pose, on_pause: Optional[Callable[[], None]] = None) -> RecoveryResult:
        """Face backwards, wait, then restore the original heading."""
        reversed_yaw = wrap_angle(pose.yaw + math.pi)
        if self.verbose:
            console.print(f"[yellow]No explorable frontier, turning to {math.degrees(reversed_yaw):.0f}°[/yellow]")

        self.vehicle.send_pose_command(pose.position.copy(), reversed_yaw)
        self.sleep(self.pause)
        if on_pause:
            on_pause()
        self.vehicle.send_pose_command(pose.position.copy(), pose.yaw)

        self.count += 1
        return RecoveryResult(original_yaw=pose.yaw, reversed_yaw=reversed_yaw)
