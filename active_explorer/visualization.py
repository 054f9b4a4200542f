"""Console diagnostic sink."""

from typing import Dict, Sequence

import numpy as np
from rich.console import Console

from .trajectory import Trajectory

console = Console()

COLOR_STYLES = {
    "red": "red",
    "green": "green",
    "black": "white",
    "blue": "blue",
}


class ConsoleVisualizer:
    """Prints a one-line summary for every published point set."""

    def __init__(self, show_points: bool = False):
        self.show_points = show_points
        self.published: Dict[str, int] = {}

    def visualize_points(self, channel: str, points: Sequence[np.ndarray], color: str, scale: float) -> None:
        self.published[channel] = self.published.get(channel, 0) + 1
        if not points:
            return
        style = COLOR_STYLES.get(color, "white")
        console.print(f"[{style}]{channel}[/{style}]: {len(points)} points (scale {scale})")
        if self.show_points:
            for p in points:
                console.print(f"  [dim]({p[0]:.2f}, {p[1]:.2f}, {p[2]:.2f})[/dim]")

    def visualize_trajectory(self, channel: str, trajectory: Trajectory, color: str, scale: float) -> None:
        self.visualize_points(channel, [sample.position for sample in trajectory], color, scale)
