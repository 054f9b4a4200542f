"""
Command line interface for the exploration core.

Usage:
    active-explorer simulate --ticks 40
    active-explorer simulate --yaw-policy constant --verbose --visualize
    active-explorer simulate --config explorer.json --log-dir ./logs
    active-explorer config --config explorer.json
"""

import sys
import time
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import ExplorerConfig, LogConfig, load_config
from .data_logger import DataLogger
from .errors import ConfigError
from .interfaces import NullLogger, NullVisualizer
from .sim import SimClock, demo_world
from .supervisor import ExplorationSupervisor, SupervisorState
from .visualization import ConsoleVisualizer

app = typer.Typer(help="Frontier exploration decision core")
console = Console()


def build_config(
    config_path: Optional[Path],
    yaw_policy: Optional[str] = None,
    verbose: Optional[bool] = None,
    visualize: Optional[bool] = None,
    speed: Optional[float] = None,
) -> ExplorerConfig:
    """Defaults, then the config file, then command line overrides."""
    config = load_config(config_path) if config_path else ExplorerConfig()
    return config.with_overrides(
        yaw_policy=yaw_policy,
        verbose=verbose,
        visualize=visualize,
        nominal_speed=speed,
    )


@app.command()
def simulate(
    ticks: int = typer.Option(40, help="Number of control ticks to run"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="JSON config file"),
    yaw_policy: Optional[str] = typer.Option(None, help="point_facing, follow_velocity, anticipate_velocity or constant"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Print supervisor progress"),
    visualize: Optional[bool] = typer.Option(None, "--visualize/--no-visualize", help="Print diagnostic point sets"),
    speed: Optional[float] = typer.Option(None, help="Nominal speed along the path (m/s)"),
    log_dir: Optional[Path] = typer.Option(None, help="Write a session log under this directory"),
    realtime: bool = typer.Option(False, help="Sleep in real time instead of on a simulated clock"),
):
    """Run the supervisor against the built-in simulated world."""
    try:
        config = build_config(config_path, yaw_policy, verbose, visualize, speed)
    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]")
        sys.exit(1)

    console.print(Panel.fit(
        f"[bold]Exploration simulation[/bold]\n\n"
        f"Ticks: {ticks}\n"
        f"Yaw policy: {config.yaw_policy.name}\n"
        f"Robot radius: {config.robot_radius} m\n"
        f"Voxel size: {config.voxel_size} m",
        title="Simulate",
        border_style="blue"
    ))

    world = demo_world()
    clock = SimClock()
    logger = DataLogger(LogConfig(base_dir=str(log_dir))) if log_dir else NullLogger()
    logger.start_session(config.as_dict())

    visualizer = ConsoleVisualizer() if config.visualize else NullVisualizer()
    supervisor = ExplorationSupervisor(
        frontier_source=world,
        pathfinder=world,
        vehicle=world,
        config=config,
        visualizer=visualizer,
        logger=logger,
        time_func=time.monotonic if realtime else clock.time,
        sleep_func=time.sleep if realtime else clock.sleep,
    )

    for tick in range(ticks):
        state = supervisor.run()
        if not world.frontiers and state is SupervisorState.IDLE and supervisor.queue.is_empty():
            console.print(f"[green]All frontiers explored after {tick + 1} ticks[/green]")
            break

    status = supervisor.get_status()
    logger.end_session(status)

    table = Table(title="Supervisor status")
    table.add_column("Field")
    table.add_column("Value")
    for key, value in status.items():
        table.add_row(key, str(value))
    console.print(table)
    console.print(f"Pose commands sent: {world.command_count}")
    console.print(f"Frontiers remaining: {len(world.frontiers)}")
    if isinstance(visualizer, ConsoleVisualizer):
        for channel, count in sorted(visualizer.published.items()):
            console.print(f"Published {channel}: {count}")


@app.command()
def config(
    config_path: Optional[Path] = typer.Option(None, "--config", help="JSON config file"),
):
    """Show the effective configuration."""
    try:
        effective = build_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Config error: {e}[/red]")
        sys.exit(1)

    table = Table(title="Explorer config")
    table.add_column("Parameter")
    table.add_column("Value")
    for key, value in effective.as_dict().items():
        table.add_row(key, str(value))
    console.print(table)


def main():
    app()


if __name__ == "__main__":
    main()
