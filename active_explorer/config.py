"""Explorer configuration."""

import json
import sys
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import ConfigError
from .trajectory import YawPolicy, parse_yaw_policy

FLAG_FIELDS = ("verbose", "visualize")
NUMBER_FIELDS = (
    "robot_radius", "voxel_size", "constant_yaw", "min_velocity_norm", "nominal_speed",
    "command_rate_hz", "convergence_timeout", "recovery_pause", "min_score",
)

@dataclass(frozen=True)
class ExplorerConfig:
    """Exploration and trajectory execution parameters."""
    # Geometry
    robot_radius: float = 0.5  # meters - sample is occupied if closer to an obstacle
    voxel_size: float = 0.2  # meters - arrival tolerance and frontier cell size

    # Output
    verbose: bool = False
    visualize: bool = False

    # Heading
    yaw_policy: YawPolicy = YawPolicy.POINT_FACING
    constant_yaw: float = 3.14  # radians, used by YawPolicy.CONSTANT
    min_velocity_norm: float = 0.1  # m/s - below this a velocity has no heading
    nominal_speed: float = 0.0  # m/s along the path, 0 leaves samples at rest

    # Execution
    command_rate_hz: float = 40.0
    convergence_timeout: float = 10.0  # seconds per sample before giving up
    abort_lookahead: int = 4  # samples checked ahead of the current one
    recovery_pause: float = 1.0  # seconds facing backwards during recovery

    # Selection
    min_score: float = sys.float_info.min

    def __post_init__(self):
        if isinstance(self.yaw_policy, str):
            try:
                object.__setattr__(self, "yaw_policy", parse_yaw_policy(self.yaw_policy))
            except ValueError as e:
                raise ConfigError(f"Unknown yaw_policy: {self.yaw_policy!r}") from e
        if not isinstance(self.yaw_policy, YawPolicy):
            raise ConfigError(f"yaw_policy must be a policy name, got {self.yaw_policy!r}")

        for name in FLAG_FIELDS:
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be true or false, got {getattr(self, name)!r}")
        for name in NUMBER_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
        if isinstance(self.abort_lookahead, bool) or not isinstance(self.abort_lookahead, int):
            raise ConfigError(f"abort_lookahead must be an integer, got {self.abort_lookahead!r}")

        for name in ("robot_radius", "voxel_size", "command_rate_hz", "convergence_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("min_velocity_norm", "nominal_speed", "recovery_pause"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must not be negative, got {getattr(self, name)}")
        if self.abort_lookahead < 1:
            raise ConfigError(f"abort_lookahead must be at least 1, got {self.abort_lookahead}")

    @property
    def command_period(self) -> float:
        return 1.0 / self.command_rate_hz

    def with_overrides(self, **overrides: Any) -> "ExplorerConfig":
        """Copy with the non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)

    def as_dict(self) -> Dict[str, Any]:
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        result["yaw_policy"] = self.yaw_policy.name
        return result


@dataclass(frozen=True)
class LogConfig:
    """Session log configuration."""
    base_dir: str = "~/active_explorer/logs"
    enabled: bool = True


def config_from_dict(data: Dict[str, Any], base: Optional[ExplorerConfig] = None) -> ExplorerConfig:
    """Build a config from a plain dictionary, rejecting unknown keys."""
    known = {f.name for f in fields(ExplorerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    try:
        return replace(base or ExplorerConfig(), **data)
    except TypeError as e:
        raise ConfigError(str(e)) from e


def load_config(path: Union[str, Path]) -> ExplorerConfig:
    """Load an ExplorerConfig from a JSON file."""
    config_path = Path(path).expanduser()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        data = json.loads(config_path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {config_path}")
    return config_from_dict(data)
