"""Exception types raised by the exploration core."""


class ExplorerError(Exception):
    """Base class for exploration errors."""


class ConfigError(ExplorerError, ValueError):
    """Invalid configuration value or file."""


class EmptyQueueError(ExplorerError, IndexError):
    """Tried to pop from an empty waypoint queue."""


class SensorUnavailableError(ExplorerError):
    """A pose or distance reading could not be obtained."""
