"""Session logging for exploration runs."""

import json
import time
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from rich.console import Console

from .config import LogConfig

console = Console()


class DataLogger:
    """Writes exploration events to a per-session JSONL file."""

    def __init__(self, config: Optional[LogConfig] = None):
        self.config = config or LogConfig()
        self.session_dir: Optional[Path] = None
        self.start_time: Optional[float] = None

        self.metadata_file: Optional[Path] = None
        self.events_file: Optional[Path] = None

        # Stats
        self.event_count: int = 0
        self.event_types: Dict[str, int] = {}

    def start_session(self, explorer_config: Optional[Dict] = None) -> Optional[Path]:
        """Start a new logging session."""
        if not self.config.enabled:
            return None

        base = Path(self.config.base_dir).expanduser()
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.session_dir = base / f"session_{timestamp}"
        self.session_dir.mkdir(parents=True, exist_ok=True)

        self.start_time = time.time()
        self.events_file = self.session_dir / "events.jsonl"
        self.metadata_file = self.session_dir / "metadata.json"

        metadata = {
            "session_start": timestamp,
            "start_timestamp": self.start_time,
            "explorer_config": explorer_config or {},
            "log_config": asdict(self.config),
        }
        self.metadata_file.write_text(json.dumps(metadata, indent=2, default=_to_json))

        self.event_count = 0
        self.event_types = {}

        console.print(f"[green]Logging to:[/green] {self.session_dir}")
        return self.session_dir

    def log_event(self, event_type: str, details: Optional[Dict] = None) -> None:
        """Log an exploration event."""
        if not self.events_file:
            return

        entry = {
            "ts": time.time(),
            "type": event_type,
            "details": details or {},
        }

        with open(self.events_file, "a") as f:
            f.write(json.dumps(entry, default=_to_json) + "\n")
        self.event_count += 1
        self.event_types[event_type] = self.event_types.get(event_type, 0) + 1

    def end_session(self, summary: Optional[Dict] = None) -> Dict:
        """End logging session and return the final metadata."""
        if not self.metadata_file or not self.start_time:
            return {}

        end_time = time.time()
        duration = end_time - self.start_time

        metadata = json.loads(self.metadata_file.read_text())
        metadata["session_end"] = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        metadata["end_timestamp"] = end_time
        metadata["duration_seconds"] = round(duration, 1)
        metadata["stats"] = {
            "events": self.event_count,
            "by_type": dict(self.event_types),
        }
        if summary:
            metadata["summary"] = summary

        self.metadata_file.write_text(json.dumps(metadata, indent=2, default=_to_json))

        console.print(f"[green]Session logged:[/green] {self.session_dir}")
        console.print(f"  Duration: {duration:.1f} s")
        console.print(f"  Events: {self.event_count}")

        return metadata


def _to_json(value):
    """Fallback encoder for numpy values and enums."""
    if hasattr(value, "tolist"):
        return value.tolist()
    if hasattr(value, "name"):
        return value.name
    return str(value)
