import json
import logging
from pathlib import Path

from .validators import (
    DEFAULT_HISTORY_CAPACITY,
    DEFAULT_TOLERANCE,
    clamp_tolerance,
    validate_history_capacity,
)

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".bg_eraser_config.json"
MAX_RECENT = 5


class AppConfig:
    def __init__(self, path: Path | None = None):
        self.path = path or DEFAULT_PATH
        self.recent_files: list[str] = []
        self.theme: str = "System"
        self.tolerance: int = DEFAULT_TOLERANCE
        self.history_capacity: int = DEFAULT_HISTORY_CAPACITY
        self._load()

    def _load(self):
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable config %s: %s", self.path, e)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed config %s", self.path)
            return
        self.recent_files = [str(s) for s in data.get("recent_files", [])][:MAX_RECENT]
        self.theme = str(data.get("theme", "System"))
        self.tolerance = clamp_tolerance(data.get("tolerance", DEFAULT_TOLERANCE))
        self.history_capacity = validate_history_capacity(data.get("history_capacity", DEFAULT_HISTORY_CAPACITY))

    def add_recent(self, path: str | Path):
        s = str(Path(path).resolve())
        if s in self.recent_files:
            self.recent_files.remove(s)
        self.recent_files.insert(0, s)
        self.recent_files = self.recent_files[:MAX_RECENT]

    def save(self):
        data = {
            "recent_files": self.recent_files[:MAX_RECENT],
            "theme": self.theme,
            "tolerance": clamp_tolerance(self.tolerance),
            "history_capacity": validate_history_capacity(self.history_capacity),
        }
        try:
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save config to %s: %s", self.path, e)
