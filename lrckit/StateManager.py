import json
import threading
from datetime import datetime
from pathlib import Path

from lrckit.logging_utils import get_logger

logger = get_logger(__name__)


class StateManager:
    """Remembers which subtitle files were already converted, and the last batch summary."""

    def __init__(self, file_path="lrckit_state.json"):
        self.file_path = Path(file_path)
        self._lock = threading.Lock()
        self.state = self._load()

    def _load(self):
        default_state = {"converted": {}, "last_run": {}}
        if not self.file_path.exists():
            logger.info(f"State file {self.file_path} not found, using default state")
            return default_state
        try:
            with open(self.file_path, "r", encoding="utf-8") as f:
                content = f.read().strip()
                logger.info(f"Loaded state from {self.file_path}")
                data = json.loads(content) if content else default_state
        except (json.JSONDecodeError, ValueError):
            logger.warning(
                f"State file {self.file_path} is corrupted, using default state"
            )
            return default_state

        if not isinstance(data, dict):
            logger.warning(
                f"State file {self.file_path} is corrupted, using default state"
            )
            return default_state
        data.setdefault("converted", {})
        data.setdefault("last_run", {})
        return data

    def save(self):
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.file_path, "w", encoding="utf-8") as f:
                json.dump(self.state, f, indent=2, ensure_ascii=False)
            logger.debug(f"State saved to {self.file_path}")
        except OSError as e:
            logger.error(f"Failed to save state: {e}")

    @staticmethod
    def _key(path) -> str:
        return str(Path(path).resolve())

    def is_converted(self, src_path) -> bool:
        return self._key(src_path) in self.state["converted"]

    def mark_converted(self, src_path, lrc_path):
        with self._lock:
            self.state["converted"][self._key(src_path)] = str(lrc_path)
            self.save()

    def forget(self, src_path):
        with self._lock:
            if self.state["converted"].pop(self._key(src_path), None) is not None:
                self.save()

    def record_run(self, summary: dict):
        with self._lock:
            self.state["last_run"] = {
                "finished_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                **summary,
            }
            self.save()
