import os
from pathlib import Path

import yaml

from lrckit.errors import ConfigError
from lrckit.logging_utils import get_logger

logger = get_logger(__name__)

DEFAULTS = {
    "auto_delete_source": True,
    "cleaner_exts": "wav",
    "encoding": "utf-8",
    "workers": 1,
    "permanent_delete": False,
    "state_file": "lrckit_state.json",
}


class ConfigManager:
    """Handles loading, validating and saving the application configuration."""

    def __init__(self, config_path=None):
        # Resolve config path: explicit > env > default
        self.path = Path(
            config_path or os.getenv("LRCKIT_CONFIG_PATH") or "config.yml"
        )
        self.data = self._load()
        self._setup_properties()

    def _load(self):
        if not self.path.exists():
            logger.info(f"Config file '{self.path}' not found, using defaults")
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                logger.info(f"Loading config from: {self.path}")
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise ConfigError(
                f"Failed to parse config file '{self.path}': {e}",
                details={"path": str(self.path)},
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file '{self.path}' must contain a mapping",
                details={"path": str(self.path)},
            )
        return data

    @staticmethod
    def _flag(data, key) -> bool:
        # YAML true/false only; quoted strings such as "no" are rejected
        value = data[key]
        if not isinstance(value, bool):
            raise ConfigError(f"{key} must be true or false, got {value!r}")
        return value

    def _setup_properties(self):
        data = {**DEFAULTS, **self.data}

        self.auto_delete_source = self._flag(data, "auto_delete_source")
        self.permanent_delete = self._flag(data, "permanent_delete")

        # Cleaner extensions may be written as a list or as "wav, flac"
        cleaner_exts = data["cleaner_exts"]
        if isinstance(cleaner_exts, (list, tuple)):
            cleaner_exts = ",".join(str(e) for e in cleaner_exts)
        self.cleaner_exts = str(cleaner_exts or "")

        self.encoding = str(data["encoding"] or DEFAULTS["encoding"])

        try:
            workers = int(data["workers"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"workers must be an integer, got {data['workers']!r}") from e
        self.workers = max(1, workers)

        self.state_file = Path(data["state_file"] or DEFAULTS["state_file"])
        if str(self.state_file).startswith("~"):
            self.state_file = self.state_file.expanduser()

    def as_dict(self) -> dict:
        return {
            "auto_delete_source": self.auto_delete_source,
            "cleaner_exts": self.cleaner_exts,
            "encoding": self.encoding,
            "workers": self.workers,
            "permanent_delete": self.permanent_delete,
            "state_file": str(self.state_file),
        }

    def update(self, **values):
        """Apply new setting values in memory and re-validate them."""
        unknown = set(values) - set(DEFAULTS)
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        self.data = {**self.as_dict(), **values}
        self._setup_properties()

    def save(self):
        """Write the current settings back to the config file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.as_dict(), f, sort_keys=False, allow_unicode=True)
        logger.info(f"Config saved to {self.path}")
