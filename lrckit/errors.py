"""Domain errors for LrcKit."""

from typing import Any, Dict, Optional


class LrcKitError(Exception):
    """Base exception for LrcKit errors."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class SourceUnreadableError(LrcKitError):
    """A subtitle source could not be opened, read or decoded."""


class SinkUnwritableError(LrcKitError):
    """An output file could not be written."""


class ConfigError(LrcKitError):
    """The configuration file is invalid."""
