"""LrcKit: convert WebVTT/SubRip subtitles to LRC and clean up folders in bulk."""

__version__ = "1.0.0"
