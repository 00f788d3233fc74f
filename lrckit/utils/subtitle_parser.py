"""
Line-oriented parser for WebVTT and SubRip subtitle files.

Subtitle files in the wild are often hand-edited, so the parser is lenient:
lines it does not understand are skipped instead of raising. The only error
it reports is failing to read the source itself.
"""

import io
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from lrckit.errors import SourceUnreadableError
from lrckit.utils.timestamps import parse_time_range

# Non-greedy, non-nested. An unterminated "<" never matches and stays in the text.
TAG_RE = re.compile(r"<[^>]*>")
INDEX_RE = re.compile(r"^[0-9]+$")

BOM = "\ufeff"


@dataclass(frozen=True)
class SubtitleBlock:
    start_ms: int
    end_ms: int
    text: Tuple[str, ...] = field(default_factory=tuple)


def strip_tags(line: str) -> str:
    """Remove inline markup such as <b>, </i> or <c.colorE5E5E5> from a line."""
    return TAG_RE.sub("", line)


def _is_ignored(line: str) -> bool:
    # WebVTT header and comment blocks
    return line == "WEBVTT" or line.startswith("NOTE")


def parse_subtitle(source: Union[str, Iterable[str]]) -> List[SubtitleBlock]:
    """
    Parse subtitle content into an ordered list of timed blocks.

    Args:
        source: Whole file content as a string, or any iterable of lines
            (an open text file works).

    Returns:
        Blocks in source order. An empty list means no cue was found.

    Raises:
        SourceUnreadableError: if reading or decoding the source fails.
    """
    # Same line splitting as a file opened in text mode: \n, \r\n and \r only
    lines = io.StringIO(source, newline=None) if isinstance(source, str) else source

    blocks: List[SubtitleBlock] = []
    start_ms = end_ms = 0
    text: List[str] = []
    in_block = False

    def finalize():
        blocks.append(SubtitleBlock(start_ms, end_ms, tuple(text)))

    try:
        for lineno, raw in enumerate(lines):
            if lineno == 0 and raw.startswith(BOM):
                raw = raw[len(BOM):]
            line = raw.strip()

            if not line:
                if in_block:
                    finalize()
                    in_block = False
                continue

            if _is_ignored(line):
                continue

            start, end, ok = parse_time_range(line)
            if ok:
                if in_block:
                    finalize()
                start_ms, end_ms, text = start, end, []
                in_block = True
                continue

            if not in_block:
                continue

            # SubRip sequence numbers
            if INDEX_RE.match(line):
                continue

            line = strip_tags(line)
            if line:
                text.append(line)
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnreadableError(f"Failed to read subtitle source: {e}") from e

    if in_block:
        finalize()
    return blocks


def parse_subtitle_file(path: Path, encoding: str = "utf-8") -> List[SubtitleBlock]:
    """Open `path` and parse it. Open, read and decode failures become SourceUnreadableError."""
    path = Path(path)
    try:
        with path.open("r", encoding=encoding) as f:
            return parse_subtitle(f)
    except SourceUnreadableError as e:
        e.details.setdefault("path", str(path))
        raise
    except (OSError, UnicodeDecodeError, LookupError) as e:
        raise SourceUnreadableError(
            f"Cannot open {path.name}: {e}", details={"path": str(path)}
        ) from e
