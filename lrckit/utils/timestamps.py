import re

# [H+:]MM:SS.mmm or [H+:]MM:SS,mmm (WebVTT and SubRip both match)
TIMESTAMP_RE = re.compile(r"(?:([0-9]+):)?([0-9]{2}):([0-9]{2})[.,]([0-9]{3})")


def _to_int(value) -> int:
    """Lenient integer conversion: anything unparsable counts as zero."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _match_to_ms(match: re.Match) -> int:
    hours, minutes, seconds, millis = (_to_int(g) for g in match.groups())
    return hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + millis


def parse_timestamp(text: str) -> tuple[int, bool]:
    """
    Find the first timestamp in `text` and convert it to milliseconds.

    Returns:
        (milliseconds, matched). When nothing matches, (0, False).
    """
    match = TIMESTAMP_RE.search(text)
    if not match:
        return 0, False
    return _match_to_ms(match), True


def parse_time_range(line: str) -> tuple[int, int, bool]:
    """
    Read a cue timing line such as `00:00:01.000 --> 00:00:03.500`.

    Only the first two timestamps matter; the arrow between them is not checked.
    """
    matches = []
    for match in TIMESTAMP_RE.finditer(line):
        matches.append(match)
        if len(matches) == 2:
            break

    if len(matches) < 2:
        return 0, 0, False
    return _match_to_ms(matches[0]), _match_to_ms(matches[1]), True


def format_lrc_timestamp(ms: int) -> str:
    """Render milliseconds as an LRC tag `[mm:ss.cc]` (minutes never wrap at 60)."""
    total_sec = ms // 1000
    minutes = total_sec // 60
    seconds = total_sec % 60
    centis = (ms % 1000) // 10
    return f"[{minutes:02d}:{seconds:02d}.{centis:02d}]"
