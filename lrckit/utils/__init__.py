from lrckit.utils.subtitle_parser import (
    SubtitleBlock,
    parse_subtitle,
    parse_subtitle_file,
    strip_tags,
)
from lrckit.utils.timestamps import (
    format_lrc_timestamp,
    parse_time_range,
    parse_timestamp,
)
from lrckit.utils.vtt_to_lrc import render_lrc, vtt_to_lrc

__all__ = [
    "SubtitleBlock",
    "parse_subtitle",
    "parse_subtitle_file",
    "strip_tags",
    "format_lrc_timestamp",
    "parse_time_range",
    "parse_timestamp",
    "render_lrc",
    "vtt_to_lrc",
]
