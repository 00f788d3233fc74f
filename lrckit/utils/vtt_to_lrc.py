from pathlib import Path
from typing import Sequence

from lrckit.errors import SinkUnwritableError
from lrckit.utils.subtitle_parser import SubtitleBlock, parse_subtitle_file
from lrckit.utils.timestamps import format_lrc_timestamp


def render_lrc(blocks: Sequence[SubtitleBlock]) -> str:
    """
    Render parsed blocks as LRC text.

    Each block becomes `[mm:ss.cc]text`. A bare timestamp line marks the end
    of a block when silence follows it, and always after the last block.
    """
    lrc_lines = []

    for i, block in enumerate(blocks):
        lrc_lines.append(format_lrc_timestamp(block.start_ms) + " ".join(block.text))

        if i < len(blocks) - 1:
            if block.end_ms < blocks[i + 1].start_ms:
                lrc_lines.append(format_lrc_timestamp(block.end_ms))
        else:
            lrc_lines.append(format_lrc_timestamp(block.end_ms))

    return "\n".join(lrc_lines)


def vtt_to_lrc(vtt_path: Path, lrc_path: Path, encoding: str = "utf-8") -> int:
    """
    Convert a .vtt/.srt file to .lrc.

    Returns the number of blocks converted. Nothing is written when the
    source has no cues.
    """
    blocks = parse_subtitle_file(vtt_path, encoding=encoding)
    if not blocks:
        return 0

    try:
        lrc_path.write_text(render_lrc(blocks), encoding="utf-8")
    except OSError as e:
        raise SinkUnwritableError(
            f"Write failed: {e}", details={"path": str(lrc_path)}
        ) from e
    return len(blocks)
