import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Iterable, List

from lrckit.logging_utils import get_logger

logger = get_logger(__name__)

CONVERT_EXTS = (".vtt", ".srt")


@dataclass
class FileStat:
    """One candidate file found by a scan; `status` is updated by the engines."""

    id: str
    name: str
    path: str
    status: str = "pending"

    @classmethod
    def from_path(cls, path) -> "FileStat":
        path = str(path)
        return cls(id=path, name=os.path.basename(path), path=path)

    def to_dict(self) -> dict:
        return asdict(self)


def parse_ext_string(ext_string: str) -> List[str]:
    """
    Turn a user-entered list like "wav, .FLAC,zip" into [".wav", ".flac", ".zip"].
    """
    result = []
    for raw in (ext_string or "").split(","):
        clean = raw.strip().lower()
        if not clean:
            continue
        if not clean.startswith("."):
            clean = "." + clean
        result.append(clean)
    return result


def _matches(name: str, exts: Iterable[str]) -> bool:
    return os.path.splitext(name)[1].lower() in exts


def scan_recursive(directory, exts: Iterable[str]) -> List[FileStat]:
    """Walk `directory` and collect files whose extension is in `exts`."""
    target_exts = {e.lower() for e in exts}
    files = []

    # Unreadable directories are skipped (os.walk ignores errors by default)
    for root, dirs, names in os.walk(directory):
        dirs.sort()
        for name in sorted(names):
            if _matches(name, target_exts):
                files.append(FileStat.from_path(os.path.join(root, name)))
    return files


def scan_files(directory) -> List[FileStat]:
    logger.info(f"Scanning VTT/SRT in: {directory}")
    return scan_recursive(directory, CONVERT_EXTS)


def scan_by_ext(directory, ext_string: str) -> List[FileStat]:
    logger.info(f"Scanning extensions [{ext_string}] in: {directory}")
    return scan_recursive(directory, parse_ext_string(ext_string))


def scan_dropped(paths: Iterable, mode: str, ext_string: str = "") -> List[FileStat]:
    """
    Expand a mixed selection of files and folders (e.g. a drag & drop).

    Args:
        paths: Files and/or directories
        mode: "convert" picks subtitle files; anything else uses `ext_string`
        ext_string: Comma-separated extensions for the cleaner

    Returns:
        Matching files; folders are walked recursively
    """
    paths = list(paths)
    if mode == "convert":
        target_exts = list(CONVERT_EXTS)
        logger.info(f"Drag processing: {len(paths)} paths (Mode: Converter)")
    else:
        target_exts = parse_ext_string(ext_string)
        logger.info(f"Drag processing: {len(paths)} paths (Mode: Cleaner)")

    all_files = []
    for p in paths:
        p = Path(os.path.normpath(str(p)))
        try:
            is_dir = p.is_dir()
            if not is_dir:
                p.stat()
        except OSError:
            logger.error(f"Read error: {p.name}")
            continue

        if is_dir:
            all_files.extend(scan_recursive(p, target_exts))
        elif _matches(p.name, target_exts):
            all_files.append(FileStat.from_path(p))

    logger.info(f"Loaded {len(all_files)} files from drag & drop")
    return all_files
