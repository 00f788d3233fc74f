from pathlib import Path
from typing import Iterable, List

from send2trash import send2trash
from tqdm import tqdm

from lrckit.ConfigManager import ConfigManager
from lrckit.FileScanner import FileStat
from lrckit.logging_utils import get_logger

logger = get_logger(__name__)


class RecycleEngine:
    """
    Moves files to the system trash (or deletes them when `permanent_delete` is set).
    """

    def __init__(self, config: ConfigManager):
        self.config = config

    def move_to_trash(self, path) -> bool:
        """Returns True when the file is gone from its original location."""
        path = Path(path)
        try:
            if self.config.permanent_delete:
                path.unlink()
            else:
                send2trash(str(path.absolute()))
            return True
        except OSError as e:
            logger.debug(f"Trash failed for {path}: {e}")
            return False

    def recycle_files(self, paths: Iterable, progress: bool = True) -> int:
        """
        Trash every path in `paths`.

        Returns:
            Number of files successfully removed
        """
        paths = [str(p) for p in paths]
        logger.info(f"Batch recycling {len(paths)} files...")

        count = 0
        for p in tqdm(paths, desc="Recycling", unit="file", disable=not progress):
            if self.move_to_trash(p):
                count += 1
            else:
                logger.error(f"Recycle failed: {Path(p).name}")

        logger.info(f"Recycle complete. Success: {count}/{len(paths)}")
        return count

    def recycle_file_stats(self, files: List[FileStat]) -> int:
        """
        Trash the files of a scan list and record the outcome in each `status`.

        Entries already marked "success" were removed on an earlier run and are
        left alone.

        Returns:
            Number of files removed by this call
        """
        count = 0
        for f in files:
            if f.status == "success":
                continue
            if self.move_to_trash(f.path):
                f.status = "success"
                count += 1
            else:
                f.status = "error"
                logger.error(f"Recycle failed: {f.name}")
        return count
