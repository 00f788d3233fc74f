from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, Optional

from tqdm import tqdm

from lrckit.ConfigManager import ConfigManager
from lrckit.errors import SinkUnwritableError, SourceUnreadableError
from lrckit.FileScanner import FileStat
from lrckit.logging_utils import get_logger
from lrckit.RecycleEngine import RecycleEngine
from lrckit.StateManager import StateManager
from lrckit.utils.vtt_to_lrc import vtt_to_lrc

logger = get_logger(__name__)

STATUS_SUCCESS = "success"
STATUS_FAILED = "failed"
STATUS_ERROR = "error"
STATUS_WRITE_ERROR = "write_error"

AUDIO_EXTS = (".wav", ".mp3", ".flac", ".m4a")


def lrc_output_path(src_path) -> Path:
    """
    song.vtt -> song.lrc, and song.mp3.srt -> song.lrc (audio extension dropped).
    """
    src = str(src_path)
    base = src[: len(src) - len(Path(src).suffix)]
    ext = Path(base).suffix
    if ext.lower() in AUDIO_EXTS:
        base = base[: len(base) - len(ext)]
    return Path(base + ".lrc")


class ConvertEngine:
    """
    Converts .vtt/.srt files to .lrc and reports one status per file:
    "success", "failed" (no cues), "error" (unreadable source) or
    "write_error" (output not written).
    """

    def __init__(
        self,
        config: ConfigManager,
        recycler: Optional[RecycleEngine] = None,
        state: Optional[StateManager] = None,
    ):
        self.config = config
        self.recycler = recycler or RecycleEngine(config)
        self.state = state

    def convert_file(self, src_path, delete_source: Optional[bool] = None) -> str:
        src_path = Path(src_path)
        if delete_source is None:
            delete_source = self.config.auto_delete_source

        lrc_path = lrc_output_path(src_path)
        try:
            count = vtt_to_lrc(src_path, lrc_path, encoding=self.config.encoding)
        except SourceUnreadableError as e:
            logger.error(f"Parse failed: {src_path.name} ({e})")
            return STATUS_ERROR
        except SinkUnwritableError as e:
            logger.error(str(e))
            return STATUS_WRITE_ERROR

        if not count:
            logger.warning(f"Empty/Invalid file: {src_path.name}")
            return STATUS_FAILED

        if self.state is not None:
            self.state.mark_converted(src_path, lrc_path)

        if delete_source:
            if self.recycler.move_to_trash(src_path):
                logger.info(f"Converted & Deleted: {src_path.name}")
            else:
                logger.warning(f"Converted but delete failed: {src_path.name}")
        else:
            logger.info(f"Converted: {src_path.name}")
        return STATUS_SUCCESS

    def _should_skip(self, item: FileStat) -> bool:
        if item.status == STATUS_SUCCESS:
            return True
        if self.state is None or not self.state.is_converted(item.path):
            return False
        # Reconvert when the source changed after its .lrc was written
        try:
            src_mtime = Path(item.path).stat().st_mtime
            lrc_mtime = lrc_output_path(item.path).stat().st_mtime
        except OSError:
            return False
        return lrc_mtime >= src_mtime

    def convert_batch(
        self,
        files: Iterable,
        delete_source: Optional[bool] = None,
        progress: bool = True,
        force: bool = False,
    ) -> Dict[str, str]:
        """
        Convert many files; entries may be FileStat objects or plain paths.

        FileStat entries get their `status` updated ("processing", then the
        result). Entries already marked "success" are skipped, as are files
        the state manager recorded as converted whose .lrc is newer than the
        source; skipped entries are marked "success". `force` converts
        everything and clears the recorded state first.

        Returns:
            {path: status} for every file that was processed
        """
        items = [f if isinstance(f, FileStat) else FileStat.from_path(f) for f in files]
        if force:
            todo = items
            if self.state is not None:
                for item in items:
                    self.state.forget(item.path)
        else:
            todo = []
            for item in items:
                if self._should_skip(item):
                    item.status = STATUS_SUCCESS
                else:
                    todo.append(item)
        skipped = len(items) - len(todo)
        if skipped:
            logger.info(f"Skipping {skipped} already converted files")

        results: Dict[str, str] = {}
        bar = tqdm(total=len(todo), desc="Converting", unit="file", disable=not progress)

        def run(item: FileStat) -> str:
            item.status = "processing"
            status = self.convert_file(item.path, delete_source)
            item.status = status
            return status

        try:
            if self.config.workers > 1 and len(todo) > 1:
                with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                    future_to_item = {executor.submit(run, item): item for item in todo}
                    for future in as_completed(future_to_item):
                        item = future_to_item[future]
                        results[item.path] = future.result()
                        bar.update()
            else:
                for item in todo:
                    results[item.path] = run(item)
                    bar.update()
        finally:
            bar.close()

        summary = {
            status: sum(1 for r in results.values() if r == status)
            for status in (STATUS_SUCCESS, STATUS_FAILED, STATUS_ERROR, STATUS_WRITE_ERROR)
        }
        summary["skipped"] = skipped
        logger.info(
            f"Conversion complete - "
            f"Success: {summary[STATUS_SUCCESS]}, "
            f"Failed: {summary[STATUS_FAILED]}, "
            f"Errors: {summary[STATUS_ERROR]}, "
            f"Write errors: {summary[STATUS_WRITE_ERROR]}, "
            f"Skipped: {skipped}"
        )
        if self.state is not None:
            self.state.record_run(summary)
        return results
