import argparse
import sys
from typing import List, Optional

from lrckit.ConfigManager import ConfigManager
from lrckit.ConvertEngine import STATUS_SUCCESS, ConvertEngine
from lrckit.errors import ConfigError
from lrckit.FileScanner import scan_by_ext, scan_dropped, scan_files
from lrckit.logging_utils import get_logger
from lrckit.RecycleEngine import RecycleEngine
from lrckit.StateManager import StateManager

logger = get_logger(__name__)


class LrcKitApp:
    """
    Wires configuration, state and the engines together for the command line.
    """

    def __init__(self, config_path=None):
        logger.info("Initializing components...")
        self.config = ConfigManager(config_path)
        self.state = StateManager(self.config.state_file)
        self.recycler = RecycleEngine(self.config)
        self.engine = ConvertEngine(self.config, self.recycler, self.state)
        logger.info("LrcKit started. Ready.")

    def scan(self, directory: str, ext: Optional[str] = None) -> int:
        files = scan_by_ext(directory, ext) if ext else scan_files(directory)
        for f in files:
            print(f.path)
        logger.info(f"Found {len(files)} files")
        return 0

    def convert(
        self, paths: List[str], delete_source: Optional[bool], force: bool = False
    ) -> int:
        files = scan_dropped(paths, "convert")
        if not files:
            logger.warning("No .vtt/.srt files found in the given paths")
            return 1

        results = self.engine.convert_batch(
            files, delete_source=delete_source, force=force
        )
        failed = [path for path, status in results.items() if status != STATUS_SUCCESS]
        for path in failed:
            print(f"{results[path]}\t{path}")
        return 1 if failed else 0

    def clean(self, paths: List[str], ext: Optional[str], confirm: bool) -> int:
        ext_string = ext if ext is not None else self.config.cleaner_exts
        files = scan_dropped(paths, "cleaner", ext_string)
        if not files:
            logger.warning(f"No files matching [{ext_string}] found")
            return 0

        if not confirm:
            for f in files:
                print(f.path)
            logger.info(f"Dry run: {len(files)} files would be recycled (pass --yes)")
            return 0

        removed = self.recycler.recycle_files([f.path for f in files])
        return 0 if removed == len(files) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lrckit",
        description="Convert .vtt/.srt subtitles to .lrc lyrics and clean up folders.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yml (default: $LRCKIT_CONFIG_PATH or ./config.yml).",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    scan = sub.add_parser("scan", help="List convertible (or matching) files.")
    scan.add_argument("directory")
    scan.add_argument(
        "--ext",
        default=None,
        help="Comma-separated extensions to list instead of .vtt/.srt (e.g. 'wav, flac').",
    )

    conv = sub.add_parser("convert", help="Convert .vtt/.srt files to .lrc.")
    conv.add_argument("paths", nargs="+", help="Files and/or folders.")
    delete = conv.add_mutually_exclusive_group()
    delete.add_argument(
        "--delete-source",
        dest="delete_source",
        action="store_true",
        default=None,
        help="Move converted sources to the trash.",
    )
    delete.add_argument(
        "--keep-source",
        dest="delete_source",
        action="store_false",
        help="Keep converted sources.",
    )
    conv.add_argument(
        "--workers", type=int, default=None, help="Parallel conversions (default: config)."
    )
    conv.add_argument(
        "--force",
        action="store_true",
        help="Reconvert files even if they were converted before and are unchanged.",
    )

    clean = sub.add_parser("clean", help="Move matching files to the trash.")
    clean.add_argument("paths", nargs="+", help="Files and/or folders.")
    clean.add_argument(
        "--ext", default=None, help="Comma-separated extensions (default: config cleaner_exts)."
    )
    clean.add_argument(
        "--yes", action="store_true", help="Actually recycle; without it only list matches."
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        app = LrcKitApp(args.config)
    except ConfigError as e:
        logger.error(f"Failed to initialize components: {e}")
        return 2

    if getattr(args, "workers", None) is not None:
        app.config.update(workers=args.workers)

    commands = {
        "scan": lambda: app.scan(args.directory, args.ext),
        "convert": lambda: app.convert(args.paths, args.delete_source, args.force),
        "clean": lambda: app.clean(args.paths, args.ext, args.yes),
    }
    return commands[args.cmd]()


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Exiting...")
        sys.exit(130)
