"""
Movie organizer daemon: move downloaded movies into a title/year library.
Runs a single scan, a dry-run preview, or watches the download folder forever.
"""

import argparse
import signal
import sys
import threading
from pathlib import Path

import movieorg as movieorg_module
from movieorg import rename
from movieorg.rename import collaborator
from movieorg.utils import LogLevel, logger, system_util
from movieorg.utils.config import OrganizerConfig

# Set by SIGINT/SIGTERM; checked between files and while waiting between scans
_shutdown = threading.Event()


def _signal_handler(signum, frame):
    """Handle termination signals gracefully."""
    try:
        sig_name = signal.Signals(signum).name
    except ValueError:
        sig_name = str(signum)
    logger.log("shutdown.requested", LogLevel.INFO, signal=sig_name, msg="Finishing current file before exit")
    _shutdown.set()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="movie-organizer",
        description="Move downloaded movies into a library with one folder per title. "
                    "Titles and years come from the external renamer when configured, "
                    "otherwise from the filename.",
        epilog="Example: movie-organizer --watch --source /mnt/share/downloads --destination /mnt/share/movies",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-c", "--config", action="store_true", help="Show current configuration and exit")
    mode.add_argument("-t", "--test", action="store_true", help="Test mode - show what would be done without moving files")
    mode.add_argument("-w", "--watch", action="store_true", help="Watch mode - continuously monitor for new files")
    mode.add_argument(
        "--init-collaborator-config",
        metavar="PATH",
        help="Write a default renamer configuration to PATH and exit",
    )
    parser.add_argument("--source", help="Download folder to scan (default: $MOVIEORG_SOURCE_DIR)")
    parser.add_argument("--destination", help="Movies library folder (default: $MOVIEORG_DESTINATION_DIR)")
    parser.add_argument("--extensions", help="Comma separated video extensions to pick up, e.g. 'mkv,mp4'")
    parser.add_argument("--interval", type=int, help="Seconds between scans in watch mode")
    parser.add_argument("--log-file", help="Append log lines to this file (in addition to the console)")
    parser.add_argument("--collaborator-config", help="Renamer config file; enables the external renamer")
    parser.add_argument("--collaborator-command", help="Renamer executable (default: mnamer)")
    parser.add_argument("--debug", action="store_true", help="Enable debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {movieorg_module.__version__}")
    return parser


def _config_from_args(args: argparse.Namespace) -> OrganizerConfig:
    extensions = [e for e in args.extensions.split(",") if e.strip()] if args.extensions else None
    return OrganizerConfig.from_env(
        source_dir=args.source,
        destination_dir=args.destination,
        extensions=extensions,
        scan_interval=args.interval,
        log_file=args.log_file,
        collaborator_config=args.collaborator_config,
        collaborator_command=args.collaborator_command,
        dry_run=args.test or None,
    )


def _show_config(config: OrganizerConfig) -> None:
    logger.safe_print("Current Configuration:")
    for key, value in config.describe().items():
        logger.safe_print(f"  {key + ':':<22}{value}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    logger.set_log_level(LogLevel.DEBUG if args.debug else LogLevel.INFO)

    if args.config:
        _show_config(config)
        return 0

    if args.init_collaborator_config:
        try:
            path = collaborator.write_default_config(
                Path(args.init_collaborator_config), movie_directory=config.destination_dir
            )
        except OSError as e:
            logger.log("config.error", LogLevel.ERROR, msg=str(e))
            return 1
        logger.log("config.written", LogLevel.INFO, path=str(path), msg="Edit it to add API keys and paths")
        return 0

    if config.log_file:
        logger.set_log_file(config.log_file)

    if config.uses_collaborator and not system_util.has_binary(config.collaborator_command):
        logger.log(
            "startup.warning",
            LogLevel.WARN,
            msg="Renamer not found on PATH; filename parsing will be used",
            command=config.collaborator_command,
        )

    # Register signal handlers for graceful shutdown
    _shutdown.clear()
    signal.signal(signal.SIGTERM, _signal_handler)
    signal.signal(signal.SIGINT, _signal_handler)

    relocator = rename.build_relocator(config)

    if args.watch:
        logger.log("startup.watch", LogLevel.INFO, msg="Starting watch mode - Press Ctrl+C to stop")
        rename.watch(config, relocator, _shutdown)
        logger.log("shutdown.complete", LogLevel.INFO)
        return 0

    if config.dry_run:
        logger.log("startup.test", LogLevel.INFO, msg="TEST MODE - No files will be moved")

    summary = rename.scan_once(config, relocator, _shutdown)
    logger.log("organizer.end", LogLevel.INFO, processed=summary.processed, failed=summary.failed)
    return 0 if summary.ok else 1


if __name__ == "__main__":
    sys.exit(main())
