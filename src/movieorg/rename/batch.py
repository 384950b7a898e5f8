# python
"""Scan passes that move downloaded movies into the library.

This module finds video files under the download folder and drives each one
through the relocation engine, one file at a time, tallying the outcome of the
pass. `watch` repeats passes on a fixed interval until told to stop. It is
non-interactive and intended to be driven by the CLI or a service manager.
"""
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from tqdm import tqdm

from movieorg.rename.core import RawEntry, RelocationResult, Relocator, build_relocator
from movieorg.utils import VIDEO_EXTENSIONS, LogLevel, file_util, logger
from movieorg.utils.config import OrganizerConfig
from movieorg.utils.errors import SourceDirectoryError


@dataclass
class RunSummary:
    """Tally of one scan pass."""

    processed: int = 0
    failed: int = 0
    error: str | None = None
    cancelled: bool = False
    results: list[RelocationResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def record(self, result: RelocationResult) -> None:
        self.results.append(result)
        if result.success:
            self.processed += 1
        else:
            self.failed += 1


def iter_video_files(root: Path, extensions: Iterable[str] = VIDEO_EXTENSIONS) -> list[Path]:
    """Find all video files recursively, in path order."""
    allowed = file_util.normalize_extensions(extensions)
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix.lower() in allowed)


def _check_source(root: Path) -> None:
    if not root.is_dir():
        raise SourceDirectoryError(root)


def scan_once(
        config: OrganizerConfig,
        relocator: Relocator | None = None,
        cancel: threading.Event | None = None,
        show_progress: bool = True,
) -> RunSummary:
    """Run a single scan pass over `config.source_dir`.

    The function:
    - Reports a run-level error, and touches nothing, when the source folder is missing.
    - Creates the destination folder when needed (not in dry-run mode).
    - Relocates each matching file in turn, checking `cancel` between files.

    Args:
        config (OrganizerConfig): Effective run configuration.
        relocator (Relocator): Strategy to use; built from `config` when omitted.
        cancel (threading.Event): Set it to stop after the current file.
        show_progress (bool): Show a tqdm progress bar.

    Returns:
        RunSummary: Counts of relocated and failed files for this pass.
    """
    summary = RunSummary()
    source = config.source_dir
    destination = config.destination_dir

    logger.log("scan.start", LogLevel.INFO, source=str(source), dry_run=config.dry_run)

    try:
        _check_source(source)
    except SourceDirectoryError as e:
        summary.error = str(e)
        logger.log("scan.error", LogLevel.ERROR, msg=summary.error, source=str(source))
        return summary

    if not destination.is_dir() and not config.dry_run:
        logger.log("scan.destination", LogLevel.INFO, msg="Creating movies destination folder", path=str(destination))
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            summary.error = f"Could not create destination folder {destination}: {e}"
            logger.log("scan.error", LogLevel.ERROR, msg=summary.error)
            return summary

    relocator = relocator or build_relocator(config)
    try:
        files = iter_video_files(source, config.extensions)
    except OSError as e:
        summary.error = f"Could not list {source}: {e}"
        logger.log("scan.error", LogLevel.ERROR, msg=summary.error)
        return summary

    logger.log("scan.found", LogLevel.DEBUG, files=len(files))

    for file in tqdm(files, desc="Organizing movies", disable=not show_progress or not files):
        if cancel is not None and cancel.is_set():
            summary.cancelled = True
            logger.log("scan.cancelled", LogLevel.WARN, remaining=len(files) - len(summary.results))
            break

        logger.log("scan.file", LogLevel.INFO, file=file.name)
        summary.record(relocator.relocate(RawEntry.from_path(file)))

    logger.log("scan.end", LogLevel.INFO, processed=summary.processed, failed=summary.failed)
    return summary


def watch(
        config: OrganizerConfig,
        relocator: Relocator | None = None,
        cancel: threading.Event | None = None,
        show_progress: bool = False,
) -> int:
    """
    Scan repeatedly, waiting `config.scan_interval` seconds between passes.

    Runs until `cancel` is set. A failed pass (for example a missing download
    folder) is logged and retried on the next interval.

    Returns:
        int: Number of completed passes.
    """
    cancel = cancel or threading.Event()
    relocator = relocator or build_relocator(config)
    passes = 0

    logger.log("watch.start", LogLevel.INFO, interval=config.scan_interval, source=str(config.source_dir))
    while not cancel.is_set():
        summary = scan_once(config, relocator, cancel, show_progress=show_progress)
        passes += 1
        if not summary.ok:
            logger.log("watch.retry", LogLevel.WARN, msg=summary.error, next_scan=config.scan_interval)
        if cancel.wait(config.scan_interval):
            break

    logger.log("watch.stop", LogLevel.INFO, passes=passes)
    return passes
