"""
Relocation of single movie files into the library.

This module moves one discovered file into its library folder. Two strategies
share the same collision handling and move primitives:

- DirectRelocator: parse the filename, build the library names, and move the
  file into place.
- DelegatedRelocator: let the external metadata renamer pick the name inside
  a private scratch folder first, and fall back to the direct strategy when
  the renamer fails or produces nothing.

`relocate` never raises for per-file problems. Every outcome comes back as a
RelocationResult so a scan can carry on with the next file.

Functions:
- build_relocator: Picks the strategy for a configuration.
"""

import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from movieorg.rename import formatter, parser, versioning
from movieorg.rename.collaborator import ExternalRenamer
from movieorg.utils import STRATEGY_DELEGATED, STRATEGY_DIRECT, STRATEGY_DRY_RUN, LogLevel, file_util, logger
from movieorg.utils.config import OrganizerConfig
from movieorg.utils.errors import CollaboratorFailure, OrganizerError


@dataclass(frozen=True)
class RawEntry:
    """A video file found by the scanner."""

    path: Path
    filename: str
    extension: str

    @classmethod
    def from_path(cls, path: Path) -> "RawEntry":
        path = Path(path).absolute()
        return cls(path=path, filename=path.name, extension=path.suffix.lower())


@dataclass
class RelocationResult:
    """Outcome of relocating one file."""

    entry: RawEntry
    success: bool
    destination: Path | None = None
    reason: str | None = None
    strategy: str = STRATEGY_DIRECT
    versioned: bool = False


class Relocator:
    """Shared collision handling and move primitives for both strategies."""

    strategy = STRATEGY_DIRECT

    def __init__(self, config: OrganizerConfig):
        self.config = config

    def relocate(self, entry: RawEntry) -> RelocationResult:
        raise NotImplementedError

    def _commit(self, src: Path, entry: RawEntry, stem: str, extension: str, strategy: str) -> RelocationResult:
        """
        Move `src` into `<destination>/<stem>/`, versioning the name on collision.

        The folder is created first; the free slot is resolved right before
        the move so the existence check is as fresh as possible.
        """
        folder = self.config.destination_dir / stem

        if self.config.dry_run:
            target, versioned = versioning.resolve_destination(folder, stem, extension, extensions=self.config.extensions)
            logger.log(
                "relocate.dry_run",
                LogLevel.INFO,
                file=entry.filename,
                target=str(target.relative_to(self.config.destination_dir)),
                versioned=versioned,
            )
            return RelocationResult(entry, True, target, strategy=STRATEGY_DRY_RUN, versioned=versioned)

        if not folder.is_dir():
            folder.mkdir(parents=True, exist_ok=True)
            logger.log("relocate.folder", LogLevel.INFO, folder=stem)

        target, versioned = versioning.resolve_destination(folder, stem, extension, extensions=self.config.extensions)
        if versioned:
            logger.log("relocate.version", LogLevel.INFO, file=entry.filename, versioned_name=target.name)

        file_util.safe_move(src, target)
        logger.log(
            "relocate.success",
            LogLevel.INFO,
            file=entry.filename,
            target=str(target.relative_to(self.config.destination_dir)),
            strategy=strategy,
        )
        return RelocationResult(entry, True, target, strategy=strategy, versioned=versioned)

    @staticmethod
    def _failure(entry: RawEntry, stage: str, error: Exception, strategy: str) -> RelocationResult:
        logger.log("relocate.error", LogLevel.ERROR, file=entry.filename, stage=stage, error=str(error))
        return RelocationResult(entry, False, reason=f"{stage}: {error}", strategy=strategy)


class DirectRelocator(Relocator):
    """Names the file from its own filename and moves it into place."""

    strategy = STRATEGY_DIRECT

    def relocate(self, entry: RawEntry) -> RelocationResult:
        logger.log("relocate.direct", LogLevel.DEBUG, file=entry.filename)

        try:
            parsed = parser.parse_movie_filename(entry.filename, self.config.noise_tokens)
        except OrganizerError as e:
            return self._failure(entry, "parse", e, self.strategy)

        names = formatter.build_names(parsed.title, parsed.year, entry.extension)
        logger.log(
            "relocate.parsed",
            LogLevel.DEBUG,
            file=entry.filename,
            title=parsed.title,
            year=parsed.year,
            folder=names.folder_name,
        )

        try:
            return self._commit(entry.path, entry, names.stem, entry.extension, self.strategy)
        except OrganizerError as e:
            return self._failure(entry, "move", e, self.strategy)
        except OSError as e:
            return self._failure(entry, "destination", e, self.strategy)


class DelegatedRelocator(Relocator):
    """
    Lets the external renamer choose the name, falling back to DirectRelocator.

    The renamer only ever sees a copy of the source inside a fresh scratch
    folder. The original is removed only once the renamed copy is safely in
    the library, and the scratch folder is removed on every exit path.
    """

    strategy = STRATEGY_DELEGATED

    def __init__(self, config: OrganizerConfig, renamer: ExternalRenamer | None = None,
                 fallback: Relocator | None = None):
        super().__init__(config)
        self.renamer = renamer or ExternalRenamer(
            config.collaborator_config,
            command=config.collaborator_command,
            timeout=config.collaborator_timeout,
        )
        self.fallback = fallback or DirectRelocator(config)

    def _make_scratch(self) -> Path:
        root = self.config.scratch_root
        if root is not None:
            root.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=f"{int(time.time())}-", dir=root))

    def relocate(self, entry: RawEntry) -> RelocationResult:
        if self.config.dry_run:
            # The renamer works on real copies; previews use filename parsing only.
            return self.fallback.relocate(entry)

        logger.log("relocate.delegated", LogLevel.INFO, file=entry.filename, renamer=self.renamer.command)

        try:
            scratch = self._make_scratch()
        except OSError as e:
            logger.log("relocate.fallback", LogLevel.WARN, file=entry.filename, reason=f"no scratch folder: {e}")
            return self.fallback.relocate(entry)

        try:
            try:
                renamed = self._rename_copy(entry, scratch)
            except CollaboratorFailure as e:
                logger.log("relocate.fallback", LogLevel.WARN, file=entry.filename, reason=str(e))
                # Scratch is gone before the fallback touches the source.
                shutil.rmtree(scratch, ignore_errors=True)
                return self.fallback.relocate(entry)

            logger.log("relocate.renamed", LogLevel.INFO, file=entry.filename, new_name=renamed.name)
            try:
                result = self._commit(renamed, entry, renamed.stem, renamed.suffix.lower(), self.strategy)
            except OrganizerError as e:
                return self._failure(entry, "move", e, self.strategy)
            except OSError as e:
                return self._failure(entry, "destination", e, self.strategy)

            try:
                entry.path.unlink()
            except OSError as e:
                logger.log("relocate.cleanup", LogLevel.WARN, file=entry.filename, error=str(e))
            return result
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

    def _rename_copy(self, entry: RawEntry, scratch: Path) -> Path:
        work_copy = scratch / entry.filename
        try:
            shutil.copy2(entry.path, work_copy)
        except OSError as e:
            raise CollaboratorFailure(f"could not copy to scratch folder: {e}") from e
        return self.renamer.rename_in(work_copy)


def build_relocator(config: OrganizerConfig) -> Relocator:
    """Pick the delegated strategy when a renamer config is set, otherwise direct."""
    if config.uses_collaborator:
        return DelegatedRelocator(config)
    return DirectRelocator(config)
