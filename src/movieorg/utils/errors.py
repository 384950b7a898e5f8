"""Exception types raised while organizing movies.

Every error here is recoverable: the relocation engine turns per-file errors
into failed results, and the scanner turns a missing source folder into a
run-level error, so one bad file never stops a scan.
"""
from pathlib import Path


class OrganizerError(Exception):
    """Base error for the project."""


class ParseError(OrganizerError):
    """No usable title remains after cleaning a filename."""

    def __init__(self, filename: str):
        super().__init__(f"Could not extract a title from '{filename}'")
        self.filename = filename


class CollisionResolutionExhausted(OrganizerError):
    """Every version slot up to the limit is already taken."""

    def __init__(self, folder: Path, stem: str, limit: int):
        super().__init__(f"No free version of '{stem}' in {folder} up to ver{limit}")
        self.folder = folder
        self.stem = stem
        self.limit = limit


class MoveFailure(OrganizerError):
    """An I/O error while moving or copying a file into place."""

    def __init__(self, src: Path, dst: Path, reason: str):
        super().__init__(f"Failed to move {src} to {dst}: {reason}")
        self.src = src
        self.dst = dst
        self.reason = reason


class CollaboratorFailure(OrganizerError):
    """The external renamer failed, timed out, or produced nothing usable."""


class SourceDirectoryError(OrganizerError):
    """The folder to scan does not exist or is not a directory."""

    def __init__(self, path: Path):
        super().__init__(f"Download folder not found: {path}")
        self.path = path
