"""
Movie relocation functionality for library organization.

This package contains utilities to parse movie filenames, build library
folder and file names, resolve name collisions with versioned filenames, and
move files into the library either directly or through an external metadata
renamer.

Package organization:
- parser: Filename parsing (title and release year extraction, scene tag removal).
- formatter: Library folder and file name helpers.
- versioning: Collision handling with "ver2", "ver3", ... suffixes.
- collaborator: Integration with the external metadata renamer (mnamer).
- core: Single file relocation strategies (direct and delegated with fallback).
- batch: Scan passes over the download folder, once or on an interval.

Public API (top-level exports)
- Parsing:
  - `parse_movie_filename`: Parse a filename into a `ParsedTitle`.
- Naming:
  - `build_names`: Build the (folder name, file name) pair for a movie.
  - `next_available`: Find the next free versioned path in a folder.
- Relocation:
  - `RawEntry`, `DirectRelocator`, `DelegatedRelocator`, `build_relocator`.
- Scanning:
  - `scan_once`: Run a single pass and return a `RunSummary`.
  - `watch`: Run passes until cancelled.

Behavior notes:
- `relocate` never raises for per-file problems; it returns a failed
  `RelocationResult` and the source file stays where it was.
- Existing library files are never overwritten.

Example:
    from pathlib import Path
    from movieorg.utils.config import OrganizerConfig
    import movieorg.rename as rename
    summary = rename.scan_once(OrganizerConfig(Path("downloads"), Path("movies")))
"""
# Parsing and naming
from .parser import ParsedTitle, parse_movie_filename
from .formatter import DestinationName, build_names
from .versioning import next_available, resolve_destination

# Relocation
from .core import (
    DelegatedRelocator,
    DirectRelocator,
    RawEntry,
    RelocationResult,
    build_relocator,
)

# Scanning
from .batch import RunSummary, iter_video_files, scan_once, watch

__all__ = [
    # Parsing and naming
    "ParsedTitle",
    "parse_movie_filename",
    "DestinationName",
    "build_names",
    "next_available",
    "resolve_destination",
    # Relocation
    "RawEntry",
    "RelocationResult",
    "DirectRelocator",
    "DelegatedRelocator",
    "build_relocator",
    # Scanning
    "RunSummary",
    "iter_video_files",
    "scan_once",
    "watch",
]
