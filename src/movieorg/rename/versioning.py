"""
Collision handling for files landing in the movie library.

When a library folder already holds a copy of a movie, the incoming file keeps
the movie's stem and gets a version suffix instead of replacing anything:

    "Title (2020).mkv"          existing
    "Title (2020) - ver2.mp4"   first incoming duplicate
    "Title (2020) - ver3.mkv"   second incoming duplicate

A stem counts as taken when the exact path exists or when another video file
in the folder already uses that stem under a different container extension.
"""
from pathlib import Path
from typing import Iterable

from movieorg.utils import MAX_VERSION, VIDEO_EXTENSIONS, file_util
from movieorg.utils.constants import FIRST_VERSION, TRAILING_YEAR_REGEX, VERSION_FORMAT
from movieorg.utils.errors import CollisionResolutionExhausted


def versioned_name(stem: str, version: int) -> str:
    """
    Return `stem` with a version suffix (no extension).

    A trailing "(YYYY)" group is kept whole and the suffix goes after it:
      versioned_name("Title (2020)", 2) -> "Title (2020) - ver2"
      versioned_name("Title (Part 1) (2020)", 3) -> "Title (Part 1) (2020) - ver3"
      versioned_name("Home Video", 2) -> "Home Video - ver2"
    """
    m = TRAILING_YEAR_REGEX.match(stem)
    if m:
        stem = f"{m.group('head')} ({m.group('year')})"
    return VERSION_FORMAT.format(stem=stem, version=version)


def _stem_in_use(folder: Path, stem: str, extensions: Iterable[str]) -> bool:
    if not folder.is_dir():
        return False
    return any(p.stem == stem and p.suffix.lower() in extensions for p in folder.iterdir())


def is_occupied(folder: Path, stem: str, extension: str, extensions: Iterable[str] = VIDEO_EXTENSIONS) -> bool:
    """Check whether `stem` + `extension` would clash with anything already in `folder`."""
    ext = file_util.normalize_extension(extension)
    if (folder / f"{stem}{ext}").exists():
        return True
    return _stem_in_use(folder, stem, frozenset(extensions) | {ext})


def next_available(
        folder: Path,
        stem: str,
        extension: str,
        max_version: int = MAX_VERSION,
        extensions: Iterable[str] = VIDEO_EXTENSIONS,
) -> Path:
    """
    Find the first free versioned path for `stem` in `folder`, starting at ver2.

    Raises:
        CollisionResolutionExhausted: When every version up to `max_version` is taken.
    """
    ext = file_util.normalize_extension(extension)
    for version in range(FIRST_VERSION, max_version + 1):
        candidate = versioned_name(stem, version)
        if not is_occupied(folder, candidate, ext, extensions):
            return folder / f"{candidate}{ext}"
    raise CollisionResolutionExhausted(folder, stem, max_version)


def resolve_destination(
        folder: Path,
        stem: str,
        extension: str,
        max_version: int = MAX_VERSION,
        extensions: Iterable[str] = VIDEO_EXTENSIONS,
) -> tuple[Path, bool]:
    """
    Return (path, versioned): the unversioned path when free, otherwise the next free version.
    """
    ext = file_util.normalize_extension(extension)
    if not is_occupied(folder, stem, ext, extensions):
        return folder / f"{stem}{ext}", False
    return next_available(folder, stem, ext, max_version, extensions), True
