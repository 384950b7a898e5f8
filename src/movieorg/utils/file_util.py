"""
Filesystem helpers shared by the parser, the naming code and the relocation engine.

This module contains text normalization for filenames, removal of characters
that are invalid on common filesystems, extension allow-list normalization,
and a move helper that never overwrites an existing destination.
"""
import re
import shutil
from pathlib import Path
from typing import Iterable

from movieorg.utils.constants import SEPARATOR_REGEX
from movieorg.utils.errors import MoveFailure


def normalize_text(text: str) -> str:
    """Normalize text by replacing separator runs with a space and collapsing whitespace."""
    text = SEPARATOR_REGEX.sub(" ", text)
    return re.sub(r"\s+", " ", text).strip()


def sanitize_filename(name: str) -> str:
    """
    Remove invalid filesystem characters from a name.
    Uses str.translate() for optimal performance.
    """
    invalid_chars = '<>:"/\\|?*'
    translation_table = str.maketrans('', '', invalid_chars)
    return name.translate(translation_table).strip()


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and make sure it carries a leading dot."""
    ext = ext.strip().lower()
    if ext and not ext.startswith("."):
        ext = f".{ext}"
    return ext


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """
    Normalize an extension allow-list.

    Accepts entries like "mkv", ".MKV" or " .mkv " and returns a frozenset of
    lower-cased, dot-prefixed suffixes suitable for comparing with `Path.suffix.lower()`.
    """
    return frozenset(e for e in (normalize_extension(x) for x in extensions) if e)


def safe_move(src: Path, dst: Path) -> Path:
    """
    Move `src` to `dst` without ever overwriting an existing file.

    Within one filesystem this is an atomic rename. Across filesystems
    shutil.move falls back to copy + delete; if that copy fails, any partial
    destination is removed so the source remains the only copy.

    Raises:
        MoveFailure: When `dst` already exists or the move fails.
    """
    if dst.exists():
        raise MoveFailure(src, dst, "destination already exists")
    try:
        shutil.move(str(src), str(dst), copy_function=shutil.copy2)
    except (OSError, shutil.Error) as e:
        if src.exists() and dst.exists():
            try:
                dst.unlink()
            except OSError:
                pass  # Best effort cleanup of a partial copy
        raise MoveFailure(src, dst, str(e)) from e
    return dst
