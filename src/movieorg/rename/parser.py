"""
Module for parsing noisy movie filenames into a clean title and release year.

Scene releases pack resolution, source, codec and release-group tags around
the actual title. The parser keeps only the part of the name before the last
year-like token and strips the known tags from it.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath
from typing import Iterable

from movieorg.utils import NOISE_TOKENS, YEAR_REGEX, file_util
from movieorg.utils.errors import ParseError


@dataclass(frozen=True)
class ParsedTitle:
    title: str
    year: int | None = None


@lru_cache(maxsize=32)
def _noise_regex(tokens: tuple[str, ...]) -> re.Pattern | None:
    # Tokens are matched against normalized text, so normalize them the same way.
    words = {file_util.normalize_text(t) for t in tokens} - {""}
    if not words:
        return None
    alternation = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def find_year(text: str) -> re.Match | None:
    """Return the last (rightmost) 19xx/20xx token in `text`, if any."""
    year_match = None
    for match in YEAR_REGEX.finditer(text):
        year_match = match
    return year_match


def clean_title(candidate: str, noise_tokens: Iterable[str] = NOISE_TOKENS) -> str:
    """
    Turn a raw title candidate into a human title.

    Separators become spaces, scene release tags are dropped, and brackets
    left empty or dangling by the year cut are removed.
    """
    title = file_util.normalize_text(candidate)

    rx = _noise_regex(tuple(noise_tokens))
    if rx is not None:
        title = rx.sub(" ", title)

    title = re.sub(r"\(\s*\)|\[\s*\]|\{\s*\}", " ", title)
    # Characters that cannot appear in a folder name
    title = file_util.sanitize_filename(title)
    title = re.sub(r"\s+", " ", title).strip()
    # "Title (" remains when the year sat inside parentheses
    title = title.rstrip(" ([{").strip()
    return title


def parse_movie_filename(filename: str, noise_tokens: Iterable[str] = NOISE_TOKENS) -> ParsedTitle:
    """
    Extract a title and an optional release year from a movie filename.

    Examples:
      "The.Matrix.1999.1080p.BluRay.x264.mkv" -> ParsedTitle("The Matrix", 1999)
      "Blade.Runner.2049.2017.mkv" -> ParsedTitle("Blade Runner 2049", 2017)
      "random_home_video.mp4" -> ParsedTitle("random home video", None)

    Raises:
        ParseError: When nothing usable is left once the name is cleaned.
    """
    stem = PurePath(filename).stem

    year = None
    candidate = stem
    year_match = find_year(stem)
    if year_match:
        year = int(year_match.group(0))
        candidate = stem[: year_match.start()]

    title = clean_title(candidate, noise_tokens)
    if not title:
        raise ParseError(filename)
    return ParsedTitle(title=title, year=year)
