# python
"""
Utilities to build library folder and file names for movies.

The library keeps one folder per title, and the file inside shares the
folder's stem:

- "Title (Year)/Title (Year).ext"
- "Title/Title.ext"

Notes:
- Invalid filesystem characters are stripped from the title.
- The transform is one-way. A title that legitimately contains a four-digit
  number cannot be told apart from a year when the built name is parsed again.

Example:
    build_names("The Matrix", 1999, "mkv") -> DestinationName("The Matrix (1999)", "The Matrix (1999).mkv")
"""
from dataclasses import dataclass

from movieorg.utils import file_util


@dataclass(frozen=True)
class DestinationName:
    folder_name: str
    file_name: str

    @property
    def stem(self) -> str:
        return self.folder_name


def build_folder_name(title: str, year: int | str | None) -> str:
    """
    Build the library folder name for a movie.

    Returns "Title (Year)" when a year is given, otherwise just "Title".
    """
    title = file_util.sanitize_filename(title)
    if year:
        return f"{title} ({year})"
    return title


def build_names(title: str, year: int | str | None, extension: str) -> DestinationName:
    """
    Build the (folder name, file name) pair for a movie.

    Parameters:
    - title (str): Clean, non-empty movie title.
    - year (int | str | None): Release year, if known.
    - extension (str): File extension with or without the leading dot; lower-cased.

    Returns:
    - DestinationName: folder name and file name sharing the same stem.
    """
    folder_name = build_folder_name(title, year)
    return DestinationName(folder_name, f"{folder_name}{file_util.normalize_extension(extension)}")
