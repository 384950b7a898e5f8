"""
A media organizing module for moving downloaded movies into a tidy library.

This module watches a download folder for newly arrived video files, infers a
title and release year from each noisy filename, and relocates every file into
a destination library laid out as one folder per title. Name collisions are
resolved with versioned filenames so existing files are never overwritten.

The module is organized into two categories:
- Parsing, naming, collision handling and relocation (``movieorg.rename``).
- Configuration, logging, and filesystem/process helpers (``movieorg.utils``).
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
