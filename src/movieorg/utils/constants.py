"""
Constants and default settings for movie organization.

This module contains the defaults used when building an ``OrganizerConfig``:
source and destination folders, the accepted video extensions, the scene
release tags stripped from titles, scan timing, and the external renamer
invocation. Values here are defaults only; the effective configuration is
always passed around explicitly.
"""

import re

from dotenv import load_dotenv

load_dotenv()

# Environment variable prefix for configuration overrides
ENV_PREFIX = "MOVIEORG_"

# Folder defaults
SOURCE_FOLDER = "/mnt/smb-share/downloads"
DESTINATION_FOLDER = "/mnt/smb-share/movies"

# Run settings
SCAN_INTERVAL = 60  # seconds between scans in watch mode
MAX_LOG_SIZE = 10 * 1024 * 1024  # rotate the log file past 10MB

# Accepted video file extensions
VIDEO_EXTENSIONS = frozenset({
    ".mp4", ".mkv", ".avi", ".mov", ".wmv", ".flv",
    ".webm", ".m4v", ".mp2", ".mpg", ".mpeg", ".m2v",
})

# Scene release tags carrying no title information
NOISE_TOKENS = (
    "720p", "1080p", "2160p", "4K",
    "HDTV", "BluRay", "BRRip", "DVDRip", "WEBRip",
    "YIFY",
    "x264", "x265", "H264", "H265",
)

# Regex patterns for filename parsing
YEAR_REGEX = re.compile(r"(?<![0-9A-Za-z])(?:19|20)\d{2}(?![0-9A-Za-z])")
SEPARATOR_REGEX = re.compile(r"[._\-]+")
TRAILING_YEAR_REGEX = re.compile(r"^(?P<head>.*\S)\s*\((?P<year>\d{4})\)$")

# Collision handling
FIRST_VERSION = 2
MAX_VERSION = 9999
VERSION_FORMAT = "{stem} - ver{version}"

# External metadata renamer
COLLABORATOR_COMMAND = "mnamer"
COLLABORATOR_TIMEOUT = 600  # seconds
COLLABORATOR_DEFAULT_CONFIG = {
    "api_key_tmdb": "",
    "batch": True,
    "config_ignore": False,
    "episode_api": "tvdb",
    "episode_directory": "/mnt/smb-share/tv",
    "episode_format": "{series} - S{season:02d}E{episode:02d} - {title}",
    "hits": 5,
    "ignore": [".*sample.*", ".*trailer.*", ".*preview.*"],
    "language": "en",
    "lower": False,
    "mask": ["nfo", "txt", "srt"],
    "movie_api": "tmdb",
    "movie_directory": DESTINATION_FOLDER,
    "movie_format": "{title} ({year})",
    "no_cache": False,
    "no_guess": False,
    "no_overwrite": False,
    "no_style": False,
    "recurse": True,
    "scene": False,
    "verbose": 1,
}

# Relocation strategy names
STRATEGY_DIRECT = "direct"
STRATEGY_DELEGATED = "delegated"
STRATEGY_DRY_RUN = "dry-run"
