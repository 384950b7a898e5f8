"""
A module providing constants, configuration, logging, and filesystem helpers
for movie organizing tasks.

This module includes the default settings used to build an explicit run
configuration, the error taxonomy, utility functions for command execution
and safe file moves, and a structured logging mechanism.
"""

from .constants import (
    COLLABORATOR_COMMAND,
    MAX_VERSION,
    NOISE_TOKENS,
    SCAN_INTERVAL,
    STRATEGY_DELEGATED,
    STRATEGY_DIRECT,
    STRATEGY_DRY_RUN,
    VIDEO_EXTENSIONS,
    YEAR_REGEX,
)
from .logger import LogLevel

__all__ = [
    "VIDEO_EXTENSIONS",
    "NOISE_TOKENS",
    "YEAR_REGEX",
    "SCAN_INTERVAL",
    "MAX_VERSION",
    "COLLABORATOR_COMMAND",
    "STRATEGY_DIRECT",
    "STRATEGY_DELEGATED",
    "STRATEGY_DRY_RUN",
    "LogLevel",
]
