"""
Explicit run configuration for the organizer.

An ``OrganizerConfig`` is built once at startup (from defaults, ``MOVIEORG_*``
environment variables loaded through python-dotenv, and command line
overrides) and handed to the scanner and the relocation engine. Nothing
reads configuration from module globals after that point.

Recognized environment variables:
- MOVIEORG_SOURCE_DIR, MOVIEORG_DESTINATION_DIR
- MOVIEORG_EXTENSIONS (comma separated, e.g. "mkv,mp4")
- MOVIEORG_SCAN_INTERVAL (seconds)
- MOVIEORG_LOG_FILE
- MOVIEORG_COLLABORATOR_CONFIG, MOVIEORG_COLLABORATOR_COMMAND, MOVIEORG_COLLABORATOR_TIMEOUT
- MOVIEORG_SCRATCH_DIR
- MOVIEORG_NOISE_TOKENS (comma separated, appended to the built-in list)
"""
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict

from movieorg.utils import constants
from movieorg.utils.file_util import normalize_extensions


def _env(name: str) -> str | None:
    value = os.getenv(f"{constants.ENV_PREFIX}{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class OrganizerConfig:
    """Everything the scanner and relocation engine need for one daemon run."""

    source_dir: Path
    destination_dir: Path
    extensions: frozenset[str] = constants.VIDEO_EXTENSIONS
    scan_interval: int = constants.SCAN_INTERVAL
    log_file: Path | None = None
    collaborator_config: Path | None = None
    collaborator_command: str = constants.COLLABORATOR_COMMAND
    collaborator_timeout: int = constants.COLLABORATOR_TIMEOUT
    scratch_root: Path | None = None
    noise_tokens: tuple[str, ...] = field(default=constants.NOISE_TOKENS)
    dry_run: bool = False

    def __post_init__(self):
        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "source_dir", Path(self.source_dir).expanduser())
        object.__setattr__(self, "destination_dir", Path(self.destination_dir).expanduser())
        object.__setattr__(self, "extensions", normalize_extensions(self.extensions))
        object.__setattr__(self, "noise_tokens", tuple(self.noise_tokens))
        for name in ("log_file", "collaborator_config", "scratch_root"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, Path(value).expanduser())
        if self.scan_interval < 0:
            raise ValueError("scan_interval must not be negative")
        if not self.extensions:
            raise ValueError("extension allow-list must not be empty")

    @property
    def uses_collaborator(self) -> bool:
        """True when relocation should try the external renamer first."""
        return self.collaborator_config is not None

    @classmethod
    def from_env(cls, **overrides: Any) -> "OrganizerConfig":
        """
        Build a configuration from defaults and MOVIEORG_* environment variables.

        Keyword overrides win over the environment; an override of None means
        "not given" and is ignored.
        """
        values: Dict[str, Any] = {
            "source_dir": _env("SOURCE_DIR") or constants.SOURCE_FOLDER,
            "destination_dir": _env("DESTINATION_DIR") or constants.DESTINATION_FOLDER,
        }
        if _env("EXTENSIONS"):
            values["extensions"] = _split_list(_env("EXTENSIONS"))
        if _env("SCAN_INTERVAL"):
            values["scan_interval"] = int(_env("SCAN_INTERVAL"))
        if _env("LOG_FILE"):
            values["log_file"] = _env("LOG_FILE")
        if _env("COLLABORATOR_CONFIG"):
            values["collaborator_config"] = _env("COLLABORATOR_CONFIG")
        if _env("COLLABORATOR_COMMAND"):
            values["collaborator_command"] = _env("COLLABORATOR_COMMAND")
        if _env("COLLABORATOR_TIMEOUT"):
            values["collaborator_timeout"] = int(_env("COLLABORATOR_TIMEOUT"))
        if _env("SCRATCH_DIR"):
            values["scratch_root"] = _env("SCRATCH_DIR")
        if _env("NOISE_TOKENS"):
            values["noise_tokens"] = constants.NOISE_TOKENS + tuple(_split_list(_env("NOISE_TOKENS")))

        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def with_overrides(self, **overrides: Any) -> "OrganizerConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def describe(self) -> Dict[str, str]:
        """Human readable view of the effective configuration."""
        return {
            "Download folder": str(self.source_dir),
            "Movies folder": str(self.destination_dir),
            "Log file": str(self.log_file) if self.log_file else "(console only)",
            "Supported extensions": "|".join(sorted(e.lstrip(".") for e in self.extensions)),
            "Scan interval": f"{self.scan_interval}s",
            "Renamer": (
                f"{self.collaborator_command} (config: {self.collaborator_config})"
                if self.uses_collaborator
                else "(disabled, filename parsing only)"
            ),
            "Scratch folder": str(self.scratch_root) if self.scratch_root else "(system temp)",
            "Dry run": str(self.dry_run).lower(),
        }
