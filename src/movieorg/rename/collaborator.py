"""
Integration with an external metadata renamer (mnamer by default).

The renamer is run non-interactively against a single file sitting alone in a
scratch folder, with "never overwrite" semantics. When it succeeds it leaves a
renamed file next to the original; when it cannot identify the movie it
leaves the file untouched. Its own configuration is a JSON document that is
opaque here apart from the few keys written by `write_default_config`.
"""
import json
import subprocess
from pathlib import Path

from movieorg.utils import COLLABORATOR_COMMAND, LogLevel, logger, system_util
from movieorg.utils.constants import COLLABORATOR_DEFAULT_CONFIG, COLLABORATOR_TIMEOUT
from movieorg.utils.errors import CollaboratorFailure


class ExternalRenamer:
    """Runs the external renamer and reports the file it produced."""

    def __init__(self, config_path: Path, command: str = COLLABORATOR_COMMAND, timeout: int = COLLABORATOR_TIMEOUT):
        self.config_path = Path(config_path)
        self.command = command
        self.timeout = timeout

    def build_cmd(self, file: Path) -> list[str]:
        return [
            self.command,
            f"--config-path={self.config_path}",
            "--batch",
            "--no-overwrite",
            str(file),
        ]

    def rename_in(self, file: Path) -> Path:
        """
        Rename `file` in place and return the path of the renamed file.

        Only the folder holding `file` is searched for the result, so `file`
        should be the only thing in it.

        Raises:
            CollaboratorFailure: On a non-zero exit, a timeout, a missing
                binary, or when no renamed file can be found.
        """
        cmd = self.build_cmd(file)
        logger.log("collaborator.run", LogLevel.DEBUG, file=file.name, cmd=" ".join(cmd))
        try:
            code, out, err = system_util.run_cmd(cmd, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise CollaboratorFailure(f"{self.command} timed out after {self.timeout}s") from e
        except OSError as e:
            raise CollaboratorFailure(f"{self.command} could not be started: {e}") from e

        if code != 0:
            detail = (err or out).strip()
            raise CollaboratorFailure(f"{self.command} exited with code {code}: {detail}")

        logger.log("collaborator.output", LogLevel.DEBUG, file=file.name, output=out.strip())

        renamed = find_renamed_file(file.parent, file.name)
        if renamed is None:
            raise CollaboratorFailure(f"{self.command} did not rename {file.name}")
        return renamed


def find_renamed_file(folder: Path, original_name: str) -> Path | None:
    """Return the first file under `folder` whose name differs from `original_name`."""
    for p in sorted(folder.rglob("*")):
        if p.is_file() and p.name != original_name:
            return p
    return None


def write_default_config(path: Path, movie_directory: Path | None = None, episode_directory: Path | None = None) -> Path:
    """
    Write a default renamer configuration to `path`.

    Refuses to replace an existing file so operator edits (API keys, formats)
    survive a reinstall.

    Raises:
        FileExistsError: When `path` already exists.
    """
    path = Path(path).expanduser()
    if path.exists():
        raise FileExistsError(f"Renamer config already exists: {path}")

    config = dict(COLLABORATOR_DEFAULT_CONFIG)
    if movie_directory is not None:
        config["movie_directory"] = str(movie_directory)
    if episode_directory is not None:
        config["episode_directory"] = str(episode_directory)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(config, handle, indent=2, sort_keys=True)
        handle.write("\n")
    return path
