"""
Utility functions for running external commands and checking binary availability.

These helpers are used to drive the optional external metadata renamer.

Functions:
    - run_cmd: Executes a command and returns its exit code along with its
      standard output and error streams.
    - has_binary: Checks whether a binary is present on the system's PATH.
"""
import shutil
import subprocess
from typing import List, Optional, Tuple


def run_cmd(cmd: List[str], timeout: Optional[float] = None) -> Tuple[int, str, str]:
    """
    Run a command and return (code, stdout, stderr).

    Raises subprocess.TimeoutExpired when `timeout` elapses and
    FileNotFoundError when the binary does not exist.
    """
    p = subprocess.run(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        timeout=timeout,
    )
    return p.returncode, p.stdout, p.stderr


def has_binary(binary: str) -> bool:
    """Check if a binary exists on PATH."""
    return shutil.which(binary) is not None
