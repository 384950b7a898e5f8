"""
Provides structured, line-oriented logging with log levels and an optional file sink.

Every event becomes a single line of the form
``[YYYY-MM-DD HH:MM:SS] [LEVEL] event | key="value" | ...`` written to the
console and, when configured, appended to a log file that is rotated once it
grows past a size limit.
"""
import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from tqdm import tqdm

from movieorg.utils.constants import MAX_LOG_SIZE

_print_lock = threading.Lock()
_separator = " | "
_log_file: Path | None = None
_max_log_bytes = MAX_LOG_SIZE


class LogLevel(Enum):
    """Log level enumeration."""
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


_current_level = LogLevel.INFO


def set_log_level(level: LogLevel) -> None:
    """Set the current log level."""
    global _current_level
    _current_level = level


def get_log_level() -> LogLevel:
    """Get the current log level."""
    return _current_level


def set_log_file(path: Path | None, max_bytes: int = MAX_LOG_SIZE) -> None:
    """
    Append every log line to `path` in addition to the console.

    Passing None disables the file sink. The parent folder is created on demand.
    """
    global _log_file, _max_log_bytes
    if path is not None:
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
    _log_file = path
    _max_log_bytes = max_bytes


def _format_kv(data: Dict[str, Any]) -> str:
    """Format key-value pairs for logging."""
    parts = []
    for key, value in data.items():
        if isinstance(value, str):
            # Escape quotes and newlines to keep log entries single-line.
            escaped = value.replace("\r", "\\r").replace("\n", "\\n")
            escaped = escaped.replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        elif value is None:
            parts.append(f'{key}=null')
        elif isinstance(value, bool):
            parts.append(f'{key}={str(value).lower()}')
        elif isinstance(value, Path):
            parts.append(f'{key}="{value}"')
        else:
            parts.append(f'{key}={value}')
    return _separator.join(parts)


def _rotate_if_needed(path: Path) -> None:
    """Move `path` aside to `<name>.1` once it exceeds the size limit."""
    try:
        if path.stat().st_size < _max_log_bytes:
            return
    except FileNotFoundError:
        return
    path.replace(path.with_name(path.name + ".1"))


def _write_line(text: str) -> None:
    try:
        tqdm.write(text)
    except Exception:
        print(text, flush=True)

    if _log_file is None:
        return
    try:
        _rotate_if_needed(_log_file)
        with open(_log_file, "a", encoding="utf-8", errors="backslashreplace") as handle:
            handle.write(text + "\n")
    except (OSError, ValueError) as e:
        print(f"Could not write to log file {_log_file}: {e}")


def _should_log(level: LogLevel) -> bool:
    """Check if a message at the given level should be logged."""
    return level.value >= _current_level.value


def format_line(event: str, level: LogLevel, fields: Dict[str, Any], now: datetime | None = None) -> str:
    """Build a single timestamped log line."""
    timestamp = (now or datetime.now()).strftime("%Y-%m-%d %H:%M:%S")
    header = f"[{timestamp}] [{level.name}] {event}"
    kv_str = _format_kv(fields) if fields else ""
    line = f"{header}{_separator}{kv_str}" if kv_str else header
    # Undecodable filenames carry lone surrogates; write them as backslash escapes.
    return line.encode("utf-8", "backslashreplace").decode("utf-8")


def log(event: str, level: LogLevel = LogLevel.INFO, **kwargs) -> None:
    """
    Structured logging function.

    Args:
        event: Event name (e.g., 'scan.start', 'relocate.success')
        level: Log level (TRACE, DEBUG, INFO, WARN, ERROR)
        **kwargs: Key-value pairs to log
    """
    if not _should_log(level):
        return

    with _print_lock:
        _write_line(format_line(event, level, kwargs))


def safe_print(*args, **kwargs) -> None:
    """
    Thread-safe print function for plain operator output.
    Use log() for events that belong in the log.
    """
    with _print_lock:
        print(*args, **kwargs, flush=True)
