import os

import pytest

from movieorg.utils import LogLevel, logger
from movieorg.utils.config import OrganizerConfig


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep MOVIEORG_* variables and logger state from leaking between tests."""
    for name in list(os.environ):
        if name.startswith("MOVIEORG_"):
            monkeypatch.delenv(name, raising=False)
    logger.set_log_level(LogLevel.INFO)
    logger.set_log_file(None)
    yield
    logger.set_log_level(LogLevel.INFO)
    logger.set_log_file(None)


@pytest.fixture
def make_file():
    """Create a file (and its parent folders) with some content."""
    def _make(path, content="video"):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path
    return _make


@pytest.fixture
def downloads(tmp_path):
    path = tmp_path / "downloads"
    path.mkdir()
    return path


@pytest.fixture
def movies(tmp_path):
    return tmp_path / "movies"


@pytest.fixture
def config(tmp_path, downloads, movies):
    return OrganizerConfig(
        source_dir=downloads,
        destination_dir=movies,
        scratch_root=tmp_path / "scratch",
    )
