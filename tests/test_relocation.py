"""
Tests for single file relocation

Validates:
- Direct strategy: parse, name, move, collisions, failures leave the source alone
- Dry run makes no filesystem changes
- Delegated strategy: renamer success, fallback, scratch cleanup on every path
- External renamer invocation and default config writing
"""

import errno
import json
import os
import shutil
import subprocess

import pytest

from movieorg.rename import collaborator
from movieorg.rename.collaborator import ExternalRenamer, write_default_config
from movieorg.rename.core import DelegatedRelocator, DirectRelocator, RawEntry, build_relocator
from movieorg.utils import STRATEGY_DELEGATED, STRATEGY_DIRECT, STRATEGY_DRY_RUN, file_util, system_util
from movieorg.utils.errors import CollaboratorFailure, MoveFailure


class FakeRenamer:
    """Stands in for mnamer: renames the scratch copy to a fixed name."""

    command = "fake-renamer"

    def __init__(self, new_name):
        self.new_name = new_name
        self.seen = []

    def rename_in(self, file):
        self.seen.append(file)
        renamed = file.with_name(self.new_name)
        file.rename(renamed)
        return renamed


class FailingRenamer:
    command = "fake-renamer"

    def __init__(self):
        self.seen = []

    def rename_in(self, file):
        self.seen.append(file)
        raise CollaboratorFailure("fake-renamer exited with code 1")


def _scratch_is_clean(config):
    root = config.scratch_root
    return not root.exists() or not any(root.iterdir())


class TestRawEntry:

    def test_from_path(self, downloads, make_file):
        path = make_file(downloads / "Heat.1995.MKV")
        entry = RawEntry.from_path(path)
        assert entry.filename == "Heat.1995.MKV"
        assert entry.extension == ".mkv"
        assert entry.path.is_absolute()


class TestDirectRelocator:

    def test_moves_into_title_folder(self, config, downloads, movies, make_file):
        src = make_file(downloads / "The.Matrix.1999.1080p.BluRay.x264.mkv")
        result = DirectRelocator(config).relocate(RawEntry.from_path(src))

        assert result.success
        assert result.strategy == STRATEGY_DIRECT
        assert result.destination == movies / "The Matrix (1999)" / "The Matrix (1999).mkv"
        assert result.destination.read_text() == "video"
        assert not src.exists()

    def test_existing_file_is_never_overwritten(self, config, downloads, movies, make_file):
        existing = make_file(movies / "Heat (1995)" / "Heat (1995).mkv", content="original")
        src = make_file(downloads / "Heat.1995.mkv", content="incoming")

        result = DirectRelocator(config).relocate(RawEntry.from_path(src))

        assert result.success
        assert result.versioned
        assert result.destination.name == "Heat (1995) - ver2.mkv"
        assert existing.read_text() == "original"
        assert result.destination.read_text() == "incoming"

    def test_parse_failure_leaves_source(self, config, downloads, movies, make_file):
        src = make_file(downloads / "1999.mkv")
        result = DirectRelocator(config).relocate(RawEntry.from_path(src))

        assert not result.success
        assert result.reason.startswith("parse")
        assert src.exists()
        assert not movies.exists()

    def test_title_of_invalid_characters_leaves_source(self, config, downloads, movies, make_file):
        src = make_file(downloads / "???.mkv")
        result = DirectRelocator(config).relocate(RawEntry.from_path(src))

        assert not result.success
        assert result.reason.startswith("parse")
        assert src.exists()
        assert not movies.exists()

    def test_move_failure_leaves_source(self, config, downloads, make_file, monkeypatch):
        src = make_file(downloads / "Heat.1995.mkv")

        def _fail(s, d):
            raise MoveFailure(s, d, "disk full")

        monkeypatch.setattr(file_util, "safe_move", _fail)
        result = DirectRelocator(config).relocate(RawEntry.from_path(src))

        assert not result.success
        assert result.reason.startswith("move")
        assert src.exists()

    def test_dry_run_changes_nothing(self, config, downloads, movies, make_file):
        src = make_file(downloads / "Heat.1995.mkv")
        relocator = DirectRelocator(config.with_overrides(dry_run=True))

        result = relocator.relocate(RawEntry.from_path(src))

        assert result.success
        assert result.strategy == STRATEGY_DRY_RUN
        assert result.destination == movies / "Heat (1995)" / "Heat (1995).mkv"
        assert src.exists()
        assert not movies.exists()


class TestSafeMove:

    def test_refuses_existing_destination(self, tmp_path, make_file):
        src = make_file(tmp_path / "a.mkv", content="a")
        dst = make_file(tmp_path / "b.mkv", content="b")
        with pytest.raises(MoveFailure):
            file_util.safe_move(src, dst)
        assert src.read_text() == "a"
        assert dst.read_text() == "b"

    def test_missing_source(self, tmp_path):
        with pytest.raises(MoveFailure):
            file_util.safe_move(tmp_path / "missing.mkv", tmp_path / "out.mkv")
        assert not (tmp_path / "out.mkv").exists()

    def test_failed_cross_device_copy_keeps_source(self, tmp_path, make_file, monkeypatch):
        src = make_file(tmp_path / "a.mkv", content="full")
        dst = tmp_path / "library" / "a.mkv"
        dst.parent.mkdir()

        def _rename(a, b):
            raise OSError(errno.EXDEV, "Invalid cross-device link")

        def _copy(a, b, **kwargs):
            with open(b, "w") as handle:
                handle.write("fu")
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(os, "rename", _rename)
        monkeypatch.setattr(shutil, "copy2", _copy)

        with pytest.raises(MoveFailure):
            file_util.safe_move(src, dst)
        assert src.read_text() == "full"
        assert not dst.exists()


class TestDelegatedRelocator:

    def test_uses_renamed_name(self, config, downloads, movies, make_file):
        src = make_file(downloads / "matrix.rip.final.mkv")
        renamer = FakeRenamer("The Matrix (1999).mkv")

        result = DelegatedRelocator(config, renamer=renamer).relocate(RawEntry.from_path(src))

        assert result.success
        assert result.strategy == STRATEGY_DELEGATED
        assert result.destination == movies / "The Matrix (1999)" / "The Matrix (1999).mkv"
        assert result.destination.read_text() == "video"
        assert not src.exists()
        # The renamer only ever saw a copy inside the scratch folder
        assert renamer.seen[0].parent.parent == config.scratch_root
        assert _scratch_is_clean(config)

    def test_renamed_file_is_versioned_on_collision(self, config, downloads, movies, make_file):
        make_file(movies / "The Matrix (1999)" / "The Matrix (1999).mkv", content="original")
        src = make_file(downloads / "matrix.mkv", content="incoming")

        result = DelegatedRelocator(config, renamer=FakeRenamer("The Matrix (1999).mkv")).relocate(
            RawEntry.from_path(src)
        )

        assert result.destination.name == "The Matrix (1999) - ver2.mkv"
        assert (movies / "The Matrix (1999)" / "The Matrix (1999).mkv").read_text() == "original"
        assert _scratch_is_clean(config)

    def test_falls_back_to_filename_parsing(self, config, downloads, movies, make_file):
        src = make_file(downloads / "random_home_video.mp4")
        renamer = FailingRenamer()

        result = DelegatedRelocator(config, renamer=renamer).relocate(RawEntry.from_path(src))

        assert renamer.seen
        assert result.success
        assert result.strategy == STRATEGY_DIRECT
        assert result.destination == movies / "random home video" / "random home video.mp4"
        assert _scratch_is_clean(config)

    def test_move_failure_keeps_source(self, config, downloads, make_file, monkeypatch):
        src = make_file(downloads / "matrix.mkv")

        def _fail(s, d):
            raise MoveFailure(s, d, "permission denied")

        monkeypatch.setattr(file_util, "safe_move", _fail)
        result = DelegatedRelocator(config, renamer=FakeRenamer("The Matrix (1999).mkv")).relocate(
            RawEntry.from_path(src)
        )

        assert not result.success
        assert src.exists()
        assert _scratch_is_clean(config)

    def test_dry_run_skips_renamer(self, config, downloads, movies, make_file):
        src = make_file(downloads / "Heat.1995.mkv")
        renamer = FakeRenamer("Heat (1995).mkv")

        result = DelegatedRelocator(config.with_overrides(dry_run=True), renamer=renamer).relocate(
            RawEntry.from_path(src)
        )

        assert result.strategy == STRATEGY_DRY_RUN
        assert not renamer.seen
        assert src.exists()

    def test_build_relocator_picks_strategy(self, config, tmp_path):
        assert isinstance(build_relocator(config), DirectRelocator)
        delegated = build_relocator(config.with_overrides(collaborator_config=tmp_path / "mnamer.json"))
        assert isinstance(delegated, DelegatedRelocator)
        assert delegated.renamer.command == "mnamer"


class TestExternalRenamer:

    def test_command_line(self, tmp_path):
        renamer = ExternalRenamer(tmp_path / "mnamer.json")
        cmd = renamer.build_cmd(tmp_path / "movie.mkv")
        assert cmd == ["mnamer", f"--config-path={tmp_path / 'mnamer.json'}", "--batch", "--no-overwrite",
                       str(tmp_path / "movie.mkv")]

    def test_returns_renamed_file(self, tmp_path, make_file, monkeypatch):
        file = make_file(tmp_path / "work" / "matrix.mkv")

        def _run(cmd, timeout=None):
            target = tmp_path / "work" / "The Matrix (1999).mkv"
            (tmp_path / "work" / "matrix.mkv").rename(target)
            return 0, "moved", ""

        monkeypatch.setattr(system_util, "run_cmd", _run)
        assert ExternalRenamer(tmp_path / "cfg.json").rename_in(file).name == "The Matrix (1999).mkv"

    def test_non_zero_exit(self, tmp_path, make_file, monkeypatch):
        file = make_file(tmp_path / "work" / "matrix.mkv")
        monkeypatch.setattr(system_util, "run_cmd", lambda cmd, timeout=None: (1, "", "no match"))
        with pytest.raises(CollaboratorFailure, match="code 1"):
            ExternalRenamer(tmp_path / "cfg.json").rename_in(file)

    def test_timeout(self, tmp_path, make_file, monkeypatch):
        file = make_file(tmp_path / "work" / "matrix.mkv")

        def _run(cmd, timeout=None):
            raise subprocess.TimeoutExpired(cmd, timeout)

        monkeypatch.setattr(system_util, "run_cmd", _run)
        with pytest.raises(CollaboratorFailure, match="timed out"):
            ExternalRenamer(tmp_path / "cfg.json", timeout=5).rename_in(file)

    def test_untouched_file(self, tmp_path, make_file, monkeypatch):
        file = make_file(tmp_path / "work" / "matrix.mkv")
        monkeypatch.setattr(system_util, "run_cmd", lambda cmd, timeout=None: (0, "skipped", ""))
        with pytest.raises(CollaboratorFailure, match="did not rename"):
            ExternalRenamer(tmp_path / "cfg.json").rename_in(file)

    def test_missing_binary(self, tmp_path, make_file):
        file = make_file(tmp_path / "work" / "matrix.mkv")
        renamer = ExternalRenamer(tmp_path / "cfg.json", command="movieorg-no-such-renamer")
        with pytest.raises(CollaboratorFailure, match="could not be started"):
            renamer.rename_in(file)

    def test_find_renamed_file(self, tmp_path, make_file):
        make_file(tmp_path / "matrix.mkv")
        assert collaborator.find_renamed_file(tmp_path, "matrix.mkv") is None
        make_file(tmp_path / "sub" / "The Matrix (1999).mkv")
        assert collaborator.find_renamed_file(tmp_path, "matrix.mkv").name == "The Matrix (1999).mkv"


class TestDefaultConfig:

    def test_writes_json(self, tmp_path):
        path = write_default_config(tmp_path / "etc" / "mnamer.json", movie_directory=tmp_path / "movies")
        data = json.loads(path.read_text())
        assert data["movie_directory"] == str(tmp_path / "movies")
        assert data["movie_format"] == "{title} ({year})"
        assert data["batch"] is True

    def test_never_overwrites(self, tmp_path):
        path = write_default_config(tmp_path / "mnamer.json")
        path.write_text("{}")
        with pytest.raises(FileExistsError):
            write_default_config(path)
        assert path.read_text() == "{}"
