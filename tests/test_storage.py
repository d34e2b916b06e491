import os

import pytest

from treasure_hunt.storage import HuntPaths, StorageError


def test_ensure_directories_creates_both(tmp_path):
    paths = HuntPaths("h1", tmp_path)
    assert not paths.exists()
    created = paths.ensure_directories()
    assert created == [tmp_path / "treasure_hunts", tmp_path / "treasure_hunts" / "h1"]
    assert paths.exists()


def test_ensure_directories_is_idempotent(tmp_path):
    paths = HuntPaths("h1", tmp_path)
    paths.ensure_directories()
    assert paths.ensure_directories() == []


def test_ensure_directories_base_is_a_file(tmp_path):
    (tmp_path / "treasure_hunts").write_text("x")
    with pytest.raises(StorageError):
        HuntPaths("h1", tmp_path).ensure_directories()


def test_file_locations(tmp_path):
    paths = HuntPaths("h1", tmp_path)
    assert paths.treasure_file == tmp_path / "treasure_hunts" / "h1" / "treasure.bin"
    assert paths.log_file.name == "logged_hunt.txt"
    assert paths.symlink == tmp_path / "logged_hunt-h1"


def test_create_symlink(tmp_path):
    paths = HuntPaths("h1", tmp_path)
    paths.ensure_directories()
    paths.log_file.touch()
    assert paths.create_symlink() is True
    assert os.readlink(paths.symlink) == os.path.join("treasure_hunts", "h1", "logged_hunt.txt")
    assert paths.symlink.resolve() == paths.log_file.resolve()
    assert paths.create_symlink() is False


def test_create_symlink_over_regular_file(tmp_path):
    paths = HuntPaths("h1", tmp_path)
    paths.ensure_directories()
    paths.symlink.write_text("not a link")
    with pytest.raises(StorageError, match="not a symlink"):
        paths.create_symlink()


def test_append_log_accumulates(tmp_path):
    paths = HuntPaths("h1", tmp_path)
    paths.ensure_directories()
    paths.append_log("first\n")
    paths.append_log("second\n")
    assert paths.log_file.read_text() == "first\nsecond\n"


def test_append_log_without_directory(tmp_path):
    with pytest.raises(StorageError):
        HuntPaths("missing", tmp_path).append_log("entry\n")