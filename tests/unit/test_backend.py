"""Tests for FileBackend — one document per context on disk."""

from pathlib import Path

import pytest

from ifnotnow.core.storage.backend import FileBackend
from ifnotnow.protocols import DocumentBackend


def test_init_raises_for_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        FileBackend(tmp_path / "does_not_exist")


def test_backend_satisfies_protocol(tmp_path: Path) -> None:
    assert isinstance(FileBackend(tmp_path), DocumentBackend)


def test_filename_is_name_plus_suffix(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path, suffix=".test.yaml")
    assert backend.filename("work") == "work.test.yaml"
    assert backend.path_for("work") == tmp_path.resolve() / "work.test.yaml"


@pytest.mark.parametrize("name", ["../escape", "a/b", "", " padded"])
def test_path_for_rejects_unsafe_names(tmp_path: Path, name: str) -> None:
    with pytest.raises(ValueError):
        FileBackend(tmp_path).path_for(name)


def test_write_then_read(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path)
    backend.write("work", "hello\n")

    assert backend.exists("work")
    assert backend.read("work") == "hello\n"
    assert (tmp_path / "work.inn.yaml").read_text() == "hello\n"


def test_write_skips_identical_contents(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path)
    backend.write("work", "same\n")
    path = tmp_path / "work.inn.yaml"
    before = path.stat().st_mtime_ns

    backend.write("work", "same\n")

    assert path.stat().st_mtime_ns == before


def test_create_refuses_existing_file(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path)
    backend.create("work", "original\n")

    with pytest.raises(FileExistsError):
        backend.create("work", "clobbered\n")

    assert backend.read("work") == "original\n"


def test_read_missing_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileBackend(tmp_path).read("missing")


def test_names_lists_only_documents(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path)
    backend.write("work", "x")
    backend.write("home", "x")
    (tmp_path / "notes.txt").write_text("not a context")

    assert list(backend.names()) == ["home", "work"]


def test_remove_deletes_file(tmp_path: Path) -> None:
    backend = FileBackend(tmp_path)
    backend.write("work", "x")
    backend.remove("work")
    assert not backend.exists("work")
