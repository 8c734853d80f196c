"""Shared test fixtures."""

from pathlib import Path

import pytest

from ifnotnow.core.storage.backend import FileBackend
from ifnotnow.core.storage.store import ContextStore
from tests.unit.fakes import FakeBackend


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def store(backend: FakeBackend) -> ContextStore:
    """A store over an in-memory backend."""
    return ContextStore(backend)


@pytest.fixture
def file_store(tmp_path: Path) -> ContextStore:
    """A store writing real files into a temporary directory."""
    return ContextStore(FileBackend(tmp_path))
