"""Fake implementations for testing the context store."""

from collections.abc import Iterator


class FakeBackend:
    """In-memory fake for FileBackend.

    Stores documents in a dict and records every write for assertions.
    """

    def __init__(self) -> None:
        self.documents: dict[str, str] = {}
        self.writes: list[str] = []
        self.fail_writes = False

    def exists(self, name: str) -> bool:
        """Assertion helper; the store itself never asks."""
        return name in self.documents

    def read(self, name: str) -> str:
        if name not in self.documents:
            raise FileNotFoundError(name)
        return self.documents[name]

    def write(self, name: str, contents: str) -> None:
        if self.fail_writes:
            msg = f"FakeBackend: write refused for {name!r}"
            raise PermissionError(msg)
        self.writes.append(name)
        self.documents[name] = contents

    def create(self, name: str, contents: str) -> None:
        if name in self.documents:
            raise FileExistsError(name)
        self.write(name, contents)

    def remove(self, name: str) -> None:
        if name not in self.documents:
            raise FileNotFoundError(name)
        del self.documents[name]

    def names(self) -> Iterator[str]:
        yield from self.documents
