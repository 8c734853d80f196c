"""Protocols for dependency injection in the context store."""

from collections.abc import Iterator
from typing import Protocol, runtime_checkable


@runtime_checkable
class DocumentBackend(Protocol):
    """Protocol for the medium that holds one text document per context.

    Implementations raise ``FileNotFoundError`` for missing documents,
    ``FileExistsError`` when an exclusive create collides, ``ValueError`` for
    names they cannot store, and ``OSError`` for other I/O failures.
    """

    def read(self, name: str) -> str:
        """Return the document text for ``name``."""
        ...

    def write(self, name: str, contents: str) -> None:
        """Write the document for ``name``, replacing any existing one."""
        ...

    def create(self, name: str, contents: str) -> None:
        """Write the document for ``name``, failing if it already exists."""
        ...

    def remove(self, name: str) -> None:
        """Delete the document for ``name``."""
        ...

    def names(self) -> Iterator[str]:
        """Yield the names of all stored documents."""
        ...
