"""File backend: one YAML document per context in a data directory."""

from collections.abc import Iterator
from pathlib import Path

from loguru import logger

from ifnotnow.config import DOCUMENT_SUFFIX


class FileBackend:
    """Store context documents as ``<name><suffix>`` files.

    - Do not rewrite files if contents are the same.
    - Never write outside the data directory.
    """

    def __init__(self, datadir: str | Path, *, suffix: str = DOCUMENT_SUFFIX) -> None:
        self.datadir = str(Path(datadir).resolve())
        self.suffix = suffix

        if not Path(self.datadir).is_dir():
            msg = f"Data directory {self.datadir!r} not found"
            raise ValueError(msg)

        logger.debug("Backend ready, datadir {!r}, suffix {!r}", self.datadir, suffix)

    def filename(self, name: str) -> str:
        """Return the file name for a context; a pure function of ``name``."""
        return name + self.suffix

    def path_for(self, name: str) -> Path:
        """Return the absolute path of the document for ``name``."""
        if not name or name.strip() != name:
            msg = f"Invalid context name: {name!r}"
            raise ValueError(msg)
        fname = str(Path(self.datadir) / self.filename(name))
        if Path(fname).parent != Path(self.datadir):
            msg = f"Path escapes datadir: {fname!r}"
            raise ValueError(msg)
        return Path(fname)

    def exists(self, name: str) -> bool:
        """Return True if a document for ``name`` is on disk; not part of DocumentBackend."""
        return self.path_for(name).exists()

    def read(self, name: str) -> str:
        return self.path_for(name).read_text(encoding="utf-8")

    def write(self, name: str, contents: str) -> None:
        path = self.path_for(name)
        action = "create"
        try:
            if path.read_text(encoding="utf-8") == contents:
                logger.debug("Unchanged, not writing {!r}", str(path))
                return
            action = "update"
        except (FileNotFoundError, UnicodeDecodeError):
            pass
        logger.debug("Writing ({}) {!r}", action, str(path))
        with open(path, "w", encoding="utf-8") as f:
            f.write(contents)

    def create(self, name: str, contents: str) -> None:
        path = self.path_for(name)
        logger.debug("Writing (create) {!r}", str(path))
        # "x" mode refuses to open an existing file
        with open(path, "x", encoding="utf-8") as f:
            f.write(contents)

    def remove(self, name: str) -> None:
        path = self.path_for(name)
        logger.debug("Removing file: {!r}", str(path))
        path.unlink()

    def names(self) -> Iterator[str]:
        for path in sorted(Path(self.datadir).glob(f"*{self.suffix}")):
            if path.is_file():
                yield path.name.removesuffix(self.suffix)
