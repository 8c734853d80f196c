"""Configuration constants for ifnotnow."""

import os
from pathlib import Path

# Every context lives in "<name>" + DOCUMENT_SUFFIX inside the data directory.
DOCUMENT_SUFFIX: str = ".inn.yaml"

# Schema tag written at the top of each document.
SCHEMA_TAG: str = "list/v1"

# Budget given to new timeboxes when none is requested.
DEFAULT_BUDGET_SECONDS: int = 3600

# Deepest sublist nesting accepted when encoding or decoding a document.
MAX_OUTLINE_DEPTH: int = 64

# `init` with this name writes the starter template instead of an empty list.
STARTER_NAME: str = "starter"

# loguru format for stderr messages.
LOG_FORMAT: str = "{level.icon} {message}"

# Environment variable that overrides the data directory.
DATA_DIR_ENV: str = "IFNOTNOW_DIR"

# Directory with contexts. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/ifnotnow").expanduser(),
    Path("~/.ifnotnow").expanduser(),
]


def resolve_data_directory() -> Path:
    """Return the directory holding context documents.

    ``$IFNOTNOW_DIR`` wins, then the first existing entry of DATA_DIRECTORIES,
    then the current working directory.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return Path.cwd()
