"""The closed set of commands understood by the dispatcher."""

from dataclasses import dataclass

from ifnotnow.core.search.pattern import Query
from ifnotnow.models.outline import AttentionEvent


@dataclass(frozen=True)
class Init:
    name: str


@dataclass(frozen=True)
class List:
    pass


@dataclass(frozen=True)
class Search:
    """Run ``query``; item queries are limited to ``context_name`` when set."""

    context_name: str | None
    query: Query


@dataclass(frozen=True)
class Switch:
    name: str


@dataclass(frozen=True)
class Last:
    pass


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class Load:
    name: str


@dataclass(frozen=True)
class Save:
    name: str


@dataclass(frozen=True)
class Mark:
    """Record ``event`` on the timebox at ``path`` in context ``name``."""

    name: str
    path: tuple[int, ...]
    event: AttentionEvent


Cmd = Init | List | Search | Switch | Last | Next | Clear | Load | Save | Mark
