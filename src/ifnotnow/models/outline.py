"""Domain models for ifnotnow outlines."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, order=True)
class Timespan:
    """A non-negative duration in whole seconds."""

    seconds: int = 0

    def __post_init__(self) -> None:
        if self.seconds < 0:
            msg = f"Timespan must be non-negative, got {self.seconds!r}"
            raise ValueError(msg)

    def __str__(self) -> str:
        return f"{self.seconds}s"


# --- Attention events ---


@dataclass(frozen=True)
class Created:
    """Synthetic first event of every timebox."""

    at: datetime


@dataclass(frozen=True)
class Started:
    at: datetime


@dataclass(frozen=True)
class Paused:
    at: datetime


@dataclass(frozen=True)
class WaitingFor:
    """Work stopped until something outside the timebox happens."""

    at: datetime
    reason: str = ""


@dataclass(frozen=True)
class Abandoned:
    at: datetime


@dataclass(frozen=True)
class Finished:
    at: datetime


AttentionEvent = Created | Started | Paused | WaitingFor | Abandoned | Finished


# --- List items ---


@dataclass(frozen=True)
class Heading:
    text: str


@dataclass(frozen=True)
class Note:
    text: str


@dataclass(frozen=True)
class Entry:
    text: str


@dataclass(frozen=True)
class Goal:
    """A plain checkbox without history."""

    label: str
    done: bool = False


@dataclass(frozen=True)
class Timebox:
    """A goal with tracked attention.

    ``accrued`` is a cache of the time derived from ``history``; it is refreshed
    whenever an interval closes and when an active timebox is loaded.
    """

    label: str
    history: tuple[AttentionEvent, ...]
    done: datetime | None = None
    accrued: Timespan = field(default_factory=Timespan)
    budget: Timespan = field(default_factory=Timespan)


@dataclass(frozen=True)
class Sublist:
    """A nested outline."""

    context: "Context"


ListItem = Heading | Note | Entry | Goal | Timebox | Sublist


@dataclass(frozen=True)
class Context:
    """A named outline, the unit of persistence."""

    name: str
    items: tuple[ListItem, ...] = ()


@dataclass(frozen=True)
class FlatItem:
    """An item's display text and its index path through nested sublists."""

    path: tuple[int, ...]
    text: str
