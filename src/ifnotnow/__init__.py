"""Local-first outlines with time-boxed attention tracking."""

from ifnotnow.core.dispatch.dispatcher import DispatcherState, DispatchResult, dispatch
from ifnotnow.core.storage.backend import FileBackend
from ifnotnow.core.storage.store import ContextStore
from ifnotnow.protocols import DocumentBackend

__all__ = [
    "ContextStore",
    "DispatchResult",
    "DispatcherState",
    "DocumentBackend",
    "FileBackend",
    "dispatch",
]
