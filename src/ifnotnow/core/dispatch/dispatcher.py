"""Apply commands to the store and cursor."""

import bisect
import dataclasses
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from ifnotnow.config import STARTER_NAME
from ifnotnow.core.attention.tracker import apply_event
from ifnotnow.core.dispatch.commands import (
    Clear,
    Cmd,
    Init,
    Last,
    List,
    Load,
    Mark,
    Next,
    Save,
    Search,
    Switch,
)
from ifnotnow.core.search.searcher import SearchMatch, search
from ifnotnow.core.storage.store import ContextStore
from ifnotnow.core.tree.outline import format_path, item_at, replace_item
from ifnotnow.errors import InvalidAddressError, NotFoundError
from ifnotnow.models.outline import Timebox
from ifnotnow.starter import starter_context


@dataclass(frozen=True)
class DispatcherState:
    """The store plus the currently selected context name."""

    store: ContextStore
    cursor: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    """The state after a command, plus anything the command reports."""

    state: DispatcherState
    names: tuple[str, ...] = ()
    matches: tuple[SearchMatch, ...] = ()


def _step(state: DispatcherState, *, forward: bool) -> DispatcherState:
    """Move the cursor one key along the store's order, clamping at the ends."""
    keys = list(state.store.names())
    if not keys:
        return state
    if state.cursor is None:
        return dataclasses.replace(state, cursor=keys[0] if forward else keys[-1])
    if forward:
        index = bisect.bisect_right(keys, state.cursor)
        target = keys[index] if index < len(keys) else keys[-1]
    else:
        index = bisect.bisect_left(keys, state.cursor) - 1
        target = keys[index] if index >= 0 else keys[0]
    return dataclasses.replace(state, cursor=target)


def _mark(state: DispatcherState, cmd: Mark) -> None:
    store = state.store
    context = store.get(cmd.name)
    item = item_at(context, cmd.path)
    if not isinstance(item, Timebox):
        msg = (
            f"Item {format_path(cmd.path)} in {cmd.name!r} is a "
            f"{type(item).__name__}, not a timebox"
        )
        raise InvalidAddressError(msg)
    updated = apply_event(item, cmd.event)
    store.save(cmd.name, replace_item(context, cmd.path, updated))
    logger.info(
        "Marked {!r} in {!r}: {}", item.label, cmd.name, type(cmd.event).__name__
    )


def dispatch(cmd: Cmd, state: DispatcherState, *, now: datetime | None = None) -> DispatchResult:
    """Process one command to completion.

    Args:
        cmd: Command to run.
        state: Current store and cursor.
        now: Evaluation instant for accrued time of loaded timeboxes.

    Returns:
        The next state and any names or search matches the command produced.

    Raises:
        CoreError: A subclass describing why the command failed; the state
            is left as it was.
    """
    logger.debug("Dispatching {!r}", cmd)
    store = state.store

    if isinstance(cmd, Init):
        template = starter_context(now=now) if cmd.name == STARTER_NAME else None
        store.create(cmd.name, template)
    elif isinstance(cmd, Load):
        store.load(cmd.name, now=now)
    elif isinstance(cmd, Save):
        store.save(cmd.name, store.get(cmd.name))
    elif isinstance(cmd, Switch):
        if cmd.name not in store:
            msg = f"Context {cmd.name!r} is not loaded"
            raise NotFoundError(msg)
        return DispatchResult(state=dataclasses.replace(state, cursor=cmd.name))
    elif isinstance(cmd, Last):
        return DispatchResult(state=_step(state, forward=False))
    elif isinstance(cmd, Next):
        return DispatchResult(state=_step(state, forward=True))
    elif isinstance(cmd, Clear):
        return DispatchResult(state=dataclasses.replace(state, cursor=None))
    elif isinstance(cmd, List):
        return DispatchResult(state=state, names=tuple(store.names()))
    elif isinstance(cmd, Search):
        matches = search(store, cmd.query, context_name=cmd.context_name)
        return DispatchResult(state=state, matches=tuple(matches))
    elif isinstance(cmd, Mark):
        _mark(state, cmd)
    else:
        msg = f"Unknown command: {cmd!r}"
        raise TypeError(msg)

    return DispatchResult(state=state)
