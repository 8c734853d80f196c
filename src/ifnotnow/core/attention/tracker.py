"""Attention tracking state machine for timeboxes."""

import dataclasses
from datetime import UTC, datetime, timedelta
from enum import Enum

from loguru import logger

from ifnotnow.config import DEFAULT_BUDGET_SECONDS
from ifnotnow.errors import InvalidTransitionError
from ifnotnow.models.outline import (
    Abandoned,
    AttentionEvent,
    Created,
    Finished,
    Paused,
    Started,
    Timebox,
    Timespan,
    WaitingFor,
)


class AttentionState(Enum):
    CREATED = "created"
    ACTIVE = "active"
    PAUSED = "paused"
    WAITING = "waiting"
    FINISHED = "finished"
    ABANDONED = "abandoned"


TERMINAL_STATES = frozenset({AttentionState.FINISHED, AttentionState.ABANDONED})

_STATE_AFTER: dict[type, AttentionState] = {
    Created: AttentionState.CREATED,
    Started: AttentionState.ACTIVE,
    Paused: AttentionState.PAUSED,
    WaitingFor: AttentionState.WAITING,
    Abandoned: AttentionState.ABANDONED,
    Finished: AttentionState.FINISHED,
}

# Events that close an open Started interval.
_INTERVAL_ENDS = (Paused, WaitingFor, Abandoned, Finished)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def new_timebox(
    label: str,
    *,
    budget: Timespan | None = None,
    now: datetime | None = None,
) -> Timebox:
    """Create a timebox whose history starts with a Created event."""
    return Timebox(
        label=label,
        history=(Created(at=now or _utcnow()),),
        done=None,
        accrued=Timespan(0),
        budget=budget if budget is not None else Timespan(DEFAULT_BUDGET_SECONDS),
    )


def state_of(timebox: Timebox) -> AttentionState:
    """Derive the current state from the last history entry."""
    if not timebox.history:
        return AttentionState.CREATED
    return _STATE_AFTER[type(timebox.history[-1])]


def compute_accrued(history: tuple[AttentionEvent, ...], now: datetime) -> Timespan:
    """Sum the time spent between each Started and the event that ended it.

    A trailing Started without an end counts up to ``now``.
    """
    total = timedelta(0)
    open_since: datetime | None = None
    for event in history:
        if isinstance(event, Started):
            if open_since is None:
                open_since = event.at
        elif isinstance(event, _INTERVAL_ENDS) and open_since is not None:
            total += max(event.at - open_since, timedelta(0))
            open_since = None
    if open_since is not None:
        total += max(now - open_since, timedelta(0))
    return Timespan(int(total.total_seconds()))


def refresh_accrued(timebox: Timebox, now: datetime | None = None) -> Timebox:
    """Recompute the cached ``accrued`` field from history."""
    accrued = compute_accrued(timebox.history, now or _utcnow())
    if accrued == timebox.accrued:
        return timebox
    return dataclasses.replace(timebox, accrued=accrued)


def is_over_budget(timebox: Timebox, now: datetime | None = None) -> bool:
    """Return True once the time spent exceeds the advisory budget."""
    return compute_accrued(timebox.history, now or _utcnow()) > timebox.budget


def _check_transition(state: AttentionState, event: AttentionEvent) -> None:
    name = type(event).__name__
    if state in TERMINAL_STATES:
        msg = f"Cannot apply {name}: timebox is already {state.value}"
        raise InvalidTransitionError(msg)
    if isinstance(event, Created):
        msg = "Created is only valid as the first history entry"
        raise InvalidTransitionError(msg)
    if isinstance(event, Started) and state == AttentionState.ACTIVE:
        msg = "Cannot apply Started: timebox is already active"
        raise InvalidTransitionError(msg)
    if isinstance(event, Paused | WaitingFor) and state != AttentionState.ACTIVE:
        msg = f"Cannot apply {name}: timebox is {state.value}, not active"
        raise InvalidTransitionError(msg)


def apply_event(timebox: Timebox, event: AttentionEvent) -> Timebox:
    """Return the timebox with ``event`` appended.

    Raises:
        InvalidTransitionError: The event is not allowed in the current state,
            or it predates the last recorded event. The input is never modified.
    """
    state = state_of(timebox)
    _check_transition(state, event)
    if event.at.tzinfo is None:
        msg = (
            f"Cannot apply {type(event).__name__}: "
            f"timestamp {event.at.isoformat()} has no timezone"
        )
        raise InvalidTransitionError(msg)
    if timebox.history and event.at < timebox.history[-1].at:
        msg = (
            f"Cannot apply {type(event).__name__} at {event.at.isoformat()}: "
            f"history already has an event at {timebox.history[-1].at.isoformat()}"
        )
        raise InvalidTransitionError(msg)

    history = (*timebox.history, event)
    changes: dict[str, object] = {"history": history}
    if isinstance(event, _INTERVAL_ENDS):
        changes["accrued"] = max(compute_accrued(history, event.at), timebox.accrued)
    if isinstance(event, Finished):
        changes["done"] = event.at

    updated = dataclasses.replace(timebox, **changes)
    logger.debug(
        "Timebox {!r}: {} -> {}", timebox.label, state.value, state_of(updated).value
    )
    return updated
