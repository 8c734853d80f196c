"""Convert contexts to and from their YAML document form."""

from datetime import datetime
from typing import Any

import yaml

from ifnotnow.config import MAX_OUTLINE_DEPTH, SCHEMA_TAG
from ifnotnow.errors import DecodeError
from ifnotnow.models.outline import (
    Abandoned,
    AttentionEvent,
    Context,
    Created,
    Entry,
    Finished,
    Goal,
    Heading,
    ListItem,
    Note,
    Paused,
    Started,
    Sublist,
    Timebox,
    Timespan,
    WaitingFor,
)

_EVENT_KEYS: dict[type, str] = {
    Created: "created",
    Started: "started",
    Paused: "paused",
    WaitingFor: "waiting_for",
    Abandoned: "abandoned",
    Finished: "finished",
}
_EVENT_TYPES: dict[str, type] = {key: cls for cls, key in _EVENT_KEYS.items()}

_TEXT_ITEMS: dict[str, type] = {"heading": Heading, "note": Note, "entry": Entry}


# --- Encoding ---


def _encode_event(event: AttentionEvent) -> dict[str, Any]:
    key = _EVENT_KEYS[type(event)]
    if isinstance(event, WaitingFor):
        return {key: {"at": event.at.isoformat(), "reason": event.reason}}
    return {key: event.at.isoformat()}


def _encode_item(item: ListItem, depth: int) -> dict[str, Any]:
    if isinstance(item, Heading):
        return {"heading": item.text}
    if isinstance(item, Note):
        return {"note": item.text}
    if isinstance(item, Entry):
        return {"entry": item.text}
    if isinstance(item, Goal):
        return {"goal": {"label": item.label, "done": item.done}}
    if isinstance(item, Timebox):
        return {
            "timebox": {
                "label": item.label,
                "done": item.done.isoformat() if item.done else None,
                "history": [_encode_event(e) for e in item.history],
                "accrued": item.accrued.seconds,
                "budget": item.budget.seconds,
            }
        }
    if isinstance(item, Sublist):
        return {"sublist": _encode_list(item.context, depth + 1)}
    msg = f"Unknown list item: {item!r}"
    raise TypeError(msg)


def _encode_list(context: Context, depth: int) -> dict[str, Any]:
    if depth > MAX_OUTLINE_DEPTH:
        msg = f"Outline {context.name!r} is nested deeper than {MAX_OUTLINE_DEPTH} levels"
        raise ValueError(msg)
    return {
        "name": context.name,
        "items": [_encode_item(item, depth) for item in context.items],
    }


def context_to_data(context: Context) -> dict[str, Any]:
    """Return the plain-data form of a context, tagged with the schema version."""
    return {"schema": SCHEMA_TAG, **_encode_list(context, 0)}


def dump_context(context: Context) -> str:
    """Serialize a context as a YAML document."""
    return yaml.safe_dump(
        context_to_data(context), sort_keys=False, allow_unicode=True, default_flow_style=False
    )


# --- Decoding ---


def _expect(value: Any, kind: type | tuple[type, ...], what: str) -> Any:
    if not isinstance(value, kind):
        msg = f"Expected {what}, got {type(value).__name__}: {value!r}"
        raise DecodeError(msg)
    return value


def _single_key(raw: Any, what: str) -> tuple[str, Any]:
    _expect(raw, dict, what)
    if len(raw) != 1:
        msg = f"Expected a single-key mapping for {what}, got keys {sorted(raw)!r}"
        raise DecodeError(msg)
    ((key, value),) = raw.items()
    return key, value


def _parse_timestamp(raw: Any) -> datetime:
    # safe_load already turns unquoted ISO timestamps into datetime objects
    if isinstance(raw, datetime):
        value = raw
    else:
        try:
            value = datetime.fromisoformat(_expect(raw, str, "timestamp"))
        except ValueError as e:
            msg = f"Invalid timestamp {raw!r}"
            raise DecodeError(msg) from e
    if value.tzinfo is None:
        msg = f"Timestamp {raw!r} has no timezone"
        raise DecodeError(msg)
    return value


def _parse_timespan(raw: Any, what: str) -> Timespan:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        msg = f"Expected non-negative seconds for {what}, got {raw!r}"
        raise DecodeError(msg)
    return Timespan(raw)


def _parse_event(raw: Any) -> AttentionEvent:
    key, value = _single_key(raw, "attention event")
    cls = _EVENT_TYPES.get(key)
    if cls is None:
        msg = f"Unknown attention event {key!r}"
        raise DecodeError(msg)
    if cls is WaitingFor:
        _expect(value, dict, "waiting_for body")
        return WaitingFor(
            at=_parse_timestamp(value.get("at")),
            reason=_expect(value.get("reason", ""), str, "waiting_for reason"),
        )
    return cls(at=_parse_timestamp(value))


def _check_history(
    label: str, history: tuple[AttentionEvent, ...], done: datetime | None
) -> None:
    """Reject a history that the tracker could not have produced."""
    if not history or not isinstance(history[0], Created):
        msg = f"Timebox {label!r} history must start with 'created'"
        raise DecodeError(msg)
    for previous, event in zip(history, history[1:]):
        if isinstance(event, Created):
            msg = f"Timebox {label!r} has 'created' after the first history entry"
            raise DecodeError(msg)
        if event.at < previous.at:
            msg = f"Timebox {label!r} history is out of order at {event.at.isoformat()}"
            raise DecodeError(msg)
    last = history[-1]
    if isinstance(last, Finished):
        if done != last.at:
            msg = f"Timebox {label!r} is finished at {last.at.isoformat()} but done is {done!r}"
            raise DecodeError(msg)
    elif done is not None:
        msg = f"Timebox {label!r} has done set but its history does not end in 'finished'"
        raise DecodeError(msg)


def _parse_timebox(raw: Any) -> Timebox:
    _expect(raw, dict, "timebox")
    label = _expect(raw.get("label"), str, "timebox label")
    history = tuple(_parse_event(e) for e in _expect(raw.get("history"), list, "timebox history"))
    done = raw.get("done")
    done = _parse_timestamp(done) if done is not None else None
    _check_history(label, history, done)
    return Timebox(
        label=label,
        history=history,
        done=done,
        accrued=_parse_timespan(raw.get("accrued", 0), "accrued"),
        budget=_parse_timespan(raw.get("budget", 0), "budget"),
    )


def _parse_item(raw: Any, depth: int) -> ListItem:
    key, value = _single_key(raw, "list item")
    if key in _TEXT_ITEMS:
        return _TEXT_ITEMS[key](text=_expect(value, str, f"{key} text"))
    if key == "goal":
        _expect(value, dict, "goal")
        return Goal(
            label=_expect(value.get("label"), str, "goal label"),
            done=_expect(value.get("done", False), bool, "goal done flag"),
        )
    if key == "timebox":
        return _parse_timebox(value)
    if key == "sublist":
        return Sublist(context=_parse_list(value, depth + 1))
    msg = f"Unknown list item kind {key!r}"
    raise DecodeError(msg)


def _parse_list(raw: Any, depth: int) -> Context:
    if depth > MAX_OUTLINE_DEPTH:
        msg = f"Outline is nested deeper than {MAX_OUTLINE_DEPTH} levels"
        raise DecodeError(msg)
    _expect(raw, dict, "list")
    name = _expect(raw.get("name"), str, "list name")
    items = _expect(raw.get("items", []), list, "list items")
    return Context(name=name, items=tuple(_parse_item(item, depth) for item in items))


def context_from_data(data: Any) -> Context:
    """Build a Context from the plain-data form of a document.

    Raises:
        DecodeError: The data is not a valid ``list/v1`` document.
    """
    _expect(data, dict, "document mapping")
    schema = data.get("schema")
    if schema != SCHEMA_TAG:
        msg = f"Unsupported document schema {schema!r}, expected {SCHEMA_TAG!r}"
        raise DecodeError(msg)
    return _parse_list(data, 0)


def load_context(text: str) -> Context:
    """Parse a YAML document into a Context."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        msg = f"Malformed YAML: {e}"
        raise DecodeError(msg) from e
    except RecursionError as e:
        msg = "Document is nested too deeply to parse"
        raise DecodeError(msg) from e
    return context_from_data(data)
