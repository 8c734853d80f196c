"""CLI for ifnotnow (init, add, now, list, search, mark)."""

import json
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from ifnotnow.config import DEFAULT_BUDGET_SECONDS, resolve_data_directory
from ifnotnow.core.attention.tracker import is_over_budget, new_timebox
from ifnotnow.core.dispatch.commands import Init, Load, Mark, Save, Search
from ifnotnow.core.dispatch.dispatcher import DispatcherState, dispatch
from ifnotnow.core.search.pattern import (
    ContextItems,
    ContextNames,
    KeywordSpec,
    RegexSpec,
    compile_pattern,
)
from ifnotnow.core.storage.backend import FileBackend
from ifnotnow.core.storage.store import ContextStore
from ifnotnow.core.tree.markdown import render_context
from ifnotnow.core.tree.outline import (
    append_item_at,
    flatten_text,
    format_path,
    item_at,
    parse_path,
)
from ifnotnow.errors import CoreError
from ifnotnow.logging_config import configure_logging
from ifnotnow.models.outline import (
    Abandoned,
    AttentionEvent,
    Entry,
    Finished,
    Goal,
    Heading,
    ListItem,
    Note,
    Paused,
    Started,
    Timebox,
    Timespan,
    WaitingFor,
)

app = typer.Typer(help="ifnotnow: local-first outlines with time-boxed goals.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory holding context documents"),
]


class EventName(str, Enum):
    start = "start"
    pause = "pause"
    wait = "wait"
    abandon = "abandon"
    finish = "finish"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _open_state(data_dir: Path | None) -> DispatcherState:
    """Build a fresh dispatcher state over the data directory."""
    dst = data_dir or resolve_data_directory()
    dst.mkdir(parents=True, exist_ok=True)
    return DispatcherState(store=ContextStore(FileBackend(dst)))


def _fail(error: CoreError) -> typer.Exit:
    logger.error("{}", error)
    return typer.Exit(1)


def _make_event(event: EventName, at: datetime, reason: str) -> AttentionEvent:
    if event is EventName.start:
        return Started(at=at)
    if event is EventName.pause:
        return Paused(at=at)
    if event is EventName.wait:
        return WaitingFor(at=at, reason=reason)
    if event is EventName.abandon:
        return Abandoned(at=at)
    return Finished(at=at)


@app.command()
def init(
    name: str = typer.Argument(..., help="Name of the new context"),
    data_dir: DataDirOption = None,
) -> None:
    """Create a new context; refuses to overwrite an existing one."""
    state = _open_state(data_dir)
    try:
        dispatch(Init(name), state)
    except CoreError as e:
        raise _fail(e) from e
    typer.echo(f"Created {name}")


@app.command()
def add(
    name: str = typer.Argument(..., help="Context to modify"),
    goal: Annotated[str | None, typer.Option("--goal", "-g", help="Add a goal")] = None,
    heading: Annotated[str | None, typer.Option("--heading", help="Add a heading")] = None,
    note: Annotated[str | None, typer.Option("--note", help="Add a note")] = None,
    entry: Annotated[str | None, typer.Option("--entry", help="Add a free entry")] = None,
    timebox: Annotated[
        str | None, typer.Option("--timebox", "-t", help="Add a tracked goal")
    ] = None,
    budget: int = typer.Option(
        DEFAULT_BUDGET_SECONDS, "--budget", "-b", min=0, help="Timebox budget in seconds"
    ),
    under: str = typer.Option("", "--under", "-u", help="Path of the sublist to add into"),
    data_dir: DataDirOption = None,
) -> None:
    """Append items to a context and save it."""
    items: list[ListItem] = []
    if heading is not None:
        items.append(Heading(heading))
    if note is not None:
        items.append(Note(note))
    if entry is not None:
        items.append(Entry(entry))
    if goal is not None:
        items.append(Goal(goal, done=False))
    if timebox is not None:
        items.append(new_timebox(timebox, budget=Timespan(budget)))

    state = _open_state(data_dir)
    try:
        dispatch(Load(name), state)
        context = state.store.get(name)
        path = parse_path(under)
        for item in items:
            context = append_item_at(context, path, item)
        state.store.put(name, context)
        dispatch(Save(name), state)
    except CoreError as e:
        raise _fail(e) from e
    logger.debug("Added {} item(s) to {!r}", len(items), name)


@app.command()
def now(
    name: str = typer.Argument(..., help="Context to display"),
    data_dir: DataDirOption = None,
) -> None:
    """Render a context as a markdown outline."""
    state = _open_state(data_dir)
    try:
        dispatch(Load(name), state)
    except CoreError as e:
        raise _fail(e) from e
    context = state.store.get(name)
    typer.echo(render_context(context))

    for flat in flatten_text(context):
        item = item_at(context, flat.path)
        if isinstance(item, Timebox) and is_over_budget(item):
            logger.warning("Over budget: {} ({})", item.label, format_path(flat.path))


@app.command(name="list")
def list_cmd(data_dir: DataDirOption = None) -> None:
    """List all contexts in the data directory."""
    state = _open_state(data_dir)
    try:
        names = state.store.available()
    except CoreError as e:
        raise _fail(e) from e
    typer.echo(f"{len(names)} contexts:\n")
    for name in names:
        typer.echo(f"  {name}")


@app.command()
def search(
    pattern: str = typer.Argument(..., help="Keyword, or regex with --regex"),
    regex: bool = typer.Option(False, "--regex", "-r", help="Treat PATTERN as a regex"),
    names: bool = typer.Option(False, "--names", "-N", help="Match context names"),
    context: Annotated[
        str | None,
        typer.Option("--context", "-c", help="Restrict to one context"),
    ] = None,
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Count pattern matches in context names or item text."""
    state = _open_state(data_dir)
    try:
        compiled = compile_pattern(RegexSpec(pattern) if regex else KeywordSpec(pattern))
        query = ContextNames(compiled) if names else ContextItems(compiled)
        if context is not None:
            dispatch(Load(context), state)
        else:
            state.store.load_all(skip_invalid=True)
        result = dispatch(Search(context, query), state)
    except CoreError as e:
        raise _fail(e) from e

    texts: dict[tuple[str, tuple[int, ...]], str] = {}
    for matched_name in {m.context_name for m in result.matches if m.path}:
        for flat in flatten_text(state.store.get(matched_name)):
            texts[(matched_name, flat.path)] = flat.text

    if output_json:
        data = {
            "results": [
                {
                    "context": m.context_name,
                    "path": format_path(m.path),
                    "count": m.count,
                    "text": texts.get((m.context_name, m.path), m.context_name),
                }
                for m in result.matches
            ],
            "total": len(result.matches),
        }
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(f"Found {len(result.matches)} results:\n")
    for m in result.matches:
        if m.path:
            text = texts[(m.context_name, m.path)]
            typer.echo(f"  [{m.context_name}] {text[:80]}")
            typer.echo(f"    path={format_path(m.path)}  count={m.count}")
        else:
            typer.echo(f"  [{m.context_name}]  count={m.count}")


@app.command()
def mark(
    name: str = typer.Argument(..., help="Context holding the timebox"),
    path: str = typer.Argument(..., help="Item path of the timebox, e.g. 0.2"),
    event: EventName = typer.Argument(..., help="Attention event to record"),
    reason: str = typer.Option("", "--reason", help="What the timebox is waiting for"),
    data_dir: DataDirOption = None,
) -> None:
    """Record an attention event on a timebox."""
    state = _open_state(data_dir)
    at = datetime.now(UTC)
    try:
        dispatch(Load(name), state, now=at)
        dispatch(Mark(name, parse_path(path), _make_event(event, at, reason)), state, now=at)
    except CoreError as e:
        raise _fail(e) from e
    typer.echo(f"Marked {name} {path}: {event.value}")
