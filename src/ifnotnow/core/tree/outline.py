"""Outline operations: appending, flattening and path addressing."""

import dataclasses

from ifnotnow.errors import InvalidAddressError
from ifnotnow.models.outline import (
    Context,
    Entry,
    FlatItem,
    Goal,
    Heading,
    ListItem,
    Note,
    Sublist,
    Timebox,
)


def new_context(name: str) -> Context:
    """Return an empty outline called ``name``."""
    return Context(name=name, items=())


def append_item(context: Context, item: ListItem) -> Context:
    """Return a copy of ``context`` with ``item`` added at the end."""
    return dataclasses.replace(context, items=(*context.items, item))


def item_text(item: ListItem) -> str:
    """Return the canonical display string of a single item."""
    if isinstance(item, Heading | Note | Entry):
        return item.text
    if isinstance(item, Goal | Timebox):
        return item.label
    if isinstance(item, Sublist):
        return item.context.name
    msg = f"Unknown list item: {item!r}"
    raise TypeError(msg)


def flatten_text(context: Context) -> list[FlatItem]:
    """List every item of the outline with its path, depth-first pre-order.

    A sublist contributes its own name first, then its children.
    """
    result: list[FlatItem] = []
    # Stack of (path prefix, items, next index); iterative so deep nesting is safe.
    stack: list[tuple[tuple[int, ...], tuple[ListItem, ...], int]] = [((), context.items, 0)]
    while stack:
        prefix, items, index = stack.pop()
        if index >= len(items):
            continue
        stack.append((prefix, items, index + 1))
        item = items[index]
        path = (*prefix, index)
        result.append(FlatItem(path=path, text=item_text(item)))
        if isinstance(item, Sublist):
            stack.append((path, item.context.items, 0))
    return result


def item_at(context: Context, path: tuple[int, ...]) -> ListItem:
    """Resolve ``path`` to an item, descending through sublists."""
    if not path:
        msg = "Empty item path"
        raise InvalidAddressError(msg)
    current = context
    for depth, index in enumerate(path):
        if not 0 <= index < len(current.items):
            msg = f"No item at {format_path(path[: depth + 1])} in {context.name!r}"
            raise InvalidAddressError(msg)
        item = current.items[index]
        if depth == len(path) - 1:
            return item
        if not isinstance(item, Sublist):
            msg = f"Item {format_path(path[: depth + 1])} in {context.name!r} is not a sublist"
            raise InvalidAddressError(msg)
        current = item.context
    raise AssertionError("unreachable")


def _sublist_chain(context: Context, path: tuple[int, ...]) -> list[Context]:
    """Return the contexts from ``context`` down to the sublist at ``path``."""
    chain = [context]
    for depth, index in enumerate(path):
        current = chain[-1]
        if not 0 <= index < len(current.items):
            msg = f"No item at {format_path(path[: depth + 1])} in {context.name!r}"
            raise InvalidAddressError(msg)
        item = current.items[index]
        if not isinstance(item, Sublist):
            msg = f"Item {format_path(path[: depth + 1])} in {context.name!r} is not a sublist"
            raise InvalidAddressError(msg)
        chain.append(item.context)
    return chain


def _rebuild(chain: list[Context], path: tuple[int, ...], leaf: Context) -> Context:
    """Write ``leaf`` back up through ``chain`` following ``path``."""
    rebuilt = leaf
    for parent, index in zip(reversed(chain[:-1]), reversed(path), strict=True):
        items = list(parent.items)
        items[index] = Sublist(context=rebuilt)
        rebuilt = dataclasses.replace(parent, items=tuple(items))
    return rebuilt


def append_item_at(context: Context, path: tuple[int, ...], item: ListItem) -> Context:
    """Append ``item`` to the sublist at ``path`` (the top level when empty)."""
    chain = _sublist_chain(context, path)
    return _rebuild(chain, path, append_item(chain[-1], item))


def replace_item(context: Context, path: tuple[int, ...], item: ListItem) -> Context:
    """Return a copy of ``context`` with the item at ``path`` replaced."""
    item_at(context, path)
    chain = _sublist_chain(context, path[:-1])
    items = list(chain[-1].items)
    items[path[-1]] = item
    leaf = dataclasses.replace(chain[-1], items=tuple(items))
    return _rebuild(chain, path[:-1], leaf)


def parse_path(text: str) -> tuple[int, ...]:
    """Parse a dotted path such as ``"0.2.1"``; an empty string is the top level."""
    text = text.strip()
    if not text:
        return ()
    try:
        path = tuple(int(part) for part in text.split("."))
    except ValueError:
        msg = f"Invalid item path: {text!r}"
        raise InvalidAddressError(msg) from None
    if any(index < 0 for index in path):
        msg = f"Invalid item path: {text!r}"
        raise InvalidAddressError(msg)
    return path


def format_path(path: tuple[int, ...]) -> str:
    return ".".join(str(index) for index in path)
