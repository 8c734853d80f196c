"""Render outlines as markdown-like text."""

import io

from ifnotnow.models.outline import (
    Context,
    Entry,
    Goal,
    Heading,
    ListItem,
    Note,
    Sublist,
    Timebox,
)

INDENT = "   "


def render_item(item: ListItem) -> str:
    """Render a single item as one line, without indentation."""
    if isinstance(item, Heading):
        return f"## {item.text}"
    if isinstance(item, Note):
        return f"> {item.text}"
    if isinstance(item, Entry):
        return f"- {item.text}"
    if isinstance(item, Goal):
        return f"- [x] ~~{item.label}~~" if item.done else f"- [ ] {item.label}"
    if isinstance(item, Timebox):
        return f"- [?] {item.label} (..{item.accrued} <={item.budget})"
    if isinstance(item, Sublist):
        return f"- {item.context.name}"
    msg = f"Unknown list item: {item!r}"
    raise TypeError(msg)


def render_outline(context: Context) -> str:
    """Render the items of ``context``; each sublist level indents three spaces."""
    out = io.StringIO()
    # Stack of (depth, items, next index); iterative so deep nesting is safe.
    stack: list[tuple[int, tuple[ListItem, ...], int]] = [(0, context.items, 0)]
    while stack:
        depth, items, index = stack.pop()
        if index >= len(items):
            continue
        stack.append((depth, items, index + 1))
        item = items[index]
        out.write(f"{INDENT * depth}{render_item(item)}\n")
        if isinstance(item, Sublist):
            stack.append((depth + 1, item.context.items, 0))
    return out.getvalue()


def render_context(context: Context) -> str:
    """Render a whole context with its title line."""
    return f"# {context.name}\n\n{render_outline(context)}"
