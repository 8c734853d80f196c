"""Match-counting search over context names and item text."""

from dataclasses import dataclass

from ifnotnow.core.search.pattern import ContextItems, ContextNames, Query, count_matches
from ifnotnow.core.storage.store import ContextStore
from ifnotnow.core.tree.outline import flatten_text


@dataclass(frozen=True)
class SearchMatch:
    """A context (and item path, for item queries) with its match count."""

    context_name: str
    path: tuple[int, ...]
    count: int


def _sort_key(match: SearchMatch) -> tuple[int, str, tuple[int, ...]]:
    return (-match.count, match.context_name, match.path)


def search(
    store: ContextStore,
    query: Query,
    *,
    context_name: str | None = None,
) -> list[SearchMatch]:
    """Count pattern matches across the tracked contexts of ``store``.

    Args:
        store: Store whose tracked contexts are searched.
        query: Names or item text, with the pattern to count.
        context_name: Restrict an item query to this context.

    Returns:
        Matches with a non-zero count, most matches first, then by context
        name and item path.
    """
    results: list[SearchMatch] = []

    if isinstance(query, ContextNames):
        for name in store.names():
            count = count_matches(name, query.pattern)
            if count > 0:
                results.append(SearchMatch(context_name=name, path=(), count=count))
    elif isinstance(query, ContextItems):
        names = [context_name] if context_name is not None else list(store.names())
        for name in names:
            context = store.get(name)
            for flat in flatten_text(context):
                count = count_matches(flat.text, query.pattern)
                if count > 0:
                    results.append(SearchMatch(context_name=name, path=flat.path, count=count))
    else:
        msg = f"Unknown query: {query!r}"
        raise TypeError(msg)

    results.sort(key=_sort_key)
    return results
