"""Context store: name-keyed outlines with create/load/save policy."""

import dataclasses
from collections.abc import Iterator
from datetime import datetime

from loguru import logger

from ifnotnow.core.attention.tracker import AttentionState, refresh_accrued, state_of
from ifnotnow.core.storage.codec import dump_context, load_context
from ifnotnow.core.tree.outline import new_context
from ifnotnow.errors import AlreadyExistsError, DecodeError, NotFoundError, StoreIOError
from ifnotnow.models.outline import Context, ListItem, Sublist, Timebox
from ifnotnow.protocols import DocumentBackend


def _refresh_active(context: Context, now: datetime | None) -> Context:
    """Recompute the accrued cache of every active timebox in the outline."""
    items: list[ListItem] = []
    changed = False
    for item in context.items:
        new_item = item
        if isinstance(item, Timebox) and state_of(item) == AttentionState.ACTIVE:
            new_item = refresh_accrued(item, now)
        elif isinstance(item, Sublist):
            sub = _refresh_active(item.context, now)
            if sub is not item.context:
                new_item = Sublist(context=sub)
        changed = changed or new_item is not item
        items.append(new_item)
    if not changed:
        return context
    return dataclasses.replace(context, items=tuple(items))


class ContextStore:
    """Contexts tracked this session, backed by one document per name.

    ``create`` refuses to touch an existing document while ``save`` always
    overwrites. Iteration follows lexicographic name order.
    """

    def __init__(self, backend: DocumentBackend) -> None:
        self.backend = backend
        self._contexts: dict[str, Context] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._contexts

    def __len__(self) -> int:
        return len(self._contexts)

    def names(self) -> Iterator[str]:
        """Yield tracked context names in key order."""
        yield from sorted(self._contexts)

    def get(self, name: str) -> Context:
        """Return a tracked context."""
        try:
            return self._contexts[name]
        except KeyError:
            msg = f"Context {name!r} is not loaded"
            raise NotFoundError(msg) from None

    def put(self, name: str, context: Context) -> None:
        """Replace the tracked value for ``name`` without writing it."""
        self._contexts[name] = context

    def available(self) -> list[str]:
        """Return the names of all documents on the backing medium, sorted."""
        try:
            return sorted(self.backend.names())
        except OSError as e:
            msg = f"Cannot list documents: {e}"
            raise StoreIOError(msg) from e

    def create(self, name: str, template: Context | None = None) -> Context:
        """Write a new document for ``name`` and start tracking it.

        Raises:
            AlreadyExistsError: A document for ``name`` already exists; it is
                left untouched.
        """
        context = template if template is not None else new_context(name)
        try:
            self.backend.create(name, dump_context(context))
        except FileExistsError:
            logger.warning("Context {!r} exists, not overwriting", name)
            msg = f"Context {name!r} already exists"
            raise AlreadyExistsError(msg) from None
        except (OSError, ValueError) as e:
            msg = f"Cannot create context {name!r}: {e}"
            raise StoreIOError(msg) from e
        self._contexts[name] = context
        logger.info("Created context {!r}", name)
        return context

    def load(self, name: str, *, now: datetime | None = None) -> Context:
        """Read the document for ``name`` and start tracking it.

        Active timeboxes get their accrued time recomputed against ``now``.

        Raises:
            NotFoundError: No document exists for ``name``.
            DecodeError: The document is malformed.
        """
        try:
            text = self.backend.read(name)
        except FileNotFoundError:
            msg = f"Context {name!r} not found"
            raise NotFoundError(msg) from None
        except UnicodeDecodeError as e:
            msg = f"Context {name!r} is not valid UTF-8: {e}"
            raise DecodeError(msg) from e
        except (OSError, ValueError) as e:
            msg = f"Cannot read context {name!r}: {e}"
            raise StoreIOError(msg) from e
        context = _refresh_active(load_context(text), now)
        self._contexts[name] = context
        logger.debug("Loaded context {!r} ({} items)", name, len(context.items))
        return context

    def load_all(self, *, now: datetime | None = None, skip_invalid: bool = False) -> list[str]:
        """Load every document on the backing medium; return the loaded names.

        With ``skip_invalid`` a malformed document is logged and left
        untracked instead of raising ``DecodeError``.
        """
        loaded = []
        for name in self.available():
            try:
                self.load(name, now=now)
            except DecodeError as e:
                if not skip_invalid:
                    raise
                logger.warning("Skipping {!r}: {}", name, e)
                continue
            loaded.append(name)
        return loaded

    def save(self, name: str, context: Context) -> None:
        """Write ``context`` as the document for ``name``, overwriting it."""
        try:
            contents = dump_context(context)
        except ValueError as e:
            msg = f"Cannot serialize context {name!r}: {e}"
            raise StoreIOError(msg) from e
        try:
            self.backend.write(name, contents)
        except (OSError, ValueError) as e:
            msg = f"Cannot save context {name!r}: {e}"
            raise StoreIOError(msg) from e
        self._contexts[name] = context
        logger.debug("Saved context {!r}", name)

    def remove(self, name: str) -> None:
        """Delete the document for ``name`` and stop tracking it."""
        try:
            self.backend.remove(name)
        except FileNotFoundError:
            msg = f"Context {name!r} not found"
            raise NotFoundError(msg) from None
        except (OSError, ValueError) as e:
            msg = f"Cannot remove context {name!r}: {e}"
            raise StoreIOError(msg) from e
        self._contexts.pop(name, None)
        logger.info("Removed context {!r}", name)
