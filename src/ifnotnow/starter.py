"""Template content written by ``init starter``."""

from datetime import datetime

from ifnotnow.config import STARTER_NAME
from ifnotnow.core.attention.tracker import new_timebox
from ifnotnow.core.tree.outline import append_item, new_context
from ifnotnow.models.outline import Context, Goal, Heading, Note, Sublist


def starter_context(*, now: datetime | None = None) -> Context:
    """Return an example outline showing each kind of item."""
    context = new_context(STARTER_NAME)
    for item in (
        Heading("Welcome to Your Starter Timeline"),
        Note("This is an example timeline that shows the kinds of items you can capture in them."),
        Goal("A TODO Item", done=False),
        Goal("A done TODO Item", done=True),
        Goal("Another TODO Item", done=False),
        new_timebox("A Second TODO Item", now=now),
        Sublist(new_context("nested list")),
    ):
        context = append_item(context, item)
    return context
