"""Tests for markdown rendering of outlines."""

from ifnotnow.core.tree.markdown import render_context, render_outline
from ifnotnow.models.outline import Context, Note, Sublist
from tests.unit.samples import SAMPLE_CONTEXT


def test_render_outline_uses_item_markers() -> None:
    md = render_outline(SAMPLE_CONTEXT)
    assert md.splitlines() == [
        "## Today",
        "> ship the release before lunch",
        "- [x] ~~review PR~~",
        "- [?] write report (..900s <=1800s)",
        "- backlog",
        "   - ship docs",
        "   - someday",
        "      - [ ] learn rust",
        "- call the bank",
    ]


def test_render_context_has_title() -> None:
    md = render_context(Context("empty"))
    assert md == "# empty\n\n"


def test_render_deep_nesting_indents_three_spaces_per_level() -> None:
    context = Context("leaf", (Note("bottom"),))
    for _ in range(3):
        context = Context("level", (Sublist(context),))

    last = render_outline(context).splitlines()[-1]

    assert last == " " * 9 + "> bottom"
