"""Tests for domain models."""

import pytest

from ifnotnow.models.outline import Context, Goal, Timespan


def test_context_is_frozen() -> None:
    context = Context(name="work")
    with pytest.raises(AttributeError):
        context.name = "changed"  # type: ignore[misc]


def test_timespan_renders_seconds() -> None:
    assert str(Timespan(90)) == "90s"
    assert str(Timespan()) == "0s"


def test_timespan_rejects_negative() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        Timespan(-1)


def test_timespans_are_ordered() -> None:
    assert Timespan(10) < Timespan(11)
    assert max(Timespan(3), Timespan(7)) == Timespan(7)


def test_items_compare_by_value() -> None:
    assert Context("a", (Goal("x"),)) == Context("a", (Goal("x", done=False),))
    assert Context("a", (Goal("x"),)) != Context("a", (Goal("x", done=True),))
