"""Tests for the ifnotnow CLI."""

import json
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner, Result

from ifnotnow.cli import app
from ifnotnow.core.storage.codec import dump_context, load_context
from tests.unit.samples import SAMPLE_CONTEXT

runner = CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """The CLI callback points loguru at the runner's stderr; undo that."""
    yield
    logger.remove()
    logger.add(sys.stderr)


def _invoke(tmp_path: Path, *args: str) -> Result:
    return runner.invoke(app, [*args, "--data-dir", str(tmp_path)])


def test_init_creates_document(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "init", "home")
    assert result.exit_code == 0, result.output
    assert (tmp_path / "home.inn.yaml").exists()


def test_init_refuses_existing(tmp_path: Path) -> None:
    path = tmp_path / "home.inn.yaml"
    path.write_text(dump_context(SAMPLE_CONTEXT))
    before = path.read_text()

    result = _invoke(tmp_path, "init", "home")

    assert result.exit_code == 1
    assert path.read_text() == before


def test_add_goal_and_now(tmp_path: Path) -> None:
    assert _invoke(tmp_path, "init", "home").exit_code == 0

    result = _invoke(tmp_path, "add", "home", "--goal", "buy milk")
    assert result.exit_code == 0, result.output

    result = _invoke(tmp_path, "now", "home")
    assert result.exit_code == 0, result.output
    assert "# home" in result.output
    assert "- [ ] buy milk" in result.output


def test_add_timebox_under_sublist(tmp_path: Path) -> None:
    (tmp_path / "work.inn.yaml").write_text(dump_context(SAMPLE_CONTEXT))

    result = _invoke(
        tmp_path, "add", "work", "--timebox", "triage", "--budget", "600", "--under", "4"
    )
    assert result.exit_code == 0, result.output

    saved = load_context((tmp_path / "work.inn.yaml").read_text())
    assert saved.items[4].context.items[-1].label == "triage"
    assert saved.items[4].context.items[-1].budget.seconds == 600


def test_add_to_missing_context_fails(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "add", "ghost", "--goal", "x")
    assert result.exit_code == 1


def test_now_on_malformed_document_fails_cleanly(tmp_path: Path) -> None:
    (tmp_path / "bad.inn.yaml").write_text("schema: nope\n")
    result = _invoke(tmp_path, "now", "bad")
    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_list_shows_documents(tmp_path: Path) -> None:
    _invoke(tmp_path, "init", "work")
    _invoke(tmp_path, "init", "home")

    result = _invoke(tmp_path, "list")

    assert result.exit_code == 0, result.output
    assert result.output.index("home") < result.output.index("work")


def test_search_json(tmp_path: Path) -> None:
    (tmp_path / "work.inn.yaml").write_text(dump_context(SAMPLE_CONTEXT))

    result = _invoke(tmp_path, "search", "ship", "--json")

    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["total"] == 2
    assert data["results"][0] == {
        "context": "work",
        "path": "1",
        "count": 1,
        "text": "ship the release before lunch",
    }


def test_search_skips_malformed_documents(tmp_path: Path) -> None:
    (tmp_path / "work.inn.yaml").write_text(dump_context(SAMPLE_CONTEXT))
    (tmp_path / "bad.inn.yaml").write_text("schema: nope\n")

    result = _invoke(tmp_path, "search", "ship", "--json")

    assert result.exit_code == 0, result.output
    stdout = result.stdout
    data = json.loads(stdout[stdout.index("{"):])
    assert data["total"] == 2
    assert {r["context"] for r in data["results"]} == {"work"}


def test_search_invalid_regex_fails(tmp_path: Path) -> None:
    result = _invoke(tmp_path, "search", "(", "--regex")
    assert result.exit_code == 1


def test_mark_start_then_finish(tmp_path: Path) -> None:
    (tmp_path / "work.inn.yaml").write_text(dump_context(SAMPLE_CONTEXT))

    assert _invoke(tmp_path, "mark", "work", "3", "start").exit_code == 0
    assert _invoke(tmp_path, "mark", "work", "3", "finish").exit_code == 0

    saved = load_context((tmp_path / "work.inn.yaml").read_text())
    assert saved.items[3].done is not None

    result = _invoke(tmp_path, "mark", "work", "3", "start")
    assert result.exit_code == 1


def test_quiet_hides_info_logs(tmp_path: Path) -> None:
    loud = runner.invoke(app, ["init", "a", "--data-dir", str(tmp_path)])
    quiet = runner.invoke(app, ["--quiet", "init", "b", "--data-dir", str(tmp_path)])

    assert "Created context 'a'" in loud.output
    assert "Created context" not in quiet.output
    assert quiet.exit_code == 0
