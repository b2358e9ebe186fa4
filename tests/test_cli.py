import logging

import pytest
from typer.testing import CliRunner

from clipkeep.cli import app


@pytest.fixture
def runner(storage_env):
    yield CliRunner()
    # Drop the handlers setup_logging attached for this data directory
    clipkeep_logger = logging.getLogger("clipkeep")
    for handler in list(clipkeep_logger.handlers):
        clipkeep_logger.removeHandler(handler)
        handler.close()


def invoke(runner, *args):
    return runner.invoke(app, list(args))


def test_add_and_list(runner):
    result = invoke(runner, "add", "hello world")
    assert result.exit_code == 0, result.output
    assert "Entry 1" in result.output

    invoke(runner, "add", "second")
    result = invoke(runner, "list")
    assert result.exit_code == 0
    assert "hello world" in result.output
    assert "second" in result.output


def test_search(runner):
    invoke(runner, "add", "apple pie")
    invoke(runner, "add", "banana")
    result = invoke(runner, "list", "--search", "APPLE")
    assert "apple pie" in result.output
    assert "banana" not in result.output


def test_favorite_and_delete(runner):
    invoke(runner, "add", "a")
    invoke(runner, "add", "b")

    result = invoke(runner, "favorite", "1")
    assert result.exit_code == 0
    assert "Entry 1 is now favorite." in result.output

    result = invoke(runner, "delete", "1")
    assert result.exit_code == 0
    assert "Deleted entry 1." in result.output


def test_unknown_id_exits_with_error(runner):
    result = invoke(runner, "delete", "42")
    assert result.exit_code == 1
    assert "No entry with id 42" in result.output


def test_clear_keeps_favorites(runner):
    invoke(runner, "add", "a")
    invoke(runner, "add", "b")
    invoke(runner, "add", "c")
    invoke(runner, "favorite", "2")

    result = invoke(runner, "clear", "--yes")
    assert result.exit_code == 0
    assert "Removed 2 entries." in result.output

    result = invoke(runner, "check")
    assert "1 entries, 1 log records." in result.output


def test_clear_declined(runner):
    invoke(runner, "add", "a")
    result = runner.invoke(app, ["clear"], input="n\n")
    assert result.exit_code == 0
    assert "Removed 0 entries." in result.output


def test_compact_and_check(runner):
    for text in ("a", "b", "a", "b"):
        invoke(runner, "add", text)

    result = invoke(runner, "compact")
    assert result.exit_code == 0
    assert "Log compacted from 4 to 2 records." in result.output

    result = invoke(runner, "check")
    assert result.exit_code == 0
    assert "OK" in result.output
    assert "2 entries, 2 log records." in result.output


def test_config_lists_effective_settings(runner, monkeypatch):
    monkeypatch.setenv("CLIPKEEP_HISTORY_SIZE", "17")
    result = invoke(runner, "config")
    assert result.exit_code == 0
    assert "CLIPKEEP_HISTORY_SIZE" in result.output
    assert "17" in result.output
    assert "config.yaml" in result.output
