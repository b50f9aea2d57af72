"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline and quiet mode
- format_response and print_table in each format
- Logging through RichHandler
- Global instance management
"""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from openapi_explorer import output as output_module
from openapi_explorer.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    configure_logging,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("openapi_explorer.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("openapi_explorer.output._is_tty", lambda: True)


@pytest.fixture()
def package_logger():
    """The package logger, restored to its original state afterwards."""
    logger = logging.getLogger("openapi_explorer")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


# ------------------------------------------------------------------ #
# Format resolution and colour
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """AUTO resolves from the terminal and colour settings."""

    def test_auto_is_plain_when_piped(self, non_tty):
        assert OutputManager().format == OutputFormat.PLAIN

    def test_auto_is_rich_on_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        assert OutputManager().format == OutputFormat.RICH

    def test_auto_is_plain_on_tty_without_color(self, tty):
        assert OutputManager(no_color=True).format == OutputFormat.PLAIN

    def test_explicit_format_is_kept(self, non_tty):
        assert OutputManager(format=OutputFormat.JSON).format == OutputFormat.JSON
        assert OutputManager(format=OutputFormat.RICH).format == OutputFormat.RICH


class TestColorDisabling:
    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False

    def test_env_reaches_manager(self, monkeypatch, non_tty):
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputManager().no_color is True


# ------------------------------------------------------------------ #
# stdout vs stderr
# ------------------------------------------------------------------ #


class TestStreams:
    """Data goes to stdout, diagnostics to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        OutputManager(no_color=True).print_data("hello")
        captured = capfd.readouterr()
        assert captured.out == "hello\n"
        assert captured.err == ""

    def test_diagnostics_go_to_stderr(self, capfd, non_tty):
        mgr = OutputManager(no_color=True)
        mgr.info("some info")
        mgr.success("done")
        mgr.warning("careful")
        mgr.error("broken")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert captured.err.splitlines() == [
            "some info",
            "done",
            "Warning: careful",
            "Error: broken",
        ]

    def test_quiet_keeps_warnings_and_errors(self, capfd, non_tty):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("hidden info")
        mgr.success("hidden success")
        mgr.warning("shown warning")
        mgr.error("shown error")
        captured = capfd.readouterr()
        assert "hidden" not in captured.err
        assert "shown warning" in captured.err
        assert "shown error" in captured.err

    def test_messages_are_not_markup(self, capfd, monkeypatch, non_tty):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        OutputManager().error("file [bold]x[/bold].json")
        assert "Error: file [bold]x[/bold].json" in capfd.readouterr().err


# ------------------------------------------------------------------ #
# Structured output
# ------------------------------------------------------------------ #


class TestFormatResponse:
    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).format_response({"name": "id", "schemas": ["Pet"]})
        assert json.loads(capfd.readouterr().out) == {"name": "id", "schemas": ["Pet"]}

    def test_plain_dict_joins_lists(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_response(
            {"name": "id", "schemas": ["Pet", "Tag"]}
        )
        assert capfd.readouterr().out.splitlines() == ["name\tid", "schemas\tPet, Tag"]

    def test_plain_list(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).format_response(["a", "b"])
        assert capfd.readouterr().out.splitlines() == ["a", "b"]

    def test_rich_string(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).format_response("plain text")
        assert "plain text" in capfd.readouterr().out


class TestPrintTable:
    headers = ["Field", "Type"]
    rows = [["id", "integer"], ["name", "string"]]

    def test_json(self, capfd, non_tty):
        OutputManager(format=OutputFormat.JSON).print_table(self.headers, self.rows)
        assert json.loads(capfd.readouterr().out) == [
            {"Field": "id", "Type": "integer"},
            {"Field": "name", "Type": "string"},
        ]

    def test_plain(self, capfd, non_tty):
        OutputManager(format=OutputFormat.PLAIN).print_table(self.headers, self.rows)
        assert capfd.readouterr().out.splitlines() == [
            "Field\tType",
            "id\tinteger",
            "name\tstring",
        ]

    def test_rich(self, capfd, non_tty):
        OutputManager(format=OutputFormat.RICH, no_color=True).print_table(
            self.headers, self.rows, title="Fields"
        )
        out = capfd.readouterr().out
        assert "Fields" in out
        assert "integer" in out


# ------------------------------------------------------------------ #
# Logging
# ------------------------------------------------------------------ #


class TestConfigureLogging:
    def test_installs_single_rich_handler(self, package_logger, non_tty):
        output = OutputManager(no_color=True)
        configure_logging(output=output)
        configure_logging(output=output)

        rich_handlers = [h for h in package_logger.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert package_logger.level == logging.WARNING
        assert package_logger.propagate is False

    def test_verbose_enables_debug(self, package_logger, non_tty):
        configure_logging(verbose=True, output=OutputManager(no_color=True))
        assert package_logger.level == logging.DEBUG

    def test_records_reach_stderr(self, capfd, package_logger, non_tty):
        configure_logging(output=OutputManager(no_color=True))
        logging.getLogger("openapi_explorer.session").warning("reload went wrong")
        captured = capfd.readouterr()
        assert "reload went wrong" in captured.err
        assert captured.out == ""


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_get_output_creates_default(self, non_tty):
        reset_output()
        assert isinstance(get_output(), OutputManager)
        assert get_output() is get_output()

    def test_set_and_reset(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_module_helpers_use_global(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_table(["A"], [["1"]])
        output_module.info("note")
        captured = capfd.readouterr()
        assert captured.out.splitlines() == ["A", "1"]
        assert "note" in captured.err
