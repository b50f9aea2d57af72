"""Shared test fixtures for openapi-explorer.

Provides document fixtures (raw dicts, parsed documents and built indexes),
an isolated config environment, output managers and a CLI runner. These
fixtures are discovered by pytest and available to every test module.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from openapi_explorer.index import build_index
from openapi_explorer.models import CrossReferenceIndex, OpenAPIDocument
from openapi_explorer.output import OutputFormat, OutputManager, reset_output, set_output
from openapi_explorer.parser import parse_document


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager keeps references to the sys.stdout/sys.stderr it was
    created with; CliRunner swaps those streams, so a manager left over
    from one test would write to closed files in the next.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Raw petstore document dict."""
    with open(FIXTURES_DIR / "petstore.json") as f:
        return json.load(f)


@pytest.fixture
def users_raw() -> dict[str, Any]:
    """Raw minimal document: ``User{id, name}``, ``POST /users`` and ``GET /users``."""
    with open(FIXTURES_DIR / "users.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_document(petstore_raw: dict[str, Any]) -> OpenAPIDocument:
    return parse_document(petstore_raw)


@pytest.fixture
def users_document(users_raw: dict[str, Any]) -> OpenAPIDocument:
    return parse_document(users_raw)


@pytest.fixture
def petstore_index(petstore_document: OpenAPIDocument) -> CrossReferenceIndex:
    return build_index(petstore_document)


@pytest.fixture
def users_index(users_document: OpenAPIDocument) -> CrossReferenceIndex:
    return build_index(users_document)


@pytest.fixture
def make_document():
    """Factory building a minimal document from component schemas and paths."""

    def _make(
        schemas: dict[str, Any] | None = None,
        paths: dict[str, Any] | None = None,
    ) -> OpenAPIDocument:
        raw: dict[str, Any] = {
            "openapi": "3.0.3",
            "info": {"title": "Test", "version": "1.0.0"},
            "paths": paths or {},
        }
        if schemas is not None:
            raw["components"] = {"schemas": schemas}
        return parse_document(raw)

    return _make


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME at subdirectories of
    tmp_path, clears OPENAPI_EXPLORER_SPEC and changes the working
    directory to tmp_path (so neither a project config nor the bundled
    example document is picked up).

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("openapi_explorer.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("OPENAPI_EXPLORER_SPEC", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager."""
    output = OutputManager(format=OutputFormat.JSON, no_color=True)
    set_output(output)
    return output


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
