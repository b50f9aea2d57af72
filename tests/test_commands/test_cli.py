"""End-to-end tests of the CLI through Typer's test runner."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from openapi_explorer import __version__
from openapi_explorer.app import app
from openapi_explorer.config import load_config

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures"
PETSTORE = str(FIXTURES_DIR / "petstore.json")
USERS = str(FIXTURES_DIR / "users.json")


@pytest.fixture(autouse=True)
def _isolated(isolated_config: Path) -> None:
    """Every CLI test runs without user, project or bundled documents."""


def _json(result) -> object:  # noqa: ANN001
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


class TestGlobalOptions:
    def test_version(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"openapi-explorer {__version__}" in result.output

    def test_no_document_configured(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["fields"])
        assert result.exit_code == 2
        assert "No OpenAPI document given" in result.output

    def test_missing_file(self, cli_runner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["--spec", str(tmp_path / "nope.json"), "fields"])
        assert result.exit_code == 4
        assert "OpenAPI file not found" in result.output

    def test_malformed_document(self, cli_runner, tmp_path: Path) -> None:
        path = tmp_path / "swagger.json"
        path.write_text('{"swagger": "2.0"}', encoding="utf-8")
        result = cli_runner.invoke(app, ["--spec", str(path), "stats"])
        assert result.exit_code == 7
        assert "Swagger 2.0 is not supported" in result.output

    def test_env_var_source(self, cli_runner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAPI_EXPLORER_SPEC", USERS)
        data = _json(cli_runner.invoke(app, ["--json", "fields"]))
        assert [row["Field"] for row in data] == ["id", "name"]


# ---------------------------------------------------------------------------
# Inspect commands
# ---------------------------------------------------------------------------


class TestFieldsCommand:
    def test_lists_all_fields_sorted(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "fields"]))
        names = [row["Field"] for row in data]
        assert names == sorted(names)
        assert len(names) == 12

        rows = {row["Field"]: row for row in data}
        assert rows["id"]["Type"] == "integer"
        assert rows["id"]["Critical"] == "yes"
        assert rows["created_at"]["Type"] == "unknown"
        assert rows["created_at"]["Endpoints"] == "0"
        assert rows["created_at"]["Critical"] == ""

    def test_query_filters(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "fields", "sku"]))
        assert [row["Field"] for row in data] == ["sku"]

    def test_critical_only(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "fields", "--critical"]))
        assert len(data) == 9
        assert all(row["Critical"] == "yes" for row in data)

    def test_no_match(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--spec", PETSTORE, "fields", "zzzz"])
        assert result.exit_code == 0
        assert "No matching fields." in result.output

    def test_plain_output(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--spec", USERS, "--plain", "fields"])
        assert result.exit_code == 0
        assert result.stdout.splitlines()[0] == "Field\tType\tSchemas\tEndpoints\tCritical"


class TestFieldCommand:
    def test_field_details(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "field", "id"]))
        assert data["name"] == "id"
        assert data["field_type"] == "integer"
        assert data["schemas"] == ["Category", "Tag", "Pet", "NewPet"]
        assert "POST /pets" in data["endpoints"]
        assert data["is_critical"] is True
        assert "label" in data["related"]
        assert "id" not in data["related"]

    def test_unknown_field(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--spec", PETSTORE, "field", "nope"])
        assert result.exit_code == 2
        assert "Unknown field: nope" in result.output


class TestSchemasAndEndpoints:
    def test_schemas(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "schemas"]))
        assert {row["Schema"] for row in data} == {
            "Audit", "Category", "Error", "Inventory", "NewPet", "Pet", "Tag",
        }

    def test_no_schemas(self, cli_runner, tmp_path: Path) -> None:
        path = tmp_path / "bare.json"
        path.write_text(
            json.dumps({"openapi": "3.0.0", "info": {"title": "t", "version": "1"}}),
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["--spec", str(path), "schemas"])
        assert result.exit_code == 0
        assert "No schemas defined" in result.output

    def test_endpoints(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", USERS, "--json", "endpoints"]))
        assert data == [
            {"Endpoint": "GET /users", "Fields": "-"},
            {"Endpoint": "POST /users", "Fields": "id, name"},
        ]


class TestStatsCommand:
    def test_stats(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "stats"]))
        assert data["total_fields"] == 12
        assert data["total_schemas"] == 7
        assert data["total_endpoints"] == 6
        assert data["critical_fields"] == 9
        assert data["most_connected_field"] == "id"
        assert data["graph_density"] == 33.33
        assert data["title"] == "Petstore API"


class TestValidateCommand:
    def test_warnings_listed(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "validate"]))
        assert data[0] == {"Warning": "Field 'created_at' has unknown type"}
        assert len(data) == 3

    def test_strict_fails_on_warnings(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--spec", PETSTORE, "validate", "--strict"])
        assert result.exit_code == 1

    def test_clean_document(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["--spec", USERS, "validate", "--strict"])
        assert result.exit_code == 0
        assert "No warnings." in result.output


# ---------------------------------------------------------------------------
# Config commands
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_set_spec_then_use_it(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["config", "set-spec", USERS])
        assert result.exit_code == 0
        assert load_config().default_spec == str(Path(USERS).resolve())

        data = _json(cli_runner.invoke(app, ["--json", "fields"]))
        assert [row["Field"] for row in data] == ["id", "name"]

    def test_set_spec_missing_file(self, cli_runner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set-spec", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 2
        assert load_config().default_spec is None

    def test_set_spec_url_is_stored_verbatim(self, cli_runner) -> None:
        url = "https://example.com/openapi.json"
        assert cli_runner.invoke(app, ["config", "set-spec", url]).exit_code == 0
        assert load_config().default_spec == url

    def test_show(self, cli_runner) -> None:
        data = _json(cli_runner.invoke(app, ["--json", "--quiet", "config", "show"]))
        assert data["output"]["format"] == "auto"
        assert data["validation"]["warn_unknown_types"] is True

    def test_set_output_format(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["config", "set", "output.format", "json"])
        assert result.exit_code == 0
        data = _json(cli_runner.invoke(app, ["--spec", USERS, "fields"]))
        assert len(data) == 2

    def test_set_bool(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["config", "set", "validation.warn_unknown_types", "false"])
        assert result.exit_code == 0
        assert load_config().validation.warn_unknown_types is False

        data = _json(cli_runner.invoke(app, ["--spec", PETSTORE, "--json", "validate"]))
        assert len(data) == 2

    def test_set_invalid_value(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["config", "set", "output.format", "xml"])
        assert result.exit_code == 2
        assert load_config().output.format == "auto"

    def test_set_unknown_key(self, cli_runner) -> None:
        result = cli_runner.invoke(app, ["config", "set", "output.colour", "x"])
        assert result.exit_code == 2

    def test_reset(self, cli_runner) -> None:
        cli_runner.invoke(app, ["config", "set-spec", USERS])
        result = cli_runner.invoke(app, ["config", "reset", "--force"])
        assert result.exit_code == 0
        assert load_config().default_spec is None


# ---------------------------------------------------------------------------
# browse
# ---------------------------------------------------------------------------


class TestBrowseCommand:
    def test_scripted_session(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app,
            ["--spec", PETSTORE, "browse", "--no-clear"],
            input="2\ndown\nenter\nq\n",
        )
        assert result.exit_code == 0, result.output
        assert "Fields (12)" in result.output
        assert "Schemas (7)" in result.output
        assert "Schema Details" in result.output

    def test_ends_at_end_of_input(self, cli_runner) -> None:
        result = cli_runner.invoke(
            app, ["--spec", USERS, "browse", "--no-clear"], input="/name\n"
        )
        assert result.exit_code == 0, result.output
        assert "Search: name" in result.output

    def test_missing_document(self, cli_runner, tmp_path: Path) -> None:
        result = cli_runner.invoke(app, ["--spec", str(tmp_path / "x.json"), "browse"])
        assert result.exit_code == 4
