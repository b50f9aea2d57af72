"""Config commands -- view and modify the user configuration.

Provides the ``openapi-explorer config`` group. Settings live in
``config.json`` under the config directory and hold the default document
source, the default output format and the validation switches.
"""

from __future__ import annotations

import typer

from openapi_explorer.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the current configuration.

    Example::

        openapi-explorer config show --json
    """
    from openapi_explorer.config import config_path, load_config

    config = load_config()
    info(f"Config file: {config_path()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set-spec")
def config_set_spec(
    source: str = typer.Argument(help="File path or URL of the default document."),
) -> None:
    """Remember the document opened when ``--spec`` is not given.

    Local paths are stored as absolute paths so the setting works from any
    directory.

    Example::

        openapi-explorer config set-spec ./openapi.yaml
    """
    from pathlib import Path

    from openapi_explorer.config import load_config, save_config

    if not source.startswith(("http://", "https://")) and source != "-":
        path = Path(source).expanduser()
        if not path.is_file():
            error(f"OpenAPI file not found: {source}")
            raise typer.Exit(code=2)
        source = str(path.resolve())

    config = load_config()
    config.default_spec = source
    save_config(config)
    success(f"Default document set to {source}")


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'output.format')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the current setting and the result
    is validated before it is saved.

    Example::

        openapi-explorer config set output.format plain
        openapi-explorer config set validation.warn_unknown_types false
    """
    from pydantic import ValidationError

    from openapi_explorer.config import load_config, save_config
    from openapi_explorer.models import ExplorerConfig

    data = load_config().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for part in keys[:-1]:
        if not isinstance(target.get(part), dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[part]

    final_key = keys[-1]
    if final_key not in target:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    coerced: object = value
    if isinstance(target[final_key], bool):
        coerced = value.lower() in ("true", "1", "yes")
    target[final_key] = coerced

    try:
        new_config = ExplorerConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_config(new_config)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults."""
    from openapi_explorer.config import save_config
    from openapi_explorer.models import ExplorerConfig

    if not force and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()

    save_config(ExplorerConfig())
    success("Configuration reset to defaults.")
