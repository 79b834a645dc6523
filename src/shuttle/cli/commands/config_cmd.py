"""``shuttle config``: read and write ~/.weft/config.json."""

from __future__ import annotations

import typer

from shuttle.cli import ui_components as ui
from shuttle.cli.context import get_app_context, handle_errors
from shuttle.cli.rendering import format_key_value, output
from shuttle.core.config import (
    CONFIG_KEYS,
    coerce_value,
    default_config_path,
    get_config_value,
    list_config,
    normalize_key,
    set_config_value,
    validate_config,
)
from shuttle.core.errors import ConfigError

app = typer.Typer(no_args_is_help=True, help="View and edit the CLI configuration.")


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """Show the fully resolved configuration."""

    app_ctx = get_app_context(ctx)
    with handle_errors():
        config = list_config(app_ctx.load_options)
        values = config.to_file_dict()
        shown = {**values, "apiToken": "********"} if values.get("apiToken") else values
        output(values, json_mode=app_ctx.json, build=lambda: format_key_value(shown))


@app.command("get")
def get_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"One of: {', '.join(CONFIG_KEYS)}"),
) -> None:
    """Print one resolved value."""

    app_ctx = get_app_context(ctx)
    with handle_errors():
        name = normalize_key(key)
        value = get_config_value(name, app_ctx.load_options)
        if app_ctx.json:
            output({name: value}, json_mode=True)
        elif value is None:
            ui.warning(f"{name} is not set", quiet=app_ctx.quiet)
        else:
            typer.echo(value)


@app.command("set")
def set_command(
    ctx: typer.Context,
    key: str = typer.Argument(..., help=f"One of: {', '.join(CONFIG_KEYS)}"),
    value: str = typer.Argument(...),
) -> None:
    """Persist one value in the config file."""

    app_ctx = get_app_context(ctx)
    with handle_errors():
        name = normalize_key(key)
        coerced = coerce_value(name, value)
        errors = validate_config({name: coerced})
        if errors:
            raise ConfigError("; ".join(errors), violations=errors)
        path = set_config_value(name, coerced, app_ctx.config_path)
        ui.success(f"Set {name} = {coerced} in {path}", quiet=app_ctx.quiet)


@app.command("path")
def path_command(ctx: typer.Context) -> None:
    """Print the config file location."""

    app_ctx = get_app_context(ctx)
    typer.echo(app_ctx.config_path or str(default_config_path()))


@app.command("validate")
def validate_command(ctx: typer.Context) -> None:
    """Check the resolved configuration against every rule."""

    app_ctx = get_app_context(ctx)
    with handle_errors():
        errors = validate_config(list_config(app_ctx.load_options))
        if app_ctx.json:
            output({"valid": not errors, "errors": errors}, json_mode=True)
        elif errors:
            for message in errors:
                ui.error(message)
        else:
            ui.success("Configuration is valid", quiet=app_ctx.quiet)
        if errors:
            raise typer.Exit(1)
