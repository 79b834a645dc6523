"""Shuttle CLI entry point (Typer)."""

from __future__ import annotations

import sys

import typer

from shuttle import __version__
from shuttle.cli.commands import (
    agents,
    config_cmd,
    projects,
    shutdown,
    spin_up,
    stats,
    submit,
    targets,
    watch,
    work,
)
from shuttle.cli.context import get_app_context
from shuttle.cli.ui_components import configure_logging

app = typer.Typer(
    name="shuttle",
    no_args_is_help=True,
    help="Submit work to the Weft coordinator and manage its agents and spin-up targets.",
    pretty_exceptions_enable=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"shuttle {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON instead of formatted tables."),
    config: str | None = typer.Option(
        None, "--config", help="Path to config file (default: ~/.weft/config.json)."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    project: str | None = typer.Option(
        None, "--project", "-p", help="Project ID to operate on (overrides config)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    configure_logging(verbose)
    app_ctx = get_app_context(ctx)
    app_ctx.json = json_output
    app_ctx.config_path = config
    app_ctx.quiet = quiet
    app_ctx.project = project


app.add_typer(config_cmd.app, name="config")
app.command("submit")(submit.submit)
app.add_typer(agents.app, name="agents")
app.add_typer(work.app, name="work")
app.command("watch")(watch.watch)
app.command("stats")(stats.stats)
app.command("spin-up")(spin_up.spin_up)
app.command("shutdown")(shutdown.shutdown)
app.add_typer(targets.app, name="targets")
app.command("projects")(projects.projects)


def run() -> None:
    # Windows consoles default to cp1252; Rich prints Unicode symbols.
    if sys.platform == "win32":
        sys.stdout.reconfigure(encoding="utf-8")
        sys.stderr.reconfigure(encoding="utf-8")
    app()


if __name__ == "__main__":
    run()
