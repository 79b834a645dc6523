"""``shuttle shutdown``: ask an agent to stop."""

from __future__ import annotations

import typer

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import output
from shuttle.core.config import Configuration
from shuttle.core.errors import RemoteRequestError
from shuttle.core.services.coordinator import CoordinatorClient


def shutdown(
    ctx: typer.Context,
    agent_guid: str = typer.Argument(..., help="Agent GUID to shut down."),
    graceful: bool = typer.Option(
        True, "--graceful/--force", help="Wait for current work to complete, or stop immediately."
    ),
    grace_period: int = typer.Option(30000, "--grace-period", min=0, help="Grace period in milliseconds."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt."),
) -> None:
    """Request agent shutdown."""

    app_ctx = get_app_context(ctx)
    if not yes and not app_ctx.json_mode:
        if not typer.confirm(f"Are you sure you want to shutdown agent {agent_guid}?", default=False):
            ui.warning("Shutdown cancelled", quiet=app_ctx.quiet)
            raise typer.Exit(0)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Sending shutdown request...", quiet=app_ctx.quiet):
            result = (
                await client.shutdown_agent(
                    agent_guid, graceful=graceful, grace_period_ms=grace_period if graceful else None
                )
            ).mapping(not_found=f"Agent not found: {agent_guid}")

        if app_ctx.json_mode:
            output(result, json_mode=True)
            return
        if result.get("success") is False:
            raise RemoteRequestError(f"Shutdown failed: {result.get('message') or 'Unknown error'}", status=200)
        ui.success("Agent shutdown requested", quiet=app_ctx.quiet)
        if graceful:
            ui.warning(
                f"Agent will shutdown after completing current work (max {grace_period / 1000:g}s)",
                quiet=app_ctx.quiet,
            )

    execute(app_ctx, body, failure="Failed to send shutdown request")
