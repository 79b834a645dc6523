"""``shuttle projects``: active projects across the coordinator."""

from __future__ import annotations

import typer

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import output, render_table
from shuttle.core.config import Configuration
from shuttle.core.services.coordinator import CoordinatorClient


def projects(ctx: typer.Context) -> None:
    """List active projects across the coordinator."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching projects...", quiet=app_ctx.quiet):
            data = (await client.list_projects()).mapping()
        project_ids = data.get("projects") or []

        if app_ctx.json_mode:
            output({"projects": project_ids, "count": len(project_ids)}, json_mode=True)
            return
        if not project_ids:
            typer.echo("No active projects")
            return
        output(
            project_ids,
            json_mode=False,
            build=lambda: render_table(["Project ID"], [[project_id] for project_id in project_ids]),
        )

    execute(app_ctx, body, failure="Failed to fetch projects")
