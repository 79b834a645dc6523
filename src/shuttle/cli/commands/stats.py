"""``shuttle stats``: coordinator statistics."""

from __future__ import annotations

import typer
from rich.console import Group
from rich.text import Text

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import color_status, format_key_value, output
from shuttle.core.config import Configuration
from shuttle.core.services.coordinator import CoordinatorClient


def _count(data: dict, status: str, field: str) -> Text:
    return Text.assemble(color_status(status), f" ({data.get(field) or 0})")


def stats(ctx: typer.Context) -> None:
    """Show coordinator statistics."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching statistics...", quiet=app_ctx.quiet):
            data = (await client.get_stats()).mapping()

        output(
            data,
            json_mode=app_ctx.json_mode,
            build=lambda: Group(
                Text(f"Coordinator Statistics ({config.project_id})", style="bold"),
                Text("=" * 50),
                Text("Work Items:", style="bold"),
                format_key_value(
                    {
                        "Pending": _count(data, "pending", "pending"),
                        "Active": _count(data, "in-progress", "active"),
                        "Completed": _count(data, "completed", "completed"),
                        "Failed": _count(data, "failed", "failed"),
                        "Total": data.get("total") or 0,
                    }
                ),
            ),
        )

    execute(app_ctx, body, failure="Failed to fetch statistics")
