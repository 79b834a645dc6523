"""``shuttle spin-up``: start an agent on a spin-up target."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import typer
from rich.console import Group
from rich.text import Text

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import format_key_value, format_timestamp, output
from shuttle.core.config import Configuration
from shuttle.core.domain.envelope import records
from shuttle.core.errors import RemoteRequestError, ShuttleError
from shuttle.core.services.coordinator import CoordinatorClient


def spin_up_succeeded(result: dict[str, Any]) -> bool:
    """Older coordinators answer ``success: true``; newer ones a status string."""

    return result.get("success") is True or result.get("status") in ("in-progress", "completed")


def _details(result: dict[str, Any]) -> Group:
    timestamp = result.get("timestamp")
    sections: list[Any] = [
        format_key_value(
            {
                "Operation ID": result.get("operationId") or result.get("targetId"),
                "Target Name": result.get("targetName"),
                "Status": result.get("status") or "initiated",
                "Timestamp": format_timestamp(timestamp) if timestamp else datetime.now().strftime("%c"),
            }
        )
    ]
    mechanism = result.get("mechanismResult")
    if isinstance(mechanism, dict) and mechanism:
        sections += [Text("\nMechanism Details:", style="bold"), format_key_value(mechanism)]
    return Group(*sections)


def spin_up(
    ctx: typer.Context,
    target: str | None = typer.Option(None, "--target", help="Target name to spin up."),
    agent_type: str | None = typer.Option(None, "--type", help="Agent type filter (copilot-cli|claude-code)."),
    capability: str | None = typer.Option(None, "--capability", help="Required capability."),
    boundary: str | None = typer.Option(None, "--boundary", help="Required boundary support."),
) -> None:
    """Trigger agent spin-up."""

    app_ctx = get_app_context(ctx)
    if not (target or agent_type or capability or boundary):
        ui.error(
            "Must provide either --target or at least one filter (--type, --capability, --boundary)"
        )
        raise typer.Exit(1)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        target_id = target
        if target_id is None:
            data = (
                await client.list_targets(agent_type=agent_type, capability=capability)
            ).mapping()
            candidates = records(data, "targets")
            if boundary:
                candidates = [
                    t for t in candidates if not t.get("boundaries") or boundary in t.get("boundaries")
                ]
            if not candidates:
                raise ShuttleError("No matching targets found")
            target_id = candidates[0].get("id") or candidates[0].get("name")
            ui.info(f"Selected target: {candidates[0].get('name')}", quiet=app_ctx.quiet or app_ctx.json_mode)

        with ui.spinner("Triggering agent spin-up...", quiet=app_ctx.quiet):
            result = (await client.spin_up_target(target_id)).mapping(
                not_found=f"Target not found: {target_id}"
            )

        if app_ctx.json_mode:
            output(result, json_mode=True)
        elif spin_up_succeeded(result):
            ui.success("Agent spin-up triggered successfully!", quiet=app_ctx.quiet)
            output(result, json_mode=False, build=lambda: _details(result))
        if not spin_up_succeeded(result):
            reason = result.get("error") or result.get("message") or "Unknown error"
            raise RemoteRequestError(f"Spin-up failed: {reason}", status=200)

    execute(app_ctx, body, failure="Failed to trigger spin-up")
