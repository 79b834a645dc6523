"""``shuttle agents``: registered agents."""

from __future__ import annotations

import typer

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import (
    color_agent_type,
    color_status,
    format_key_value,
    format_timestamp,
    output,
    render_table,
    truncate,
)
from shuttle.core.config import Configuration
from shuttle.core.domain.envelope import records
from shuttle.core.services.coordinator import CoordinatorClient

app = typer.Typer(help="List registered agents.")


@app.callback(invoke_without_command=True)
def list_agents(
    ctx: typer.Context,
    agent_type: str | None = typer.Option(None, "--type", help="Filter by agent type (copilot-cli|claude-code)."),
    status: str | None = typer.Option(None, "--status", help="Filter by status (online|busy|offline)."),
    capability: str | None = typer.Option(None, "--capability", help="Filter by capability."),
) -> None:
    """List registered agents."""

    if ctx.invoked_subcommand is not None:
        return
    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching agents...", quiet=app_ctx.quiet):
            data = (
                await client.list_agents(agent_type=agent_type, status=status, capability=capability)
            ).mapping()
        agents = records(data, "agents")

        if app_ctx.json_mode:
            output({"agents": agents}, json_mode=True)
            return
        if not agents:
            typer.echo("No agents found")
            return
        output(
            agents,
            json_mode=False,
            build=lambda: render_table(
                ["GUID", "Handle", "Type", "Status", "Capabilities", "Tasks"],
                [
                    [
                        truncate(agent.get("guid"), 12),
                        agent.get("handle") or "-",
                        color_agent_type(agent.get("agentType") or "-"),
                        color_status(agent.get("status") or "-"),
                        truncate(", ".join(agent.get("capabilities") or []), 30),
                        str(agent.get("currentTaskCount") or 0),
                    ]
                    for agent in agents
                ],
            ),
        )

    execute(app_ctx, body, failure="Failed to fetch agents")


@app.command("show")
def show_agent(
    ctx: typer.Context,
    agent_guid: str = typer.Argument(..., help="Agent GUID."),
) -> None:
    """Show details of one agent."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching agent...", quiet=app_ctx.quiet):
            agent = (await client.get_agent(agent_guid)).mapping(
                not_found=f"Agent not found: {agent_guid}"
            )

        output(
            agent,
            json_mode=app_ctx.json_mode,
            build=lambda: format_key_value(
                {
                    "GUID": agent.get("guid", agent_guid),
                    "Handle": agent.get("handle") or "-",
                    "Type": color_agent_type(agent.get("agentType") or "-"),
                    "Status": color_status(agent.get("status") or "-"),
                    "Capabilities": ", ".join(agent.get("capabilities") or []) or "None",
                    "Boundaries": ", ".join(agent.get("boundaries") or []) or "All",
                    "Current Tasks": agent.get("currentTaskCount") or 0,
                    "Last Heartbeat": format_timestamp(agent.get("lastHeartbeat")),
                    "Registered": format_timestamp(agent.get("registeredAt")),
                }
            ),
        )

    execute(app_ctx, body, failure="Failed to fetch agent")
