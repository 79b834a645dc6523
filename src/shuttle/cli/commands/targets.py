"""``shuttle targets``: manage spin-up targets."""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Group
from rich.text import Text

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
from shuttle.core.domain.vocabulary import AgentType, SpinUpMechanism
from shuttle.core.errors import ShuttleError
from shuttle.core.services.coordinator import CoordinatorClient

app = typer.Typer(no_args_is_help=True, help="Manage spin-up targets.")


class TargetOptionsError(ShuttleError):
    """Missing or inconsistent options for a target."""


def split_csv(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [part.strip() for part in value.split(",") if part.strip()]


def mechanism_config(
    mechanism: str,
    *,
    host: str | None = None,
    user: str | None = None,
    command: str | None = None,
    repo: str | None = None,
    workflow: str | None = None,
    url: str | None = None,
) -> dict[str, Any]:
    """Mechanism-specific settings, checked for the fields each mechanism needs."""

    kind = SpinUpMechanism.parse(mechanism)
    if kind is None:
        raise TargetOptionsError(
            f"Invalid mechanism: {mechanism}",
            hint=f"Valid values: {', '.join(SpinUpMechanism.values())}",
        )

    config: dict[str, Any] = {"mechanism": kind.value}
    if kind is SpinUpMechanism.SSH:
        if not host:
            raise TargetOptionsError("--host is required for ssh mechanism")
        config.update(host=host, user=user or "root", command=command)
    elif kind is SpinUpMechanism.GITHUB_ACTIONS:
        if not repo or not workflow:
            raise TargetOptionsError("--repo and --workflow are required for github-actions mechanism")
        config.update(repo=repo, workflowFile=workflow)
    elif kind is SpinUpMechanism.LOCAL:
        if not command:
            raise TargetOptionsError("--command is required for local mechanism")
        config.update(command=command)
    elif kind is SpinUpMechanism.WEBHOOK:
        if not url:
            raise TargetOptionsError("--url is required for webhook mechanism")
        config.update(url=url)
    return {k: v for k, v in config.items() if v is not None}


@app.command("list")
def list_command(
    ctx: typer.Context,
    agent_type: str | None = typer.Option(None, "--type", help="Filter by agent type."),
    status: str | None = typer.Option(None, "--status", help="Filter by status."),
    capability: str | None = typer.Option(None, "--capability", help="Filter by capability."),
    include_disabled: bool = typer.Option(False, "--include-disabled", help="Include disabled targets."),
) -> None:
    """List spin-up targets."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching targets...", quiet=app_ctx.quiet):
            data = (
                await client.list_targets(
                    agent_type=agent_type,
                    status=status,
                    capability=capability,
                    include_disabled=include_disabled,
                )
            ).mapping()
        targets = records(data, "targets")

        if app_ctx.json_mode:
            output({"targets": targets}, json_mode=True)
            return
        if not targets:
            typer.echo("No targets found")
            return
        output(
            targets,
            json_mode=False,
            build=lambda: render_table(
                ["Name", "Type", "Mechanism", "Status", "Health", "Capabilities", "Uses"],
                [
                    [
                        t.get("name") or "-",
                        color_agent_type(t.get("agentType") or "-"),
                        t.get("mechanism") or "-",
                        color_status(t.get("status") or "-"),
                        color_status(t.get("healthStatus") or "unknown"),
                        truncate(", ".join(t.get("capabilities") or []), 25),
                        str(t.get("useCount") or 0),
                    ]
                    for t in targets
                ],
            ),
        )

    execute(app_ctx, body, failure="Failed to fetch targets")


app.command("ls", hidden=True)(list_command)


@app.command("add")
def add_command(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", help="Target name (unique identifier)."),
    agent_type: str = typer.Option(..., "--type", help="Agent type (claude-code|copilot-cli)."),
    mechanism: str = typer.Option(
        ..., "--mechanism", help="Spin-up mechanism (ssh|github-actions|local|webhook|kubernetes)."
    ),
    host: str | None = typer.Option(None, "--host", help="SSH host (ssh)."),
    user: str | None = typer.Option(None, "--user", help="SSH user (ssh)."),
    command: str | None = typer.Option(None, "--command", help="Command to run (ssh/local)."),
    repo: str | None = typer.Option(None, "--repo", help="GitHub repo (github-actions)."),
    workflow: str | None = typer.Option(None, "--workflow", help="Workflow file (github-actions)."),
    url: str | None = typer.Option(None, "--url", help="Webhook URL (webhook)."),
    capabilities: str | None = typer.Option(None, "--capabilities", help="Comma-separated capabilities."),
    boundaries: str | None = typer.Option(None, "--boundaries", help="Comma-separated allowed boundaries."),
    description: str | None = typer.Option(None, "--description", help="Target description."),
) -> None:
    """Add a new spin-up target."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        if AgentType.parse(agent_type) is None:
            raise TargetOptionsError(
                f"Invalid agent type: {agent_type}",
                hint=f"Valid values: {', '.join(AgentType.values())}",
            )
        request = {
            "name": name,
            "agentType": agent_type,
            "capabilities": split_csv(capabilities) or [],
            "mechanism": mechanism,
            "config": mechanism_config(
                mechanism, host=host, user=user, command=command, repo=repo, workflow=workflow, url=url
            ),
            "boundaries": split_csv(boundaries),
            "description": description,
        }
        with ui.spinner("Creating target...", quiet=app_ctx.quiet):
            target = (await client.create_target(request)).mapping()

        if app_ctx.json_mode:
            output(target, json_mode=True)
            return
        ui.success(f'Target "{target.get("name", name)}" created successfully', quiet=app_ctx.quiet)
        output(
            target,
            json_mode=False,
            build=lambda: format_key_value(
                {
                    "ID": target.get("id"),
                    "Name": target.get("name", name),
                    "Type": target.get("agentType", agent_type),
                    "Mechanism": target.get("mechanism", mechanism),
                    "Status": target.get("status"),
                }
            ),
        )

    execute(app_ctx, body, failure="Failed to create target")


def _target_details(result: dict[str, Any]) -> Group:
    sections: list[Any] = [
        Text("Target Details:", style="bold"),
        format_key_value(
            {
                "ID": result.get("id"),
                "Name": result.get("name"),
                "Description": result.get("description") or "N/A",
                "Type": color_agent_type(result.get("agentType") or "-"),
                "Mechanism": result.get("mechanism"),
                "Status": color_status(result.get("status") or "-"),
                "Health": color_status(result.get("healthStatus") or "unknown"),
                "Capabilities": ", ".join(result.get("capabilities") or []) or "None",
                "Boundaries": ", ".join(result.get("boundaries") or []) or "All",
                "Use Count": result.get("useCount") or 0,
                "Last Used": format_timestamp(result.get("lastUsedAt")) if result.get("lastUsedAt") else "Never",
                "Created": format_timestamp(result.get("createdAt")),
            }
        ),
    ]
    if isinstance(result.get("config"), dict):
        sections += [Text("\nConfiguration:", style="bold"), format_key_value(result["config"])]
    return Group(*sections)


@app.command("show")
def show_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target name or ID."),
) -> None:
    """Show target details."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching target...", quiet=app_ctx.quiet):
            result = (await client.get_target(target)).mapping(
                not_found=f"Target not found: {target}"
            )
        output(result, json_mode=app_ctx.json_mode, build=lambda: _target_details(result))

    execute(app_ctx, body, failure="Failed to fetch target")


@app.command("update")
def update_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target name or ID."),
    capabilities: str | None = typer.Option(None, "--capabilities", help="New comma-separated capabilities."),
    boundaries: str | None = typer.Option(None, "--boundaries", help="New comma-separated boundaries."),
    description: str | None = typer.Option(None, "--description", help="New description."),
) -> None:
    """Update a target."""

    app_ctx = get_app_context(ctx)
    updates: dict[str, Any] = {}
    if capabilities:
        updates["capabilities"] = split_csv(capabilities)
    if boundaries:
        updates["boundaries"] = split_csv(boundaries)
    if description is not None:
        updates["description"] = description
    if not updates:
        ui.error("No updates specified")
        raise typer.Exit(1)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Updating target...", quiet=app_ctx.quiet):
            data = (await client.update_target(target, updates)).raise_for_error(
                not_found=f"Target not found: {target}"
            )
        if app_ctx.json_mode:
            output(data, json_mode=True)
        else:
            ui.success(f'Target "{target}" updated', quiet=app_ctx.quiet)

    execute(app_ctx, body, failure="Failed to update target")


@app.command("remove")
def remove_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target name or ID."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Remove a target."""

    app_ctx = get_app_context(ctx)
    if not yes and not app_ctx.json_mode:
        if not typer.confirm(f'Remove target "{target}"?', default=False):
            typer.echo("Cancelled.")
            return

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Removing target...", quiet=app_ctx.quiet):
            data = (await client.delete_target(target)).raise_for_error(not_found=f"Target not found: {target}")
        if app_ctx.json_mode:
            output(data if data is not None else {"success": True}, json_mode=True)
            return
        ui.success(f'Target "{target}" removed', quiet=app_ctx.quiet)

    execute(app_ctx, body, failure="Failed to remove target")


app.command("rm", hidden=True)(remove_command)


@app.command("test")
def test_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target name or ID."),
) -> None:
    """Test target health/connectivity."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Testing target...", quiet=app_ctx.quiet):
            result = (await client.test_target(target)).mapping(
                not_found=f"Target not found: {target}"
            )

        if app_ctx.json_mode:
            output(result, json_mode=True)
            return
        if result.get("healthy"):
            ui.success("Target is healthy", quiet=app_ctx.quiet)
        else:
            ui.warning("Target health check failed", quiet=app_ctx.quiet)
        latency = result.get("latencyMs")
        output(
            result,
            json_mode=False,
            build=lambda: format_key_value(
                {
                    "Target": target,
                    "Healthy": "Yes" if result.get("healthy") else "No",
                    "Latency": f"{latency}ms" if latency else "N/A",
                    "Error": result.get("error") or "(none)",
                }
            ),
        )

    execute(app_ctx, body, failure="Failed to test target")


def _toggle(ctx: typer.Context, target: str, *, enable: bool) -> None:
    app_ctx = get_app_context(ctx)
    verb = "enable" if enable else "disable"

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        call = client.enable_target if enable else client.disable_target
        with ui.spinner(f"{'Enabling' if enable else 'Disabling'} target...", quiet=app_ctx.quiet):
            data = (await call(target)).raise_for_error(not_found=f"Target not found: {target}")
        if app_ctx.json_mode:
            output(data if data is not None else {"success": True}, json_mode=True)
            return
        ui.success(f'Target "{target}" {verb}d', quiet=app_ctx.quiet)

    execute(app_ctx, body, failure=f"Failed to {verb} target")


@app.command("enable")
def enable_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target name or ID."),
) -> None:
    """Enable a disabled target."""

    _toggle(ctx, target, enable=True)


@app.command("disable")
def disable_command(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Target name or ID."),
) -> None:
    """Disable a target (prevent spin-up)."""

    _toggle(ctx, target, enable=False)
