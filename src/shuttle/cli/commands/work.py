"""``shuttle work``: list, inspect and cancel work items."""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Group
from rich.text import Text

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import (
    color_boundary,
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

app = typer.Typer(help="List and view work items.")

WORK_HEADERS = ["ID", "Status", "Boundary", "Capability", "Description", "Priority", "Offered"]


def work_row(item: dict[str, Any]) -> list[Any]:
    return [
        truncate(item.get("id"), 12),
        color_status(item.get("status") or "-"),
        color_boundary(item.get("boundary") or "-"),
        item.get("capability") or "-",
        truncate(item.get("description"), 40),
        str(item.get("priority") or 5),
        format_timestamp(item.get("offeredAt")),
    ]


def work_details(item: dict[str, Any]) -> Group:
    """Detail view: item fields, then result and error sections when present."""

    progress = item.get("progress")
    sections: list[Any] = [
        Text("Work Item Details:", style="bold"),
        format_key_value(
            {
                "ID": item.get("id"),
                "Task ID": item.get("taskId"),
                "Status": color_status(item.get("status") or "-"),
                "Boundary": color_boundary(item.get("boundary") or "-"),
                "Capability": item.get("capability"),
                "Description": item.get("description"),
                "Priority": item.get("priority"),
                "Attempts": item.get("attempts"),
                "Offered By": item.get("offeredBy"),
                "Offered At": format_timestamp(item.get("offeredAt")),
                "Assigned To": item.get("assignedTo") or "N/A",
                "Assigned At": format_timestamp(item.get("assignedAt")),
                "Deadline": item.get("deadline") or "N/A",
                "Progress": f"{progress}%" if progress is not None else "N/A",
            }
        ),
    ]

    result = item.get("result")
    if isinstance(result, dict) and result:
        sections += [
            Text("\nResult:", style="bold"),
            format_key_value(
                {
                    "Summary": result.get("summary") or "N/A",
                    "Completed At": format_timestamp(result.get("completedAt")),
                    "Artifacts": ", ".join(result.get("artifacts") or []) or "None",
                }
            ),
        ]

    failure = item.get("error")
    if isinstance(failure, dict) and failure:
        sections += [
            Text("\nError:", style="bold red"),
            format_key_value(
                {
                    "Message": failure.get("message"),
                    "Code": failure.get("code") or "N/A",
                    "Recoverable": "Yes" if failure.get("recoverable") else "No",
                    "Occurred At": format_timestamp(failure.get("occurredAt")),
                }
            ),
        ]
    return Group(*sections)


def _list_work(ctx: typer.Context, status: str | None, boundary: str | None) -> None:
    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching work items...", quiet=app_ctx.quiet):
            data = (await client.list_work(status=status, boundary=boundary)).mapping()
        items = records(data, "workItems")

        if app_ctx.json_mode:
            output({"workItems": items}, json_mode=True)
            return
        if not items:
            typer.echo("No work items found")
            return
        output(items, json_mode=False, build=lambda: render_table(WORK_HEADERS, [work_row(i) for i in items]))

    execute(app_ctx, body, failure="Failed to fetch work items")


_STATUS_HELP = "Filter by status (pending|assigned|in-progress|completed|failed|cancelled)."


@app.callback(invoke_without_command=True)
def work(
    ctx: typer.Context,
    status: str | None = typer.Option(None, "--status", help=_STATUS_HELP),
    boundary: str | None = typer.Option(None, "--boundary", help="Filter by boundary."),
) -> None:
    """List and view work items."""

    if ctx.invoked_subcommand is None:
        _list_work(ctx, status, boundary)


@app.command("list")
def list_command(
    ctx: typer.Context,
    status: str | None = typer.Option(None, "--status", help=_STATUS_HELP),
    boundary: str | None = typer.Option(None, "--boundary", help="Filter by boundary."),
) -> None:
    """List work items."""

    _list_work(ctx, status, boundary)


@app.command("show")
def show_command(
    ctx: typer.Context,
    work_id: str = typer.Argument(..., help="Work item ID."),
) -> None:
    """Show details of a specific work item."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Fetching work item...", quiet=app_ctx.quiet):
            item = (await client.get_work(work_id)).mapping(
                not_found=f"Work item not found: {work_id}"
            )
        output(item, json_mode=app_ctx.json_mode, build=lambda: work_details(item))

    execute(app_ctx, body, failure="Failed to fetch work item")


@app.command("cancel")
def cancel_command(
    ctx: typer.Context,
    work_id: str = typer.Argument(..., help="Work item ID."),
) -> None:
    """Cancel a work item."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Cancelling work item...", quiet=app_ctx.quiet):
            data = (await client.cancel_work(work_id)).raise_for_error(
                not_found=f"Work item not found: {work_id}"
            )
        if app_ctx.json_mode:
            output(data, json_mode=True)
        else:
            ui.success(f"Work item {work_id} cancelled", quiet=app_ctx.quiet)

    execute(app_ctx, body, failure="Failed to cancel work item")
