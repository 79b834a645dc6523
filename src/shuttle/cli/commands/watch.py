"""``shuttle watch``: follow a work item until it settles."""

from __future__ import annotations

import asyncio
import time

import typer
from rich.text import Text

from shuttle.cli import ui_components as ui
from shuttle.cli.commands.work import work_details
from shuttle.cli.context import execute, get_app_context
from shuttle.cli.rendering import color_status, output
from shuttle.core.config import Configuration
from shuttle.core.domain.vocabulary import WorkStatus
from shuttle.core.errors import RemoteRequestError
from shuttle.core.services.coordinator import CoordinatorClient


def watch(
    ctx: typer.Context,
    work_id: str = typer.Argument(..., help="Work item ID."),
    interval: float = typer.Option(2.0, "--interval", min=0.1, help="Seconds between polls."),
    timeout: float = typer.Option(0.0, "--timeout", min=0.0, help="Give up after N seconds (0: never)."),
) -> None:
    """Watch a work item until it completes, fails or is cancelled."""

    app_ctx = get_app_context(ctx)

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        started = time.monotonic()
        last_status: str | None = None
        last_progress = None
        while True:
            item = (await client.get_work(work_id)).mapping(
                not_found=f"Work item not found: {work_id}"
            )
            status = item.get("status")
            progress = item.get("progress")
            if (status, progress) != (last_status, last_progress) and not app_ctx.json_mode:
                suffix = f" ({progress}%)" if progress is not None else ""
                line = Text.assemble(f"{work_id}: ", color_status(status or "-"), suffix)
                ui.get_console().print(line)
            last_status, last_progress = status, progress

            parsed = WorkStatus.parse(status)
            if parsed is not None and parsed.is_terminal:
                output(item, json_mode=app_ctx.json_mode, build=lambda: work_details(item))
                if parsed is WorkStatus.FAILED:
                    raise RemoteRequestError(f"Work item {work_id} failed", status=200)
                return

            if timeout and time.monotonic() - started >= timeout:
                raise RemoteRequestError(
                    f"Timed out after {timeout:g}s waiting for {work_id} (last status: {status})",
                    status=408,
                )
            await asyncio.sleep(interval)

    execute(app_ctx, body, failure="Watch failed")
