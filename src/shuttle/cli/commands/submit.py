"""``shuttle submit``: offer a unit of work to the coordinator."""

from __future__ import annotations

import typer

from shuttle.cli import ui_components as ui
from shuttle.cli.context import execute, get_app_context, handle_errors
from shuttle.cli.rendering import format_key_value, output
from shuttle.core.config import DEFAULT_PRIORITY, Configuration
from shuttle.core.domain.vocabulary import AgentType
from shuttle.core.errors import ShuttleError
from shuttle.core.services.coordinator import CoordinatorClient, WorkSubmission


class SubmissionError(ShuttleError):
    """Invalid or incomplete work submission."""


def _prompt_missing(
    description: str | None,
    boundary: str | None,
    capability: str | None,
    priority: int,
) -> tuple[str, str, str, int]:
    description = description or typer.prompt("Task description").strip()
    boundary = boundary or typer.prompt("Boundary (e.g. production, staging)").strip()
    capability = capability or typer.prompt("Required capability (e.g. python)").strip()
    priority = typer.prompt("Priority (1-10)", default=priority, type=int)
    return description, boundary, capability, priority


def build_submission(
    config: Configuration,
    *,
    description: str | None,
    boundary: str | None,
    capability: str | None,
    priority: int | None,
    agent_type: str | None,
    deadline: str | None,
    interactive: bool,
    allow_prompts: bool,
) -> WorkSubmission:
    boundary = boundary or config.default_boundary
    resolved_priority = priority if priority is not None else (config.default_priority or DEFAULT_PRIORITY)

    if (interactive or not description or not boundary or not capability) and allow_prompts:
        description, boundary, capability, resolved_priority = _prompt_missing(
            description, boundary, capability, resolved_priority
        )

    if not description:
        raise SubmissionError("Description is required", hint="Pass it as an argument or use --interactive.")
    if not boundary or not boundary.strip():
        raise SubmissionError("Boundary must be a non-empty string", hint="Use --boundary or --interactive.")
    if not capability:
        raise SubmissionError("Capability is required", hint="Use --capability or --interactive.")
    if not 1 <= resolved_priority <= 10:
        raise SubmissionError(f"Priority must be between 1 and 10, got {resolved_priority}")
    if agent_type and AgentType.parse(agent_type) is None:
        raise SubmissionError(
            f"Invalid agent type: {agent_type}",
            hint=f"Valid values: {', '.join(AgentType.values())}",
        )

    return WorkSubmission(
        description=description,
        boundary=boundary.strip(),
        capability=capability,
        priority=resolved_priority,
        deadline=deadline,
        agent_type=agent_type,
    )


def submit(
    ctx: typer.Context,
    description: str | None = typer.Argument(None, help="Task description."),
    boundary: str | None = typer.Option(
        None, "--boundary", help="Work boundary (user-defined, e.g. production, staging)."
    ),
    capability: str | None = typer.Option(
        None, "--capability", help="Required capability (e.g. typescript, python)."
    ),
    priority: int | None = typer.Option(None, "--priority", help="Priority level (1-10)."),
    agent_type: str | None = typer.Option(
        None, "--agent-type", help="Required agent type (copilot-cli|claude-code)."
    ),
    deadline: str | None = typer.Option(None, "--deadline", help="Deadline (ISO 8601 timestamp)."),
    interactive: bool = typer.Option(False, "--interactive", help="Prompt for missing fields."),
) -> None:
    """Submit work to the coordinator."""

    app_ctx = get_app_context(ctx)
    with handle_errors():
        submission = build_submission(
            app_ctx.config,
            description=description,
            boundary=boundary,
            capability=capability,
            priority=priority,
            agent_type=agent_type,
            deadline=deadline,
            interactive=interactive,
            allow_prompts=not app_ctx.json_mode,
        )

    async def body(client: CoordinatorClient, config: Configuration) -> None:
        with ui.spinner("Submitting work...", quiet=app_ctx.quiet):
            result = (await client.submit_work(submission)).mapping()

        if app_ctx.json_mode:
            output(result, json_mode=True)
            return

        work_id = result.get("workItemId") or result.get("id")
        wait = result.get("estimatedWaitSeconds")
        ui.success("Work submitted!", quiet=app_ctx.quiet)
        output(
            result,
            json_mode=False,
            build=lambda: format_key_value(
                {
                    "Work Item ID": work_id,
                    "Target Agent Type": result.get("targetAgentType") or "Any",
                    "Spin-up Triggered": "Yes" if result.get("spinUpTriggered") else "No",
                    "Estimated Wait": f"{wait}s" if wait is not None else "N/A",
                }
            ),
        )
        ui.info(f"Track progress with: shuttle watch {work_id}", quiet=app_ctx.quiet)

    execute(app_ctx, body, failure="Failed to submit work")
