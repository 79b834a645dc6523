"""Rendering of coordinator payloads (Rich).

Two output modes share one entry point, :func:`output`:

- ``--json``: the payload is serialized verbatim, every field kept;
- otherwise the command's own table builder runs.

The field helpers (``truncate``, ``color_*``, ``format_timestamp``) never
raise on values they do not know. Remote text is never parsed as Rich markup:
cells and colorized values are plain :class:`~rich.text.Text`.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

import typer
from pydantic import BaseModel
from rich.abc import RichRenderable
from rich.console import RenderableType
from rich.table import Table
from rich.text import Text

from shuttle.cli.ui_components import get_console
from shuttle.core.domain.vocabulary import AgentStatus, AgentType, TargetStatus, WorkStatus

PLACEHOLDER = "N/A"
ELLIPSIS = "..."


def _cell(value: Any) -> RenderableType:
    if isinstance(value, RichRenderable):
        return value
    return Text(str(value))


def render_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> Table:
    """Aligned table with ``headers`` and ``rows`` in the given order."""

    table = Table(show_header=True, header_style="bold cyan", show_lines=False)
    for header in headers:
        table.add_column(header, overflow="fold")
    for index, row in enumerate(rows):
        if len(row) != len(headers):
            raise ValueError(f"Row {index} has {len(row)} cells, expected {len(headers)}")
        table.add_row(*(_cell(cell) for cell in row))
    return table


def format_key_value(values: Mapping[str, Any]) -> Table:
    """Two-column grid for detail views."""

    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold", no_wrap=True)
    grid.add_column()
    for key, value in values.items():
        grid.add_row(Text(f"{key}:"), _cell("-" if value is None else value))
    return grid


def truncate(value: str | None, max_len: int) -> str:
    """Cut ``value`` to at most ``max_len`` characters, marking the cut."""

    text = "" if value is None else str(value)
    if len(text) <= max_len:
        return text
    if max_len < len(ELLIPSIS):
        return text[: max(max_len, 0)]
    return text[: max_len - len(ELLIPSIS)] + ELLIPSIS


_STATUS_STYLES: dict[Enum, str] = {
    WorkStatus.PENDING: "yellow",
    WorkStatus.ASSIGNED: "cyan",
    WorkStatus.IN_PROGRESS: "blue",
    WorkStatus.COMPLETED: "green",
    WorkStatus.FAILED: "red",
    WorkStatus.CANCELLED: "dim",
    AgentStatus.ONLINE: "green",
    AgentStatus.BUSY: "yellow",
    AgentStatus.OFFLINE: "dim",
    TargetStatus.AVAILABLE: "green",
    TargetStatus.IN_USE: "yellow",
    TargetStatus.DISABLED: "dim",
    TargetStatus.ERROR: "red",
    TargetStatus.HEALTHY: "green",
    TargetStatus.UNHEALTHY: "red",
    TargetStatus.UNKNOWN: "dim",
}

_AGENT_TYPE_STYLES: dict[AgentType, str] = {
    AgentType.COPILOT_CLI: "magenta",
    AgentType.CLAUDE_CODE: "cyan",
}


class Boundary(str, Enum):
    """Boundaries with a dedicated color. Any other name is still valid."""

    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"
    PERSONAL = "personal"
    OPEN_SOURCE = "open-source"


_BOUNDARY_STYLES: dict[Boundary, str] = {
    Boundary.PRODUCTION: "bold red",
    Boundary.STAGING: "yellow",
    Boundary.DEVELOPMENT: "green",
    Boundary.PERSONAL: "cyan",
    Boundary.OPEN_SOURCE: "blue",
}


def _lookup(value: Any, *vocabularies: type[Enum]) -> Enum | None:
    for vocabulary in vocabularies:
        try:
            return vocabulary(value)
        except ValueError:
            continue
    return None


def _decorate(value: Any, member: Enum | None, styles: Mapping[Any, str]) -> Text:
    text = "" if value is None else str(value)
    if member is None:
        # Outside the known vocabulary: shown as received, unstyled.
        return Text(text)
    return Text(text, style=styles[member])


def color_status(status: Any) -> Text:
    return _decorate(status, _lookup(status, WorkStatus, AgentStatus, TargetStatus), _STATUS_STYLES)


def color_agent_type(agent_type: Any) -> Text:
    return _decorate(agent_type, _lookup(agent_type, AgentType), _AGENT_TYPE_STYLES)


def color_boundary(boundary: Any) -> Text:
    return _decorate(boundary, _lookup(boundary, Boundary), _BOUNDARY_STYLES)


def format_timestamp(value: str | datetime | None) -> str:
    """Local, locale-formatted time; ``N/A`` when absent."""

    if value is None or value == "":
        return PLACEHOLDER
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return str(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone().strftime("%c")


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json(payload: Any) -> str:
    """Structured form of ``payload``, with nothing dropped or reordered."""

    return json.dumps(payload, indent=2, ensure_ascii=False, default=_json_default)


def output(
    payload: Any,
    *,
    json_mode: bool,
    build: Callable[[], RenderableType | None] | None = None,
) -> None:
    """Print ``payload`` as JSON, or print what ``build`` returns."""

    if json_mode:
        typer.echo(to_json(payload))
        return
    if build is None:
        return
    renderable = build()
    if renderable is not None:
        get_console().print(renderable)
