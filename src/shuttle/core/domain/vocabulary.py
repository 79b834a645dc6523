"""Closed vocabularies shared by the CLI and the coordinator facade.

The coordinator reports statuses and agent types as plain strings. These
enums are the values Shuttle knows about; anything else is passed through
untouched by the renderers.
"""

from __future__ import annotations

from enum import Enum


class _Vocabulary(str, Enum):
    @classmethod
    def parse(cls, value: object):
        """Return the member for ``value`` or ``None`` when it is unknown."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class WorkStatus(_Vocabulary):
    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Work in a terminal state will not change any more."""

        return self in (WorkStatus.COMPLETED, WorkStatus.FAILED, WorkStatus.CANCELLED)


class AgentStatus(_Vocabulary):
    ONLINE = "online"
    BUSY = "busy"
    OFFLINE = "offline"


class TargetStatus(_Vocabulary):
    """Spin-up target status and health values."""

    AVAILABLE = "available"
    IN_USE = "in-use"
    DISABLED = "disabled"
    ERROR = "error"
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class AgentType(_Vocabulary):
    COPILOT_CLI = "copilot-cli"
    CLAUDE_CODE = "claude-code"


class SpinUpMechanism(_Vocabulary):
    SSH = "ssh"
    GITHUB_ACTIONS = "github-actions"
    LOCAL = "local"
    WEBHOOK = "webhook"
    KUBERNETES = "kubernetes"


class OutputFormat(_Vocabulary):
    TABLE = "table"
    JSON = "json"


class TransportKind(_Vocabulary):
    HTTP = "http"
    NATS = "nats"
