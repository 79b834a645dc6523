"""Error hierarchy for Shuttle.

Every error that leaves the core is a :class:`ShuttleError` subclass, so the
CLI error boundary can print one clean line without a traceback.

Hierarchy
---------
ShuttleError
├── ConfigError
├── CredentialError
├── TransportError
└── RemoteRequestError
    └── NotFoundError
"""

from __future__ import annotations


class ShuttleError(Exception):
    """Base exception for all Shuttle errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


class ConfigError(ShuttleError):
    """Malformed configuration file or a violated configuration rule."""

    def __init__(
        self,
        message: str,
        *,
        violations: list[str] | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.violations: list[str] = list(violations or [])


class CredentialError(ShuttleError):
    """The configured NATS credentials file could not be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to read NATS credentials file: {path}: {reason}")
        self.path = path


class TransportError(ShuttleError):
    """The connection to the coordinator could not be established."""


class RemoteRequestError(ShuttleError):
    """The coordinator answered with an error, or the request timed out."""

    def __init__(self, message: str, *, status: int, hint: str | None = None) -> None:
        super().__init__(message, hint=hint)
        self.status = status


class NotFoundError(RemoteRequestError):
    """The requested work item, agent or target does not exist."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message, status=404, hint=hint)
