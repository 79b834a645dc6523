"""Contract shared by the NATS and HTTP bindings.

Rules:
- ``send`` performs exactly one round trip.
- Remote failures (error status, error reply, timeout) come back as a failed
  :class:`~shuttle.core.domain.envelope.Envelope`.
- Failing to establish the connection, or to read the credentials, raises
  :class:`~shuttle.core.errors.TransportError` /
  :class:`~shuttle.core.errors.CredentialError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from shuttle.core.domain.envelope import Envelope
from shuttle.core.domain.operations import Operation


class Transport(ABC):
    name: str = "transport"

    @abstractmethod
    async def send(
        self,
        operation: Operation,
        payload: Mapping[str, Any] | None = None,
        *,
        entity_id: str | None = None,
    ) -> Envelope[Any]:
        """Send one request and return its envelope."""

    async def aclose(self) -> None:
        """Release resources owned by the transport."""

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
