"""NATS request/reply binding.

Pieces:
- :class:`NatsConnectionPool` owns the single connection of the process. It
  connects on first use, hands back the same connection while it is open,
  and drains + forgets it on :meth:`NatsConnectionPool.close`.
- :class:`NatsTransport` turns an :class:`Operation` into a subject, sends a
  JSON request and maps the reply (or the timeout) into an envelope.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from typing import Any

import nats
from nats.aio.client import Client as NatsClient
from nats.aio.client import RawCredentials
from nats.errors import Error as NatsError
from nats.errors import NoRespondersError
from nats.errors import TimeoutError as NatsTimeoutError

from shuttle.adapters.subjects import SubjectNamer
from shuttle.core.config import Configuration
from shuttle.core.domain.envelope import Envelope
from shuttle.core.domain.operations import Operation
from shuttle.core.errors import CredentialError, TransportError
from shuttle.core.interfaces.transport import Transport

logger = logging.getLogger(__name__)

CLIENT_NAME = "weft-shuttle"
MAX_RECONNECT_ATTEMPTS = 10
RECONNECT_TIME_WAIT_SECONDS = 1.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0

Connector = Callable[..., Awaitable[NatsClient]]


def read_credentials(path: str) -> RawCredentials:
    """Contents of the ``.creds`` file, or :class:`CredentialError` naming it.

    The contents, not the path, go to the client, so the file is read once.
    """

    try:
        return RawCredentials(Path(path).expanduser().read_text(encoding="utf-8"))
    except OSError as exc:
        raise CredentialError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise CredentialError(path, "not a text file") from exc


async def _on_error(exc: Exception) -> None:
    logger.debug("NATS error: %s", exc)


async def _on_disconnected() -> None:
    logger.debug("NATS disconnected")


async def _on_reconnected() -> None:
    logger.info("NATS reconnected")


class NatsConnectionPool:
    """Lazily created, reusable connection to the NATS server."""

    def __init__(self, config: Configuration, *, connect: Connector = nats.connect) -> None:
        self._config = config
        self._connect = connect
        self._connection: NatsClient | None = None

    @property
    def is_open(self) -> bool:
        return self._connection is not None and not self._connection.is_closed

    def connect_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {
            "servers": [self._config.nats_url],
            "name": CLIENT_NAME,
            "max_reconnect_attempts": MAX_RECONNECT_ATTEMPTS,
            "reconnect_time_wait": RECONNECT_TIME_WAIT_SECONDS,
            "error_cb": _on_error,
            "disconnected_cb": _on_disconnected,
            "reconnected_cb": _on_reconnected,
        }
        creds = self._config.nats_credentials
        if creds:
            options["user_credentials"] = read_credentials(creds)
        return options

    async def acquire(self) -> NatsClient:
        if self._connection is not None and not self._connection.is_closed:
            return self._connection

        options = self.connect_options()
        logger.debug("Connecting to NATS at %s", self._config.nats_url)
        try:
            self._connection = await self._connect(**options)
        except (NatsError, OSError, asyncio.TimeoutError) as exc:
            raise TransportError(
                f"Cannot connect to NATS at {self._config.nats_url}: {exc}",
                hint="Check natsUrl with `shuttle config get natsUrl`.",
            ) from exc
        return self._connection

    async def close(self) -> None:
        connection, self._connection = self._connection, None
        if connection is None or connection.is_closed:
            return
        logger.debug("Draining NATS connection")
        try:
            await connection.drain()
        except (NatsError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Draining the NATS connection failed: %s", exc)
        if connection.is_closed:
            return
        try:
            await connection.close()
        except (NatsError, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Closing the NATS connection failed: %s", exc)


def decode_reply(data: bytes) -> Envelope[Any]:
    """Map a reply body to an envelope."""

    try:
        body = json.loads(data.decode("utf-8")) if data else None
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return Envelope.failure(502, f"Invalid reply from coordinator: {exc}")

    if isinstance(body, dict) and body.get("error"):
        error = body["error"]
        message = error.get("message") if isinstance(error, dict) else None
        message = str(message or error)
        status = body.get("status", body.get("code"))
        if not isinstance(status, int) or isinstance(status, bool):
            status = 404 if "not found" in message.lower() else 500
        return Envelope.failure(status, message)
    return Envelope.success(200, body)


class NatsTransport(Transport):
    name = "nats"

    def __init__(
        self,
        pool: NatsConnectionPool,
        namer: SubjectNamer,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        owns_pool: bool = False,
    ) -> None:
        self._pool = pool
        self._namer = namer
        self._timeout = timeout
        self._owns_pool = owns_pool

    async def send(
        self,
        operation: Operation,
        payload: Mapping[str, Any] | None = None,
        *,
        entity_id: str | None = None,
    ) -> Envelope[Any]:
        route = operation.route
        if route.category is None:
            return Envelope.failure(501, f"{operation.value} is only available over the HTTP API")
        try:
            subject = self._namer.for_operation(operation, entity_id)
        except ValueError as exc:
            return Envelope.failure(400, str(exc))
        body: dict[str, Any] = {k: v for k, v in (payload or {}).items() if v is not None}
        if entity_id is not None and not route.id_in_subject:
            body.setdefault("id", entity_id)
        timeout = route.timeout or self._timeout

        connection = await self._pool.acquire()
        logger.debug("NATS request %s (timeout %.1fs)", subject, timeout)
        try:
            msg = await connection.request(subject, json.dumps(body).encode("utf-8"), timeout=timeout)
        except NatsTimeoutError:
            logger.info("NATS request %s timed out", subject)
            return Envelope.failure(408, f"Request timed out after {timeout:g}s ({subject})")
        except NoRespondersError:
            return Envelope.failure(503, f"No coordinator is listening on {subject}")
        except NatsError as exc:
            raise TransportError(f"NATS request {subject} failed: {exc}") from exc
        return decode_reply(msg.data)

    async def aclose(self) -> None:
        if self._owns_pool:
            await self._pool.close()
