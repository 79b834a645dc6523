"""REST binding over httpx.

One call per operation against ``apiUrl``. Every outcome becomes an
envelope: non-2xx answers and connection failures included.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

import httpx

from shuttle import __version__
from shuttle.core.config import Configuration
from shuttle.core.domain.envelope import Envelope
from shuttle.core.domain.operations import Operation
from shuttle.core.errors import ConfigError
from shuttle.core.interfaces.transport import Transport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0
PROJECT_HEADER = "X-Project-ID"


def build_async_client(
    config: Configuration,
    *,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the ``httpx.AsyncClient`` used for every REST call.

    Sets the base URL, JSON headers, the project header and, when a token is
    configured, the bearer credential. ``transport`` lets tests plug in an
    ``httpx.MockTransport``.
    """

    if not config.api_url:
        raise ConfigError(
            "No coordinator API URL configured",
            hint="Set it with `shuttle config set apiUrl <url>` or WEFT_API_URL.",
        )

    headers: dict[str, str] = {
        "User-Agent": f"weft-shuttle/{__version__}",
        "Accept": "application/json",
        PROJECT_HEADER: config.project_id,
    }
    if config.api_token:
        headers["Authorization"] = f"Bearer {config.api_token}"

    return httpx.AsyncClient(
        base_url=config.api_url.rstrip("/"),
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            value = body.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if value:
                return str(value)
    return f"HTTP {response.status_code}"


def response_to_envelope(response: httpx.Response) -> Envelope[Any]:
    if not response.is_success:
        return Envelope.failure(response.status_code, _error_message(response))
    if response.status_code == 204 or not response.content:
        return Envelope.success(response.status_code, None)
    try:
        return Envelope.success(response.status_code, response.json())
    except ValueError:
        return Envelope.failure(502, f"Invalid JSON in response from {response.request.url}")


class HttpTransport(Transport):
    name = "http"

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: Configuration, **kwargs: Any) -> "HttpTransport":
        return cls(build_async_client(config, **kwargs))

    async def send(
        self,
        operation: Operation,
        payload: Mapping[str, Any] | None = None,
        *,
        entity_id: str | None = None,
    ) -> Envelope[Any]:
        route = operation.route
        if route.needs_id:
            if entity_id is None:
                raise ValueError(f"{operation.value} needs an entity id")
            path = route.path.replace("{id}", quote(entity_id, safe=""))
        else:
            path = route.path

        body = {k: v for k, v in (payload or {}).items() if v is not None}
        request_kwargs: dict[str, Any] = {}
        if route.method == "GET":
            request_kwargs["params"] = body
        elif body:
            request_kwargs["json"] = body

        logger.debug("HTTP %s %s", route.method, path)
        try:
            response = await self._client.request(route.method, path, **request_kwargs)
        except httpx.HTTPError as exc:
            logger.info("HTTP %s %s failed: %s", route.method, path, exc)
            return Envelope.failure(0, f"Request to {self._client.base_url} failed: {exc}")
        return response_to_envelope(response)

    async def aclose(self) -> None:
        await self._client.aclose()
