"""Shared pytest fixtures for the Shuttle test suite.

Guidelines
----------
* No network access: NATS and HTTP are replaced at the library boundary.
* Tests never read or write the real ``~/.weft`` directory.
* Environment variables recognised by the config resolver are cleared.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from shuttle.core.domain.envelope import Envelope
from shuttle.core.domain.operations import Operation
from shuttle.core.interfaces.transport import Transport

CONFIG_ENV_VARS = ("NATS_URL", "PROJECT_ID", "WEFT_API_URL", "WEFT_API_TOKEN", "SHUTTLE_LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "weft" / "config.json"


class FakeTransport(Transport):
    """Records every call and answers from a per-operation table."""

    name = "fake"

    def __init__(self, responses: Mapping[Operation, Envelope[Any]] | None = None) -> None:
        self.responses: dict[Operation, Envelope[Any]] = dict(responses or {})
        self.calls: list[tuple[Operation, dict[str, Any], str | None]] = []
        self.closed = False

    async def send(
        self,
        operation: Operation,
        payload: Mapping[str, Any] | None = None,
        *,
        entity_id: str | None = None,
    ) -> Envelope[Any]:
        self.calls.append((operation, dict(payload or {}), entity_id))
        return self.responses.get(operation, Envelope.success(200, {}))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport() -> type[FakeTransport]:
    return FakeTransport
