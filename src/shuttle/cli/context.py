"""Per-invocation state shared by all commands.

``AppContext`` lives in ``typer.Context.obj``. It carries the global flags and
the NATS connection pool, and :func:`execute` runs one command coroutine with
configuration, transport and error reporting wired the same way everywhere.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass, field

import typer

from shuttle.adapters.nats_transport import NatsConnectionPool
from shuttle.adapters.transport_factory import build_transport
from shuttle.cli import ui_components as ui
from shuttle.core.config import Configuration, LoadOptions, ensure_valid, load_config
from shuttle.core.domain.vocabulary import OutputFormat
from shuttle.core.errors import ShuttleError
from shuttle.core.interfaces.transport import Transport
from shuttle.core.services.coordinator import CoordinatorClient

logger = logging.getLogger(__name__)

GENERAL_ERROR = 1
KEYBOARD_INTERRUPT = 130

TransportFactory = Callable[..., Transport]
CommandBody = Callable[[CoordinatorClient, Configuration], Awaitable[None]]


@dataclass
class AppContext:
    json: bool = False
    config_path: str | None = None
    quiet: bool = False
    project: str | None = None
    transport_factory: TransportFactory = build_transport
    _config: Configuration | None = field(default=None, init=False, repr=False)
    _pool: NatsConnectionPool | None = field(default=None, init=False, repr=False)

    @property
    def load_options(self) -> LoadOptions:
        return LoadOptions(config_path=self.config_path, project_override=self.project)

    @property
    def config(self) -> Configuration:
        """Resolved and validated configuration, loaded once."""

        if self._config is None:
            self._config = ensure_valid(load_config(self.load_options))
        return self._config

    @property
    def json_mode(self) -> bool:
        if self.json:
            return True
        try:
            return self.config.output_format == OutputFormat.JSON.value
        except ShuttleError:
            return False

    def pool(self) -> NatsConnectionPool:
        if self._pool is None:
            self._pool = NatsConnectionPool(self.config)
        return self._pool

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()


def get_app_context(ctx: typer.Context) -> AppContext:
    return ctx.ensure_object(AppContext)


@contextlib.contextmanager
def handle_errors(failure: str | None = None) -> Iterator[None]:
    """Error boundary: print the error and exit 1 instead of a traceback."""

    try:
        yield
    except ShuttleError as exc:
        logger.debug("Command failed", exc_info=True)
        prefix = f"{failure}: " if failure else "Error: "
        ui.error(prefix + exc.message, hint=exc.hint)
        raise typer.Exit(GENERAL_ERROR) from exc
    except KeyboardInterrupt:
        ui.error("Interrupted")
        raise typer.Exit(KEYBOARD_INTERRUPT) from None


def execute(app_ctx: AppContext, body: CommandBody, *, failure: str | None = None) -> None:
    """Run ``body`` against a coordinator client bound to this invocation."""

    async def _main() -> None:
        config = app_ctx.config
        transport = app_ctx.transport_factory(config, pool=app_ctx.pool())
        try:
            async with transport:
                await body(CoordinatorClient(transport), config)
        finally:
            await app_ctx.close()

    with handle_errors(failure):
        asyncio.run(_main())
