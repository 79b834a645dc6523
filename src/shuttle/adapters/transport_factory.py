"""Selects the transport binding once per invocation.

Order:
1) ``transport`` set in the configuration wins (``http`` or ``nats``);
2) otherwise HTTP when ``apiUrl`` is configured;
3) otherwise NATS, whose URL always has a default.
"""

from __future__ import annotations

import logging

from shuttle.adapters.http_transport import HttpTransport
from shuttle.adapters.nats_transport import NatsConnectionPool, NatsTransport
from shuttle.adapters.subjects import SubjectNamer
from shuttle.core.config import Configuration
from shuttle.core.domain.vocabulary import TransportKind
from shuttle.core.errors import ConfigError
from shuttle.core.interfaces.transport import Transport

logger = logging.getLogger(__name__)


def select_transport_kind(config: Configuration) -> TransportKind:
    if config.transport:
        kind = TransportKind.parse(config.transport)
        if kind is None:
            raise ConfigError('transport must be either "http" or "nats"')
        return kind
    return TransportKind.HTTP if config.api_url else TransportKind.NATS


def build_transport(config: Configuration, *, pool: NatsConnectionPool | None = None) -> Transport:
    """Return the binding for ``config``.

    ``pool`` is the caller's NATS connection pool; without one the NATS
    transport creates and owns its own.
    """

    kind = select_transport_kind(config)
    logger.debug("Using %s transport", kind.value)
    if kind is TransportKind.HTTP:
        return HttpTransport.from_config(config)

    try:
        namer = SubjectNamer(config.project_id)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc
    if pool is None:
        return NatsTransport(NatsConnectionPool(config), namer, owns_pool=True)
    return NatsTransport(pool, namer)
