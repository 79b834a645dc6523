"""Uniform success/failure wrapper returned by every transport call."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from shuttle.core.errors import NotFoundError, RemoteRequestError

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNEXPECTED_RESPONSE = "Unexpected response from coordinator"


@dataclass(frozen=True)
class Envelope(Generic[T]):
    """Tagged result of one remote call.

    Build it with :meth:`success` or :meth:`failure`; exactly one of ``data``
    and ``error`` is meaningful for a given ``ok``.
    """

    ok: bool
    status: int
    data: T | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.ok and self.error is not None:
            raise ValueError("a successful envelope cannot carry an error")
        if not self.ok and (self.error is None or self.data is not None):
            raise ValueError("a failed envelope carries an error and no data")

    @classmethod
    def success(cls, status: int, data: Any = None) -> "Envelope[Any]":
        return cls(ok=True, status=status, data=data)

    @classmethod
    def failure(cls, status: int, error: str) -> "Envelope[Any]":
        return cls(ok=False, status=status, error=error or f"HTTP {status}")

    @property
    def not_found(self) -> bool:
        return not self.ok and self.status == 404

    def raise_for_error(self, *, not_found: str | None = None) -> T | None:
        """Return ``data`` or raise the matching :class:`RemoteRequestError`.

        ``not_found`` replaces the remote message for 404 answers so the user
        sees which entity was missing.
        """

        if self.ok:
            return self.data
        if self.not_found:
            raise NotFoundError(not_found or self.error or "Not found")
        raise RemoteRequestError(self.error or f"HTTP {self.status}", status=self.status)

    def mapping(self, *, not_found: str | None = None) -> dict[str, Any]:
        """Like :meth:`raise_for_error`, for calls whose reply is a JSON object.

        An empty reply is an empty dict. Any other shape is a
        :class:`RemoteRequestError` rather than a crash further down.
        """

        data = self.raise_for_error(not_found=not_found)
        if data is None:
            return {}
        if not isinstance(data, Mapping):
            logger.debug("Expected an object, got %s", type(data).__name__)
            raise RemoteRequestError(UNEXPECTED_RESPONSE, status=502)
        return dict(data)


def records(payload: Mapping[str, Any], key: str) -> list[dict[str, Any]]:
    """The list of objects under ``key``; missing or null is an empty list."""

    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, Mapping) for item in value):
        logger.debug("Expected a list of objects under %r", key)
        raise RemoteRequestError(UNEXPECTED_RESPONSE, status=502)
    return [dict(item) for item in value]
