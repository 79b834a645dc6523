"""Abstractions the core depends on; adapters provide the implementations."""

from shuttle.core.interfaces.transport import Transport

__all__ = ["Transport"]
