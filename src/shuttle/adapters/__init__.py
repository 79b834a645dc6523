"""Adapters to the outside world.

- ``subjects``: NATS subject hierarchy.
- ``nats_transport`` / ``http_transport``: the two bindings of
  :class:`shuttle.core.interfaces.Transport`.
- ``transport_factory``: picks one of them from the configuration.
"""
