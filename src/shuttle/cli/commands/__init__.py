"""One module per top-level command (or command group)."""
