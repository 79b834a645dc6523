"""Command-line layer: Typer commands, Rich rendering, error boundary."""
