"""Shuttle: command-line client for the Weft work coordinator."""

__version__ = "0.4.0"
