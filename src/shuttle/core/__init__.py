"""Core of Shuttle: configuration, domain types, errors and the transport contract.

The core never prints and never exits; the CLI layer does both.
"""
