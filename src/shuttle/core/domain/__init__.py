"""Domain types of the Shuttle client.

Plain data only: vocabularies, remote operations and the response envelope.
Nothing here knows about NATS, HTTP or the terminal.
"""
