"""Gist: ask questions about a codebase and watch an agent explore it.

The package relays a streamed agent run to a client and assembles the
resulting events into an ordered, persisted conversation transcript.
"""

__version__ = "0.1.0"
