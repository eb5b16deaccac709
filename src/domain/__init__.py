"""Domain types for the quote pipeline.

Plain value objects shared by the fetcher, persister, server and client:
the quote itself, the deadline value passed down every call chain and the
error taxonomy. Nothing here touches the network or the database.
"""

__all__ = [
    "deadline",
    "errors",
    "quote",
]
