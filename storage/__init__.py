"""Document content stores."""

from .content_store import ContentStore, LocalContentStore, InMemoryContentStore

__all__ = [
    "ContentStore",
    "LocalContentStore",
    "InMemoryContentStore",
]
