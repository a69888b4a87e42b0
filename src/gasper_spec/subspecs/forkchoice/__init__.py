"""Chain store holding accepted blocks and their post-states."""

from .store import ChainStore

__all__ = [
    "ChainStore",
]
