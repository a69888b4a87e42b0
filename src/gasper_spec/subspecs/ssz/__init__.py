"""SSZ merkleization: the `hash_tree_root` digest of every consensus value."""

from .constants import ZERO_HASH
from .hash import hash_tree_root

__all__ = [
    "hash_tree_root",
    "ZERO_HASH",
]
