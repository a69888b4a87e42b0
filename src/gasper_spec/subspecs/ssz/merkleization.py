"""
Binary Merkle trees over 32-byte chunks.

Padding chunks are never materialised. A tree declared wide enough for
`limit` chunks but holding only a few is reduced level by level, and a missing
right sibling at depth `d` is replaced by the precomputed root of an all-zero
subtree of that depth. This keeps `hash_tree_root` linear in the number of
actual chunks even for lists with capacities in the billions.
"""

from __future__ import annotations

import hashlib
from typing import Final, Optional, Sequence

from gasper_spec.types.byte_arrays import Bytes32

from .constants import ZERO_HASH

MAX_MERKLE_DEPTH: Final = 64
"""Deepest tree supported: enough for any limit expressible as a uint64."""


def hash_nodes(node_a: Bytes32, node_b: Bytes32) -> Bytes32:
    """Hash two 32-byte nodes together using SHA-256."""
    return Bytes32(hashlib.sha256(node_a + node_b).digest())


def _build_zero_hashes(depth: int) -> tuple[Bytes32, ...]:
    hashes = [ZERO_HASH]
    for _ in range(depth):
        hashes.append(hash_nodes(hashes[-1], hashes[-1]))
    return tuple(hashes)


ZERO_HASHES: Final = _build_zero_hashes(MAX_MERKLE_DEPTH)
"""`ZERO_HASHES[d]` is the root of a full tree of `2**d` zero chunks."""


def get_power_of_two_ceil(x: int) -> int:
    """
    Smallest power of two greater than or equal to x.

    Examples: 0->1, 1->1, 2->2, 3->4, 4->4, 5->8.
    """
    if x <= 1:
        return 1
    return 1 << (x - 1).bit_length()


def merkleize(chunks: Sequence[Bytes32], limit: Optional[int] = None) -> Bytes32:
    """
    Compute the Merkle root of `chunks`.

    - With no `limit` the tree is as wide as the next power of two of `len(chunks)`.
    - With a `limit` the tree is as wide as the next power of two of `limit`.
    - An empty input yields the zero-subtree root of the padded width.

    Raises:
        ValueError: If `limit` is smaller than the number of chunks.
    """
    count = len(chunks)
    if limit is None:
        limit = count
    elif count > limit:
        raise ValueError(f"merkleize: {count} chunks exceed limit {limit}")

    depth = (get_power_of_two_ceil(limit) - 1).bit_length()
    if count == 0:
        return ZERO_HASHES[depth]

    level = list(chunks)
    for d in range(depth):
        if len(level) % 2 == 1:
            level.append(ZERO_HASHES[d])
        level = [hash_nodes(level[i], level[i + 1]) for i in range(0, len(level), 2)]
    return level[0]


def mix_in_length(root: Bytes32, length: int) -> Bytes32:
    """Mix a list length (as little-endian uint256) into a Merkle root."""
    if length < 0:
        raise ValueError("length must be non-negative")
    return hash_nodes(root, Bytes32(length.to_bytes(32, "little")))
