"""
Block containers.

A block references its parent by root, forming a chain. It declares the root
of the state that results from applying it, which lets any node check the
transition it performed.

A header carries the body's root instead of the body. Because a container's
root is computed from its fields' roots, a header with the state root filled
in has the same root as its block.
"""

from __future__ import annotations

from gasper_spec.types import Bytes32, Container

from ..slot import Slot
from .types import Attestations, Deposits


class BlockBody(Container):
    """The operations a block applies, in processing order."""

    attestations: Attestations
    deposits: Deposits


class BlockHeader(Container):
    """The header of a block."""

    slot: Slot
    """The slot in which the block was proposed."""

    parent_root: Bytes32
    """The root of the parent block."""

    state_root: Bytes32
    """
    The post-state root of the block.

    Held at `ZERO_HASH` in the state's latest header until the next slot
    step fills it in.
    """

    body_root: Bytes32
    """The root of the block body."""


class Block(Container):
    """A complete block including header and body."""

    slot: Slot
    parent_root: Bytes32
    state_root: Bytes32
    body: BlockBody
