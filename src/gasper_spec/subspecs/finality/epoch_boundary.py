"""
Epoch boundary blocks.

The epoch boundary block (EBB) of epoch `k` on a chain is the most recent
block whose slot is at most `k * SLOTS_PER_EPOCH`. When the first slot of an
epoch is empty, the EBB is an older block, possibly shared with earlier epochs.

Every function here takes the chain as block roots in strictly decreasing slot
order ending at the genesis block, plus a root -> block lookup. Chain validity
is the caller's responsibility (see `ChainStore.chain`).
"""

from __future__ import annotations

from typing import Mapping, Sequence

from gasper_spec.subspecs.chain.config import SLOTS_PER_EPOCH
from gasper_spec.subspecs.containers.block import Block
from gasper_spec.subspecs.containers.checkpoint import Checkpoint
from gasper_spec.subspecs.containers.slot import Epoch, Slot
from gasper_spec.types import Bytes32, Uint64


def epoch_boundary_blocks(
    chain: Sequence[Bytes32],
    blocks: Mapping[Bytes32, Block],
    epoch: Epoch,
    slots_per_epoch: Uint64 = SLOTS_PER_EPOCH,
) -> list[Bytes32]:
    """
    EBBs of epochs `epoch` down to 0.

    Returns `epoch + 1` roots; the root at position `epoch - k` is the EBB of
    epoch `k`. The chain is scanned once: the scan position only moves toward
    genesis as the epoch decreases.
    """
    assert chain, "Chain must not be empty"
    assert blocks[chain[-1]].slot == Slot(0), "Chain must end at the genesis block"

    spe = int(slots_per_epoch)
    boundaries: list[Bytes32] = []
    position = 0
    for k in range(int(epoch), -1, -1):
        while int(blocks[chain[position]].slot) > k * spe:
            position += 1
        boundaries.append(chain[position])
    return boundaries


def epoch_boundary_block(
    chain: Sequence[Bytes32],
    blocks: Mapping[Bytes32, Block],
    epoch: Epoch,
    slots_per_epoch: Uint64 = SLOTS_PER_EPOCH,
) -> Bytes32:
    """The EBB of a single epoch: the first entry of `epoch_boundary_blocks`."""
    return epoch_boundary_blocks(chain, blocks, epoch, slots_per_epoch)[0]


def epoch_boundary_checkpoints(
    chain: Sequence[Bytes32],
    blocks: Mapping[Bytes32, Block],
    epoch: Epoch,
    slots_per_epoch: Uint64 = SLOTS_PER_EPOCH,
) -> list[Checkpoint]:
    """Checkpoints `(k, EBB(k))` for `k = epoch .. 0`, most recent first."""
    roots = epoch_boundary_blocks(chain, blocks, epoch, slots_per_epoch)
    return [
        Checkpoint(epoch=Epoch(int(epoch) - offset), root=root) for offset, root in enumerate(roots)
    ]
