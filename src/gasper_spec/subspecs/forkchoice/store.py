"""
Chain store: every accepted block and its post-state, keyed by block root.

The store is the read side of the finality gadget. It hands chains, epoch
boundary checkpoints and attestation links to the functions in
`gasper_spec.subspecs.finality`.
"""

from __future__ import annotations

__all__ = ["ChainStore"]

import logging
from typing import Dict, Iterable, Optional

from gasper_spec.subspecs.containers import Block, Checkpoint, Epoch, Slot, State
from gasper_spec.subspecs.finality import (
    AttestationLink,
    FinalityResult,
    JustificationEngine,
    epoch_boundary_checkpoints,
    links_from_attestations,
)
from gasper_spec.subspecs.ssz.hash import hash_tree_root
from gasper_spec.types import Bytes32, StrictBaseModel
from gasper_spec.types.exceptions import SSZError

logger = logging.getLogger(__name__)


class ChainStore(StrictBaseModel):
    """
    Immutable arena of accepted blocks.

    Every block except genesis has its parent in the store, so walking parent
    roots from any known block always ends at genesis. Adding a block returns
    a new store; the old one is never touched.
    """

    genesis_root: Bytes32
    """Root of the genesis block, the anchor every chain ends at."""

    blocks: Dict[Bytes32, Block] = {}
    """
    Accepted blocks, keyed by block root.

    The block root is the hash tree root of the block, which equals the root
    of its header once the header's state root is filled in.
    """

    states: Dict[Bytes32, State] = {}
    """Post-state of every accepted block, keyed by the same root as `blocks`."""

    @classmethod
    def from_genesis(cls, state: State, block: Block) -> ChainStore:
        """
        Create a store holding only the genesis block and state.

        Raises:
            AssertionError: If the block is not at slot 0 or does not commit
                to `state`.
        """
        assert block.slot == Slot(0), "Genesis block must be at slot 0"
        assert block.state_root == hash_tree_root(state), (
            "Genesis block state root must match genesis state hash"
        )

        genesis_root = hash_tree_root(block)
        return cls(
            genesis_root=genesis_root,
            blocks={genesis_root: block},
            states={genesis_root: state},
        )

    def on_block(self, block: Block) -> ChainStore:
        """
        Accept a block on top of a known parent.

        Returns:
            A new store that also holds `block` and its post-state, or this
            store if the block is already known.

        Raises:
            AssertionError: If the parent is unknown or the block fails the
                state transition. The store is left as it was.
            SSZError: If a counter overflows during the transition. The
                store is left as it was.
        """
        block_root = hash_tree_root(block)

        # Skip duplicate blocks (idempotent operation)
        if block_root in self.blocks:
            return self

        parent_state = self.states.get(block.parent_root)
        assert parent_state is not None, (
            f"Parent state not found (root={block.parent_root.hex()}). "
            f"Sync parent chain before processing block at slot {block.slot}."
        )

        try:
            post_state = parent_state.state_transition(block)
        except (AssertionError, SSZError) as e:
            logger.warning("Rejected block %s at slot %s: %s", block_root.hex(), block.slot, e)
            raise

        logger.info("Accepted block %s at slot %s", block_root.hex(), block.slot)
        return self.model_copy(
            update={
                "blocks": self.blocks | {block_root: block},
                "states": self.states | {block_root: post_state},
            }
        )

    def chain(self, head_root: Bytes32) -> list[Bytes32]:
        """
        Roots from `head_root` back to genesis, in strictly decreasing slot order.

        Raises:
            AssertionError: If `head_root` is not a known block.
        """
        assert head_root in self.blocks, f"Unknown block (root={head_root.hex()})"

        roots = [head_root]
        while roots[-1] != self.genesis_root:
            roots.append(self.blocks[roots[-1]].parent_root)
        return roots

    def heads(self) -> list[Bytes32]:
        """Roots of the blocks nobody builds on, highest slot first."""
        parents = {block.parent_root for block in self.blocks.values()}
        leaves = [root for root in self.blocks if root not in parents]
        return sorted(leaves, key=lambda root: (-int(self.blocks[root].slot), bytes(root)))

    def checkpoints(self, head_root: Bytes32, epoch: Epoch) -> list[Checkpoint]:
        """Epoch boundary checkpoints of the chain ending at `head_root`, most recent first."""
        return epoch_boundary_checkpoints(self.chain(head_root), self.blocks, epoch)

    def attestation_links(self, head_root: Bytes32) -> list[AttestationLink]:
        """
        FFG links voted for by the attestations included on the chain ending at `head_root`.

        States refer to genesis through the `(0, ZERO_HASH)` stub checkpoint until
        the first justification. Such votes are credited to the genesis checkpoint.
        """
        genesis = Checkpoint(epoch=Epoch(0), root=self.genesis_root)
        stub = Checkpoint.default()

        def resolve(checkpoint: Checkpoint) -> Checkpoint:
            return genesis if checkpoint == stub else checkpoint

        links = links_from_attestations(
            attestation
            for root in reversed(self.chain(head_root))
            for attestation in self.blocks[root].body.attestations
        )
        merged: dict[tuple[Checkpoint, Checkpoint], set] = {}
        for link in links:
            pair = (resolve(link.source), resolve(link.target))
            merged.setdefault(pair, set()).update(link.attesters)
        return [
            AttestationLink(source=source, target=target, attesters=frozenset(attesters))
            for (source, target), attesters in merged.items()
        ]

    def finality(
        self,
        head_root: Bytes32,
        epoch: Epoch,
        engine: JustificationEngine,
        links: Optional[Iterable[AttestationLink]] = None,
    ) -> FinalityResult:
        """
        Justified and finalized checkpoints of the chain ending at `head_root`.

        Uses the links of the chain's own attestations unless `links` is given.
        """
        if links is None:
            links = self.attestation_links(head_root)
        return engine.evaluate(self.checkpoints(head_root, epoch), links)
