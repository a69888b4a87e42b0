"""State Container and the state transition function."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from gasper_spec.subspecs.chain.config import (
    EFFECTIVE_BALANCE_INCREMENT,
    GENESIS_EPOCH,
    MIN_ATTESTATION_INCLUSION_DELAY,
    SLOTS_PER_EPOCH,
    SLOTS_PER_HISTORICAL_ROOT,
)
from gasper_spec.subspecs.finality.justification import is_supermajority
from gasper_spec.subspecs.ssz.hash import hash_tree_root
from gasper_spec.types import ZERO_HASH, Boolean, Bytes32, Container, Uint64

from ..attestation import Attestation, PendingAttestation
from ..block import Attestations, Block, BlockBody, BlockHeader, Deposits
from ..checkpoint import Checkpoint
from ..deposit import Deposit
from ..slot import Epoch, Slot
from ..validator import Gwei, ValidatorIndex
from .types import HistoricalRoots, JustificationBits, PendingAttestations, Validators

logger = logging.getLogger(__name__)

UINT64_LIMIT = 2**64
"""First value that no longer fits a uint64 counter."""


class State(Container):
    """The main consensus state object."""

    # Versioning
    genesis_time: Uint64
    """Genesis timestamp, in seconds."""

    slot: Slot
    """The current slot number."""

    # History
    latest_block_header: BlockHeader
    """
    Header of the most recent block.

    Its `state_root` stays `ZERO_HASH` until the next slot step fills it in.
    """

    block_roots: HistoricalRoots
    """Ring buffer of block roots, one entry per slot."""

    state_roots: HistoricalRoots
    """Ring buffer of state roots, one entry per slot."""

    # Eth1
    eth1_deposit_index: Uint64
    """Number of deposits processed so far."""

    # Registry
    validators: Validators

    # Attestations
    previous_epoch_attestations: PendingAttestations
    current_epoch_attestations: PendingAttestations

    # Finality
    justification_bits: JustificationBits
    """Justification status of the current epoch and the three before it."""

    previous_justified_checkpoint: Checkpoint
    current_justified_checkpoint: Checkpoint
    finalized_checkpoint: Checkpoint

    @classmethod
    def generate_genesis(cls, genesis_time: Uint64, validators: Validators) -> State:
        """
        Generate a genesis state with empty history.

        All three checkpoints start as the `(0, ZERO_HASH)` stub. They are left
        alone until epoch processing of epoch 2, by which time the history
        buffers hold real boundary roots.
        """
        empty_body = BlockBody(attestations=Attestations(data=[]), deposits=Deposits(data=[]))
        genesis_header = BlockHeader(
            slot=Slot(0),
            parent_root=ZERO_HASH,
            state_root=ZERO_HASH,
            body_root=hash_tree_root(empty_body),
        )

        return cls(
            genesis_time=genesis_time,
            slot=Slot(0),
            latest_block_header=genesis_header,
            block_roots=HistoricalRoots.filled(ZERO_HASH),
            state_roots=HistoricalRoots.filled(ZERO_HASH),
            eth1_deposit_index=Uint64(0),
            validators=validators,
            previous_epoch_attestations=PendingAttestations(data=[]),
            current_epoch_attestations=PendingAttestations(data=[]),
            justification_bits=JustificationBits.zero(),
            previous_justified_checkpoint=Checkpoint.default(),
            current_justified_checkpoint=Checkpoint.default(),
            finalized_checkpoint=Checkpoint.default(),
        )

    def genesis_block(self) -> Block:
        """The block whose post-state is this (genesis) state."""
        assert self.slot == Slot(0), "Only a slot 0 state has a genesis block"
        return Block(
            slot=Slot(0),
            parent_root=ZERO_HASH,
            state_root=hash_tree_root(self),
            body=BlockBody(attestations=Attestations(data=[]), deposits=Deposits(data=[])),
        )

    # Accessors

    def current_epoch(self) -> Epoch:
        return self.slot.epoch()

    def previous_epoch(self) -> Epoch:
        """The previous epoch, or the genesis epoch while still in it."""
        current_epoch = self.current_epoch()
        if int(current_epoch) == int(GENESIS_EPOCH):
            return current_epoch
        return current_epoch - Epoch(1)

    def get_block_root_at_slot(self, slot: Slot) -> Bytes32:
        """
        Root of the latest block at or before a recent `slot`.

        Raises:
            AssertionError: If `slot` is not in the past or has left the ring buffer.
        """
        assert (
            int(slot) < int(self.slot) <= int(slot) + int(SLOTS_PER_HISTORICAL_ROOT)
        ), "Slot is outside the block root history"
        return self.block_roots.at(slot)

    def get_block_root(self, epoch: Epoch) -> Bytes32:
        """Root of the epoch boundary block of a recent `epoch`."""
        return self.get_block_root_at_slot(epoch.start_slot())

    def get_active_validator_indices(self, epoch: Epoch) -> list[ValidatorIndex]:
        return [ValidatorIndex(i) for i, v in enumerate(self.validators) if v.is_active(epoch)]

    def get_total_balance(self, indices: Iterable[ValidatorIndex]) -> Gwei:
        """
        Combined effective balance of `indices`.

        Floored at `EFFECTIVE_BALANCE_INCREMENT` so that it is never zero.
        """
        total = sum(int(self.validators[int(i)].effective_balance) for i in indices)
        return Gwei(max(int(EFFECTIVE_BALANCE_INCREMENT), total))

    def get_total_active_balance(self) -> Gwei:
        return self.get_total_balance(self.get_active_validator_indices(self.current_epoch()))

    def get_attesting_indices(self, attestation: PendingAttestation) -> set[ValidatorIndex]:
        return set(attestation.aggregation_bits.to_validator_indices())

    def get_unslashed_attesting_indices(
        self, attestations: Iterable[PendingAttestation]
    ) -> set[ValidatorIndex]:
        """Union of the attesters of `attestations`, minus slashed validators."""
        indices: set[ValidatorIndex] = set()
        for attestation in attestations:
            indices |= self.get_attesting_indices(attestation)
        return {i for i in indices if not self.validators[int(i)].slashed}

    def get_attesting_balance(self, attestations: Iterable[PendingAttestation]) -> Gwei:
        return self.get_total_balance(self.get_unslashed_attesting_indices(attestations))

    def get_matching_target_attestations(self, epoch: Epoch) -> list[PendingAttestation]:
        """Pending attestations of `epoch` whose target is that epoch's boundary block."""
        current_epoch = self.current_epoch()
        assert epoch == self.previous_epoch() or epoch == current_epoch, "Epoch is not tracked"
        source = (
            self.current_epoch_attestations
            if epoch == current_epoch
            else self.previous_epoch_attestations
        )
        boundary_root = self.get_block_root(epoch)
        return [a for a in source if a.data.target.root == boundary_root]

    # Slot processing

    def process_slot(self) -> State:
        """
        Cache the roots of the current slot.

        1. The state root goes into `state_roots`.
        2. An unresolved latest header gets that root as its `state_root`.
        3. The root of the (now resolved) header goes into `block_roots`.

        The slot counter is left unchanged.
        """
        # Root of the state as it stands at the end of this slot.
        previous_state_root = hash_tree_root(self)

        # State Root Caching (Conditional)
        #
        # A zero state root marks the header of a block applied in this slot:
        # the post-block state root was unknown while the block was being
        # processed. Only the first slot after a block sees it unresolved.
        # Later empty slots keep the header as it is.
        header = self.latest_block_header
        if header.state_root == ZERO_HASH:
            header = header.model_copy(update={"state_root": previous_state_root})

        # Both ring buffers are indexed by `slot % SLOTS_PER_HISTORICAL_ROOT`.
        # The block root is taken from the resolved header, so it equals the
        # root of the block itself.
        return self.model_copy(
            update={
                "state_roots": self.state_roots.record(self.slot, previous_state_root),
                "latest_block_header": header,
                "block_roots": self.block_roots.record(self.slot, hash_tree_root(header)),
            }
        )

    def process_slots(self, target_slot: Slot) -> State:
        """
        Advance the state through empty slots up to `target_slot`.

        Epoch processing runs on the last slot of every epoch, before the slot
        counter moves into the next epoch.

        Raises:
            AssertionError: If `target_slot` is not in the future.
        """
        # The target must be strictly greater than the current slot.
        assert self.slot < target_slot, "Target slot must be in the future"

        # Work on a local variable. Do not mutate self.
        state = self

        # Step through each missing slot:
        while state.slot < target_slot:
            # 1. Per-slot housekeeping: cache this slot's state and block roots.
            state = state.process_slot()

            # 2. Epoch transition:
            #    On the last slot of an epoch, weigh that epoch's votes while
            #    `current_epoch()` still names it. The roots cached above are
            #    already visible to `get_block_root`.
            if (int(state.slot) + 1) % int(SLOTS_PER_EPOCH) == 0:
                state = state.process_epoch()

            # 3. Slot increment.
            #    Uint64 arithmetic raises SSZOverflowError past 2**64 - 1.
            state = state.model_copy(update={"slot": Slot(state.slot + Slot(1))})

        # Reached the target slot. Return the advanced state.
        return state

    # Epoch processing

    def process_epoch(self) -> State:
        """
        Run end-of-epoch processing.

        Rewards, penalties, registry updates and slashings are not part of
        this state machine.
        """
        logger.debug("Processing epoch %s at slot %s", self.current_epoch(), self.slot)
        return self.process_justification_and_finalization().process_participation_record_updates()

    def process_justification_and_finalization(self) -> State:
        """
        Weigh the target votes of the previous and current epoch.

        Skipped during the first two epochs: the checkpoints still hold the
        genesis stub and the history has no previous epoch boundary to vote for.
        """
        if int(self.current_epoch()) <= int(GENESIS_EPOCH) + 1:
            return self

        previous_attestations = self.get_matching_target_attestations(self.previous_epoch())
        current_attestations = self.get_matching_target_attestations(self.current_epoch())
        return self.weigh_justification_and_finalization(
            total_active_balance=self.get_total_active_balance(),
            previous_epoch_target_balance=self.get_attesting_balance(previous_attestations),
            current_epoch_target_balance=self.get_attesting_balance(current_attestations),
        )

    def weigh_justification_and_finalization(
        self,
        total_active_balance: Gwei,
        previous_epoch_target_balance: Gwei,
        current_epoch_target_balance: Gwei,
    ) -> State:
        """
        Update the justified checkpoints, the bitfield and the finalized checkpoint.

        Finalization compares against the justified checkpoints as they were
        before this call. Bit `i` of the bitfield refers to epoch `current - i`.
        """
        previous_epoch = self.previous_epoch()
        current_epoch = self.current_epoch()
        old_previous_justified = self.previous_justified_checkpoint
        old_current_justified = self.current_justified_checkpoint

        # Justification: shift the bitfield by one epoch.
        bits = [Boolean(False)] + list(self.justification_bits.data[:-1])
        current_justified = old_current_justified

        if is_supermajority(int(previous_epoch_target_balance), int(total_active_balance)):
            current_justified = Checkpoint(
                epoch=previous_epoch, root=self.get_block_root(previous_epoch)
            )
            bits[1] = Boolean(True)

        if is_supermajority(int(current_epoch_target_balance), int(total_active_balance)):
            current_justified = Checkpoint(
                epoch=current_epoch, root=self.get_block_root(current_epoch)
            )
            bits[0] = Boolean(True)

        # Finalization
        finalized = self.finalized_checkpoint
        current = int(current_epoch)

        # Epochs current-1 .. current-3 justified, the oldest as source.
        if all(bits[1:4]) and int(old_previous_justified.epoch) + 3 == current:
            finalized = old_previous_justified

        # Epochs current-1 .. current-2 justified, the older as source.
        if all(bits[1:3]) and int(old_previous_justified.epoch) + 2 == current:
            finalized = old_previous_justified

        # Epochs current .. current-2 justified, the oldest as source.
        if all(bits[0:3]) and int(old_current_justified.epoch) + 2 == current:
            finalized = old_current_justified

        # Epochs current .. current-1 justified, the older as source.
        if all(bits[0:2]) and int(old_current_justified.epoch) + 1 == current:
            finalized = old_current_justified

        if current_justified != old_current_justified:
            logger.debug("Justified epoch %s (%s)", current_justified.epoch, current_justified.root.hex())
        if finalized != self.finalized_checkpoint:
            logger.debug("Finalized epoch %s (%s)", finalized.epoch, finalized.root.hex())

        return self.model_copy(
            update={
                "previous_justified_checkpoint": old_current_justified,
                "current_justified_checkpoint": current_justified,
                "justification_bits": JustificationBits(data=bits),
                "finalized_checkpoint": finalized,
            }
        )

    def process_participation_record_updates(self) -> State:
        """The current epoch's attestations become the previous epoch's."""
        return self.model_copy(
            update={
                "previous_epoch_attestations": self.current_epoch_attestations,
                "current_epoch_attestations": PendingAttestations(data=[]),
            }
        )

    # Block processing

    def process_block_header(self, block: Block) -> State:
        """
        Validate the block header and make it the latest header.

        Raises:
            AssertionError: If the slot or the parent link does not match.
        """
        parent_header = self.latest_block_header

        # The block must belong to the slot the state was advanced to.
        assert block.slot == self.slot, "Block slot mismatch"

        # At most one block per slot: the previous header must be strictly older.
        assert block.slot > parent_header.slot, "Block is older than latest header"

        # The latest header was resolved by `process_slot`, so its root is the
        # root of the parent block.
        assert block.parent_root == hash_tree_root(parent_header), "Block parent root mismatch"

        # The state root is unknown until the block body is applied.
        # The next `process_slot` fills it in.
        new_header = BlockHeader(
            slot=block.slot,
            parent_root=block.parent_root,
            state_root=ZERO_HASH,
            body_root=hash_tree_root(block.body),
        )
        return self.model_copy(update={"latest_block_header": new_header})

    def process_block(self, block: Block) -> State:
        """Apply the block header, then the block body operations."""
        return self.process_block_header(block).process_operations(block.body)

    def process_operations(self, body: BlockBody) -> State:
        """
        Apply attestations, then deposits, each in block order.

        Raises:
            AssertionError: If the deposits would overflow `eth1_deposit_index`,
                or any single operation is invalid.
        """
        assert (
            int(self.eth1_deposit_index) + len(body.deposits) < UINT64_LIMIT
        ), "Deposit index overflow"

        state = self
        for attestation in body.attestations:
            state = state.process_attestation(attestation)
        for deposit in body.deposits:
            state = state.process_deposit(deposit)
        return state

    def process_attestation(self, attestation: Attestation) -> State:
        """
        Record an attestation for epoch processing.

        Signatures are not verified by this state machine.

        Raises:
            AssertionError: If the attestation is not includable in this state.
        """
        data = attestation.data
        current_epoch = self.current_epoch()
        previous_epoch = self.previous_epoch()

        assert (
            data.target.epoch == previous_epoch or data.target.epoch == current_epoch
        ), "Target epoch is neither the previous nor the current epoch"
        assert data.target.epoch == data.slot.epoch(), "Target epoch does not match attestation slot"
        assert (
            int(data.slot) + int(MIN_ATTESTATION_INCLUSION_DELAY)
            <= int(self.slot)
            <= int(data.slot) + int(SLOTS_PER_EPOCH)
        ), "Attestation is outside its inclusion window"
        assert len(attestation.aggregation_bits) == len(
            self.validators
        ), "Aggregation bits length does not match the validator count"

        pending = PendingAttestation(
            aggregation_bits=attestation.aggregation_bits,
            data=data,
            inclusion_delay=self.slot - data.slot,
        )

        if data.target.epoch == current_epoch:
            assert (
                data.source == self.current_justified_checkpoint
            ), "Source does not match the current justified checkpoint"
            return self.model_copy(
                update={"current_epoch_attestations": self.current_epoch_attestations + [pending]}
            )

        assert (
            data.source == self.previous_justified_checkpoint
        ), "Source does not match the previous justified checkpoint"
        return self.model_copy(
            update={"previous_epoch_attestations": self.previous_epoch_attestations + [pending]}
        )

    def process_deposit(self, deposit: Deposit) -> State:
        """
        Consume the next deposit.

        Only the deposit index advances. Proof verification and validator
        registration are not part of this state machine.
        """
        return self.model_copy(
            update={"eth1_deposit_index": self.eth1_deposit_index + Uint64(1)}
        )

    # Full transition

    def state_transition(self, block: Block, validate_result: bool = True) -> State:
        """
        Apply a block to this state.

        The block is accepted only when every check passes:

        - its slot is after the state's slot,
        - its parent is the latest header of the state advanced to its slot,
        - its deposits fit the deposit counter,
        - its operations are valid,
        - and, with `validate_result`, its `state_root` matches the computed post-state.

        Raises:
            AssertionError: On the first failing check. No state is produced.
        """
        state = self.process_slots(block.slot)
        new_state = state.process_block(block)

        if validate_result:
            assert block.state_root == hash_tree_root(new_state), "Invalid block state root"

        return new_state

    def produce_block(
        self,
        slot: Slot,
        attestations: Sequence[Attestation] = (),
        deposits: Sequence[Deposit] = (),
    ) -> tuple[Block, State]:
        """
        Build a valid block for `slot` on top of this state.

        Returns the block, with its state root filled in, and its post-state.
        """
        pre_state = self.process_slots(slot)
        candidate = Block(
            slot=slot,
            parent_root=hash_tree_root(pre_state.latest_block_header),
            state_root=ZERO_HASH,
            body=BlockBody(
                attestations=Attestations(data=list(attestations)),
                deposits=Deposits(data=list(deposits)),
            ),
        )
        post_state = pre_state.process_block(candidate)
        return candidate.model_copy(update={"state_root": hash_tree_root(post_state)}), post_state
