"""
Factory functions for constructing test fixtures.

Provides deterministic builders for validators, genesis data, attestations and
whole chains. Every builder goes through the real state transition, so a
built block is always valid on top of the state it was built from.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple, Optional, Sequence

from gasper_spec.subspecs.containers import (
    AggregationBits,
    Attestation,
    AttestationData,
    Block,
    Checkpoint,
    Deposit,
    DepositData,
    DepositProof,
    Gwei,
    Slot,
    State,
    Validator,
    ValidatorIndex,
    Validators,
)
from gasper_spec.subspecs.forkchoice import ChainStore
from gasper_spec.subspecs.ssz.hash import hash_tree_root
from gasper_spec.types import Bytes32, Bytes48, Bytes96, Uint64


def make_bytes32(seed: int) -> Bytes32:
    """Create a deterministic 32-byte value from a seed."""
    return Bytes32(bytes([seed % 256]) * 32)


def make_validators(num_validators: int, balance: Optional[Gwei] = None) -> Validators:
    """Genesis validators with distinct public keys and equal balances."""
    validators = []
    for i in range(num_validators):
        pubkey = Bytes48(i.to_bytes(48, "little"))
        if balance is None:
            validators.append(Validator.genesis(pubkey))
        else:
            validators.append(Validator.genesis(pubkey, balance))
    return Validators(data=validators)


def make_genesis_state(num_validators: int = 4, genesis_time: int = 0) -> State:
    """Genesis state with `num_validators` fully funded validators."""
    return State.generate_genesis(Uint64(genesis_time), make_validators(num_validators))


def make_genesis_block(state: State) -> Block:
    """Genesis block committing to `state`."""
    return state.genesis_block()


def make_deposit(seed: int = 0) -> Deposit:
    """A deposit with an empty proof. Proofs are not checked by the state machine."""
    return Deposit(
        proof=DepositProof.filled(Bytes32.zero()),
        data=DepositData(
            pubkey=Bytes48(bytes([seed % 256]) * 48),
            withdrawal_credentials=make_bytes32(seed),
            amount=Gwei(32 * 10**9),
            signature=Bytes96.zero(),
        ),
    )


def make_attestation(
    state: State,
    data_slot: Slot,
    inclusion_slot: Slot,
    participants: Optional[Iterable[int]] = None,
) -> Attestation:
    """
    An attestation for `data_slot` that is valid in a block at `inclusion_slot`.

    The target is the epoch boundary block of the slot's epoch and the source
    is the justified checkpoint the block's pre-state expects for that target.
    Every validator participates unless `participants` says otherwise.
    """
    pre_state = state.process_slots(inclusion_slot) if state.slot < inclusion_slot else state
    target_epoch = data_slot.epoch()

    if target_epoch == pre_state.current_epoch():
        source = pre_state.current_justified_checkpoint
    else:
        source = pre_state.previous_justified_checkpoint

    num_validators = len(pre_state.validators)
    if participants is None:
        participants = range(num_validators)

    return Attestation(
        aggregation_bits=AggregationBits.from_validator_indices(
            (ValidatorIndex(i) for i in participants), num_validators
        ),
        data=AttestationData(
            slot=data_slot,
            beacon_block_root=pre_state.get_block_root_at_slot(data_slot),
            source=source,
            target=Checkpoint(epoch=target_epoch, root=pre_state.get_block_root(target_epoch)),
        ),
    )


class BuiltChain(NamedTuple):
    """A linear chain of blocks with the post-state of each."""

    blocks: list[Block]
    """Blocks in slot order, genesis first."""

    states: list[State]
    """Post-state of each block, aligned with `blocks`."""

    def root_at(self, slot: int) -> Bytes32:
        """Root of the block at `slot`."""
        return next(hash_tree_root(b) for b in self.blocks if int(b.slot) == slot)

    @property
    def head_root(self) -> Bytes32:
        return hash_tree_root(self.blocks[-1])


def build_chain(
    genesis_state: State,
    slots: Sequence[int],
    participants: Optional[Iterable[int]] = None,
) -> BuiltChain:
    """
    Build one block per slot in `slots` on top of `genesis_state`.

    Each block includes an attestation for the slot right before it, signed by
    `participants` (everyone by default). Slots must be increasing and at least 1.
    """
    voters = None if participants is None else list(participants)
    blocks = [genesis_state.genesis_block()]
    states = [genesis_state]

    state = genesis_state
    for raw_slot in slots:
        slot = Slot(raw_slot)
        attestation = make_attestation(state, Slot(raw_slot - 1), slot, voters)

        block, state = state.produce_block(slot, [attestation])
        blocks.append(block)
        states.append(state)

    return BuiltChain(blocks=blocks, states=states)


def make_store(chain: BuiltChain) -> ChainStore:
    """A store holding every block of `chain`."""
    store = ChainStore.from_genesis(chain.states[0], chain.blocks[0])
    for block in chain.blocks[1:]:
        store = store.on_block(block)
    return store
