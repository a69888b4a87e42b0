"""Tests for the chain store."""

import logging

import pytest

from gasper_spec.subspecs.containers import Checkpoint, Epoch, Slot, State
from gasper_spec.subspecs.finality import JustificationEngine
from gasper_spec.subspecs.forkchoice import ChainStore
from gasper_spec.subspecs.ssz.hash import hash_tree_root
from gasper_spec.types import ZERO_HASH, SSZOverflowError
from tests.gasper_spec.helpers import (
    BuiltChain,
    build_chain,
    make_bytes32,
    make_genesis_state,
    make_store,
)

STORE_LOGGER = "gasper_spec.subspecs.forkchoice.store"


@pytest.fixture
def genesis_state() -> State:
    return make_genesis_state(num_validators=4)


@pytest.fixture
def genesis_store(genesis_state: State) -> ChainStore:
    return ChainStore.from_genesis(genesis_state, genesis_state.genesis_block())


@pytest.fixture(scope="module")
def long_chain() -> BuiltChain:
    """Blocks at slots 1..32 with every validator attesting."""
    return build_chain(make_genesis_state(num_validators=4), range(1, 33))


@pytest.fixture(scope="module")
def long_store(long_chain: BuiltChain) -> ChainStore:
    return make_store(long_chain)


class TestFromGenesis:
    def test_holds_genesis(self, genesis_state: State, genesis_store: ChainStore) -> None:
        root = hash_tree_root(genesis_state.genesis_block())
        assert genesis_store.genesis_root == root
        assert genesis_store.states[root] == genesis_state
        assert genesis_store.heads() == [root]
        assert genesis_store.chain(root) == [root]

    def test_state_root_mismatch(self, genesis_state: State) -> None:
        block = genesis_state.genesis_block().model_copy(update={"state_root": make_bytes32(3)})
        with pytest.raises(AssertionError, match="must match genesis state hash"):
            ChainStore.from_genesis(genesis_state, block)

    def test_block_must_be_at_slot_zero(self, genesis_state: State) -> None:
        block = genesis_state.genesis_block().model_copy(update={"slot": Slot(1)})
        with pytest.raises(AssertionError, match="Genesis block must be at slot 0"):
            ChainStore.from_genesis(genesis_state, block)


class TestOnBlock:
    def test_accepts_block(
        self, genesis_state: State, genesis_store: ChainStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger=STORE_LOGGER)
        block, post_state = genesis_state.produce_block(Slot(1))

        store = genesis_store.on_block(block)
        root = hash_tree_root(block)

        assert store.blocks[root] == block
        assert store.states[root] == post_state
        assert root not in genesis_store.blocks
        assert "Accepted block" in caplog.text

    def test_duplicate_block_is_a_no_op(
        self, genesis_state: State, genesis_store: ChainStore
    ) -> None:
        block, _ = genesis_state.produce_block(Slot(1))
        store = genesis_store.on_block(block)
        assert store.on_block(block) is store

    def test_unknown_parent(self, genesis_state: State, genesis_store: ChainStore) -> None:
        block, _ = genesis_state.produce_block(Slot(1))
        orphan = block.model_copy(update={"parent_root": make_bytes32(7)})
        with pytest.raises(AssertionError, match="Parent state not found"):
            genesis_store.on_block(orphan)

    def test_invalid_block_leaves_store_unchanged(
        self, genesis_state: State, genesis_store: ChainStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger=STORE_LOGGER)
        block, _ = genesis_state.produce_block(Slot(1))
        bad = block.model_copy(update={"state_root": make_bytes32(9)})

        with pytest.raises(AssertionError, match="Invalid block state root"):
            genesis_store.on_block(bad)

        assert len(genesis_store.blocks) == 1
        records = [r for r in caplog.records if r.name == STORE_LOGGER]
        assert [r.levelno for r in records] == [logging.WARNING]
        assert "Rejected block" in records[0].getMessage()

    def test_overflow_during_transition_is_logged(
        self,
        genesis_state: State,
        genesis_store: ChainStore,
        caplog: pytest.LogCaptureFixture,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Counter overflows reject the block the same way failed checks do."""
        caplog.set_level(logging.WARNING, logger=STORE_LOGGER)
        block, _ = genesis_state.produce_block(Slot(1))

        def overflowing_transition(self: State, *args: object, **kwargs: object) -> State:
            raise SSZOverflowError(2**64, "Uint64", max_value=2**64 - 1)

        monkeypatch.setattr(State, "state_transition", overflowing_transition)

        with pytest.raises(SSZOverflowError, match="out of range for Uint64"):
            genesis_store.on_block(block)

        assert len(genesis_store.blocks) == 1
        records = [r for r in caplog.records if r.name == STORE_LOGGER]
        assert [r.levelno for r in records] == [logging.WARNING]
        assert "Rejected block" in records[0].getMessage()


class TestTraversal:
    def test_chain_walks_back_to_genesis(self, long_chain: BuiltChain, long_store: ChainStore) -> None:
        roots = long_store.chain(long_chain.head_root)
        assert roots == [hash_tree_root(b) for b in reversed(long_chain.blocks)]

        slots = [int(long_store.blocks[r].slot) for r in roots]
        assert slots == sorted(slots, reverse=True)
        assert slots[-1] == 0

    def test_unknown_head(self, genesis_store: ChainStore) -> None:
        with pytest.raises(AssertionError, match="Unknown block"):
            genesis_store.chain(make_bytes32(1))

    def test_heads_of_a_fork(self, genesis_state: State, genesis_store: ChainStore) -> None:
        early, _ = genesis_state.produce_block(Slot(1))
        late, _ = genesis_state.produce_block(Slot(2))
        store = genesis_store.on_block(early).on_block(late)

        assert store.heads() == [hash_tree_root(late), hash_tree_root(early)]
        assert store.chain(hash_tree_root(late)) == [hash_tree_root(late), store.genesis_root]

    def test_checkpoints(self, long_chain: BuiltChain, long_store: ChainStore) -> None:
        assert long_store.checkpoints(long_chain.head_root, Epoch(3)) == [
            Checkpoint(epoch=Epoch(3), root=long_chain.root_at(24)),
            Checkpoint(epoch=Epoch(2), root=long_chain.root_at(16)),
            Checkpoint(epoch=Epoch(1), root=long_chain.root_at(8)),
            Checkpoint(epoch=Epoch(0), root=long_store.genesis_root),
        ]


class TestFinality:
    def test_genesis_stub_is_credited_to_genesis(
        self, long_chain: BuiltChain, long_store: ChainStore
    ) -> None:
        links = long_store.attestation_links(long_chain.head_root)
        stub = Checkpoint.default()
        assert stub.root == ZERO_HASH
        assert all(link.source != stub and link.target != stub for link in links)

        genesis = Checkpoint(epoch=Epoch(0), root=long_store.genesis_root)
        epoch_one = Checkpoint(epoch=Epoch(1), root=long_chain.root_at(8))
        (first,) = [link for link in links if link.target == epoch_one]
        assert first.source == genesis
        assert len(first.attesters) == 4

    def test_agrees_with_the_state_transition(
        self, long_chain: BuiltChain, long_store: ChainStore
    ) -> None:
        head_state = long_chain.states[-1]
        engine = JustificationEngine.for_validators(head_state.validators, Epoch(3))
        result = long_store.finality(long_chain.head_root, Epoch(3), engine)

        assert result.justified == (True, True, True, True)
        assert result.finalized == (False, True, False, True)
        assert result.latest_finalized == head_state.finalized_checkpoint
        assert result.latest_justified == head_state.current_justified_checkpoint

    def test_explicit_links_replace_the_chain_votes(
        self, long_chain: BuiltChain, long_store: ChainStore
    ) -> None:
        result = long_store.finality(
            long_chain.head_root, Epoch(3), JustificationEngine.for_committee(4), links=[]
        )
        assert result.justified_checkpoints == (
            Checkpoint(epoch=Epoch(0), root=long_store.genesis_root),
        )
