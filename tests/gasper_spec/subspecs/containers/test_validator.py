"""Tests for validators and aggregation bits."""

import pytest

from gasper_spec.subspecs.chain.config import FAR_FUTURE_EPOCH, MAX_EFFECTIVE_BALANCE
from gasper_spec.subspecs.containers import AggregationBits, Epoch, Gwei, Validator, ValidatorIndex
from gasper_spec.types import Boolean, Bytes48
from tests.gasper_spec.helpers import make_validators


def test_genesis_validator() -> None:
    validator = Validator.genesis(Bytes48.zero())
    assert validator.effective_balance == Gwei(MAX_EFFECTIVE_BALANCE)
    assert validator.activation_epoch == Epoch(0)
    assert validator.exit_epoch == Epoch(FAR_FUTURE_EPOCH)
    assert not validator.slashed


def test_is_active_window() -> None:
    """Active from the activation epoch up to, but not including, the exit epoch."""
    validator = Validator.genesis(Bytes48.zero()).model_copy(
        update={"activation_epoch": Epoch(2), "exit_epoch": Epoch(5)}
    )
    assert not validator.is_active(Epoch(1))
    assert validator.is_active(Epoch(2))
    assert validator.is_active(Epoch(4))
    assert not validator.is_active(Epoch(5))


def test_make_validators_have_distinct_keys() -> None:
    validators = make_validators(4)
    assert len({v.pubkey for v in validators}) == 4


class TestAggregationBits:
    def test_from_validator_indices(self) -> None:
        bits = AggregationBits.from_validator_indices([ValidatorIndex(0), ValidatorIndex(2)], 4)
        assert list(bits) == [Boolean(True), Boolean(False), Boolean(True), Boolean(False)]
        assert bits.to_validator_indices() == [ValidatorIndex(0), ValidatorIndex(2)]

    def test_duplicates_collapse(self) -> None:
        bits = AggregationBits.from_validator_indices([ValidatorIndex(1), ValidatorIndex(1)], 2)
        assert bits.to_validator_indices() == [ValidatorIndex(1)]

    def test_out_of_range_index(self) -> None:
        with pytest.raises(AssertionError, match="Validator index out of range"):
            AggregationBits.from_validator_indices([ValidatorIndex(4)], 4)

    def test_empty(self) -> None:
        bits = AggregationBits.from_validator_indices([], 3)
        assert len(bits) == 3
        assert bits.to_validator_indices() == []
