"""Aggregation bits for tracking validator participation."""

from __future__ import annotations

from typing import Iterable

from gasper_spec.subspecs.chain.config import MAX_VALIDATORS_PER_COMMITTEE
from gasper_spec.types import Boolean
from gasper_spec.types.bitfields import BaseBitlist

from ..validator import ValidatorIndex


class AggregationBits(BaseBitlist):
    """
    Bitlist of attesting validators.

    There is a single committee covering the whole registry, so bit `i` stands
    for validator `i` and a well-formed bitlist has one bit per validator.
    """

    LIMIT = int(MAX_VALIDATORS_PER_COMMITTEE)

    @classmethod
    def from_validator_indices(
        cls, indices: Iterable[ValidatorIndex], num_validators: int
    ) -> AggregationBits:
        """
        Build a bitlist of length `num_validators` with the given indices set.

        Raises:
            AssertionError: If any index is outside the registry.
        """
        ids = {int(i) for i in indices}
        assert all(i < num_validators for i in ids), "Validator index out of range"
        return cls(data=[Boolean(i in ids) for i in range(num_validators)])

    def to_validator_indices(self) -> list[ValidatorIndex]:
        """The indices of all set bits, in ascending order."""
        return [ValidatorIndex(i) for i, bit in enumerate(self.data) if bit]
