"""State-specific SSZ types."""

from __future__ import annotations

from gasper_spec.subspecs.chain.config import (
    JUSTIFICATION_BITS_LENGTH,
    MAX_ATTESTATIONS,
    SLOTS_PER_EPOCH,
    SLOTS_PER_HISTORICAL_ROOT,
    VALIDATOR_REGISTRY_LIMIT,
)
from gasper_spec.types import Bytes32, SSZList, SSZVector
from gasper_spec.types.bitfields import BaseBitvector

from ..attestation import PendingAttestation
from ..slot import Slot
from ..validator import Validator


class HistoricalRoots(SSZVector[Bytes32]):
    """
    Fixed-capacity ring buffer of roots addressed by `slot % LENGTH`.

    Writing slot `s` overwrites whatever slot `s - LENGTH` left behind.
    """

    ELEMENT_TYPE = Bytes32
    LENGTH = int(SLOTS_PER_HISTORICAL_ROOT)

    def record(self, slot: Slot, root: Bytes32) -> HistoricalRoots:
        """Return a copy with `root` stored in the position of `slot`."""
        index = int(slot) % self.LENGTH
        data = tuple(self.data)
        return type(self)(data=data[:index] + (root,) + data[index + 1 :])

    def at(self, slot: Slot) -> Bytes32:
        """The root stored in the position of `slot`."""
        return self.data[int(slot) % self.LENGTH]


class Validators(SSZList[Validator]):
    """Validator registry tracked in the state."""

    ELEMENT_TYPE = Validator
    LIMIT = int(VALIDATOR_REGISTRY_LIMIT)


class PendingAttestations(SSZList[PendingAttestation]):
    """Attestations of one epoch waiting for epoch processing."""

    ELEMENT_TYPE = PendingAttestation
    LIMIT = int(MAX_ATTESTATIONS) * int(SLOTS_PER_EPOCH)


class JustificationBits(BaseBitvector):
    """
    Rolling justification record.

    Bit `i` is set when the epoch `i` epochs before the current one is justified.
    """

    LENGTH = JUSTIFICATION_BITS_LENGTH
