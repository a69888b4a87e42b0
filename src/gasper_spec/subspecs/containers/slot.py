"""Slot and Epoch types."""

from __future__ import annotations

from gasper_spec.subspecs.chain.config import SLOTS_PER_EPOCH
from gasper_spec.types import Uint64


class Slot(Uint64):
    """A slot number as a 64-bit unsigned integer."""

    def epoch(self, slots_per_epoch: Uint64 = SLOTS_PER_EPOCH) -> Epoch:
        """The epoch this slot belongs to."""
        return Epoch(int(self) // int(slots_per_epoch))

    def is_epoch_start(self, slots_per_epoch: Uint64 = SLOTS_PER_EPOCH) -> bool:
        """Whether this slot is the first slot of its epoch."""
        return int(self) % int(slots_per_epoch) == 0


class Epoch(Uint64):
    """An epoch number as a 64-bit unsigned integer."""

    def start_slot(self, slots_per_epoch: Uint64 = SLOTS_PER_EPOCH) -> Slot:
        """
        The first slot of this epoch.

        Raises:
            SSZOverflowError: If the slot does not fit in 64 bits.
        """
        return Slot(int(self) * int(slots_per_epoch))
