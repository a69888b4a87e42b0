"""Checkpoint Container."""

from typing_extensions import Self

from gasper_spec.types import ZERO_HASH, Bytes32
from gasper_spec.types.container import Container

from .slot import Epoch


class Checkpoint(Container):
    """An (epoch, block root) pair used as the source or target of an FFG vote."""

    epoch: Epoch
    """The epoch the checkpoint stands for."""

    root: Bytes32
    """The root of the epoch boundary block."""

    @classmethod
    def default(cls) -> Self:
        """The genesis stub: epoch 0 with a zero root."""
        return cls(epoch=Epoch(0), root=ZERO_HASH)
