"""The Casper FFG finality gadget: epoch boundary blocks and justification."""

from .epoch_boundary import (
    epoch_boundary_block,
    epoch_boundary_blocks,
    epoch_boundary_checkpoints,
)
from .justification import (
    AttestationLink,
    FinalityResult,
    JustificationEngine,
    is_supermajority,
    links_from_attestations,
    supermajority_threshold,
)

__all__ = [
    "AttestationLink",
    "FinalityResult",
    "JustificationEngine",
    "epoch_boundary_block",
    "epoch_boundary_blocks",
    "epoch_boundary_checkpoints",
    "is_supermajority",
    "links_from_attestations",
    "supermajority_threshold",
]
