"""The chain state and its SSZ field types."""

from .state import State
from .types import HistoricalRoots, JustificationBits, PendingAttestations, Validators

__all__ = [
    "HistoricalRoots",
    "JustificationBits",
    "PendingAttestations",
    "State",
    "Validators",
]
