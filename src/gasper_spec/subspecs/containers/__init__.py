"""
The container types for the Gasper consensus specification.

All containers use SSZ encoding and SHA-256 merkleization.
"""

from .attestation import (
    AggregationBits,
    Attestation,
    AttestationData,
    PendingAttestation,
)
from .block import Attestations, Block, BlockBody, BlockHeader, Deposits
from .checkpoint import Checkpoint
from .deposit import Deposit, DepositData, DepositProof
from .slot import Epoch, Slot
from .state import (
    HistoricalRoots,
    JustificationBits,
    PendingAttestations,
    State,
    Validators,
)
from .validator import Gwei, Validator, ValidatorIndex

__all__ = [
    "AggregationBits",
    "Attestation",
    "AttestationData",
    "Attestations",
    "Block",
    "BlockBody",
    "BlockHeader",
    "Checkpoint",
    "Deposit",
    "DepositData",
    "DepositProof",
    "Deposits",
    "Epoch",
    "Gwei",
    "HistoricalRoots",
    "JustificationBits",
    "PendingAttestation",
    "PendingAttestations",
    "Slot",
    "State",
    "Validator",
    "ValidatorIndex",
    "Validators",
]
