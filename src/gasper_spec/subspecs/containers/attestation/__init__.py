"""Attestation containers."""

from .aggregation_bits import AggregationBits
from .attestation import Attestation, AttestationData, PendingAttestation

__all__ = [
    "AggregationBits",
    "Attestation",
    "AttestationData",
    "PendingAttestation",
]
