"""
Attestation-related container definitions.

An attestation is a validator's FFG vote:

- the checkpoint it already considers justified (source),
- the checkpoint it wants justified next (target),
- and the head block it saw at its slot.

Attestations for identical data are aggregated into one bitlist of voters.
"""

from __future__ import annotations

from gasper_spec.types import Bytes32, Container

from ..checkpoint import Checkpoint
from ..slot import Slot
from .aggregation_bits import AggregationBits


class AttestationData(Container):
    """Attestation content describing the validator's observed chain view."""

    slot: Slot
    """The slot for which the attestation is made."""

    beacon_block_root: Bytes32
    """The head block root as observed by the validator."""

    source: Checkpoint
    """The justified checkpoint the vote originates from."""

    target: Checkpoint
    """The checkpoint the vote asks to justify."""


class Attestation(Container):
    """Aggregated attestation as carried in a block body."""

    aggregation_bits: AggregationBits
    """Bit `i` is set when validator `i` signed `data`."""

    data: AttestationData
    """The shared vote content."""


class PendingAttestation(Container):
    """An attestation accepted into the state, waiting for epoch processing."""

    aggregation_bits: AggregationBits
    data: AttestationData

    inclusion_delay: Slot
    """Number of slots between the attestation's slot and the including block."""
