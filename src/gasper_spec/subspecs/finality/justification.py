"""
Casper FFG justification and finalization over epoch boundary checkpoints.

Checkpoints are handed in most recent first, so for `E + 1` checkpoints
`ebbs[E]` is genesis. Genesis is justified and finalized by definition.
Any other checkpoint `ebbs[i]` is justified when a supermajority link reaches
it from an older justified checkpoint `ebbs[j]`, `j > i`.

A justified checkpoint `ebbs[i]` (`0 < i < E`) is finalized when either:

- a supermajority link goes from `ebbs[i]` to `ebbs[i - 1]`, or
- `ebbs[i - 1]` is justified too and a supermajority link goes from `ebbs[i]`
  to `ebbs[i - 2]`.

The relation is evaluated forward from genesis in a single pass, so every
source is settled before any link leaving it is looked at.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Optional, Sequence

from gasper_spec.subspecs.chain.config import EFFECTIVE_BALANCE_INCREMENT
from gasper_spec.subspecs.containers.attestation import Attestation
from gasper_spec.subspecs.containers.checkpoint import Checkpoint
from gasper_spec.subspecs.containers.slot import Epoch
from gasper_spec.subspecs.containers.validator import Validator, ValidatorIndex

logger = logging.getLogger(__name__)


def supermajority_threshold(total_weight: int) -> int:
    """Smallest weight that forms a supermajority of `total_weight`: floor(2T/3) + 1."""
    return 2 * total_weight // 3 + 1


def is_supermajority(weight: int, total_weight: int) -> bool:
    """
    Whether `weight` is strictly more than two thirds of `total_weight`.

    Same as `weight >= supermajority_threshold(total_weight)`, without division.
    """
    return 3 * weight > 2 * total_weight


@dataclass(frozen=True, slots=True)
class AttestationLink:
    """Validators that voted for the FFG link `source -> target`."""

    source: Checkpoint
    target: Checkpoint
    attesters: frozenset[ValidatorIndex] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "attesters", frozenset(ValidatorIndex(int(i)) for i in self.attesters)
        )


def links_from_attestations(attestations: Iterable[Attestation]) -> list[AttestationLink]:
    """
    Group attestations into links, one per distinct `(source, target)` pair.

    The attesters of a link are the union over all attestations voting for it.
    Links are returned in the order their pair was first seen.
    """
    voters: dict[tuple[Checkpoint, Checkpoint], set[ValidatorIndex]] = {}
    for attestation in attestations:
        pair = (attestation.data.source, attestation.data.target)
        voters.setdefault(pair, set()).update(attestation.aggregation_bits.to_validator_indices())
    return [
        AttestationLink(source=source, target=target, attesters=frozenset(indices))
        for (source, target), indices in voters.items()
    ]


@dataclass(frozen=True)
class FinalityResult:
    """Justified and finalized flags per checkpoint, most recent first."""

    checkpoints: tuple[Checkpoint, ...]
    justified: tuple[bool, ...]
    finalized: tuple[bool, ...]

    def _flag(self, flags: tuple[bool, ...], checkpoint: Checkpoint) -> bool:
        return any(flag for cp, flag in zip(self.checkpoints, flags) if cp == checkpoint)

    def is_justified(self, checkpoint: Checkpoint) -> bool:
        """Whether `checkpoint` is in the sequence and justified."""
        return self._flag(self.justified, checkpoint)

    def is_finalized(self, checkpoint: Checkpoint) -> bool:
        """Whether `checkpoint` is in the sequence and finalized."""
        return self._flag(self.finalized, checkpoint)

    @property
    def justified_checkpoints(self) -> tuple[Checkpoint, ...]:
        return tuple(cp for cp, flag in zip(self.checkpoints, self.justified) if flag)

    @property
    def finalized_checkpoints(self) -> tuple[Checkpoint, ...]:
        return tuple(cp for cp, flag in zip(self.checkpoints, self.finalized) if flag)

    @property
    def latest_justified(self) -> Optional[Checkpoint]:
        """The most recent justified checkpoint, or None for an empty sequence."""
        return next(iter(self.justified_checkpoints), None)

    @property
    def latest_finalized(self) -> Optional[Checkpoint]:
        """The most recent finalized checkpoint, or None for an empty sequence."""
        return next(iter(self.finalized_checkpoints), None)


@dataclass(frozen=True)
class JustificationEngine:
    """
    Decides justification and finalization for a sequence of checkpoints.

    `weight_of` gives the voting weight of a validator and `total_weight` the
    weight a link's attesters are measured against. The engine is total: any
    checkpoint sequence and any set of links yields a result.
    """

    total_weight: int
    weight_of: Callable[[ValidatorIndex], int]

    @classmethod
    def for_committee(cls, committee_size: int) -> JustificationEngine:
        """Unit weight for validators `0..committee_size - 1`, total `committee_size`."""
        assert committee_size > 0, "Committee must not be empty"
        return cls(
            total_weight=committee_size,
            weight_of=lambda index: 1 if int(index) < committee_size else 0,
        )

    @classmethod
    def for_validators(cls, validators: Sequence[Validator], epoch: Epoch) -> JustificationEngine:
        """
        Effective-balance weights at `epoch`.

        Only active, unslashed validators carry weight. The total is the active
        balance, floored at one `EFFECTIVE_BALANCE_INCREMENT`.
        """
        active = [(i, v) for i, v in enumerate(validators) if v.is_active(epoch)]
        weights: Mapping[ValidatorIndex, int] = {
            ValidatorIndex(i): int(v.effective_balance) for i, v in active if not v.slashed
        }
        total = max(int(EFFECTIVE_BALANCE_INCREMENT), sum(int(v.effective_balance) for _, v in active))
        return cls(total_weight=total, weight_of=lambda index: weights.get(index, 0))

    def link_weight(self, attesters: Iterable[ValidatorIndex]) -> int:
        """Combined weight of a set of attesters."""
        return sum(self.weight_of(index) for index in attesters)

    def is_supermajority_link(self, attesters: Iterable[ValidatorIndex]) -> bool:
        return is_supermajority(self.link_weight(attesters), self.total_weight)

    def evaluate(
        self, ebbs: Sequence[Checkpoint], links: Iterable[AttestationLink]
    ) -> FinalityResult:
        """
        Compute justification and finalization for `ebbs` (most recent first, genesis last).

        Links whose checkpoints are not in `ebbs`, or that do not point forward
        in time, carry no weight.
        """
        count = len(ebbs)
        if count == 0:
            return FinalityResult(checkpoints=(), justified=(), finalized=())

        # Forward position: 0 is genesis, count - 1 is the most recent epoch.
        position = {checkpoint: count - 1 - i for i, checkpoint in enumerate(ebbs)}

        voters: dict[tuple[int, int], set[ValidatorIndex]] = defaultdict(set)
        for link in links:
            source = position.get(link.source)
            target = position.get(link.target)
            if source is None or target is None or source >= target:
                continue
            voters[(source, target)].update(link.attesters)

        supermajority = {pair for pair, indices in voters.items() if self.is_supermajority_link(indices)}
        sources_of: dict[int, list[int]] = defaultdict(list)
        for source, target in supermajority:
            sources_of[target].append(source)

        justified = [False] * count
        justified[0] = True
        for k in range(1, count):
            justified[k] = any(justified[s] for s in sources_of[k])

        finalized = [False] * count
        finalized[0] = True
        for k in range(1, count - 1):
            if not justified[k]:
                continue
            one_step = (k, k + 1) in supermajority
            two_step = k + 2 < count and justified[k + 1] and (k, k + 2) in supermajority
            finalized[k] = one_step or two_step

        logger.debug(
            "Evaluated %d checkpoints: %d justified, %d finalized",
            count,
            sum(justified),
            sum(finalized),
        )
        return FinalityResult(
            checkpoints=tuple(ebbs),
            justified=tuple(reversed(justified)),
            finalized=tuple(reversed(finalized)),
        )
