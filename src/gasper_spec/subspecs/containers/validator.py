"""Validator container and the integer types that describe stake."""

from __future__ import annotations

from gasper_spec.subspecs.chain.config import FAR_FUTURE_EPOCH, MAX_EFFECTIVE_BALANCE
from gasper_spec.types import Boolean, Bytes32, Bytes48, Container, Uint64

from .slot import Epoch


class ValidatorIndex(Uint64):
    """Position of a validator in the registry."""


class Gwei(Uint64):
    """An amount of stake, in Gwei."""


class Validator(Container):
    """A registry entry: identity, stake and lifecycle epochs of one validator."""

    pubkey: Bytes48
    """BLS public key."""

    withdrawal_credentials: Bytes32
    """Commitment to the key that controls withdrawals."""

    effective_balance: Gwei
    """Stake counted for FFG votes."""

    slashed: Boolean
    """Whether the validator was slashed. Slashed validators' votes do not count."""

    activation_eligibility_epoch: Epoch
    activation_epoch: Epoch
    exit_epoch: Epoch
    withdrawable_epoch: Epoch

    @classmethod
    def genesis(cls, pubkey: Bytes48, balance: Gwei = Gwei(MAX_EFFECTIVE_BALANCE)) -> Validator:
        """A validator active from genesis with the given effective balance."""
        return cls(
            pubkey=pubkey,
            withdrawal_credentials=Bytes32.zero(),
            effective_balance=balance,
            slashed=Boolean(False),
            activation_eligibility_epoch=Epoch(0),
            activation_epoch=Epoch(0),
            exit_epoch=Epoch(FAR_FUTURE_EPOCH),
            withdrawable_epoch=Epoch(FAR_FUTURE_EPOCH),
        )

    def is_active(self, epoch: Epoch) -> bool:
        """Whether the validator is active at `epoch`."""
        return self.activation_epoch <= epoch < self.exit_epoch
