"""Deposit containers."""

from __future__ import annotations

from gasper_spec.subspecs.chain.config import DEPOSIT_CONTRACT_TREE_DEPTH
from gasper_spec.types import Bytes32, Bytes48, Bytes96, Container, SSZVector

from .validator import Gwei


class DepositProof(SSZVector[Bytes32]):
    """Merkle branch of a deposit leaf, plus the mixed-in deposit count."""

    ELEMENT_TYPE = Bytes32
    LENGTH = DEPOSIT_CONTRACT_TREE_DEPTH + 1


class DepositData(Container):
    """The payload a depositor submits to the deposit contract."""

    pubkey: Bytes48
    withdrawal_credentials: Bytes32
    amount: Gwei
    signature: Bytes96


class Deposit(Container):
    """A deposit included in a block, with its inclusion proof."""

    proof: DepositProof
    """Path from the deposit leaf to the deposit root."""

    data: DepositData
