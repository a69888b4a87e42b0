"""
Chain and Consensus Configuration Specification

Core consensus parameters and the two chain presets. The mainnet preset is
the production parameter set. The minimal preset shrinks epochs and history
buffers so that multi-epoch scenarios stay cheap to run.
"""

from typing_extensions import Final

from gasper_spec.config import GASPER_ENV
from gasper_spec.types import StrictBaseModel, Uint64


class ChainConfig(StrictBaseModel):
    """The canonical, immutable configuration constants of a chain preset."""

    # Time parameters
    slots_per_epoch: Uint64
    """Number of slots in one epoch."""

    min_attestation_inclusion_delay: Uint64
    """Minimum number of slots between an attestation's slot and its inclusion."""

    # State list lengths
    slots_per_historical_root: Uint64
    """Capacity of the `block_roots` and `state_roots` ring buffers."""

    validator_registry_limit: Uint64
    """The maximum number of validators the registry can hold."""

    # Max operations per block
    max_validators_per_committee: Uint64
    """Capacity of an attestation's aggregation bitlist."""

    max_attestations: Uint64
    """Maximum number of attestations in one block body."""

    max_deposits: Uint64
    """Maximum number of deposits in one block body."""

    # Gwei values
    effective_balance_increment: Uint64
    """Granularity of effective balances, and the floor of the total active balance."""

    max_effective_balance: Uint64
    """Effective balance of a fully funded validator."""


MAINNET_PRESET: Final = ChainConfig(
    slots_per_epoch=Uint64(32),
    min_attestation_inclusion_delay=Uint64(1),
    slots_per_historical_root=Uint64(2**13),
    validator_registry_limit=Uint64(2**40),
    max_validators_per_committee=Uint64(2**11),
    max_attestations=Uint64(2**7),
    max_deposits=Uint64(2**4),
    effective_balance_increment=Uint64(10**9),
    max_effective_balance=Uint64(32 * 10**9),
)
"""Production parameters."""

MINIMAL_PRESET: Final = MAINNET_PRESET.model_copy(
    update={
        "slots_per_epoch": Uint64(8),
        "slots_per_historical_root": Uint64(2**6),
    }
)
"""Test parameters: 8-slot epochs and a 64-slot history."""

CHAIN_CONFIG: Final = MINIMAL_PRESET if GASPER_ENV == "test" else MAINNET_PRESET
"""The preset selected by `GASPER_ENV`."""

# --- Protocol constants (identical in every preset) ---

GENESIS_EPOCH: Final = Uint64(0)
"""Epoch of the genesis block."""

FAR_FUTURE_EPOCH: Final = Uint64(2**64 - 1)
"""Sentinel for an epoch that has not been scheduled."""

JUSTIFICATION_BITS_LENGTH: Final = 4
"""Width of the rolling justification bitfield (this epoch and the three before it)."""

DEPOSIT_CONTRACT_TREE_DEPTH: Final = 32
"""Depth of the deposit contract Merkle tree; a deposit proof has one extra entry."""

# --- Active preset, flattened ---

SLOTS_PER_EPOCH: Final = CHAIN_CONFIG.slots_per_epoch
MIN_ATTESTATION_INCLUSION_DELAY: Final = CHAIN_CONFIG.min_attestation_inclusion_delay
SLOTS_PER_HISTORICAL_ROOT: Final = CHAIN_CONFIG.slots_per_historical_root
VALIDATOR_REGISTRY_LIMIT: Final = CHAIN_CONFIG.validator_registry_limit
MAX_VALIDATORS_PER_COMMITTEE: Final = CHAIN_CONFIG.max_validators_per_committee
MAX_ATTESTATIONS: Final = CHAIN_CONFIG.max_attestations
MAX_DEPOSITS: Final = CHAIN_CONFIG.max_deposits
EFFECTIVE_BALANCE_INCREMENT: Final = CHAIN_CONFIG.effective_balance_increment
MAX_EFFECTIVE_BALANCE: Final = CHAIN_CONFIG.max_effective_balance
