"""Specifications for chain and consensus parameters."""

from .config import CHAIN_CONFIG, MAINNET_PRESET, MINIMAL_PRESET, ChainConfig

__all__ = [
    "ChainConfig",
    "CHAIN_CONFIG",
    "MAINNET_PRESET",
    "MINIMAL_PRESET",
]
