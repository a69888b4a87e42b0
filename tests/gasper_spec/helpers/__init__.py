"""Test helpers for gasper_spec unit tests."""

from .builders import (
    BuiltChain,
    build_chain,
    make_attestation,
    make_bytes32,
    make_deposit,
    make_genesis_block,
    make_genesis_state,
    make_store,
    make_validators,
)

__all__ = [
    "BuiltChain",
    "build_chain",
    "make_attestation",
    "make_bytes32",
    "make_deposit",
    "make_genesis_block",
    "make_genesis_state",
    "make_store",
    "make_validators",
]
