"""Constants defined in the SSZ merkleization rules."""

from gasper_spec.types.byte_arrays import Bytes32

BYTES_PER_CHUNK: int = 32
"""Number of bytes per Merkle chunk."""

BITS_PER_BYTE: int = 8
"""Number of bits per byte."""

BITS_PER_CHUNK: int = BYTES_PER_CHUNK * BITS_PER_BYTE
"""Number of bitfield bits packed into one chunk."""

ZERO_HASH: Bytes32 = Bytes32.zero()
"""The all-zero chunk used as Merkle padding."""
