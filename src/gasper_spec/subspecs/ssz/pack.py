"""
Packing of serialized data into 32-byte chunks.

These helpers do not serialize values themselves; they only arrange bytes
that are already serialized into the chunk form `merkleize` consumes.
"""

from __future__ import annotations

from typing import List, Sequence

from gasper_spec.types.byte_arrays import Bytes32

from .constants import BITS_PER_BYTE, BYTES_PER_CHUNK


def pack_bytes(data: bytes) -> List[Bytes32]:
    """Right-pad `data` with zeros to a chunk boundary and split it into chunks."""
    if len(data) % BYTES_PER_CHUNK:
        data = data + b"\x00" * (BYTES_PER_CHUNK - len(data) % BYTES_PER_CHUNK)
    return [Bytes32(data[i : i + BYTES_PER_CHUNK]) for i in range(0, len(data), BYTES_PER_CHUNK)]


def pack_bits(bits: Sequence[bool]) -> List[Bytes32]:
    """
    Pack a bit sequence little-endian into bytes, then into chunks.

    No delimiter bit is added. Bitlists mix their length in at the Merkle level.
    """
    if not bits:
        return []
    byte_array = bytearray((len(bits) + BITS_PER_BYTE - 1) // BITS_PER_BYTE)
    for i, bit in enumerate(bits):
        if bit:
            byte_array[i // BITS_PER_BYTE] |= 1 << (i % BITS_PER_BYTE)
    return pack_bytes(bytes(byte_array))
