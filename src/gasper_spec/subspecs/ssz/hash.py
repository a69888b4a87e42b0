"""
SSZ merkleization entry point (`hash_tree_root`).

`hash_tree_root(value) -> Bytes32` is a singledispatch function with one
specialization per SSZ type family.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Type

from gasper_spec.types.bitfields import BaseBitlist, BaseBitvector
from gasper_spec.types.boolean import Boolean
from gasper_spec.types.byte_arrays import BaseBytes, Bytes32
from gasper_spec.types.collections import SSZList, SSZVector
from gasper_spec.types.container import Container
from gasper_spec.types.ssz_base import SSZType
from gasper_spec.types.uint import BaseUint

from .constants import BITS_PER_CHUNK, BYTES_PER_CHUNK
from .merkleization import merkleize, mix_in_length
from .pack import pack_bits, pack_bytes


@singledispatch
def hash_tree_root(value: object) -> Bytes32:
    """
    Compute `hash_tree_root(value)` for SSZ values.

    Raises:
        TypeError: If `value` has no registered specialization.
    """
    raise TypeError(f"hash_tree_root: unsupported value type {type(value).__name__}")


def _is_basic(element_type: Type[SSZType]) -> bool:
    return issubclass(element_type, (BaseUint, Boolean))


def _basic_chunk_limit(element_type: Type[SSZType], count: int) -> int:
    size = element_type.get_byte_length()
    return (count * size + BYTES_PER_CHUNK - 1) // BYTES_PER_CHUNK


@hash_tree_root.register
def _htr_uint(value: BaseUint) -> Bytes32:
    return merkleize(pack_bytes(value.encode_bytes()))


@hash_tree_root.register
def _htr_boolean(value: Boolean) -> Bytes32:
    return merkleize(pack_bytes(value.encode_bytes()))


@hash_tree_root.register
def _htr_bytes(value: BaseBytes) -> Bytes32:
    """A 32-byte value is its own root; longer vectors span several chunks."""
    return merkleize(pack_bytes(value.encode_bytes()))


@hash_tree_root.register
def _htr_bitvector(value: BaseBitvector) -> Bytes32:
    limit = (type(value).LENGTH + BITS_PER_CHUNK - 1) // BITS_PER_CHUNK
    return merkleize(pack_bits([bool(b) for b in value]), limit=limit)


@hash_tree_root.register
def _htr_bitlist(value: BaseBitlist) -> Bytes32:
    limit = (type(value).LIMIT + BITS_PER_CHUNK - 1) // BITS_PER_CHUNK
    root = merkleize(pack_bits([bool(b) for b in value]), limit=limit)
    return mix_in_length(root, len(value))


@hash_tree_root.register
def _htr_vector(value: SSZVector) -> Bytes32:
    element_type = type(value).ELEMENT_TYPE
    length = type(value).LENGTH

    if _is_basic(element_type):
        serialized = b"".join(e.encode_bytes() for e in value)
        return merkleize(pack_bytes(serialized), limit=_basic_chunk_limit(element_type, length))

    return merkleize([hash_tree_root(e) for e in value], limit=length)


@hash_tree_root.register
def _htr_list(value: SSZList) -> Bytes32:
    element_type = type(value).ELEMENT_TYPE
    limit = type(value).LIMIT

    if _is_basic(element_type):
        serialized = b"".join(e.encode_bytes() for e in value)
        root = merkleize(pack_bytes(serialized), limit=_basic_chunk_limit(element_type, limit))
    else:
        root = merkleize([hash_tree_root(e) for e in value], limit=limit)
    return mix_in_length(root, len(value))


@hash_tree_root.register
def _htr_container(value: Container) -> Bytes32:
    # Declared field order is the leaf order.
    return merkleize([hash_tree_root(getattr(value, name)) for name in type(value).model_fields])
