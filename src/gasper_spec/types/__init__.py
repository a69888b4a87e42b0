"""Reusable SSZ value types for the Gasper specification."""

from .base import CamelModel, StrictBaseModel
from .bitfields import BaseBitlist, BaseBitvector
from .boolean import Boolean
from .byte_arrays import ZERO_HASH, BaseBytes, Bytes32, Bytes48, Bytes96
from .codec import Decoded, DecodeErrorKind, DecodeFailure, DecodeResult, decode, encode
from .collections import SSZList, SSZVector
from .container import Container
from .exceptions import (
    SSZByteLengthError,
    SSZCapacityError,
    SSZDecodeError,
    SSZDelimiterError,
    SSZError,
    SSZOverflowError,
    SSZSerializationError,
    SSZTypeError,
    SSZValueError,
)
from .ssz_base import SSZModel, SSZType
from .uint import BaseUint, Uint8, Uint32, Uint64

__all__ = [
    # Core types
    "BaseUint",
    "Uint8",
    "Uint32",
    "Uint64",
    "Boolean",
    "BaseBytes",
    "Bytes32",
    "Bytes48",
    "Bytes96",
    "ZERO_HASH",
    "BaseBitlist",
    "BaseBitvector",
    "CamelModel",
    "StrictBaseModel",
    "SSZList",
    "SSZVector",
    "SSZModel",
    "SSZType",
    "Container",
    # Codec
    "encode",
    "decode",
    "Decoded",
    "DecodeFailure",
    "DecodeErrorKind",
    "DecodeResult",
    # Exceptions
    "SSZError",
    "SSZTypeError",
    "SSZValueError",
    "SSZOverflowError",
    "SSZSerializationError",
    "SSZDecodeError",
    "SSZByteLengthError",
    "SSZCapacityError",
    "SSZDelimiterError",
]
