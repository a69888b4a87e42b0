"""
Explicit success/failure wrapper around SSZ encoding.

`SSZType.decode_bytes` raises on malformed input. Callers that receive bytes
from outside (a peer, a file, a fuzzer) use `decode` instead and branch on the
returned `DecodeResult` rather than catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, Type, TypeVar, Union

from .exceptions import (
    SSZByteLengthError,
    SSZCapacityError,
    SSZDelimiterError,
    SSZError,
)
from .ssz_base import SSZType

V = TypeVar("V", bound=SSZType)


class DecodeErrorKind(Enum):
    """Why a byte string could not be decoded."""

    WRONG_LENGTH = auto()
    """The input length is not one the type can be decoded from."""

    EXCEEDS_CAPACITY = auto()
    """The decoded element count exceeds the type's declared capacity."""

    MISSING_DELIMITER = auto()
    """A bitlist's trailing delimiter bit is absent."""

    INVALID_VALUE = auto()
    """The bytes have the right shape but encode a value the type forbids."""


@dataclass(frozen=True, slots=True)
class Decoded(Generic[V]):
    """A successfully decoded value."""

    value: V


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """A rejected input, with the failure category and a readable detail."""

    kind: DecodeErrorKind
    detail: str


DecodeResult = Union[Decoded[V], DecodeFailure]


def _failure_kind(error: SSZError) -> DecodeErrorKind:
    # Capacity and delimiter errors are more specific than a length error.
    if isinstance(error, SSZCapacityError):
        return DecodeErrorKind.EXCEEDS_CAPACITY
    if isinstance(error, SSZDelimiterError):
        return DecodeErrorKind.MISSING_DELIMITER
    if isinstance(error, SSZByteLengthError):
        return DecodeErrorKind.WRONG_LENGTH
    return DecodeErrorKind.INVALID_VALUE


def encode(value: SSZType) -> bytes:
    """Return the SSZ encoding of `value`."""
    return value.encode_bytes()


def decode(data: bytes, ssz_type: Type[V]) -> DecodeResult[V]:
    """
    Decode `data` as a value of `ssz_type`.

    Never raises for malformed input. For every value `v`,
    `decode(encode(v), type(v)) == Decoded(v)`.
    """
    try:
        return Decoded(ssz_type.decode_bytes(bytes(data)))
    except SSZError as e:
        return DecodeFailure(kind=_failure_kind(e), detail=str(e))
    except ValueError as e:
        # Pydantic validation of a decoded composite.
        return DecodeFailure(kind=DecodeErrorKind.INVALID_VALUE, detail=str(e))
