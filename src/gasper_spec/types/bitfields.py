"""
Bitvectors and bitlists.

Bit `i` is stored in byte `i // 8` at bit position `i % 8`, least significant
first. A bitvector encodes to exactly `ceil(LENGTH / 8)` bytes.

A bitlist has no length prefix. Instead a single 1 bit, the delimiter, is
written right after the last data bit, possibly in a byte of its own. The
decoder finds the length from the highest set bit of the final byte, so that
byte can never be zero.

    class JustificationBits(BaseBitvector):
        LENGTH = 4

    class AggregationBits(BaseBitlist):
        LIMIT = 2048
"""

from __future__ import annotations

from typing import IO, Any, ClassVar, Sequence, overload

from pydantic import Field, field_validator
from typing_extensions import Self

from .boolean import Boolean
from .exceptions import (
    SSZByteLengthError,
    SSZCapacityError,
    SSZDecodeError,
    SSZDelimiterError,
    SSZTypeError,
    SSZValueError,
)
from .ssz_base import SSZModel


def _pack(bits: Sequence[Boolean], size: int) -> bytearray:
    packed = bytearray(size)
    for i, bit in enumerate(bits):
        if bit:
            packed[i // 8] |= 1 << (i % 8)
    return packed


def _unpack(data: bytes, count: int) -> tuple[Boolean, ...]:
    return tuple(Boolean((data[i // 8] >> (i % 8)) & 1) for i in range(count))


def _as_sequence(cls: type, value: Any) -> Sequence[Any]:
    if isinstance(value, (list, tuple)):
        return value
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        raise SSZTypeError(f"{cls.__name__} data must be iterable, got {type(value).__name__}")
    return list(value)


class _Bits(SSZModel):
    """Bits held as a tuple of Booleans in `data`."""

    data: Sequence[Boolean] = Field(default_factory=tuple)

    @overload
    def __getitem__(self, key: int) -> Boolean: ...

    @overload
    def __getitem__(self, key: slice) -> list[Boolean]: ...

    def __getitem__(self, key: int | slice) -> Boolean | list[Boolean]:
        if isinstance(key, slice):
            return list(self.data[key])
        return self.data[key]

    def serialize(self, stream: IO[bytes]) -> int:
        return stream.write(self.encode_bytes())


class BaseBitvector(_Bits):
    """Exactly `LENGTH` bits."""

    LENGTH: ClassVar[int]

    @field_validator("data", mode="before")
    @classmethod
    def _check_length(cls, value: Any) -> tuple[Boolean, ...]:
        if not hasattr(cls, "LENGTH"):
            raise SSZTypeError(f"{cls.__name__} must define LENGTH")
        bits = _as_sequence(cls, value)
        if len(bits) != cls.LENGTH:
            raise SSZValueError(f"{cls.__name__} requires exactly {cls.LENGTH} bits, got {len(bits)}")
        return tuple(Boolean(bit) for bit in bits)

    @classmethod
    def zero(cls) -> Self:
        return cls(data=[Boolean(False)] * cls.LENGTH)

    @classmethod
    def is_fixed_size(cls) -> bool:
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        return (cls.LENGTH + 7) // 8

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        if scope != cls.get_byte_length():
            raise SSZByteLengthError(cls.__name__, expected=cls.get_byte_length(), actual=scope)
        return cls.decode_bytes(stream.read(scope))

    def encode_bytes(self) -> bytes:
        return bytes(_pack(self.data, self.get_byte_length()))

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Raises:
            SSZByteLengthError: Unless `data` is exactly `ceil(LENGTH / 8)` bytes.
            SSZDecodeError: If a padding bit past `LENGTH` is set.
        """
        if len(data) != cls.get_byte_length():
            raise SSZByteLengthError(cls.__name__, expected=cls.get_byte_length(), actual=len(data))
        if cls.LENGTH % 8 and data[-1] >> (cls.LENGTH % 8):
            raise SSZDecodeError(cls.__name__, "padding bits must be zero")
        return cls(data=_unpack(data, cls.LENGTH))


class BaseBitlist(_Bits):
    """Between 0 and `LIMIT` bits."""

    LIMIT: ClassVar[int]

    @field_validator("data", mode="before")
    @classmethod
    def _check_limit(cls, value: Any) -> tuple[Boolean, ...]:
        if not hasattr(cls, "LIMIT"):
            raise SSZTypeError(f"{cls.__name__} must define LIMIT")
        bits = _as_sequence(cls, value)
        if len(bits) > cls.LIMIT:
            raise SSZValueError(f"{cls.__name__} cannot exceed {cls.LIMIT} bits, got {len(bits)}")
        return tuple(Boolean(bit) for bit in bits)

    @classmethod
    def is_fixed_size(cls) -> bool:
        return False

    @classmethod
    def get_byte_length(cls) -> int:
        raise SSZTypeError(f"{cls.__name__} is variable-size")

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        data = stream.read(scope)
        if len(data) != scope:
            raise SSZByteLengthError(cls.__name__, expected=scope, actual=len(data))
        return cls.decode_bytes(data)

    def encode_bytes(self) -> bytes:
        count = len(self.data)
        packed = _pack(self.data, count // 8 + 1)
        packed[count // 8] |= 1 << (count % 8)
        return bytes(packed)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Raises:
            SSZByteLengthError: If `data` is empty.
            SSZDelimiterError: If the final byte is zero.
            SSZCapacityError: If the decoded length exceeds `LIMIT`.
        """
        if not data:
            raise SSZByteLengthError(cls.__name__, expected=None, actual=0)
        if data[-1] == 0:
            raise SSZDelimiterError(cls.__name__)

        count = (len(data) - 1) * 8 + data[-1].bit_length() - 1
        if count > cls.LIMIT:
            raise SSZCapacityError(cls.__name__, limit=cls.LIMIT, actual=count)
        return cls(data=_unpack(data, count))
