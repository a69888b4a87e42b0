"""
Fixed-length byte strings: roots, public keys and signatures.

An instance is a real `bytes` object whose length always equals the class's
`LENGTH`. These types have no length prefix on the wire.
"""

from __future__ import annotations

from typing import IO, Any, ClassVar, Iterable

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import SSZByteLengthError, SSZTypeError, SSZValueError
from .ssz_base import SSZType


def _to_bytes(value: Any) -> bytes:
    """Bytes-like values, hex strings (optionally `0x`-prefixed) and iterables of ints."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    if isinstance(value, Iterable):
        return bytes(value)
    raise SSZTypeError(f"Cannot convert {type(value).__name__} to bytes")


class BaseBytes(bytes, SSZType):
    """Common behavior of the fixed-length byte types."""

    LENGTH: ClassVar[int]

    def __new__(cls, value: Any = b"") -> Self:
        if not hasattr(cls, "LENGTH"):
            raise SSZTypeError(f"{cls.__name__} must define LENGTH")

        raw = _to_bytes(value)
        if len(raw) != cls.LENGTH:
            raise SSZValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(raw)}")
        return super().__new__(cls, raw)

    @classmethod
    def zero(cls) -> Self:
        return cls(bytes(cls.LENGTH))

    @classmethod
    def is_fixed_size(cls) -> bool:
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        return cls.LENGTH

    def serialize(self, stream: IO[bytes]) -> int:
        return stream.write(self)

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        if scope != cls.LENGTH:
            raise SSZByteLengthError(cls.__name__, expected=cls.LENGTH, actual=scope)
        return cls.decode_bytes(stream.read(scope))

    def encode_bytes(self) -> bytes:
        return bytes(self)

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Raises:
            SSZByteLengthError: Unless `data` holds exactly `LENGTH` bytes.
        """
        if len(data) != cls.LENGTH:
            raise SSZByteLengthError(cls.__name__, expected=cls.LENGTH, actual=len(data))
        return cls(data)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Instances pass through; raw bytes of the right length are wrapped.
        exact_bytes = core_schema.chain_schema(
            [
                core_schema.bytes_schema(min_length=cls.LENGTH, max_length=cls.LENGTH),
                core_schema.no_info_plain_validator_function(cls),
            ]
        )
        return core_schema.union_schema(
            [core_schema.is_instance_schema(cls), exact_bytes],
            serialization=core_schema.plain_serializer_function_ser_schema(lambda b: b.hex()),
        )

    def __hash__(self) -> int:
        return hash((type(self), bytes(self)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"


class Bytes32(BaseBytes):
    """Roots and digests."""

    LENGTH = 32


class Bytes48(BaseBytes):
    """BLS public keys."""

    LENGTH = 48


class Bytes96(BaseBytes):
    """BLS signatures."""

    LENGTH = 96


ZERO_HASH = Bytes32.zero()
"""The all-zero root: genesis parent and the "unresolved" header state root."""
