"""Fixed-width unsigned integers with checked arithmetic."""

from __future__ import annotations

from typing import IO, Any, ClassVar, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import SSZByteLengthError, SSZError, SSZOverflowError, SSZTypeError
from .ssz_base import SSZType


class BaseUint(int, SSZType):
    """
    Base class for fixed-width unsigned integers.

    Arithmetic is only defined between values of the same type, and any result
    that leaves `[0, 2**BITS - 1]` raises instead of wrapping around.
    """

    BITS: ClassVar[int]

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Raises:
            SSZTypeError: If `value` is a bool, float or non-integer type.
            SSZOverflowError: If `value` is outside `[0, 2**BITS - 1]`.
        """
        if isinstance(value, (bool, float)) or not isinstance(value, SupportsInt):
            raise SSZTypeError(f"Expected int for {cls.__name__}, got {type(value).__name__}")

        int_value = int(value)
        if not (0 <= int_value < (2**cls.BITS)):
            raise SSZOverflowError(int_value, cls.__name__, max_value=2**cls.BITS - 1)
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        def validate(value: Any) -> BaseUint:
            if isinstance(value, cls):
                return value
            try:
                return cls(value)
            except SSZError as e:
                raise ValueError(str(e)) from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.int_schema(ge=0, lt=2**cls.BITS),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )

    @classmethod
    def max_value(cls) -> Self:
        """Return the largest representable value."""
        return cls(2**cls.BITS - 1)

    @classmethod
    def is_fixed_size(cls) -> bool:
        """Unsigned integers always occupy `BITS // 8` bytes."""
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        """Return the byte length of the type."""
        return cls.BITS // 8

    def encode_bytes(self) -> bytes:
        """Little-endian encoding in exactly `BITS // 8` bytes."""
        return int(self).to_bytes(self.get_byte_length(), "little")

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """Decode from exactly `BITS // 8` little-endian bytes."""
        expected = cls.get_byte_length()
        if len(data) != expected:
            raise SSZByteLengthError(cls.__name__, expected=expected, actual=len(data))
        return cls(int.from_bytes(data, "little"))

    def serialize(self, stream: IO[bytes]) -> int:
        return stream.write(self.encode_bytes())

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """Read exactly `BITS // 8` bytes from a stream."""
        expected = cls.get_byte_length()
        if scope != expected:
            raise SSZByteLengthError(cls.__name__, expected=expected, actual=scope)
        return cls.decode_bytes(stream.read(scope))

    def _operand(self, other: Any, symbol: str) -> int:
        """`other` as an int, provided it has this value's type."""
        if not isinstance(other, type(self)):
            raise SSZTypeError(
                f"Unsupported operand type(s) for {symbol}: "
                f"'{type(self).__name__}' and '{type(other).__name__}'"
            )
        return int(other)

    # Arithmetic returns the same type, so out-of-range results raise.

    def __add__(self, other: Any) -> Self:
        return type(self)(int(self) + self._operand(other, "+"))

    def __radd__(self, other: Any) -> Self:
        return type(self)(self._operand(other, "+") + int(self))

    def __sub__(self, other: Any) -> Self:
        return type(self)(int(self) - self._operand(other, "-"))

    def __mul__(self, other: Any) -> Self:
        return type(self)(int(self) * self._operand(other, "*"))

    def __floordiv__(self, other: Any) -> Self:
        return type(self)(int(self) // self._operand(other, "//"))

    def __mod__(self, other: Any) -> Self:
        return type(self)(int(self) % self._operand(other, "%"))

    # Comparing against another type raises instead of returning False.

    def __eq__(self, other: object) -> bool:
        return int(self) == self._operand(other, "==")

    def __ne__(self, other: object) -> bool:
        return int(self) != self._operand(other, "!=")

    def __lt__(self, other: Any) -> bool:
        return int(self) < self._operand(other, "<")

    def __le__(self, other: Any) -> bool:
        return int(self) <= self._operand(other, "<=")

    def __gt__(self, other: Any) -> bool:
        return int(self) > self._operand(other, ">")

    def __ge__(self, other: Any) -> bool:
        return int(self) >= self._operand(other, ">=")

    def __hash__(self) -> int:
        return hash((type(self), int(self)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return str(int(self))


class Uint8(BaseUint):
    BITS = 8


class Uint32(BaseUint):
    """Used for the offsets of variable-size fields."""

    BITS = 32


class Uint64(BaseUint):
    BITS = 64
