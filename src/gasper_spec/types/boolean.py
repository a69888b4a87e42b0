"""The SSZ boolean: one byte, `0x00` or `0x01`."""

from __future__ import annotations

from typing import IO, Any, NoReturn

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import CoreSchema, core_schema
from typing_extensions import Self

from .exceptions import SSZByteLengthError, SSZDecodeError, SSZTypeError, SSZValueError
from .ssz_base import SSZType


class Boolean(int, SSZType):
    """
    A flag backed by the integers 0 and 1.

    `+` and `-` raise, so a flag never ends up used as a counter. `&` and `|`
    work between two Booleans only.
    """

    __slots__ = ()

    def __new__(cls, value: bool | int) -> Self:
        """
        Raises:
            SSZTypeError: For anything that is not an int (bools are ints).
            SSZValueError: For integers other than 0 and 1.
        """
        if not isinstance(value, int):
            raise SSZTypeError(f"Expected bool or int, got {type(value).__name__}")
        if int(value) not in (0, 1):
            raise SSZValueError(f"Boolean value must be 0 or 1, not {int(value)}")
        return super().__new__(cls, int(value))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        # Model fields take a Boolean or a real `bool`; plain 0/1 ints are refused.
        from_bool = core_schema.chain_schema(
            [
                core_schema.bool_schema(strict=True),
                core_schema.no_info_plain_validator_function(cls),
            ]
        )
        return core_schema.union_schema(
            [core_schema.is_instance_schema(cls), from_bool],
            serialization=core_schema.plain_serializer_function_ser_schema(bool),
        )

    @classmethod
    def is_fixed_size(cls) -> bool:
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        return 1

    def encode_bytes(self) -> bytes:
        return bytes([int(self)])

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Raises:
            SSZByteLengthError: Unless `data` is exactly one byte.
            SSZDecodeError: For a byte other than 0x00 and 0x01.
        """
        if len(data) != 1:
            raise SSZByteLengthError(cls.__name__, expected=1, actual=len(data))
        if data[0] > 1:
            raise SSZDecodeError(cls.__name__, f"byte must be 0x00 or 0x01, got {data[0]:#04x}")
        return cls(data[0])

    def serialize(self, stream: IO[bytes]) -> int:
        return stream.write(self.encode_bytes())

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        if scope != 1:
            raise SSZByteLengthError(cls.__name__, expected=1, actual=scope)
        return cls.decode_bytes(stream.read(1))

    def _no_arithmetic(self, other: Any) -> NoReturn:
        raise SSZTypeError("Arithmetic operations are not supported for Boolean.")

    __add__ = __radd__ = __sub__ = __rsub__ = _no_arithmetic

    def _check_operand(self, other: Any, symbol: str) -> None:
        if not isinstance(other, type(self)):
            raise SSZTypeError(
                f"Unsupported operand type(s) for {symbol}: "
                f"'{type(self).__name__}' and '{type(other).__name__}'"
            )

    def __and__(self, other: Any) -> Self:
        self._check_operand(other, "&")
        return type(self)(int(self) & int(other))

    def __or__(self, other: Any) -> Self:
        self._check_operand(other, "|")
        return type(self)(int(self) | int(other))

    def __eq__(self, other: object) -> bool:
        # Equal to bools and ints of the same value, unequal to everything else.
        return isinstance(other, int) and int(self) == int(other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((type(self), int(self)))

    def __repr__(self) -> str:
        return f"Boolean({bool(self)})"

    def __str__(self) -> str:
        return str(bool(self))
