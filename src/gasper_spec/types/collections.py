"""SSZ vectors and lists: homogeneous sequences of fixed length or bounded capacity."""

from __future__ import annotations

import io
from typing import (
    IO,
    Any,
    ClassVar,
    Generic,
    Sequence,
    Type,
    TypeVar,
    cast,
    overload,
)

from pydantic import Field, field_serializer, field_validator
from typing_extensions import Self

from .byte_arrays import BaseBytes
from .constants import OFFSET_BYTE_LENGTH
from .exceptions import (
    SSZByteLengthError,
    SSZCapacityError,
    SSZDecodeError,
    SSZTypeError,
    SSZValueError,
)
from .ssz_base import SSZModel, SSZType
from .uint import Uint32

T = TypeVar("T", bound=SSZType)
"""
Element type parameter for SSZ collections.

Lets type checkers infer `vec[0]: Bytes32` for a `SSZVector[Bytes32]`.
"""


def _json_items(value: Sequence[Any]) -> list[Any]:
    """Render byte elements as 0x-prefixed hex, everything else unchanged."""
    return ["0x" + item.hex() if isinstance(item, BaseBytes) else item for item in value]


def _coerce_elements(cls: Any, elements: Sequence[Any]) -> tuple[SSZType, ...]:
    """Convert every element to the collection's ELEMENT_TYPE."""
    typed_values = []
    for element in elements:
        if isinstance(element, cls.ELEMENT_TYPE):
            typed_values.append(element)
        else:
            try:
                typed_values.append(cast(Any, cls.ELEMENT_TYPE)(element))
            except Exception as e:
                raise SSZTypeError(
                    f"Expected {cls.ELEMENT_TYPE.__name__}, got {type(element).__name__}"
                ) from e
    return tuple(typed_values)


def _serialize_elements(elements: Sequence[SSZType], stream: IO[bytes], fixed: bool) -> int:
    """Write elements back-to-back, or as an offset table followed by their data."""
    if fixed:
        return sum(element.serialize(stream) for element in elements)

    variable_data_stream = io.BytesIO()
    offset = len(elements) * OFFSET_BYTE_LENGTH
    for element in elements:
        Uint32(offset).serialize(stream)
        offset += element.serialize(variable_data_stream)
    stream.write(variable_data_stream.getvalue())
    return offset


def _read_variable_elements(
    cls: Any, stream: IO[bytes], scope: int, count: int | None
) -> list[SSZType]:
    """
    Read an offset table and the variable-size elements it points to.

    When `count` is None the element count is recovered from the first offset.
    """
    if scope == 0:
        if count:
            raise SSZByteLengthError(cls.__name__, expected=None, actual=0)
        return []
    if scope < OFFSET_BYTE_LENGTH:
        raise SSZByteLengthError(cls.__name__, expected=None, actual=scope)

    first_offset = int(Uint32.deserialize(stream, OFFSET_BYTE_LENGTH))
    # A non-empty encoding holds at least one offset, so the first offset
    # cannot point inside the offset table's first entry.
    if (
        first_offset < OFFSET_BYTE_LENGTH
        or first_offset > scope
        or first_offset % OFFSET_BYTE_LENGTH != 0
    ):
        raise SSZDecodeError(cls.__name__, f"invalid first offset {first_offset}")

    found = first_offset // OFFSET_BYTE_LENGTH
    if count is not None and found != count:
        raise SSZDecodeError(cls.__name__, f"expected {count} offsets, found {found}")
    limit = getattr(cls, "LIMIT", None)
    if limit is not None and found > limit:
        raise SSZCapacityError(cls.__name__, limit=limit, actual=found)

    offsets = [first_offset] + [
        int(Uint32.deserialize(stream, OFFSET_BYTE_LENGTH)) for _ in range(found - 1)
    ]
    offsets.append(scope)

    elements = []
    for start, end in zip(offsets, offsets[1:]):
        if start > end:
            raise SSZDecodeError(cls.__name__, f"invalid offsets start={start} > end={end}")
        elements.append(cls.ELEMENT_TYPE.deserialize(stream, end - start))
    return elements


class SSZVector(SSZModel, Generic[T]):
    """
    Exactly `LENGTH` elements of `ELEMENT_TYPE`.

    Fixed-size elements are packed back to back; variable-size ones sit
    behind an offset table, as in a container.

    Example:
        class HistoricalRoots(SSZVector[Bytes32]):
            ELEMENT_TYPE = Bytes32
            LENGTH = 64
    """

    ELEMENT_TYPE: ClassVar[Type[SSZType]]
    LENGTH: ClassVar[int]

    data: Sequence[T] = Field(default_factory=tuple)

    @field_serializer("data", when_used="json")
    def _serialize_data(self, value: Sequence[T]) -> list[Any]:
        return _json_items(value)

    @field_validator("data", mode="before")
    @classmethod
    def _validate_vector_data(cls, v: Any) -> tuple[SSZType, ...]:
        if not hasattr(cls, "ELEMENT_TYPE") or not hasattr(cls, "LENGTH"):
            raise SSZTypeError(f"{cls.__name__} must define ELEMENT_TYPE and LENGTH")

        if not isinstance(v, (list, tuple)):
            v = tuple(v)

        typed_values = _coerce_elements(cls, v)
        if len(typed_values) != cls.LENGTH:
            raise SSZValueError(
                f"{cls.__name__} requires exactly {cls.LENGTH} elements, got {len(typed_values)}"
            )
        return typed_values

    @classmethod
    def filled(cls, value: SSZType) -> Self:
        """Return a vector with every position set to `value`."""
        return cls(data=[value] * cls.LENGTH)

    @classmethod
    def is_fixed_size(cls) -> bool:
        return cls.ELEMENT_TYPE.is_fixed_size()

    @classmethod
    def get_byte_length(cls) -> int:
        if not cls.is_fixed_size():
            raise SSZTypeError(f"{cls.__name__}: variable-size vector has no fixed byte length")
        return cls.ELEMENT_TYPE.get_byte_length() * cls.LENGTH

    def serialize(self, stream: IO[bytes]) -> int:
        return _serialize_elements(self.data, stream, self.is_fixed_size())

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        if cls.is_fixed_size():
            expected = cls.get_byte_length()
            if scope != expected:
                raise SSZByteLengthError(cls.__name__, expected=expected, actual=scope)
            element_size = cls.ELEMENT_TYPE.get_byte_length()
            elements = [
                cls.ELEMENT_TYPE.deserialize(stream, element_size) for _ in range(cls.LENGTH)
            ]
        else:
            elements = _read_variable_elements(cls, stream, scope, cls.LENGTH)
        return cls(data=elements)

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> Sequence[T]: ...

    def __getitem__(self, index: int | slice) -> T | Sequence[T]:
        return self.data[index]


class SSZList(SSZModel, Generic[T]):
    """
    Up to `LIMIT` elements of `ELEMENT_TYPE`.

    The encoding carries no length; it follows from the byte count (fixed-size
    elements) or the first offset (variable-size ones). The hash tree root
    mixes in the element count.

    Example:
        class Deposits(SSZList[Deposit]):
            ELEMENT_TYPE = Deposit
            LIMIT = 16
    """

    ELEMENT_TYPE: ClassVar[Type[SSZType]]
    LIMIT: ClassVar[int]

    data: Sequence[T] = Field(default_factory=tuple)

    @field_serializer("data", when_used="json")
    def _serialize_data(self, value: Sequence[T]) -> list[Any]:
        return _json_items(value)

    @field_validator("data", mode="before")
    @classmethod
    def _validate_list_data(cls, v: Any) -> tuple[SSZType, ...]:
        if not hasattr(cls, "ELEMENT_TYPE") or not hasattr(cls, "LIMIT"):
            raise SSZTypeError(f"{cls.__name__} must define ELEMENT_TYPE and LIMIT")

        if isinstance(v, (list, tuple)):
            elements = v
        elif hasattr(v, "__iter__") and not isinstance(v, (str, bytes)):
            elements = list(v)
        else:
            raise SSZTypeError(f"Expected iterable, got {type(v).__name__}")

        if len(elements) > cls.LIMIT:
            raise SSZValueError(f"{cls.__name__} exceeds limit of {cls.LIMIT}, got {len(elements)}")

        return _coerce_elements(cls, elements)

    def __add__(self, other: Any) -> Self:
        """Concatenate this list with another sequence."""
        if isinstance(other, SSZList):
            new_data = tuple(self.data) + tuple(other.data)
        elif isinstance(other, (list, tuple)):
            new_data = tuple(self.data) + tuple(other)
        else:
            return NotImplemented
        return type(self)(data=new_data)

    @classmethod
    def is_fixed_size(cls) -> bool:
        return False

    @classmethod
    def get_byte_length(cls) -> int:
        raise SSZTypeError(f"{cls.__name__}: variable-size list has no fixed byte length")

    def serialize(self, stream: IO[bytes]) -> int:
        return _serialize_elements(self.data, stream, self.ELEMENT_TYPE.is_fixed_size())

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        if not cls.ELEMENT_TYPE.is_fixed_size():
            return cls(data=_read_variable_elements(cls, stream, scope, None))

        element_size = cls.ELEMENT_TYPE.get_byte_length()
        if scope % element_size != 0:
            raise SSZByteLengthError(cls.__name__, expected=None, actual=scope)

        num_elements = scope // element_size
        if num_elements > cls.LIMIT:
            raise SSZCapacityError(cls.__name__, limit=cls.LIMIT, actual=num_elements)

        return cls(
            data=[cls.ELEMENT_TYPE.deserialize(stream, element_size) for _ in range(num_elements)]
        )

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> Sequence[T]: ...

    def __getitem__(self, index: int | slice) -> T | Sequence[T]:
        return self.data[index]
