"""The interface shared by every SSZ value type."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import IO, Any

from typing_extensions import Iterator, Self

from .base import StrictBaseModel


class SSZType(ABC):
    """
    A value with an SSZ encoding.

    Subclasses stream their encoding through `serialize` and `deserialize`.
    The byte-string helpers are built on top of those two.
    """

    @classmethod
    @abstractmethod
    def is_fixed_size(cls) -> bool:
        """Whether every value of the type encodes to the same number of bytes."""

    @classmethod
    @abstractmethod
    def get_byte_length(cls) -> int:
        """
        Encoded size of a fixed-size type.

        Raises:
            SSZTypeError: If the type is variable-size.
        """

    @abstractmethod
    def serialize(self, stream: IO[bytes]) -> int:
        """Write the encoding to `stream` and return the number of bytes written."""

    @classmethod
    @abstractmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """Read a value that occupies exactly the next `scope` bytes of `stream`."""

    def encode_bytes(self) -> bytes:
        with io.BytesIO() as stream:
            self.serialize(stream)
            return stream.getvalue()

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        with io.BytesIO(data) as stream:
            return cls.deserialize(stream, len(data))


class SSZModel(StrictBaseModel, SSZType):
    """
    Pydantic-backed sequence type holding its elements in a `data` field.

    The model behaves like the sequence it wraps: `len`, iteration and
    indexing all go to `data`.
    """

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[Any]:  # type: ignore[override]
        return iter(self.data)

    def __getitem__(self, key: Any) -> Any:
        return self.data[key]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(data={list(self.data)!r})"
