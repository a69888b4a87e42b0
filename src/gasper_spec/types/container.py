"""
SSZ Container type: ordered heterogeneous collections with named fields.

Blocks, headers, checkpoints and the chain state are all containers.
"""

from __future__ import annotations

from typing import IO, Type, cast

from typing_extensions import Self

from .base import StrictBaseModel
from .constants import OFFSET_BYTE_LENGTH
from .exceptions import SSZByteLengthError, SSZDecodeError, SSZTypeError
from .ssz_base import SSZType
from .uint import Uint32


class Container(StrictBaseModel, SSZType):
    """
    A strict, ordered collection of named SSZ fields.

    Fields are serialized in definition order. Fixed-size fields are written
    inline; variable-size fields leave a 4-byte offset in the fixed part and
    append their data after it:

        [fixed_1][offset_1][fixed_2]...[variable_data_1]...

    Example:
        class Checkpoint(Container):
            epoch: Epoch
            root: Bytes32
    """

    @classmethod
    def _field_types(cls) -> list[tuple[str, Type[SSZType]]]:
        return [
            (name, cast(Type[SSZType], field.annotation))
            for name, field in cls.model_fields.items()
        ]

    @classmethod
    def is_fixed_size(cls) -> bool:
        """A container is fixed-size only when every field is fixed-size."""
        return all(field_type.is_fixed_size() for _, field_type in cls._field_types())

    @classmethod
    def get_byte_length(cls) -> int:
        """
        Sum of the field byte lengths of a fixed-size container.

        Raises:
            SSZTypeError: If called on a variable-size container.
        """
        if not cls.is_fixed_size():
            raise SSZTypeError(f"{cls.__name__} is variable-size")
        return sum(field_type.get_byte_length() for _, field_type in cls._field_types())

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the fixed part (with offsets) followed by the variable part."""
        fixed_parts: list[bytes | None] = []
        variable_data: list[bytes] = []

        for name, field_type in self._field_types():
            encoded = getattr(self, name).encode_bytes()
            if field_type.is_fixed_size():
                fixed_parts.append(encoded)
            else:
                # Placeholder: replaced by the offset once the fixed size is known.
                fixed_parts.append(None)
                variable_data.append(encoded)

        offset = sum(OFFSET_BYTE_LENGTH if part is None else len(part) for part in fixed_parts)

        var_index = 0
        for part in fixed_parts:
            if part is None:
                Uint32(offset).serialize(stream)
                offset += len(variable_data[var_index])
                var_index += 1
            else:
                stream.write(part)

        for data in variable_data:
            stream.write(data)

        return offset

    @classmethod
    def deserialize(cls, stream: IO[bytes], scope: int) -> Self:
        """
        Read a container from `scope` bytes of `stream`.

        Raises:
            SSZByteLengthError: If the input ends inside the fixed part.
            SSZDecodeError: If the variable-size offsets are inconsistent.
        """
        fields = {}
        var_fields: list[tuple[str, Type[SSZType], int]] = []
        bytes_read = 0

        for name, field_type in cls._field_types():
            size = field_type.get_byte_length() if field_type.is_fixed_size() else OFFSET_BYTE_LENGTH
            data = stream.read(size)
            if len(data) != size or bytes_read + size > scope:
                raise SSZByteLengthError(cls.__name__, expected=None, actual=scope)
            bytes_read += size

            if field_type.is_fixed_size():
                fields[name] = field_type.decode_bytes(data)
            else:
                var_fields.append((name, field_type, int(Uint32.decode_bytes(data))))

        if not var_fields:
            if bytes_read != scope:
                raise SSZByteLengthError(cls.__name__, expected=bytes_read, actual=scope)
            return cls(**fields)

        var_section = stream.read(scope - bytes_read)
        if len(var_section) != scope - bytes_read:
            raise SSZByteLengthError(cls.__name__, expected=scope, actual=bytes_read + len(var_section))
        if var_fields[0][2] != bytes_read:
            raise SSZDecodeError(cls.__name__, f"first offset must be {bytes_read}")

        ends = [offset for _, _, offset in var_fields[1:]] + [scope]
        for (name, field_type, start), end in zip(var_fields, ends):
            if start > end or end > scope:
                raise SSZDecodeError(cls.__name__, f"invalid offsets for {name}")
            fields[name] = field_type.decode_bytes(var_section[start - bytes_read : end - bytes_read])

        return cls(**fields)
