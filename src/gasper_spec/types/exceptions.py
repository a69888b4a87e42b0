"""Exception hierarchy for the SSZ type system."""

from __future__ import annotations


class SSZError(Exception):
    """
    Base exception for all SSZ-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class SSZTypeError(SSZError):
    """Raised when a value has the wrong Python type or a type is incompletely defined."""


class SSZValueError(SSZError):
    """
    Base class for value-related errors.

    Raised when a value is invalid for an SSZ operation, even if the type is correct.
    """


class SSZOverflowError(SSZValueError):
    """
    Raised when a numeric value is outside the valid range.

    Attributes:
        value: The value that caused the overflow.
        type_name: The SSZ type that couldn't hold the value.
        max_value: The maximum allowed value (inclusive).
    """

    def __init__(self, value: int, type_name: str, *, max_value: int) -> None:
        self.value = value
        self.type_name = type_name
        self.max_value = max_value

        super().__init__(f"{value} is out of range for {type_name} (valid range: [0, {max_value}])")


class SSZSerializationError(SSZError):
    """Base class for serialization-related errors."""


class SSZDecodeError(SSZSerializationError):
    """
    Raised when decoding SSZ bytes to a value fails.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
    """

    def __init__(self, type_name: str, detail: str) -> None:
        self.type_name = type_name
        self.detail = detail
        super().__init__(f"Failed to decode {type_name}: {detail}")


class SSZByteLengthError(SSZDecodeError):
    """
    Raised when the input has a byte length the type cannot be decoded from.

    Attributes:
        expected: The required byte length, or None when only emptiness is rejected.
        actual: The byte length received.
    """

    def __init__(self, type_name: str, *, expected: int | None, actual: int) -> None:
        self.expected = expected
        self.actual = actual

        if expected is None:
            detail = f"invalid byte length {actual}"
        else:
            detail = f"expected {expected} bytes, got {actual}"
        super().__init__(type_name, detail)


class SSZCapacityError(SSZDecodeError):
    """
    Raised when decoded data holds more elements than the type's declared capacity.

    Attributes:
        limit: The declared capacity.
        actual: The decoded element count.
    """

    def __init__(self, type_name: str, *, limit: int, actual: int) -> None:
        self.limit = limit
        self.actual = actual
        super().__init__(type_name, f"decoded length {actual} exceeds limit {limit}")


class SSZDelimiterError(SSZDecodeError):
    """Raised when a bitlist's trailing delimiter bit is missing or misplaced."""

    def __init__(self, type_name: str) -> None:
        super().__init__(type_name, "missing delimiter bit in final byte")
