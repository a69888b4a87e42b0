"""Tests for the explicit encode/decode wrapper."""

from typing import Any, Type

import pytest
from hypothesis import given
from hypothesis import strategies as st

from gasper_spec.types import (
    BaseBitlist,
    Boolean,
    Bytes32,
    Container,
    Decoded,
    DecodeErrorKind,
    DecodeFailure,
    SSZList,
    SSZType,
    Uint8,
    Uint64,
    decode,
    encode,
)


class Bits(BaseBitlist):
    LIMIT = 16


class Uint64List(SSZList[Uint64]):
    ELEMENT_TYPE = Uint64
    LIMIT = 8


class Record(Container):
    number: Uint64
    flag: Boolean
    values: Uint64List
    bits: Bits


records = st.builds(
    lambda number, flag, values, bits: Record(
        number=Uint64(number),
        flag=Boolean(flag),
        values=Uint64List(data=[Uint64(v) for v in values]),
        bits=Bits(data=[Boolean(b) for b in bits]),
    ),
    st.integers(min_value=0, max_value=2**64 - 1),
    st.booleans(),
    st.lists(st.integers(min_value=0, max_value=2**64 - 1), max_size=8),
    st.lists(st.booleans(), max_size=16),
)


@given(records)
def test_record_round_trip(value: Record) -> None:
    """Decoding an encoding gives back the original value."""
    assert decode(encode(value), Record) == Decoded(value)


@given(records, records)
def test_record_encoding_is_injective(a: Record, b: Record) -> None:
    """Distinct values never share an encoding."""
    if a != b:
        assert encode(a) != encode(b)


@given(st.lists(st.booleans(), max_size=16))
def test_bitlist_round_trip(bits: list[bool]) -> None:
    value = Bits(data=bits)
    assert decode(encode(value), Bits) == Decoded(value)


@given(st.binary(max_size=64))
def test_decode_never_raises(data: bytes) -> None:
    """Arbitrary bytes produce a value or a failure, never an exception."""
    result = decode(data, Record)
    assert isinstance(result, (Decoded, DecodeFailure))


@pytest.mark.parametrize(
    "data, ssz_type, kind",
    [
        (b"", Boolean, DecodeErrorKind.WRONG_LENGTH),
        (b"\x00\x01", Boolean, DecodeErrorKind.WRONG_LENGTH),
        (b"\x00\x00", Uint8, DecodeErrorKind.WRONG_LENGTH),
        (b"\x02", Boolean, DecodeErrorKind.INVALID_VALUE),
        (b"\x00" * 31, Bytes32, DecodeErrorKind.WRONG_LENGTH),
        (b"", Bits, DecodeErrorKind.WRONG_LENGTH),
        (b"\x00", Bits, DecodeErrorKind.MISSING_DELIMITER),
        (b"\xff\xff\x04", Bits, DecodeErrorKind.EXCEEDS_CAPACITY),
        (b"\x00" * 72, Uint64List, DecodeErrorKind.EXCEEDS_CAPACITY),
        (b"\x00" * 7, Uint64List, DecodeErrorKind.WRONG_LENGTH),
    ],
)
def test_failure_kinds(data: bytes, ssz_type: Type[SSZType], kind: DecodeErrorKind) -> None:
    result: Any = decode(data, ssz_type)
    assert isinstance(result, DecodeFailure)
    assert result.kind is kind
    assert result.detail


def test_single_byte_types() -> None:
    assert decode(b"\x01", Boolean) == Decoded(Boolean(True))
    assert decode(b"\x07", Uint8) == Decoded(Uint8(7))
