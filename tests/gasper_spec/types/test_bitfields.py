"""Tests for the Bitvector and Bitlist types."""

from typing import Any

import pytest

from gasper_spec.types.bitfields import BaseBitlist, BaseBitvector
from gasper_spec.types.boolean import Boolean
from gasper_spec.types.exceptions import (
    SSZByteLengthError,
    SSZCapacityError,
    SSZDecodeError,
    SSZDelimiterError,
    SSZTypeError,
    SSZValueError,
)


class Bitvector4(BaseBitvector):
    LENGTH = 4


class Bitvector10(BaseBitvector):
    LENGTH = 10


class Bitlist8(BaseBitlist):
    LIMIT = 8


class Bitlist16(BaseBitlist):
    LIMIT = 16


class TestBitvector:
    def test_zero(self) -> None:
        assert list(Bitvector4.zero()) == [Boolean(False)] * 4

    def test_requires_exact_length(self) -> None:
        with pytest.raises(SSZValueError, match="requires exactly 4 bits"):
            Bitvector4(data=[True, False, True])

    def test_undefined_length_is_rejected(self) -> None:
        class NoLength(BaseBitvector):
            pass

        with pytest.raises(SSZTypeError, match="must define LENGTH"):
            NoLength(data=[])

    @pytest.mark.parametrize(
        "bits, encoded",
        [
            ([1, 0, 0, 0], b"\x01"),
            ([1, 1, 0, 1], b"\x0b"),
            ([0, 0, 0, 0], b"\x00"),
        ],
    )
    def test_encode_has_no_delimiter(self, bits: list[int], encoded: bytes) -> None:
        vector = Bitvector4(data=bits)
        assert vector.encode_bytes() == encoded
        assert Bitvector4.decode_bytes(encoded) == vector

    def test_multi_byte_encoding(self) -> None:
        vector = Bitvector10(data=[1] + [0] * 8 + [1])
        assert vector.encode_bytes() == b"\x01\x02"
        assert Bitvector10.get_byte_length() == 2

    def test_decode_wrong_length(self) -> None:
        with pytest.raises(SSZByteLengthError):
            Bitvector4.decode_bytes(b"\x00\x00")

    def test_decode_rejects_padding_bits(self) -> None:
        with pytest.raises(SSZDecodeError, match="padding bits must be zero"):
            Bitvector4.decode_bytes(b"\x10")


class TestBitlist:
    def test_exceeding_limit_is_rejected(self) -> None:
        with pytest.raises(SSZValueError, match="cannot exceed 8 bits"):
            Bitlist8(data=[True] * 9)

    @pytest.mark.parametrize("invalid", [1, "0101", b"\x01"])
    def test_non_iterable_data_is_rejected(self, invalid: Any) -> None:
        with pytest.raises(SSZTypeError):
            Bitlist8(data=invalid)

    @pytest.mark.parametrize(
        "bits, encoded",
        [
            ([], b"\x01"),
            ([1], b"\x03"),
            ([0, 1, 0], b"\x0a"),
            ([1] * 8, b"\xff\x01"),
            ([0] * 8, b"\x00\x01"),
        ],
    )
    def test_encode_appends_delimiter(self, bits: list[int], encoded: bytes) -> None:
        """Tests that the delimiter bit follows the last data bit."""
        bitlist = Bitlist8(data=bits)
        assert bitlist.encode_bytes() == encoded
        assert Bitlist8.decode_bytes(encoded) == bitlist

    def test_decode_empty_input(self) -> None:
        with pytest.raises(SSZByteLengthError):
            Bitlist8.decode_bytes(b"")

    @pytest.mark.parametrize("data", [b"\x00", b"\x01\x00", b"\xff\x00"])
    def test_decode_zero_final_byte(self, data: bytes) -> None:
        """Tests that a final byte without a delimiter bit is rejected."""
        with pytest.raises(SSZDelimiterError):
            Bitlist8.decode_bytes(data)

    def test_decode_over_capacity(self) -> None:
        # Nine data bits, delimiter in bit 1 of the second byte.
        with pytest.raises(SSZCapacityError) as exc_info:
            Bitlist8.decode_bytes(b"\xff\x03")
        assert exc_info.value.limit == 8
        assert exc_info.value.actual == 9

    def test_decode_within_larger_limit(self) -> None:
        bitlist = Bitlist16.decode_bytes(b"\xff\x03")
        assert len(bitlist) == 9
        assert all(bitlist)

    def test_indexing_and_slicing(self) -> None:
        bitlist = Bitlist8(data=[1, 0, 1])
        assert bitlist[0] == Boolean(True)
        assert bitlist[1:] == [Boolean(False), Boolean(True)]
