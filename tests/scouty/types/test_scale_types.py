"""Tests for byte arrays, containers and enums."""

from __future__ import annotations

from typing import ClassVar

import pytest

from scouty.types import (
    Bytes4,
    Bytes32,
    ByteVec,
    Container,
    ScaleDecodeError,
    ScaleEnum,
    ScaleSelectorError,
    ScaleStreamError,
    ScaleTypeCoercionError,
    Uint32,
    Uint64,
)


class Pair(Container):
    """Two fields for container tests."""

    first: Uint32
    second: ByteVec


class Sparse(ScaleEnum):
    """Enum with non-contiguous variant indices."""

    UNIT: ClassVar[int] = 0
    NUMBER: ClassVar[int] = 7

    VARIANTS = {UNIT: None, NUMBER: Uint32}


class TestBytes:
    """Tests for fixed and variable byte arrays."""

    def test_fixed_from_hex(self) -> None:
        assert Bytes4("0x42414245") == Bytes4(b"BABE")

    def test_fixed_length_enforced(self) -> None:
        with pytest.raises(ValueError):
            Bytes32(b"\x00" * 31)

    def test_fixed_encoding_is_raw(self) -> None:
        assert Bytes4(b"BABE").encode_bytes() == b"BABE"

    def test_vec_has_compact_prefix(self) -> None:
        assert ByteVec(b"abc").encode_bytes() == b"\x0cabc"
        assert ByteVec.decode_bytes(b"\x0cabc") == ByteVec(b"abc")

    def test_vec_truncated(self) -> None:
        with pytest.raises(ScaleStreamError):
            ByteVec.decode_bytes(b"\x0cab")

    def test_repr_is_hex(self) -> None:
        assert repr(Bytes4(b"\x00\x01\x02\x03")) == "Bytes4(00010203)"


class TestContainer:
    """Tests for struct encoding."""

    def test_fields_concatenate_in_order(self) -> None:
        pair = Pair(first=Uint32(1), second=ByteVec(b"\xff"))
        assert pair.encode_bytes() == b"\x01\x00\x00\x00\x04\xff"

    def test_decode(self) -> None:
        pair = Pair.decode_bytes(b"\x02\x00\x00\x00\x00")
        assert pair.first == Uint32(2)
        assert pair.second == ByteVec(b"")

    def test_trailing_bytes_rejected_by_default(self) -> None:
        with pytest.raises(ScaleDecodeError):
            Pair.decode_bytes(b"\x02\x00\x00\x00\x00\x99")

    def test_trailing_bytes_allowed_on_request(self) -> None:
        pair = Pair.decode_bytes(b"\x02\x00\x00\x00\x00\x99", allow_trailing=True)
        assert pair.first == Uint32(2)


class TestScaleEnum:
    """Tests for sparse enums."""

    def test_unit_variant(self) -> None:
        assert Sparse(selector=Sparse.UNIT).encode_bytes() == b"\x00"
        assert Sparse.decode_bytes(b"\x00").value is None

    def test_payload_variant(self) -> None:
        encoded = Sparse(selector=Sparse.NUMBER, value=Uint32(1)).encode_bytes()
        assert encoded == b"\x07\x01\x00\x00\x00"
        assert Sparse.decode_bytes(encoded).value == Uint32(1)

    def test_unknown_selector(self) -> None:
        with pytest.raises(ScaleSelectorError) as exc_info:
            Sparse.decode_bytes(b"\x03")
        assert exc_info.value.selector == 3
        assert exc_info.value.known == (0, 7)

    def test_payload_type_checked(self) -> None:
        with pytest.raises(ScaleTypeCoercionError):
            Sparse(selector=Sparse.NUMBER, value=Uint64(1))

    def test_unit_variant_rejects_payload(self) -> None:
        with pytest.raises(ScaleTypeCoercionError):
            Sparse(selector=Sparse.UNIT, value=Uint32(1))
