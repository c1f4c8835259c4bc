"""
SCALE compact integer encoding and decoding.

WHAT ARE COMPACT INTEGERS?
--------------------------
SCALE prefixes every variable-length collection with its length, and most
lengths are small. The compact encoding spends one byte on values below 64
and grows only as needed, up to 67 bytes for 2^536 - 1.


HOW THE ENCODING WORKS
----------------------
The two least significant bits of the first byte select the mode::

    0b00  single-byte mode   value in the upper 6 bits         (0 .. 2^6 - 1)
    0b01  two-byte mode      value in the upper 14 bits, LE    (2^6 .. 2^14 - 1)
    0b10  four-byte mode     value in the upper 30 bits, LE    (2^14 .. 2^30 - 1)
    0b11  big-integer mode   upper 6 bits hold (byte count - 4),
                             followed by the value as LE bytes (2^30 .. 2^536 - 1)


ENCODING EXAMPLE: VALUE 69
--------------------------
69 does not fit in 6 bits, so two-byte mode is used:

    69 << 2 | 0b01 = 277 = 0x0115 -> little-endian [0x15, 0x01]


Only canonical encodings are accepted: a value must use the smallest mode
that can hold it.
"""

from __future__ import annotations

import io
from typing import IO, Final

from .exceptions import ScaleDecodeError, ScaleValueError
from .scale_base import read_exact

SINGLE_BYTE_MAX: Final = 0x3F
"""Largest value in single-byte mode."""

TWO_BYTE_MAX: Final = 0x3FFF
"""Largest value in two-byte mode."""

FOUR_BYTE_MAX: Final = 0x3FFF_FFFF
"""Largest value in four-byte mode."""

MAX_BIG_INT_BYTES: Final = 67
"""Upper bound on the payload of big-integer mode (6-bit header + 4)."""


def encode_compact(value: int) -> bytes:
    """
    Encode a non-negative integer in SCALE compact form.

    Args:
        value: Integer to encode. Maximum: 2^536 - 1.

    Returns:
        Between 1 and 68 encoded bytes.

    Raises:
        ScaleValueError: If value is negative or too large.
    """
    if value < 0:
        raise ScaleValueError("Compact integers must be non-negative")

    if value <= SINGLE_BYTE_MAX:
        return bytes([value << 2])
    if value <= TWO_BYTE_MAX:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value <= FOUR_BYTE_MAX:
        return ((value << 2) | 0b10).to_bytes(4, "little")

    payload_len = max(4, (value.bit_length() + 7) // 8)
    if payload_len > MAX_BIG_INT_BYTES:
        raise ScaleValueError(f"Compact integer too large: {value.bit_length()} bits")
    header = ((payload_len - 4) << 2) | 0b11
    return bytes([header]) + value.to_bytes(payload_len, "little")


def read_compact(stream: IO[bytes]) -> int:
    """
    Read one compact integer from a stream.

    Args:
        stream: Binary stream positioned at the first byte of the encoding.

    Returns:
        The decoded value.

    Raises:
        ScaleStreamError: If the stream ends mid-value.
        ScaleDecodeError: If the encoding is not canonical.
    """
    first = read_exact(stream, 1, "Compact")[0]
    mode = first & 0b11

    if mode == 0b00:
        return first >> 2

    if mode == 0b01:
        raw = int.from_bytes(bytes([first]) + read_exact(stream, 1, "Compact"), "little")
        value = raw >> 2
        minimum = SINGLE_BYTE_MAX + 1
    elif mode == 0b10:
        raw = int.from_bytes(bytes([first]) + read_exact(stream, 3, "Compact"), "little")
        value = raw >> 2
        minimum = TWO_BYTE_MAX + 1
    else:
        payload_len = (first >> 2) + 4
        value = int.from_bytes(read_exact(stream, payload_len, "Compact"), "little")
        # The highest payload byte must be used, otherwise a shorter form exists.
        minimum = max(FOUR_BYTE_MAX + 1, 1 << (8 * (payload_len - 1)))

    if value < minimum:
        raise ScaleDecodeError("Compact", f"non-canonical encoding of {value}")
    return value


def decode_compact(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a compact integer from bytes.

    Args:
        data: Buffer containing the encoded value.
        offset: Starting position in the buffer.

    Returns:
        Tuple of (decoded value, number of bytes consumed).
    """
    with io.BytesIO(data) as stream:
        stream.seek(offset)
        value = read_compact(stream)
        return value, stream.tell() - offset
