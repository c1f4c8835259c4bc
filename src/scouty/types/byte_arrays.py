"""
Byte array SCALE types.

- BaseBytes subclasses (Bytes4, Bytes32, Bytes64): fixed-length arrays,
  encoded as the raw bytes.
- ByteVec: a variable-length `Vec<u8>`, encoded as a compact length prefix
  followed by the raw bytes.
"""

from __future__ import annotations

from typing import IO, Any, ClassVar, Iterable, SupportsIndex

from pydantic.annotated_handlers import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .compact import encode_compact, read_compact
from .scale_base import ScaleType, read_exact


def _coerce_to_bytes(value: Any) -> bytes:
    """
    Coerce a variety of inputs to raw bytes.

    Accepts:
      - `bytes` / `bytearray` (returned as immutable `bytes`)
      - Iterables of integers in [0, 255]
      - Hex strings, with or without a '0x' prefix (e.g. "0xdeadbeef" or "deadbeef")

    Raises:
      ValueError / TypeError if conversion is not possible or out-of-range.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    if isinstance(value, Iterable):
        return bytes(bytearray(value))
    return bytes(value)


class _HexBytesMixin(bytes):
    """Shared helpers for byte types rendered as hex."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex()})"

    def __hash__(self) -> int:
        return hash((type(self), bytes(self)))

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Return the hexadecimal string representation of the underlying bytes."""
        return bytes(self).hex() if sep is None else bytes(self).hex(sep, bytes_per_sep)


class BaseBytes(_HexBytesMixin, ScaleType):
    """
    A base class for fixed-length byte types that inherits from `bytes`.

    Subclasses set:
      - `LENGTH`: exact number of bytes the instance must contain.
    """

    LENGTH: ClassVar[int]
    """The exact number of bytes (overridden by subclasses)."""

    def __new__(cls, value: Any = b"") -> Self:
        """
        Create and validate a new Bytes instance.

        Raises:
            ValueError: If the resulting byte length differs from `LENGTH`.
        """
        if not hasattr(cls, "LENGTH"):
            raise TypeError(f"{cls.__name__} must define LENGTH")

        b = _coerce_to_bytes(value)
        if len(b) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(b)}")
        return super().__new__(cls, b)

    @classmethod
    def zero(cls) -> Self:
        """Create a new instance filled with zero bytes."""
        return cls(b"\x00" * cls.LENGTH)

    def serialize(self, stream: IO[bytes]) -> int:
        stream.write(self)
        return len(self)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        return cls(read_exact(stream, cls.LENGTH, cls.__name__))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Hook into Pydantic's validation system.

        1. If the input is already an instance of the class, accept it.
        2. Otherwise coerce bytes or a hex string of exactly LENGTH bytes.
        3. Serialize to a hex string.
        """
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(cls),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(lambda x: x.hex()),
        )


class Bytes4(BaseBytes):
    """Fixed-size byte array of exactly 4 bytes (consensus engine ids)."""

    LENGTH = 4


class Bytes32(BaseBytes):
    """Fixed-size byte array of exactly 32 bytes (VRF pre-outputs, account ids)."""

    LENGTH = 32


class Bytes64(BaseBytes):
    """Fixed-size byte array of exactly 64 bytes (VRF proofs, signatures)."""

    LENGTH = 64


class ByteVec(_HexBytesMixin, ScaleType):
    """A variable-length byte vector with a compact length prefix."""

    def __new__(cls, value: Any = b"") -> Self:
        return super().__new__(cls, _coerce_to_bytes(value))

    def serialize(self, stream: IO[bytes]) -> int:
        prefix = encode_compact(len(self))
        stream.write(prefix)
        stream.write(self)
        return len(prefix) + len(self)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        length = read_compact(stream)
        return cls(read_exact(stream, length, cls.__name__))

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Accept instances, raw bytes or hex strings; serialize to hex."""
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(cls),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(lambda x: x.hex()),
        )
