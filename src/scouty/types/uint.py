"""Unsigned integer types with fixed-width little-endian SCALE encoding."""

from __future__ import annotations

from typing import IO, Any, ClassVar, Literal, SupportsIndex, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import ScaleOverflowError
from .scale_base import ScaleType, read_exact


class BaseUint(int, ScaleType):
    """
    A base class for custom unsigned integer types that inherits from `int`.

    Arithmetic and comparisons only accept operands of the exact same type,
    so a session index can never be silently mixed with a block number.
    """

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Create and validate a new Uint instance.

        Raises:
            ScaleOverflowError: If `value` is outside the range [0, 2**BITS - 1].
        """
        if isinstance(value, bool):
            raise TypeError(f"{cls.__name__} does not accept bool")
        int_value = int(value)
        if not (0 <= int_value < (2**cls.BITS)):
            raise ScaleOverflowError(int_value, cls.__name__, max_value=2**cls.BITS - 1)
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Hook into Pydantic's validation system."""

        def validate(value: Any) -> BaseUint:
            try:
                return cls(value)
            except (ScaleOverflowError, TypeError) as e:
                raise ValueError(str(e)) from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.int_schema(ge=0, lt=2**cls.BITS),
                    core_schema.no_info_plain_validator_function(validate),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: int(instance)
            ),
        )

    def to_bytes(
        self,
        length: SupportsIndex | None = None,
        byteorder: Literal["little", "big"] = "little",
        *,
        signed: bool = False,
    ) -> bytes:
        """
        Return an array of bytes representing the integer.

        Defaults to little-endian and a fixed length based on `BITS`.
        """
        actual_length = self.BITS // 8 if length is None else int(length)
        return super().to_bytes(length=actual_length, byteorder=byteorder, signed=signed)

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the fixed-width little-endian encoding."""
        data = self.to_bytes()
        stream.write(data)
        return len(data)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """Read `BITS // 8` little-endian bytes."""
        data = read_exact(stream, cls.BITS // 8, cls.__name__)
        return cls(int.from_bytes(data, byteorder="little"))

    def _same_type(self, other: Any, op_symbol: str) -> int:
        """Return `other` as an int, or raise if it is not the same Uint type."""
        if not isinstance(other, type(self)):
            raise TypeError(
                f"Unsupported operand type(s) for {op_symbol}: "
                f"'{type(self).__name__}' and '{type(other).__name__}'"
            )
        return int(other)

    def __add__(self, other: Any) -> Self:
        return type(self)(int(self) + self._same_type(other, "+"))

    def __radd__(self, other: Any) -> Self:
        return type(self)(self._same_type(other, "+") + int(self))

    def __sub__(self, other: Any) -> Self:
        """
        Subtract a value of the same type.

        Raises:
            ScaleOverflowError: If the result would be negative.
        """
        return type(self)(int(self) - self._same_type(other, "-"))

    def __rsub__(self, other: Any) -> Self:
        return type(self)(self._same_type(other, "-") - int(self))

    # Comparisons are strict too: a session index never equals a plain int.

    def __eq__(self, other: object) -> bool:
        return int(self) == self._same_type(other, "==")

    def __ne__(self, other: object) -> bool:
        return int(self) != self._same_type(other, "!=")

    def __lt__(self, other: Any) -> bool:
        return int(self) < self._same_type(other, "<")

    def __le__(self, other: Any) -> bool:
        return int(self) <= self._same_type(other, "<=")

    def __gt__(self, other: Any) -> bool:
        return int(self) > self._same_type(other, ">")

    def __ge__(self, other: Any) -> bool:
        return int(self) >= self._same_type(other, ">=")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        return str(int(self))

    def __hash__(self) -> int:
        return hash((type(self), int(self)))


class Uint32(BaseUint):
    """A 32-bit unsigned integer (u32)."""

    BITS = 32


class Uint64(BaseUint):
    """A 64-bit unsigned integer (u64)."""

    BITS = 64
