"""Base classes and interfaces for all SCALE types."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from typing import IO

from typing_extensions import Self

from .base import StrictBaseModel
from .exceptions import ScaleDecodeError, ScaleStreamError


def read_exact(stream: IO[bytes], size: int, type_name: str) -> bytes:
    """
    Read exactly `size` bytes from `stream`.

    Raises:
        ScaleStreamError: If the stream ends before `size` bytes are available.
    """
    data = stream.read(size)
    if len(data) != size:
        raise ScaleStreamError(type_name, expected_bytes=size, actual_bytes=len(data))
    return data


class ScaleType(ABC):
    """
    Abstract base class for all SCALE types.

    SCALE values are self-delimiting: a decoder consumes exactly the bytes
    that belong to the value and leaves the rest of the stream untouched.
    That is why, unlike length-scoped formats, `deserialize` takes no scope.
    """

    @abstractmethod
    def serialize(self, stream: IO[bytes]) -> int:
        """
        Serializes the object and writes it to a binary stream.

        Args:
            stream (IO[bytes]): The stream to write the serialized data to.

        Returns:
            int: The number of bytes written.
        """
        ...

    @classmethod
    @abstractmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """
        Deserializes an object from a binary stream.

        Args:
            stream (IO[bytes]): The stream to read from.

        Returns:
            Self: An instance of the class.
        """
        ...

    def encode_bytes(self) -> bytes:
        """Serializes the SCALE object to a byte string."""
        with io.BytesIO() as stream:
            self.serialize(stream)
            return stream.getvalue()

    @classmethod
    def decode_bytes(cls, data: bytes, *, allow_trailing: bool = False) -> Self:
        """
        Deserializes a byte string into a SCALE object.

        Args:
            data: The byte string to deserialize.
            allow_trailing: Accept bytes left over after the value is decoded.

        Raises:
            ScaleDecodeError: If the data is malformed, or if trailing bytes
                remain and `allow_trailing` is not set.
        """
        with io.BytesIO(data) as stream:
            value = cls.deserialize(stream)
            consumed = stream.tell()
        if not allow_trailing and consumed != len(data):
            raise ScaleDecodeError(
                cls.__name__,
                f"{len(data) - consumed} trailing bytes",
                offset=consumed,
            )
        return value


class ScaleModel(StrictBaseModel, ScaleType):
    """
    Base class for SCALE types that use Pydantic validation.

    Combines StrictBaseModel (validation + immutability) with SCALE encoding.
    Simple types that need special inheritance (like int or bytes) use
    ScaleType directly.
    """

    def __repr__(self) -> str:
        field_strs = [f"{name}={getattr(self, name)!r}" for name in type(self).model_fields]
        return f"{self.__class__.__name__}({' '.join(field_strs)})"
