"""
SCALE Container type: ordered heterogeneous collections with named fields.

A SCALE struct is the concatenation of its fields' encodings in definition
order, with no offsets and no padding.
"""

from __future__ import annotations

from typing import IO, Type, cast

from typing_extensions import Self

from .scale_base import ScaleModel, ScaleType


class Container(ScaleModel):
    """
    A strict, ordered collection of named SCALE fields.

    Example:
        >>> class SecondaryPlainPreDigest(Container):
        ...     authority_index: Uint32
        ...     slot: Uint64
    """

    def serialize(self, stream: IO[bytes]) -> int:
        """Write each field in definition order."""
        return sum(
            cast(ScaleType, getattr(self, name)).serialize(stream)
            for name in type(self).model_fields
        )

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """
        Read each field in definition order.

        Raises:
            ScaleStreamError: If the stream ends before the last field.
        """
        fields = {
            name: cast(Type[ScaleType], info.annotation).deserialize(stream)
            for name, info in cls.model_fields.items()
        }
        return cls(**fields)
