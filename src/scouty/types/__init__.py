"""Reusable type definitions and the SCALE codec primitives."""

from .base import CamelModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes4, Bytes32, Bytes64, ByteVec
from .compact import decode_compact, encode_compact, read_compact
from .container import Container
from .scale_enum import ScaleEnum
from .exceptions import (
    ScaleDecodeError,
    ScaleError,
    ScaleOverflowError,
    ScaleSelectorError,
    ScaleStreamError,
    ScaleTypeCoercionError,
    ScaleTypeError,
    ScaleValueError,
)
from .scale_base import ScaleModel, ScaleType
from .uint import BaseUint, Uint32, Uint64

__all__ = [
    "BaseBytes",
    "BaseUint",
    "ByteVec",
    "Bytes4",
    "Bytes32",
    "Bytes64",
    "CamelModel",
    "Container",
    "ScaleDecodeError",
    "ScaleEnum",
    "ScaleError",
    "ScaleModel",
    "ScaleOverflowError",
    "ScaleSelectorError",
    "ScaleStreamError",
    "ScaleType",
    "ScaleTypeCoercionError",
    "ScaleTypeError",
    "ScaleValueError",
    "StrictBaseModel",
    "Uint32",
    "Uint64",
    "decode_compact",
    "encode_compact",
    "read_compact",
]
