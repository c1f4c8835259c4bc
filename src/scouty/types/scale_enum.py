"""SCALE enum type: a tagged sum type with a one-byte variant index."""

from __future__ import annotations

from typing import IO, Any, ClassVar, Final, Type, cast

from pydantic import Field, field_validator
from typing_extensions import Self

from .exceptions import ScaleSelectorError, ScaleTypeCoercionError
from .scale_base import ScaleModel, ScaleType, read_exact

SELECTOR_BYTE_SIZE: Final[int] = 1
"""Size in bytes of the variant index in SCALE encoding."""


class ScaleEnum(ScaleModel):
    """
    Base class for SCALE enum types.

    Unlike SSZ unions, SCALE enum indices are sparse: a Rust enum may
    annotate variants with explicit `#[codec(index = N)]` values. Subclasses
    therefore map each index to its payload type, with `None` for unit
    variants.

    ```python
    class PreDigest(ScaleEnum):
        VARIANTS = {1: PrimaryPreDigest, 2: SecondaryPlainPreDigest}

    digest = PreDigest(selector=2, value=SecondaryPlainPreDigest(...))
    ```
    """

    VARIANTS: ClassVar[dict[int, Type[ScaleType] | None]]
    """Payload type per variant index. `None` marks a unit variant."""

    selector: int
    """The variant index."""

    value: Any = Field(default=None)
    """The variant payload, or `None` for unit variants."""

    @field_validator("selector")
    @classmethod
    def _validate_selector(cls, v: int) -> int:
        if v not in cls.VARIANTS:
            raise ValueError(f"Invalid selector {v} for {cls.__name__}")
        return v

    def model_post_init(self, __context: Any) -> None:
        """Check the payload matches the selected variant."""
        selected_type = self.VARIANTS[self.selector]
        if selected_type is None:
            if self.value is not None:
                raise ScaleTypeCoercionError("None", type(self.value).__name__, self.value)
        elif not isinstance(self.value, selected_type):
            raise ScaleTypeCoercionError(
                selected_type.__name__, type(self.value).__name__, self.value
            )

    @property
    def selected_type(self) -> Type[ScaleType] | None:
        """The payload type of the selected variant."""
        return self.VARIANTS[self.selector]

    def serialize(self, stream: IO[bytes]) -> int:
        stream.write(self.selector.to_bytes(SELECTOR_BYTE_SIZE, byteorder="little"))
        if self.selected_type is None:
            return SELECTOR_BYTE_SIZE
        return SELECTOR_BYTE_SIZE + cast(ScaleType, self.value).serialize(stream)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """
        Read the variant index and its payload.

        Raises:
            ScaleSelectorError: If the index is not a known variant.
            ScaleStreamError: If the payload is truncated.
        """
        selector = read_exact(stream, SELECTOR_BYTE_SIZE, cls.__name__)[0]
        if selector not in cls.VARIANTS:
            raise ScaleSelectorError(cls.__name__, selector, tuple(sorted(cls.VARIANTS)))

        selected_type = cls.VARIANTS[selector]
        if selected_type is None:
            return cls(selector=selector)
        return cls(selector=selector, value=selected_type.deserialize(stream))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(selector={self.selector}, value={self.value!r})"
