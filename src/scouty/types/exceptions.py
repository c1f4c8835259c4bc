"""Exception hierarchy for the SCALE codec."""

from __future__ import annotations

from typing import Any


class ScaleError(Exception):
    """
    Base exception for all SCALE-related errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class ScaleTypeError(ScaleError):
    """Base class for type-related errors."""


class ScaleTypeCoercionError(ScaleTypeError):
    """
    Raised when a value cannot be coerced to the expected SCALE type.

    Attributes:
        expected_type: The type that was expected.
        actual_type: The actual type of the value.
        value: The value that couldn't be coerced (may be truncated for display).
    """

    def __init__(
        self,
        expected_type: str,
        actual_type: str,
        value: Any = None,
    ) -> None:
        self.expected_type = expected_type
        self.actual_type = actual_type
        self.value = value

        msg = f"Expected {expected_type}, got {actual_type}"
        if value is not None:
            value_repr = repr(value)
            if len(value_repr) > 50:
                value_repr = value_repr[:47] + "..."
            msg = f"{msg}: {value_repr}"

        super().__init__(msg)


class ScaleValueError(ScaleError):
    """
    Base class for value-related errors.

    Raised when a value is invalid for a SCALE operation, even if the type is correct.
    """


class ScaleOverflowError(ScaleValueError):
    """
    Raised when a numeric value does not fit the target encoding.

    Attributes:
        value: The value that caused the overflow.
        type_name: The type that couldn't hold the value.
        max_value: The maximum allowed value (inclusive).
    """

    def __init__(self, value: int, type_name: str, *, max_value: int) -> None:
        self.value = value
        self.type_name = type_name
        self.max_value = max_value

        super().__init__(f"{value} is out of range for {type_name} (valid range: [0, {max_value}])")


class ScaleDecodeError(ScaleError):
    """
    Raised when decoding SCALE bytes to a value fails.

    Attributes:
        type_name: The type being decoded.
        detail: Description of what went wrong.
        offset: The byte offset where the error occurred (if known).
    """

    def __init__(
        self,
        type_name: str,
        detail: str,
        *,
        offset: int | None = None,
    ) -> None:
        self.type_name = type_name
        self.detail = detail
        self.offset = offset

        msg = f"Failed to decode {type_name}: {detail}"
        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"

        super().__init__(msg)


class ScaleStreamError(ScaleDecodeError):
    """
    Raised when the input ends before a value is complete.

    Attributes:
        expected_bytes: Number of bytes needed.
        actual_bytes: Number of bytes that were available.
    """

    def __init__(self, type_name: str, *, expected_bytes: int, actual_bytes: int) -> None:
        self.expected_bytes = expected_bytes
        self.actual_bytes = actual_bytes

        super().__init__(
            type_name,
            f"stream ended prematurely: needed {expected_bytes} bytes, got {actual_bytes}",
        )


class ScaleSelectorError(ScaleDecodeError):
    """
    Raised when an enum variant index is not defined by the type.

    Attributes:
        selector: The unknown variant index.
        known: The variant indices the type accepts.
    """

    def __init__(self, type_name: str, selector: int, known: tuple[int, ...]) -> None:
        self.selector = selector
        self.known = known

        super().__init__(type_name, f"unknown variant index {selector} (expected one of {known})")
