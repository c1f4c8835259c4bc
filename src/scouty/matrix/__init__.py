"""Matrix chat delivery."""

from .client import MATRIX_URL, MAX_SEND_ATTEMPTS, Matrix, private_room_alias_name

__all__ = ["MATRIX_URL", "MAX_SEND_ATTEMPTS", "Matrix", "private_room_alias_name"]
