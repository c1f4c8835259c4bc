"""Errors raised by the monitor and its collaborators."""

from __future__ import annotations


class ScoutyError(Exception):
    """Base class for all scouty errors."""


class ConfigError(ScoutyError):
    """
    Invalid or incomplete configuration.

    Raised at start-up only. The process exits without monitoring.
    """


class HookError(ScoutyError):
    """
    A hook script could not be run or exited with a failure status.

    Attributes:
        name: Hook name, e.g. "New session".
        filename: Path of the script.
        stderr: What the script wrote to stderr.
    """

    def __init__(self, name: str, filename: str, stderr: str) -> None:
        self.name = name
        self.filename = filename
        self.stderr = stderr
        super().__init__(
            f"Hook script - {name} - filename ({filename}) executed with error: {stderr!r}"
        )


class MatrixError(ScoutyError):
    """A Matrix API call failed."""


class FeedError(ScoutyError):
    """
    The chain event feed delivered something unusable.

    The supervisor restarts monitoring from a fresh snapshot.
    """


class SubscriptionFinished(ScoutyError):
    """The chain event feed ended."""
