"""Watch a Substrate chain and run hooks on validator lifecycle events."""

__version__ = "0.1.0"
