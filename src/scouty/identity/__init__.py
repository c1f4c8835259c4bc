"""Validator identities."""

from .identity import (
    MAX_IDENTITY_DEPTH,
    Identity,
    IdentityRecord,
    SuperOf,
    find_identity,
    resolve_display_name,
    shorten_stash,
)

__all__ = [
    "Identity",
    "IdentityRecord",
    "MAX_IDENTITY_DEPTH",
    "SuperOf",
    "find_identity",
    "resolve_display_name",
    "shorten_stash",
]
