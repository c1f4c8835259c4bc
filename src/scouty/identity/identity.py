"""
On-chain identities and display names.

An account either carries its own identity, or is a sub-account pointing at
a parent identity with a sub name (`SuperOf`). A validator is shown as
`name`, `name/sub`, or, without any identity, as its shortened address.
"""

from __future__ import annotations

import logging
from typing import Final, Mapping

from scouty.types import StrictBaseModel

logger = logging.getLogger(__name__)

MAX_IDENTITY_DEPTH: Final = 2
"""Identity lookups made for one account: the account and its parent."""


class Identity(StrictBaseModel):
    """A resolved identity."""

    name: str
    """Display name of the identity holder."""

    sub: str | None = None
    """Sub-account name, when resolved through a parent."""

    def __str__(self) -> str:
        if self.sub is not None:
            return f"{self.name}/{self.sub}"
        return self.name


class SuperOf(StrictBaseModel):
    """Link from a sub-account to its parent identity."""

    parent: str
    sub: str


class IdentityRecord(StrictBaseModel):
    """Identity storage of one account."""

    display: str | None = None
    """Display field of the account's own identity."""

    super_of: SuperOf | None = None
    """Parent link, for sub-accounts."""


def shorten_stash(stash: str) -> str:
    """Render an address as its first and last six characters."""
    return f"{stash[:6]}...{stash[-6:]}"


def find_identity(stash: str, records: Mapping[str, IdentityRecord]) -> Identity | None:
    """
    Follow sub-account links to the identity of `stash`.

    Args:
        stash: Account to resolve.
        records: Identity storage by account.

    Returns:
        The identity, or `None` if there is none within `MAX_IDENTITY_DEPTH` lookups.
    """
    account = stash
    sub: str | None = None
    for _ in range(MAX_IDENTITY_DEPTH):
        record = records.get(account)
        if record is None:
            return None
        if record.display is not None:
            return Identity(name=record.display, sub=sub)
        if record.super_of is None:
            return None
        account, sub = record.super_of.parent, record.super_of.sub

    logger.debug("Identity of %s not found within %d lookups", stash, MAX_IDENTITY_DEPTH)
    return None


def resolve_display_name(stash: str, records: Mapping[str, IdentityRecord]) -> str:
    """Display name of `stash`, falling back to its shortened address."""
    identity = find_identity(stash, records)
    return str(identity) if identity is not None else shorten_stash(stash)
