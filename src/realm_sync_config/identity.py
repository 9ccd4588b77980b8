"""
identity.py - Placeholder substitution for remote locators.

The ``~`` path segment stands in for the identity of whoever opens the
file. Resolving it yields a ResolvedIdentifier, which is the canonical
key for the remote file: two configurations for the same remote file
and identity always resolve to equal identifiers.

An identity becomes both a URL segment and a directory name, so it must
itself be a single valid segment.
"""

import re
from dataclasses import dataclass, fields
from typing import Final

from realm_sync_config.config import IDENTITY_PLACEHOLDER, SEGMENT_PATTERN
from realm_sync_config.errors import MissingIdentityError, ValidationError
from realm_sync_config.locator import RemoteLocator

_IDENTITY_RE: Final = re.compile(SEGMENT_PATTERN)


@dataclass(frozen=True, slots=True)
class ResolvedIdentifier(RemoteLocator):
    """A RemoteLocator that contains no placeholder segments."""

    def __post_init__(self) -> None:
        RemoteLocator.__post_init__(self)
        if IDENTITY_PLACEHOLDER in self.path:
            raise ValueError(f"unresolved placeholder in {self.url}")


def validate_identity(identity: str) -> None:
    """
    Check that an identity can stand in for exactly one path segment.

    Raises:
        ValidationError: If identity is the placeholder, '.' or '..', or
            does not match the segment grammar (this rules out separators)
    """
    if (
        not isinstance(identity, str)
        or identity in (IDENTITY_PLACEHOLDER, ".", "..")
        or not _IDENTITY_RE.match(identity)
    ):
        raise ValidationError(
            "Identity must be a single path segment of 0-9, a-z, A-Z, ., _ and -",
            field="identity",
            value=identity,
        )


def resolve_locator(locator: RemoteLocator, identity: str | None) -> ResolvedIdentifier:
    """
    Replace every placeholder segment with a concrete identity.

    The input locator is left untouched.

    Args:
        locator: Normalized locator, possibly holding placeholders
        identity: Identity of the owner

    Returns:
        New ResolvedIdentifier

    Raises:
        MissingIdentityError: If a placeholder is present but identity
            is None or empty
        ValidationError: If identity is not a single valid segment
    """
    if locator.has_placeholder and not identity:
        raise MissingIdentityError(locator.url)
    if identity:
        validate_identity(identity)

    values = {f.name: getattr(locator, f.name) for f in fields(RemoteLocator)}
    values["path"] = tuple(
        identity if segment == IDENTITY_PLACEHOLDER else segment
        for segment in locator.path
    )
    return ResolvedIdentifier(**values)
