"""
locator.py - Remote locator parsing and normalization.

A raw identifier such as ``/~/default`` or ``realms://host/~/default``
is turned into a RemoteLocator: an absolute URL with an explicit remote
scheme and host and a validated list of path segments.

Normalization is a pure function of its inputs.
"""

import re
from dataclasses import dataclass
from typing import Final, Optional
from urllib.parse import urlsplit

from realm_sync_config.collaborators import AuthenticationOrigin
from realm_sync_config.config import (
    IDENTITY_PLACEHOLDER,
    PATH_SEPARATOR,
    RESERVED_FILE_SUFFIXES,
    SCHEME_PLAIN,
    SCHEME_SECURE,
    SEGMENT_PATTERN,
    WEB_SCHEME_MAP,
)
from realm_sync_config.errors import (
    InvalidCharacterError,
    InvalidSegmentError,
    MalformedLocatorError,
    MissingRequiredFieldError,
    ReservedSuffixError,
)
from realm_sync_config.observability import ConfigLogger

_SEGMENT_RE: Final = re.compile(SEGMENT_PATTERN)

# Characters allowed anywhere in a URI reference (RFC 3986)
_URI_CHARS_RE: Final = re.compile(r"^[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=%]+$")

_events = ConfigLogger(__name__)


@dataclass(frozen=True, slots=True)
class RemoteLocator:
    """
    Immutable, normalized URL of a remote file.

    ``path`` holds the segments without separators, so
    ``realms://host/~/default`` has ``path == ("~", "default")``.
    """
    scheme: str
    host: str
    path: tuple[str, ...]
    port: Optional[int] = None
    query: str = ""
    fragment: str = ""
    userinfo: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.path, tuple):
            object.__setattr__(self, "path", tuple(self.path))
        if not self.path:
            raise ValueError("path must contain at least one segment")

    @property
    def url(self) -> str:
        """Canonical string form."""
        host = f"[{self.host}]" if ":" in self.host else self.host
        netloc = f"{self.userinfo}@{host}" if self.userinfo else host
        if self.port is not None:
            netloc = f"{netloc}:{self.port}"
        url = f"{self.scheme}://{netloc}{self.path_string}"
        if self.query:
            url = f"{url}?{self.query}"
        if self.fragment:
            url = f"{url}#{self.fragment}"
        return url

    @property
    def path_string(self) -> str:
        return PATH_SEPARATOR + PATH_SEPARATOR.join(self.path)

    @property
    def is_secure(self) -> bool:
        return self.scheme == SCHEME_SECURE

    @property
    def has_placeholder(self) -> bool:
        return IDENTITY_PLACEHOLDER in self.path

    @property
    def last_segment(self) -> str:
        return self.path[-1]

    @property
    def default_file_name(self) -> Optional[str]:
        """Last path segment, or None while it is still the placeholder."""
        if self.last_segment == IDENTITY_PLACEHOLDER:
            return None
        return self.last_segment

    def __str__(self) -> str:
        return self.url


def _normalize_scheme(scheme: str, auth_origin: AuthenticationOrigin) -> str:
    if not scheme:
        if auth_origin.scheme.lower() == "https":
            return SCHEME_SECURE
        return SCHEME_PLAIN
    scheme = scheme.lower()
    return WEB_SCHEME_MAP.get(scheme, scheme)


def validate_segments(segments: list[str], raw: str) -> None:
    """
    Check every path segment against the segment grammar.

    The placeholder is accepted as-is.

    Raises:
        InvalidSegmentError: For '.' or '..'
        InvalidCharacterError: For any other non-matching segment
    """
    for segment in segments:
        if segment == IDENTITY_PLACEHOLDER:
            continue
        if segment in (".", ".."):
            raise InvalidSegmentError(segment, raw)
        if not _SEGMENT_RE.match(segment):
            raise InvalidCharacterError(segment, raw)


def check_reserved_suffix(file_name: str) -> None:
    """
    Raises:
        ReservedSuffixError: If the name ends with a storage-engine suffix
    """
    for suffix in RESERVED_FILE_SUFFIXES:
        if file_name.endswith(suffix):
            raise ReservedSuffixError(file_name, suffix)


def normalize_locator(
    raw: str, auth_origin: Optional[AuthenticationOrigin] = None
) -> RemoteLocator:
    """
    Parse and normalize a raw remote identifier.

    A missing scheme is taken from the authentication origin
    (``https`` gives ``realms``, anything else ``realm``); ``http`` and
    ``https`` are mapped onto ``realm`` and ``realms``. A missing host is
    copied from the origin.

    Args:
        raw: Raw identifier, absolute or relative to the origin
        auth_origin: Where the owner authenticated. Only consulted, and
            only required, when raw lacks a scheme or a host

    Returns:
        Normalized RemoteLocator

    Raises:
        MalformedLocatorError: If raw is not a valid URI or has no path
        MissingRequiredFieldError: If raw lacks a scheme or host and no
            auth_origin is given
        InvalidSegmentError: If a segment is '.' or '..'
        InvalidCharacterError: If a segment has illegal characters
        ReservedSuffixError: If the default file name is reserved
    """
    if not isinstance(raw, str) or not raw:
        raise MalformedLocatorError(raw, reason="a non-empty string is required")
    if not _URI_CHARS_RE.match(raw):
        raise MalformedLocatorError(raw, reason="contains characters not allowed in a URI")

    try:
        parts = urlsplit(raw)
        port = parts.port
    except ValueError as e:
        raise MalformedLocatorError(raw, reason=str(e)) from e

    # "scheme:path" without an authority cannot carry a hierarchical path
    if parts.scheme and not parts.netloc and not parts.path.startswith(PATH_SEPARATOR):
        raise MalformedLocatorError(raw, reason="opaque URI")

    if auth_origin is None and not (parts.scheme and parts.hostname):
        raise MissingRequiredFieldError("auth_origin")

    scheme = _normalize_scheme(parts.scheme, auth_origin)
    host = parts.hostname or auth_origin.host
    userinfo = parts.netloc.rpartition("@")[0] or None

    path = parts.path
    if not path.startswith(PATH_SEPARATOR):
        path = PATH_SEPARATOR + path
    if path == PATH_SEPARATOR:
        raise MalformedLocatorError(raw, reason="the URI has no path")

    segments = path[1:].split(PATH_SEPARATOR)

    # A host typed without a scheme is parsed as the first path segment
    if not parts.netloc and len(segments) > 1 and segments[0] == host:
        segments = segments[1:]

    validate_segments(segments, raw)

    locator = RemoteLocator(
        scheme=scheme,
        host=host,
        path=tuple(segments),
        port=port,
        query=parts.query,
        fragment=parts.fragment,
        userinfo=userinfo,
    )

    default_name = locator.default_file_name
    if default_name is not None:
        check_reserved_suffix(default_name)

    _events.locator_normalized(raw, locator.url)
    return locator
