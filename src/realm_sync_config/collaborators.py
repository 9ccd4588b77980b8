"""
collaborators.py - External capabilities consumed by the builder.

The builder never reaches for process-wide state. Everything it needs
from its surroundings is described by a protocol here and injected,
either directly or through BuilderDefaults.
"""

import importlib.util
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional, Protocol
from urllib.parse import urlsplit

import platformdirs

from realm_sync_config.config import (
    APP_NAME,
    DEFAULT_ROOT_FOLDER,
    REACTIVE_EXTENSION_MODULE,
)
from realm_sync_config.errors import DirectoryCreationError, ValidationError

logger = logging.getLogger(__name__)


class IdentityOwner(Protocol):
    """The authenticated party that owns the synced file."""

    @property
    def identity(self) -> Optional[str]:
        ...

    @property
    def is_authenticated(self) -> bool:
        ...


class AuthenticationOrigin(Protocol):
    """Scheme and host the owner authenticated against."""

    @property
    def scheme(self) -> str:
        ...

    @property
    def host(self) -> str:
        ...


ErrorHandler = Callable[..., Any]
DirectoryCreator = Callable[[str], None]


@dataclass(frozen=True)
class AuthOrigin:
    """Concrete authentication origin."""
    scheme: str
    host: str

    @classmethod
    def from_url(cls, url: str) -> "AuthOrigin":
        """
        Build an origin from an authentication URL such as
        ``https://auth.example.com/auth``.

        Raises:
            ValidationError: If the URL has no scheme or host
        """
        try:
            parts = urlsplit(url)
        except ValueError as e:
            raise ValidationError(
                f"Invalid authentication URL: {e}", field="auth_url", value=url
            ) from e
        if not parts.scheme or not parts.hostname:
            raise ValidationError(
                "Authentication URL needs a scheme and a host",
                field="auth_url",
                value=url,
            )
        return cls(scheme=parts.scheme.lower(), host=parts.hostname)


@dataclass(frozen=True)
class StaticIdentityOwner:
    """Identity owner with a fixed identity, for tooling and tests."""
    identity: Optional[str]
    is_authenticated: bool = True


def ensure_directory(path: str) -> None:
    """
    Ensure a directory exists and is writable, creating it if necessary.

    Creation is idempotent: a directory that already exists, including
    one created concurrently by another builder, is success.

    Args:
        path: Directory to prepare

    Raises:
        DirectoryCreationError: If the path is a file, cannot be created
            or is not writable
    """
    if os.path.isfile(path):
        raise DirectoryCreationError(path, reason="path is a file, not a directory")

    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise DirectoryCreationError(path, reason=e.strerror or str(e)) from e

    if not os.access(path, os.W_OK):
        raise DirectoryCreationError(path, reason="directory is not writable")

    logger.debug("Directory ready: %s", path)


def reactive_extension_available() -> bool:
    """Check whether the reactive extension package can be imported."""
    return importlib.util.find_spec(REACTIVE_EXTENSION_MODULE) is not None


def default_root_directory() -> Path:
    """Platform data directory that holds synced files by default."""
    return Path(platformdirs.user_data_dir(APP_NAME)) / DEFAULT_ROOT_FOLDER


@dataclass(frozen=True)
class BuilderDefaults:
    """
    Defaults injected by the owning context at startup.

    Attributes:
        root_directory: Root directory used when no directory override is set
        default_schema: Schema modules used when none are configured
        default_error_handler: Error handler used when none is configured
        reactive_factory: Factory installed when none is set and the
            reactive extension is available
        reactive_available: Capability check for the reactive extension
        ensure_dir: Directory-creation collaborator
    """
    root_directory: Path = field(default_factory=default_root_directory)
    default_schema: tuple = ()
    default_error_handler: Optional[ErrorHandler] = None
    reactive_factory: Any = None
    reactive_available: Callable[[], bool] = reactive_extension_available
    ensure_dir: DirectoryCreator = ensure_directory
