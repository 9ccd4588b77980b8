"""
realm_sync_config - Local paths and configuration for synced files

Maps a remote URL with a per-identity placeholder (``/~/``) to a stable,
filesystem-legal local path, and validates the options of the file into
an immutable SyncConfiguration.
"""

from realm_sync_config.builder import SyncConfigurationBuilder
from realm_sync_config.collaborators import (
    AuthOrigin,
    AuthenticationOrigin,
    BuilderDefaults,
    IdentityOwner,
    StaticIdentityOwner,
    ensure_directory,
)
from realm_sync_config.configuration import (
    BaseConfiguration,
    Durability,
    SyncConfiguration,
)
from realm_sync_config.errors import (
    SyncConfigError,
    MalformedLocatorError,
    InvalidSegmentError,
    InvalidCharacterError,
    ReservedSuffixError,
    MissingIdentityError,
    MissingRequiredFieldError,
    IncompatibleOptionError,
    PathTooLongError,
    FileNameTooLongError,
    DirectoryCreationError,
    InvalidIdentityOwnerError,
    ValidationError,
    BuilderConsumedError,
)
from realm_sync_config.identity import ResolvedIdentifier, resolve_locator
from realm_sync_config.locator import RemoteLocator, normalize_locator
from realm_sync_config.paths import (
    LocalPathPlan,
    PathStrategy,
    derive_path_plan,
    sanitize_file_name,
)

__version__ = "0.1.0"
__all__ = [
    # Builder and results
    "SyncConfigurationBuilder",
    "BaseConfiguration",
    "SyncConfiguration",
    "Durability",
    # Pipeline steps
    "RemoteLocator",
    "normalize_locator",
    "ResolvedIdentifier",
    "resolve_locator",
    "LocalPathPlan",
    "PathStrategy",
    "derive_path_plan",
    "sanitize_file_name",
    # Collaborators
    "AuthOrigin",
    "AuthenticationOrigin",
    "BuilderDefaults",
    "IdentityOwner",
    "StaticIdentityOwner",
    "ensure_directory",
    # Errors
    "SyncConfigError",
    "MalformedLocatorError",
    "InvalidSegmentError",
    "InvalidCharacterError",
    "ReservedSuffixError",
    "MissingIdentityError",
    "MissingRequiredFieldError",
    "IncompatibleOptionError",
    "PathTooLongError",
    "FileNameTooLongError",
    "DirectoryCreationError",
    "InvalidIdentityOwnerError",
    "ValidationError",
    "BuilderConsumedError",
]
