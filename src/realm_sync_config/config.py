"""
config.py - Configuration constants for realm_sync_config.

All configuration is immutable and defined at module level.
No mutable global state is permitted; runtime defaults are injected
through BuilderDefaults instead.
"""

from typing import Final

# Application name used for platform data directories
APP_NAME: Final[str] = "realm-sync-config"

# Folder under the data directory that holds synced files
DEFAULT_ROOT_FOLDER: Final[str] = "realm-object-server"

# FAT limits: full path and single file name
MAX_FULL_PATH_LENGTH: Final[int] = 256
MAX_FILE_NAME_LENGTH: Final[int] = 255

# Characters not permitted in a file name on common filesystems
INVALID_FILE_NAME_CHARS: Final[tuple[str, ...]] = ("<", ">", ":", '"', "/", "\\", "|", "?", "*")
FILE_NAME_REPLACEMENT_CHAR: Final[str] = "_"

# Suffixes owned by the storage engine for the file and its siblings
RESERVED_FILE_SUFFIXES: Final[tuple[str, ...]] = (".realm", ".realm.lock", ".realm.management")

# Path segment standing in for the current identity
IDENTITY_PLACEHOLDER: Final[str] = "~"

# Allowed characters for literal path segments
SEGMENT_PATTERN: Final[str] = r"^[A-Za-z0-9_\-.]+$"

PATH_SEPARATOR: Final[str] = "/"

# Remote schemes
SCHEME_PLAIN: Final[str] = "realm"
SCHEME_SECURE: Final[str] = "realms"

# Generic web schemes mapped 1:1 onto remote schemes
WEB_SCHEME_MAP: Final[dict[str, str]] = {
    "http": SCHEME_PLAIN,
    "https": SCHEME_SECURE,
}

# Encryption key size in bytes
ENCRYPTION_KEY_LENGTH: Final[int] = 64

# PBKDF2 parameters for password-derived keys
KEY_DERIVATION_ITERATIONS: Final[int] = 100_000
KEY_DERIVATION_SALT_LENGTH: Final[int] = 16

# Python package providing the reactive extension
REACTIVE_EXTENSION_MODULE: Final[str] = "reactivex"
