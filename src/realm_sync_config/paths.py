"""
paths.py - Local path derivation for synced files.

The file for a remote URL lives at::

    <root_dir>/<identity>/<server path>/<file name>

where the server path is the remote path minus its last segment. When
that does not fit the FAT full-path budget, the file name is replaced by
its MD5 hash, and if that is still too long the server path is dropped.
Information is only discarded when the length limit forces it.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from realm_sync_config.collaborators import DirectoryCreator, ensure_directory
from realm_sync_config.config import (
    FILE_NAME_REPLACEMENT_CHAR,
    INVALID_FILE_NAME_CHARS,
    MAX_FILE_NAME_LENGTH,
    MAX_FULL_PATH_LENGTH,
    PATH_SEPARATOR,
)
from realm_sync_config.errors import (
    FileNameTooLongError,
    MissingIdentityError,
    PathTooLongError,
)
from realm_sync_config.identity import ResolvedIdentifier, validate_identity
from realm_sync_config.observability import ConfigLogger
from realm_sync_config.utils.hashing import md5_hex

_events = ConfigLogger(__name__)


class PathStrategy(Enum):
    """Which fallback step produced a path plan."""
    FULL = "full"                        # server path and readable name
    HASHED_NAME = "hashed_name"          # server path and hashed name
    SHORT_DIRECTORY = "short_directory"  # identity directory and hashed name


@dataclass(frozen=True, slots=True)
class LocalPathPlan:
    """
    Immutable disk location for a resolved identifier.

    Attributes:
        directory: Absolute directory holding the file
        file_name: Sanitized file name
        strategy: Fallback step that produced this plan
    """
    directory: str
    file_name: str
    strategy: PathStrategy = PathStrategy.FULL

    @property
    def full_path(self) -> str:
        return join_full_path(self.directory, self.file_name)


def join_full_path(directory: str, file_name: str) -> str:
    return directory + os.sep + file_name


def byte_length(value: str) -> int:
    """Length of a string in UTF-8 bytes."""
    return len(value.encode("utf-8"))


def server_path(resolved: ResolvedIdentifier) -> str:
    """
    Remote path minus the trailing file name segment.

    ``/a/b/c`` gives ``a/b``; a single segment ``/c`` gives ``c``.
    """
    segments = resolved.path
    if not segments:
        return ""
    if len(segments) == 1:
        return segments[0]
    return PATH_SEPARATOR.join(segments[:-1])


def hash_file_name(file_name: str) -> str:
    """Fixed-length (32 character) replacement for a file name."""
    return md5_hex(file_name)


def sanitize_file_name(file_name: str) -> str:
    """
    Replace characters that are illegal in file names with '_'.

    Replacement is 1:1, so the length is unchanged. Applying it twice
    gives the same result as applying it once.
    """
    for char in INVALID_FILE_NAME_CHARS:
        file_name = file_name.replace(char, FILE_NAME_REPLACEMENT_CHAR)
    return file_name


def _check_identity(identity: Optional[str], url: str) -> None:
    if not identity:
        raise MissingIdentityError(
            url, "A concrete identity is required to derive the local directory."
        )
    validate_identity(identity)


def _directory_for(root: str, identity: str, sub_path: str = "") -> str:
    parts = [p for p in sub_path.split(PATH_SEPARATOR) if p]
    return os.path.join(root, identity, *parts)


def derive_path_plan(
    resolved: ResolvedIdentifier,
    root_dir: str | os.PathLike,
    identity: str,
    file_name: Optional[str] = None,
    *,
    ensure_dir: DirectoryCreator = ensure_directory,
    max_full_path: int = MAX_FULL_PATH_LENGTH,
    max_file_name: int = MAX_FILE_NAME_LENGTH,
) -> LocalPathPlan:
    """
    Choose the local directory and file name for a resolved identifier.

    Args:
        resolved: Identifier with all placeholders substituted
        root_dir: Root directory for all synced files
        identity: Identity of the owner, used as the first directory level
        file_name: Optional override of the file name
        ensure_dir: Directory-creation collaborator
        max_full_path: Full path budget in bytes
        max_file_name: File name budget in bytes

    Returns:
        LocalPathPlan whose directory exists

    Raises:
        MissingIdentityError: If identity is None or empty
        ValidationError: If identity is not a single valid path segment
        PathTooLongError: If every fallback exceeds max_full_path
        FileNameTooLongError: If the final name exceeds max_file_name
        DirectoryCreationError: If the directory cannot be created
    """
    _check_identity(identity, resolved.url)

    root = os.path.abspath(os.fspath(root_dir))
    directory = _directory_for(root, identity, server_path(resolved))
    name = file_name if file_name is not None else resolved.last_segment
    strategy = PathStrategy.FULL

    full_path = join_full_path(directory, name)
    if byte_length(full_path) > max_full_path:
        # Shorten the file name first
        _events.path_fallback(PathStrategy.HASHED_NAME.value, full_path, max_full_path)
        name = hash_file_name(name)
        strategy = PathStrategy.HASHED_NAME
        full_path = join_full_path(directory, name)

        if byte_length(full_path) > max_full_path:
            # Then drop the server path
            _events.path_fallback(PathStrategy.SHORT_DIRECTORY.value, full_path, max_full_path)
            directory = _directory_for(root, identity)
            strategy = PathStrategy.SHORT_DIRECTORY
            full_path = join_full_path(directory, name)

            if byte_length(full_path) > max_full_path:
                raise PathTooLongError(full_path, max_full_path)

    if byte_length(name) > max_file_name:
        raise FileNameTooLongError(name, max_file_name)

    # Known limitation: the reserved-suffix check is not repeated here
    name = sanitize_file_name(name)

    ensure_dir(directory)
    return LocalPathPlan(directory=directory, file_name=name, strategy=strategy)
