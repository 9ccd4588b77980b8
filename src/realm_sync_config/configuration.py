"""
configuration.py - Immutable configuration values.

A SyncConfiguration is the validated output of SyncConfigurationBuilder.
Equality and hashing compare every field by value, so configurations
can key a dict of live files: two builds for the same remote file,
owner and options compare equal.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from realm_sync_config.identity import ResolvedIdentifier


class Durability(Enum):
    """How the local file is kept."""
    FULL = "full"          # Persisted to disk
    MEM_ONLY = "mem_only"  # Kept in memory only


@dataclass(frozen=True)
class BaseConfiguration:
    """
    Options shared by every local file configuration.

    Attributes:
        directory: Directory holding the file
        file_name: File name inside directory
        canonical_path: Absolute path of the file with links resolved
        encryption_key: 64-byte key, or None for an unencrypted file
        schema_version: Schema version number, 0 or higher
        schema: Schema modules registered for the file
        durability: Persisted or in-memory
        initial_data: Action populating a newly created file
        read_only: Whether the file is opened read-only
        reactive_factory: Factory for reactive streams, if any
    """
    directory: str
    file_name: str
    canonical_path: str
    encryption_key: Optional[bytes] = field(repr=False)
    schema_version: int
    schema: frozenset
    durability: Durability
    initial_data: Optional[Callable[..., Any]]
    read_only: bool
    reactive_factory: Any

    @property
    def path(self) -> str:
        return self.canonical_path

    @property
    def in_memory(self) -> bool:
        return self.durability is Durability.MEM_ONLY

    def describe(self) -> dict[str, Any]:
        """Plain dict for diagnostics. The encryption key is redacted."""
        return {
            "directory": self.directory,
            "file_name": self.file_name,
            "canonical_path": self.canonical_path,
            "encrypted": self.encryption_key is not None,
            "schema_version": self.schema_version,
            "schema": sorted(repr(module) for module in self.schema),
            "durability": self.durability.value,
            "has_initial_data": self.initial_data is not None,
            "read_only": self.read_only,
        }


@dataclass(frozen=True)
class SyncConfiguration(BaseConfiguration):
    """
    Configuration of a file synchronized with a remote server.

    Attributes:
        owner: Identity owner the file belongs to
        identity: Concrete identity read from the owner at build time
        remote_locator: Fully resolved remote URL
        error_handler: Handler for session errors
        delete_on_logout: Delete the local file when the owner logs out
        wait_for_initial_remote_data: Download remote data before first open
    """
    owner: Any
    identity: str
    remote_locator: ResolvedIdentifier
    error_handler: Optional[Callable[..., Any]]
    delete_on_logout: bool
    wait_for_initial_remote_data: bool

    @property
    def server_url(self) -> str:
        return self.remote_locator.url

    @property
    def lock_path(self) -> str:
        return self.canonical_path + ".lock"

    @property
    def management_path(self) -> str:
        return self.canonical_path + ".management"

    def describe(self) -> dict[str, Any]:
        info = super().describe()
        info.update({
            "identity": self.identity,
            "server_url": self.server_url,
            "delete_on_logout": self.delete_on_logout,
            "wait_for_initial_remote_data": self.wait_for_initial_remote_data,
        })
        return info


def canonical_path(directory: str, file_name: str) -> str:
    """Absolute path of a file with symbolic links resolved."""
    return os.path.realpath(os.path.join(directory, file_name))
