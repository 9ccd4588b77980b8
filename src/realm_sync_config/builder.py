"""
builder.py - Staged builder for SyncConfiguration.

Example:
    from realm_sync_config import AuthOrigin, SyncConfigurationBuilder

    config = (
        SyncConfigurationBuilder(owner, "/~/default", AuthOrigin.from_url("https://auth.example.com"))
        .schema_version(2)
        .wait_for_initial_remote_data()
        .build()
    )

A builder is single-use and not thread-safe. Options may be set in any
order; they are only validated against each other by build(), which
consumes the builder.
"""

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from realm_sync_config.collaborators import (
    AuthenticationOrigin,
    BuilderDefaults,
    ErrorHandler,
    IdentityOwner,
)
from realm_sync_config.configuration import (
    Durability,
    SyncConfiguration,
    canonical_path,
)
from realm_sync_config.errors import (
    BuilderConsumedError,
    IncompatibleOptionError,
    InvalidIdentityOwnerError,
    MissingIdentityError,
    MissingRequiredFieldError,
    SyncConfigError,
    ValidationError,
)
from realm_sync_config.identity import resolve_locator
from realm_sync_config.locator import RemoteLocator, normalize_locator
from realm_sync_config.observability import ConfigLogger
from realm_sync_config.paths import LocalPathPlan, derive_path_plan
from realm_sync_config.security import validate_encryption_key

_events = ConfigLogger(__name__)


@dataclass
class ConfigurationOptions:
    """Options staged by a builder. Nothing is validated until build()."""
    directory: Optional[str] = None
    file_name: Optional[str] = None
    encryption_key: Optional[bytes] = None
    schema_version: int = 0
    modules: Optional[tuple] = None
    initial_data: Optional[Callable[..., Any]] = None
    durability: Durability = Durability.FULL
    read_only: bool = False
    wait_for_initial_remote_data: bool = False
    error_handler: Optional[ErrorHandler] = None
    reactive_factory: Any = None
    delete_on_logout: bool = False


class SyncConfigurationBuilder:
    """
    Collects options for a synced file and builds a SyncConfiguration.

    The local file is placed at
    ``<root_dir>/<identity>/<server path>/<file name>`` unless the
    directory or name is overridden.
    """

    def __init__(
        self,
        owner: Optional[IdentityOwner],
        url: Optional[str],
        auth_origin: Optional[AuthenticationOrigin] = None,
        defaults: Optional[BuilderDefaults] = None,
    ):
        """
        Args:
            owner: Authenticated identity owner
            url: Raw remote URL, absolute or relative to auth_origin
            auth_origin: Where the owner authenticated; used to fill in a
                missing scheme or host, and only required for such URLs
            defaults: Defaults injected by the owning context

        Raises:
            InvalidIdentityOwnerError: If owner is not authenticated
            MissingRequiredFieldError: If url lacks a scheme or host and
                no auth_origin is given
            MalformedLocatorError, InvalidSegmentError,
            InvalidCharacterError, ReservedSuffixError: If url is invalid
        """
        self._defaults = defaults or BuilderDefaults()
        self._options = ConfigurationOptions()
        self._consumed = False
        self._owner: Optional[IdentityOwner] = None
        self._locator: Optional[RemoteLocator] = None

        if owner is not None:
            self._set_owner(owner)
        if url is not None:
            self._locator = normalize_locator(url, auth_origin)

    def _set_owner(self, owner: IdentityOwner) -> None:
        try:
            authenticated = owner.is_authenticated
        except AttributeError as e:
            raise InvalidIdentityOwnerError(
                f"{type(owner).__name__} does not expose 'is_authenticated'."
            ) from e
        if not authenticated:
            raise InvalidIdentityOwnerError()
        self._owner = owner

    def _check_not_consumed(self) -> None:
        if self._consumed:
            raise BuilderConsumedError()

    @property
    def locator(self) -> Optional[RemoteLocator]:
        """Normalized remote URL, before identity substitution."""
        return self._locator

    # =========================================================================
    # Options
    # =========================================================================

    def name(self, file_name: str) -> "SyncConfigurationBuilder":
        """Override the local file name (default: last URL segment)."""
        self._check_not_consumed()
        if not file_name:
            raise ValidationError("A non-empty filename must be provided", field="file_name")
        self._options.file_name = file_name
        return self

    def directory(self, directory: str | os.PathLike) -> "SyncConfigurationBuilder":
        """Override the root directory. It is created at build time."""
        self._check_not_consumed()
        if directory is None:
            raise ValidationError("Non-null 'directory' required.", field="directory")
        self._options.directory = os.fspath(directory)
        return self

    def encryption_key(self, key: bytes) -> "SyncConfigurationBuilder":
        """Set a 64-byte encryption key. The key is copied."""
        self._check_not_consumed()
        self._options.encryption_key = validate_encryption_key(key)
        return self

    def schema_version(self, version: int) -> "SyncConfigurationBuilder":
        self._check_not_consumed()
        if isinstance(version, bool) or not isinstance(version, int) or version < 0:
            raise ValidationError(
                f"Schema version numbers must be 0 (zero) or higher. Yours was: {version}",
                field="schema_version",
                value=version,
            )
        self._options.schema_version = version
        return self

    def modules(self, base_module: Any, *additional_modules: Any) -> "SyncConfigurationBuilder":
        """Replace the default schema with the given modules."""
        self._check_not_consumed()
        if base_module is None:
            raise ValidationError("A non-null module must be provided", field="modules")
        modules = tuple(m for m in (base_module, *additional_modules) if m is not None)
        for module in modules:
            try:
                hash(module)
            except TypeError as e:
                raise ValidationError(
                    f"{type(module).__name__} cannot be used as a schema module",
                    field="modules",
                    value=module,
                ) from e
        self._options.modules = modules
        return self

    def reactive_factory(self, factory: Any) -> "SyncConfigurationBuilder":
        self._check_not_consumed()
        self._options.reactive_factory = factory
        return self

    def initial_data(self, action: Optional[Callable[..., Any]]) -> "SyncConfigurationBuilder":
        """Set an action run once when the file is first created."""
        self._check_not_consumed()
        if action is not None and not callable(action):
            raise ValidationError("Initial data action must be callable", field="initial_data")
        self._options.initial_data = action
        return self

    def in_memory(self) -> "SyncConfigurationBuilder":
        """Keep the file in memory only."""
        self._check_not_consumed()
        self._options.durability = Durability.MEM_ONLY
        return self

    def error_handler(self, handler: ErrorHandler) -> "SyncConfigurationBuilder":
        self._check_not_consumed()
        if handler is None or not callable(handler):
            raise ValidationError("Non-null, callable 'error_handler' required.", field="error_handler")
        self._options.error_handler = handler
        return self

    def wait_for_initial_remote_data(self) -> "SyncConfigurationBuilder":
        """Download all remote data before the file is first opened."""
        self._check_not_consumed()
        self._options.wait_for_initial_remote_data = True
        return self

    def read_only(self) -> "SyncConfigurationBuilder":
        """Open the file read-only. Requires wait_for_initial_remote_data()."""
        self._check_not_consumed()
        self._options.read_only = True
        return self

    def delete_on_logout(self) -> "SyncConfigurationBuilder":
        """Ask the storage engine to delete the file when the owner logs out."""
        self._check_not_consumed()
        self._options.delete_on_logout = True
        return self

    # =========================================================================
    # Build
    # =========================================================================

    def build(self) -> SyncConfiguration:
        """
        Validate the options and assemble the configuration.

        The builder is consumed whether or not this succeeds.

        Returns:
            Immutable SyncConfiguration

        Raises:
            BuilderConsumedError: If build() was already called
            MissingRequiredFieldError: If url or owner is missing
            IncompatibleOptionError: If read-only is combined wrongly
            MissingIdentityError: If the owner has no identity
            ValidationError: If the identity is not a single path segment
            PathTooLongError, FileNameTooLongError, DirectoryCreationError:
                If no usable local path can be derived
        """
        self._check_not_consumed()
        self._consumed = True

        url = self._locator.url if self._locator is not None else None
        try:
            config, plan = self._assemble()
        except SyncConfigError as e:
            _events.build_failed(url, e)
            raise

        _events.configuration_built(
            config.server_url, config.canonical_path, plan.strategy.value, config.read_only
        )
        return config

    def _validate_options(self) -> None:
        options = self._options
        if options.read_only:
            if options.initial_data is not None:
                raise IncompatibleOptionError(
                    "This file is marked as read-only. "
                    "Read-only files cannot use initial_data().",
                    option="read_only",
                    conflicts_with="initial_data",
                )
            if not options.wait_for_initial_remote_data:
                raise IncompatibleOptionError(
                    "A read-only file must be provided by some source. "
                    "'wait_for_initial_remote_data()' wasn't enabled, "
                    "which is currently the only supported source.",
                    option="read_only",
                    conflicts_with="wait_for_initial_remote_data",
                )

    def _assemble(self) -> tuple[SyncConfiguration, LocalPathPlan]:
        if self._locator is None:
            raise MissingRequiredFieldError("url")
        if self._owner is None:
            raise MissingRequiredFieldError("owner")

        self._validate_options()
        options = self._options
        defaults = self._defaults

        identity = self._owner.identity
        if self._locator.has_placeholder and not identity:
            raise MissingIdentityError(
                self._locator.url,
                "The URL contains a '/~/', but the owner does not have an identity. "
                "Most likely it hasn't been authenticated yet or has been created "
                "directly from an access token. Use a path without '/~/'.",
            )

        reactive_factory = options.reactive_factory
        if (
            reactive_factory is None
            and defaults.reactive_factory is not None
            and defaults.reactive_available()
        ):
            reactive_factory = defaults.reactive_factory

        resolved = resolve_locator(self._locator, identity)
        root_dir = options.directory if options.directory is not None else defaults.root_directory
        plan = derive_path_plan(
            resolved,
            root_dir,
            identity,
            options.file_name,
            ensure_dir=defaults.ensure_dir,
        )
        modules = options.modules if options.modules is not None else defaults.default_schema
        error_handler = options.error_handler or defaults.default_error_handler

        config = SyncConfiguration(
            directory=plan.directory,
            file_name=plan.file_name,
            canonical_path=canonical_path(plan.directory, plan.file_name),
            encryption_key=options.encryption_key,
            schema_version=options.schema_version,
            schema=frozenset(modules),
            durability=options.durability,
            initial_data=options.initial_data,
            read_only=options.read_only,
            reactive_factory=reactive_factory,
            owner=self._owner,
            identity=identity,
            remote_locator=resolved,
            error_handler=error_handler,
            delete_on_logout=options.delete_on_logout,
            wait_for_initial_remote_data=options.wait_for_initial_remote_data,
        )
        return config, plan
