"""
errors.py - Domain-specific exceptions for realm_sync_config.

All exceptions inherit from SyncConfigError for unified handling.
Each exception type represents a distinct failure mode. Every failure is
a deterministic validation error: nothing here is transient or retryable.
"""

from typing import Any


class SyncConfigError(Exception):
    """Base exception for all realm_sync_config errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class MalformedLocatorError(SyncConfigError):
    """
    Raised when a raw remote identifier cannot be parsed as a URI.
    """

    def __init__(self, raw: Any, reason: str | None = None) -> None:
        context: dict[str, Any] = {"raw": raw}
        if reason is not None:
            context["reason"] = reason
        super().__init__(f"Invalid URI: {raw!r}", context=context)
        self.raw = raw
        self.reason = reason


class InvalidSegmentError(SyncConfigError):
    """
    Raised when a path segment is a relative reference ('.' or '..').
    """

    def __init__(self, segment: str, raw: str) -> None:
        super().__init__(
            f"The URI has an invalid segment: {segment}",
            context={"segment": segment, "raw": raw},
        )
        self.segment = segment
        self.raw = raw


class InvalidCharacterError(SyncConfigError):
    """
    Raised when a path segment contains characters outside
    0-9, a-z, A-Z, '.', '_' and '-'.
    """

    def __init__(self, segment: str, raw: str) -> None:
        super().__init__(
            f"The URI must only contain characters 0-9, a-z, A-Z, ., _, and -: {segment!r}",
            context={"segment": segment, "raw": raw},
        )
        self.segment = segment
        self.raw = raw


class ReservedSuffixError(SyncConfigError):
    """
    Raised when the default file name ends with a suffix the storage
    engine reserves for its own files.
    """

    def __init__(self, file_name: str, suffix: str) -> None:
        super().__init__(
            f"The URI must not end with a reserved storage suffix: {file_name}",
            context={"file_name": file_name, "suffix": suffix},
        )
        self.file_name = file_name
        self.suffix = suffix


class MissingIdentityError(SyncConfigError):
    """
    Raised when a concrete identity is needed but the owner has none.

    Most likely the owner has not been authenticated yet or was created
    directly from an access token.
    """

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(
            message
            or "The URL contains a placeholder segment, but the owner does not have an identity.",
            context={"url": url},
        )
        self.url = url


class MissingRequiredFieldError(SyncConfigError):
    """Raised when build() is called without a required field."""

    def __init__(self, field: str) -> None:
        super().__init__(f"'{field}' is required", context={"field": field})
        self.field = field


class IncompatibleOptionError(SyncConfigError):
    """
    Raised when builder options that exclude each other are combined.
    """

    def __init__(self, message: str, option: str, conflicts_with: str) -> None:
        super().__init__(
            message, context={"option": option, "conflicts_with": conflicts_with}
        )
        self.option = option
        self.conflicts_with = conflicts_with


class PathTooLongError(SyncConfigError):
    """
    Raised when every fallback strategy still yields a full path over
    the length budget.
    """

    def __init__(self, full_path: str, limit: int) -> None:
        length = len(full_path.encode("utf-8"))
        super().__init__(
            f"Full path name must not exceed {limit} bytes: {full_path}",
            context={"full_path": full_path, "limit": limit, "length": length},
        )
        self.full_path = full_path
        self.limit = limit
        self.length = length


class FileNameTooLongError(SyncConfigError):
    """Raised when the chosen file name exceeds the name budget."""

    def __init__(self, file_name: str, limit: int) -> None:
        length = len(file_name.encode("utf-8"))
        super().__init__(
            f"File name exceeds {limit} bytes: {length}",
            context={"file_name": file_name, "limit": limit, "length": length},
        )
        self.file_name = file_name
        self.limit = limit
        self.length = length


class DirectoryCreationError(SyncConfigError):
    """
    Raised when the local directory cannot be created or written.

    This wraps OSError with the directory that was being prepared.
    """

    def __init__(self, directory: str, reason: str | None = None) -> None:
        context: dict[str, Any] = {"directory": directory}
        if reason is not None:
            context["reason"] = reason
        super().__init__(
            f"Could not create directory for saving the file: {directory}",
            context=context,
        )
        self.directory = directory
        self.reason = reason


class InvalidIdentityOwnerError(SyncConfigError):
    """Raised when the identity owner is not authenticated."""

    def __init__(self, message: str = "Owner not authenticated or authentication expired.") -> None:
        super().__init__(message)


class ValidationError(SyncConfigError):
    """
    Raised when a builder setter receives an invalid argument.

    This includes empty names, wrongly sized encryption keys and
    negative schema versions.
    """

    def __init__(
        self, message: str, field: str | None = None, value: Any = None
    ) -> None:
        context = {}
        if field is not None:
            context["field"] = field
        if value is not None:
            context["value"] = repr(value)[:100]
        super().__init__(message, context=context)
        self.field = field
        self.value = value


class BuilderConsumedError(SyncConfigError):
    """Raised when a builder is used again after build()."""

    def __init__(self) -> None:
        super().__init__(
            "This builder has already been consumed by build(); create a new builder."
        )
