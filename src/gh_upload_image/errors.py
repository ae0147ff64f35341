"""Error hierarchy for gh-upload-image.

Every public error class inherits from GhUploadError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

All errors are terminal: the uploader never retries, and the first
failure aborts the whole upload.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    MISSING_ARGUMENT = "MISSING_ARGUMENT"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    UNSUPPORTED_EXTENSION = "UNSUPPORTED_EXTENSION"
    INVALID_REPOSITORY = "INVALID_REPOSITORY"
    AUTH_FAILED = "AUTH_FAILED"
    REPOSITORY_RESOLUTION_FAILED = "REPOSITORY_RESOLUTION_FAILED"
    POLICY_REQUEST_FAILED = "POLICY_REQUEST_FAILED"
    UPLOAD_FAILED = "UPLOAD_FAILED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class GhUploadError(Exception):
    """Base exception for all gh-upload-image errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A human-readable description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Local validation errors
# ---------------------------------------------------------------------------

class GhUploadMissingArgumentError(GhUploadError):
    """A required input (file path or repository) was empty.

    Context keys: ``argument``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MISSING_ARGUMENT,
            message=message,
            context=context,
            cause=cause,
        )


class GhUploadFileNotFoundError(GhUploadError):
    """The path does not resolve to an existing regular file.

    Context keys: ``file_path``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.FILE_NOT_FOUND,
            message=message,
            context=context,
            cause=cause,
        )


class GhUploadUnsupportedExtensionError(GhUploadError):
    """The file extension is outside the upload allow-list.

    Context keys: ``file_path``, ``extension``, ``allowed_extensions``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_EXTENSION,
            message=message,
            context=context,
            cause=cause,
        )


class GhUploadInvalidRepositoryError(GhUploadError):
    """The repository reference matches none of the accepted shapes.

    Context keys: ``repository``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_REPOSITORY,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# gh CLI errors
# ---------------------------------------------------------------------------

class GhUploadAuthError(GhUploadError):
    """``gh auth token`` failed, returned nothing, or could not be spawned.

    Context keys: ``argv``, ``returncode``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.AUTH_FAILED,
            message=message,
            context=context,
            cause=cause,
        )


class GhUploadRepositoryResolutionError(GhUploadError):
    """The repository id lookup failed or returned non-numeric output.

    Context keys: ``repository``, ``argv``, ``returncode``, ``output``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.REPOSITORY_RESOLUTION_FAILED,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# HTTP errors
# ---------------------------------------------------------------------------

class GhUploadPolicyError(GhUploadError):
    """The upload-policy request failed or its response was unusable.

    Context keys: ``status_code``, ``body``, ``url``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.POLICY_REQUEST_FAILED,
            message=message,
            context=context,
            cause=cause,
        )


class GhUploadTransferError(GhUploadError):
    """The storage endpoint rejected the file submission.

    Context keys: ``status_code``, ``body``, ``upload_url``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_FAILED,
            message=message,
            context=context,
            cause=cause,
        )
