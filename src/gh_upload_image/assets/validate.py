"""Local checks performed before any network or process call."""

from __future__ import annotations

from pathlib import Path

from gh_upload_image.assets.mime import (
    ALLOWED_EXTENSIONS,
    get_extension,
    is_extension_allowed,
)
from gh_upload_image.errors import (
    GhUploadFileNotFoundError,
    GhUploadMissingArgumentError,
    GhUploadUnsupportedExtensionError,
)


def file_exists(file_path: str) -> bool:
    """Return ``True`` if *file_path* is an existing regular file.

    Directories, dangling symlinks and unreadable paths all count as
    missing.
    """
    try:
        return Path(file_path).is_file()
    except OSError:
        return False


def get_file_size(file_path: str) -> int:
    """Return the size of *file_path* in bytes."""
    return Path(file_path).stat().st_size


def validate_upload_input(file_path: str | None, repository: str | None) -> None:
    """Validate the inputs of an upload.

    Checks run in order: both arguments present, the file exists, and its
    extension is on the allow-list.

    Raises
    ------
    GhUploadMissingArgumentError
        If *file_path* or *repository* is empty.
    GhUploadFileNotFoundError
        If *file_path* is not an existing regular file.
    GhUploadUnsupportedExtensionError
        If the extension is not in :data:`ALLOWED_EXTENSIONS`.
    """
    if not file_path:
        raise GhUploadMissingArgumentError(
            message="file_path is required",
            context={"argument": "file_path"},
        )
    if not repository:
        raise GhUploadMissingArgumentError(
            message="repository is required",
            context={"argument": "repository"},
        )
    if not file_exists(file_path):
        raise GhUploadFileNotFoundError(
            message=f"File does not exist: {file_path}",
            context={"file_path": file_path},
        )
    if not is_extension_allowed(file_path):
        ext = get_extension(file_path)
        raise GhUploadUnsupportedExtensionError(
            message=(
                f'File extension "{ext}" is not allowed. '
                f"Allowed extensions: {', '.join(ALLOWED_EXTENSIONS)}"
            ),
            context={
                "file_path": file_path,
                "extension": ext,
                "allowed_extensions": list(ALLOWED_EXTENSIONS),
            },
        )
