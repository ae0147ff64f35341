"""gh_upload_image — upload files to GitHub's attachment CDN.

Public re-exports
-----------------

* **Upload:** :func:`upload`, :class:`AsyncUploader`
* **Rendering:** :func:`render_markdown`, :func:`format_file_size`
* **Helpers:** repository parsing, MIME lookup and file checks
* **Configuration:** :class:`UploadConfig`
* **Errors:** Every :class:`GhUploadError` subclass and :class:`ErrorCode`
* **Models:** request, policy and result dataclasses

Usage::

    import asyncio
    from gh_upload_image import render_markdown, upload

    result = asyncio.run(upload("screenshot.png", "owner/repo"))
    print(render_markdown(result, "Screenshot"))
"""

from __future__ import annotations

from gh_upload_image._version import __version__

# ── Helpers ─────────────────────────────────────────────────────────────
from gh_upload_image.assets import (
    ALLOWED_EXTENSIONS,
    MIME_TYPES,
    file_exists,
    get_extension_category,
    get_file_size,
    get_mime_type,
    is_extension_allowed,
)

# ── Configuration ───────────────────────────────────────────────────────
from gh_upload_image.config import UploadConfig

# ── Errors ──────────────────────────────────────────────────────────────
from gh_upload_image.errors import (
    ErrorCode,
    GhUploadAuthError,
    GhUploadError,
    GhUploadFileNotFoundError,
    GhUploadInvalidRepositoryError,
    GhUploadMissingArgumentError,
    GhUploadPolicyError,
    GhUploadRepositoryResolutionError,
    GhUploadTransferError,
    GhUploadUnsupportedExtensionError,
)
from gh_upload_image.github import CommandResult, CommandRunner, SubprocessRunner
from gh_upload_image.markdown import render_markdown

# ── Models ──────────────────────────────────────────────────────────────
from gh_upload_image.models import (
    ParsedRepository,
    UploadPolicy,
    UploadRequest,
    UploadResult,
)
from gh_upload_image.repository import parse_repository

# ── Upload ──────────────────────────────────────────────────────────────
from gh_upload_image.uploader import AsyncUploader, upload
from gh_upload_image.utils.format import format_file_size

__all__ = [
    "__version__",
    # Upload
    "upload",
    "AsyncUploader",
    "CommandRunner",
    "CommandResult",
    "SubprocessRunner",
    # Rendering
    "render_markdown",
    "format_file_size",
    # Helpers
    "ALLOWED_EXTENSIONS",
    "MIME_TYPES",
    "file_exists",
    "get_file_size",
    "get_mime_type",
    "get_extension_category",
    "is_extension_allowed",
    "parse_repository",
    # Configuration
    "UploadConfig",
    # Errors
    "GhUploadError",
    "ErrorCode",
    "GhUploadMissingArgumentError",
    "GhUploadFileNotFoundError",
    "GhUploadUnsupportedExtensionError",
    "GhUploadInvalidRepositoryError",
    "GhUploadAuthError",
    "GhUploadRepositoryResolutionError",
    "GhUploadPolicyError",
    "GhUploadTransferError",
    # Models
    "UploadRequest",
    "ParsedRepository",
    "UploadPolicy",
    "UploadResult",
]
