"""Extension allow-list and MIME type table.

GitHub only accepts a fixed set of attachment types.  Lookups here are
exact matches on the lowercased final extension; nothing is sniffed from
file contents.
"""

from __future__ import annotations

from pathlib import PurePath

ALLOWED_EXTENSIONS: tuple[str, ...] = (
    ".gif",
    ".jpg",
    ".jpeg",
    ".png",
    ".docx",
    ".gz",
    ".log",
    ".pdf",
    ".pptx",
    ".txt",
    ".xlsx",
    ".zip",
    ".webp",
    ".svg",
    ".mp4",
    ".mov",
)
"""Extensions GitHub accepts for attachments."""

EXTENSION_CATEGORIES: dict[str, str] = {
    ".gif": "image",
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".webp": "image",
    ".svg": "image",
    ".mp4": "video",
    ".mov": "video",
    ".pdf": "document",
    ".docx": "document",
    ".pptx": "document",
    ".xlsx": "document",
    ".txt": "document",
    ".log": "document",
    ".zip": "archive",
    ".gz": "archive",
}

MIME_TYPES: dict[str, str] = {
    ".gif": "image/gif",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".txt": "text/plain",
    ".log": "text/plain",
    ".gz": "application/gzip",
    ".zip": "application/zip",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
}

DEFAULT_MIME_TYPE = "application/octet-stream"


def get_extension(path: str) -> str:
    """Return the lowercased final extension of *path* (``""`` if none)."""
    return PurePath(path).suffix.lower()


def get_mime_type(path: str) -> str:
    """Return the MIME type for *path*, falling back to
    ``application/octet-stream`` for unknown extensions.
    """
    return MIME_TYPES.get(get_extension(path), DEFAULT_MIME_TYPE)


def is_extension_allowed(path: str) -> bool:
    """Return ``True`` if GitHub accepts files with this extension."""
    return get_extension(path) in ALLOWED_EXTENSIONS


def get_extension_category(path: str) -> str | None:
    """Return ``"image"``, ``"video"``, ``"document"`` or ``"archive"``,
    or ``None`` if the extension is not allowed.
    """
    return EXTENSION_CATEGORIES.get(get_extension(path))
