"""Local asset handling: extension allow-list, MIME lookup and validation.

Exports
-------
get_mime_type / is_extension_allowed / get_extension_category
    Pure lookups over the static extension table.
file_exists / get_file_size
    Filesystem helpers.
validate_upload_input
    The local validation step of an upload.
"""

from .mime import (
    ALLOWED_EXTENSIONS,
    DEFAULT_MIME_TYPE,
    EXTENSION_CATEGORIES,
    MIME_TYPES,
    get_extension,
    get_extension_category,
    get_mime_type,
    is_extension_allowed,
)
from .validate import file_exists, get_file_size, validate_upload_input

__all__ = [
    "ALLOWED_EXTENSIONS",
    "DEFAULT_MIME_TYPE",
    "EXTENSION_CATEGORIES",
    "MIME_TYPES",
    "file_exists",
    "get_extension",
    "get_extension_category",
    "get_file_size",
    "get_mime_type",
    "is_extension_allowed",
    "validate_upload_input",
]
