"""Utility helpers: size formatting and secret redaction."""

from __future__ import annotations

from .format import format_file_size
from .redact import redact

__all__ = ["format_file_size", "redact"]
