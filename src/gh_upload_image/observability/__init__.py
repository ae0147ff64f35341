"""Observability: structured logging and metrics hooks for gh-upload-image."""

from __future__ import annotations

from .logger import StructuredFormatter, UploadLogAdapter, get_logger
from .metrics import MetricsHook, NoopMetricsHook

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "StructuredFormatter",
    "UploadLogAdapter",
    "get_logger",
]
