"""Structured JSON logging for gh-upload-image.

Every log record is emitted as a single-line JSON object so that upload
runs driven from CI can be consumed by log pipelines without parsing.

Typical structured output::

    {"ts": "2026-01-01T12:00:00.123456+00:00", "level": "DEBUG",
     "logger": "gh_upload_image", "message": "Requesting upload policy",
     "file_name": "shot.png", "repository": "octo/cat"}

Usage::

    from gh_upload_image.observability import UploadLogAdapter, get_logger

    log = UploadLogAdapter(get_logger(), verbose=True, repository="octo/cat")
    log.debug("Getting GitHub token")
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys: ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Extra structured fields passed via
    ``extra={"extra_fields": {...}}`` are merged into the top-level object.
    ``exc_info`` and ``stack_info`` are serialised when present.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(record, "extra_fields", None)
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name so that ``get_logger`` is idempotent.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "gh_upload_image",
    *,
    level: int | str = logging.DEBUG,
    stream: Any | None = None,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Get or create a structured logger.

    Parameters
    ----------
    name:
        Logger name.  Defaults to ``"gh_upload_image"``.
    level:
        Minimum log level, as an ``int`` or a case-insensitive string.
    stream:
        Output stream for the default handler.  Defaults to ``sys.stderr``.
    handler:
        Use this handler instead of a JSON ``StreamHandler``.  The CLI
        passes a ``RichHandler`` here.

    Returns
    -------
    logging.Logger
        Repeated calls with the same *name* return the same logger and do
        **not** add duplicate handlers.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        if handler is None:
            handler = logging.StreamHandler(stream or sys.stderr)
            handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)

        # Prevent duplicate messages when the root logger also has handlers.
        logger.propagate = False

        _configured_loggers.add(name)

    return logger


class UploadLogAdapter(logging.LoggerAdapter):
    """Logger adapter bound to a single upload.

    ``debug`` records are dropped unless *verbose* is set; every other
    level passes through.  Keyword *fields* are merged into each record's
    ``extra_fields``, underneath any fields given on the call itself.
    """

    def __init__(
        self,
        logger: logging.Logger | logging.LoggerAdapter,
        verbose: bool = False,
        **fields: Any,
    ) -> None:
        super().__init__(logger, {})
        self.verbose = verbose
        self.fields = fields

    def isEnabledFor(self, level: int) -> bool:  # noqa: N802
        if level <= logging.DEBUG and not self.verbose:
            return False
        return super().isEnabledFor(level)

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["extra_fields"] = {**self.fields, **extra.get("extra_fields", {})}
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **fields: Any) -> UploadLogAdapter:
        """Return a copy with *fields* added to the bound fields."""
        return UploadLogAdapter(self.logger, self.verbose, **{**self.fields, **fields})
