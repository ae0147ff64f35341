"""Metrics hook protocol and no-op default implementation.

The uploader emits counters and timings at its I/O boundaries.  By default
a :class:`NoopMetricsHook` is used so there is zero overhead.  Supply any
object satisfying :class:`MetricsHook` via ``UploadConfig(metrics=...)`` to
route them to StatsD, Prometheus or similar.

Emitted metric names:

* ``gh_upload.requests_total``         -- counter
* ``gh_upload.request_duration_ms``    -- timing
* ``gh_upload.upload_success_total``   -- counter
* ``gh_upload.upload_failure_total``   -- counter
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    All methods accept an optional *tags* dict of string keys and values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Default metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
