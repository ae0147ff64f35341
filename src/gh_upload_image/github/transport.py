"""Async HTTP transport for the GitHub upload endpoints.

A thin layer over :class:`httpx.AsyncClient` that adds timing metrics and
an optional redacted debug dump.  It deliberately does not retry and does
not interpret status codes; the policy API maps responses to errors.
"""

from __future__ import annotations

import json as _json
import logging
import sys
import time
from typing import Any

import httpx

from gh_upload_image.config import UploadConfig
from gh_upload_image.observability import NoopMetricsHook, get_logger
from gh_upload_image.utils.redact import redact

_log = get_logger("gh_upload_image.transport")


def _dump_exchange(
    method: str,
    url: str,
    headers: dict[str, str] | None,
    payload: dict[str, Any] | None,
    response: httpx.Response,
    token: str | None = None,
) -> None:
    """Write a redacted dump of one request/response pair to stderr."""
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text[:1000]

    dump: dict[str, Any] = {"method": method, "url": url}
    if headers:
        dump["request_headers"] = headers
    if payload is not None:
        dump["request_body"] = payload
    dump["response_status"] = response.status_code
    dump["response_body"] = body
    print(
        _json.dumps(redact(dump, token), indent=2, default=str),
        file=sys.stderr,
    )


class AsyncUploadTransport:
    """HTTP transport shared by the policy request and the file upload.

    Parameters
    ----------
    config:
        Controls timeout, proxy, metrics and debug dumps.
    client:
        An existing :class:`httpx.AsyncClient`.  When given, the transport
        does not close it.
    """

    def __init__(
        self,
        config: UploadConfig,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds),
            proxy=config.http_proxy,
        )

    async def post(
        self,
        url: str,
        *,
        op: str,
        token: str | None = None,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """POST to *url* and return the raw response.

        Parameters
        ----------
        url:
            Absolute URL.
        op:
            Short operation name used in metric tags and logs.
        token:
            Secret to scrub from debug dumps.
        log:
            Logger for request failures.  Defaults to the module logger.
        **kwargs:
            Forwarded to :meth:`httpx.AsyncClient.post`.

        Raises
        ------
        httpx.HTTPError
            On transport-level failures (timeouts, DNS, connection reset).
        """
        t0 = time.monotonic()
        try:
            response = await self._client.post(url, **kwargs)
        except httpx.HTTPError as exc:
            self._metrics.increment(
                "gh_upload.requests_total",
                tags={"op": op, "status": "error"},
            )
            (log or _log).debug(
                "Request network error",
                extra={"extra_fields": {"op": op, "error": str(exc)}},
            )
            raise
        elapsed_ms = (time.monotonic() - t0) * 1000

        status = str(response.status_code)
        self._metrics.increment(
            "gh_upload.requests_total",
            tags={"op": op, "status": status},
        )
        self._metrics.timing(
            "gh_upload.request_duration_ms",
            elapsed_ms,
            tags={"op": op, "status": status},
        )

        if self._config.debug_dump_payload:
            data = kwargs.get("data")
            _dump_exchange(
                "POST",
                url,
                kwargs.get("headers"),
                dict(data) if data is not None else None,
                response,
                token=token,
            )

        return response

    async def close(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncUploadTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
