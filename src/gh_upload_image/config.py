"""Configuration for gh-upload-image.

:class:`UploadConfig` captures every tuneable knob of the uploader: the
GitHub endpoints, the ``gh`` executable, timeouts, proxy and debug
switches.  The defaults target github.com, so most callers never need
to construct one explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from gh_upload_image._version import __version__

DEFAULT_POLICY_URL = "https://github.com/upload/policies/assets"
"""Endpoint that issues signed upload policies."""

DEFAULT_ASSET_URL_BASE = "https://github.com/user-attachments/assets"
"""Prefix of the permanent URL of an uploaded asset."""

DEFAULT_USER_AGENT = f"gh-upload-image/{__version__}"

_LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")


@dataclass
class UploadConfig:
    """Complete configuration for an :class:`AsyncUploader`.

    Parameters
    ----------
    policy_url:
        URL the upload-policy request is POSTed to.
    asset_url_base:
        Prefix joined with the asset id to form the permanent URL.
    user_agent:
        ``User-Agent`` header sent with the policy request.
    gh_path:
        Name or path of the GitHub CLI executable.
    timeout_seconds:
        HTTP request timeout in seconds.
    command_timeout_seconds:
        Maximum run time of a single ``gh`` invocation.  The process is
        killed when it is exceeded.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~gh_upload_image.observability.MetricsHook`.
    debug_dump_payload:
        Write a redacted dump of the policy request/response to *stderr*.
    """

    # ── Endpoints ───────────────────────────────────────────────────────
    policy_url: str = DEFAULT_POLICY_URL

    asset_url_base: str = DEFAULT_ASSET_URL_BASE

    user_agent: str = DEFAULT_USER_AGENT

    # ── gh CLI ──────────────────────────────────────────────────────────
    gh_path: str = "gh"

    command_timeout_seconds: float = 30.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 60.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        parsed = urlparse(self.policy_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(f"policy_url must be an http(s) URL, got {self.policy_url!r}")
        if parsed.scheme == "http" and parsed.hostname not in _LOCAL_HOSTS:
            raise ValueError(
                f"policy_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your GitHub token, or target localhost for testing."
            )

        if not self.gh_path:
            raise ValueError("gh_path must not be empty")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.command_timeout_seconds <= 0:
            raise ValueError(
                f"command_timeout_seconds must be > 0, got {self.command_timeout_seconds}"
            )

    def asset_url(self, asset_id: str) -> str:
        """Return the permanent URL of the asset *asset_id*."""
        return f"{self.asset_url_base.rstrip('/')}/{asset_id}"
