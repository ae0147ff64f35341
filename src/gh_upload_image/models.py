"""Public data models for gh-upload-image.

All types are plain dataclasses.  Requests, parsed repositories and
results are frozen; the upload policy is built once per upload from the
server response and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any

import httpx


@dataclass(frozen=True)
class UploadRequest:
    """Everything needed to upload one local file.

    Attributes
    ----------
    file_path:
        Path to the file to upload.  Must be an existing regular file.
    repository:
        Repository reference: ``owner/name``, an HTTPS URL or an SSH
        ``git@host:owner/name.git`` reference.
    dry_run:
        Validate and compute metadata only; make no external calls.
    verbose:
        Emit step-by-step debug logging.
    """

    file_path: str
    repository: str
    dry_run: bool = False
    verbose: bool = False


@dataclass(frozen=True)
class ParsedRepository:
    """A repository reference normalised to its owner and name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


def _check_upload_url(url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ValueError(f"upload_url is not a valid URL: {exc}") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError(f"upload_url must be an absolute http(s) URL, got {url!r}")


def _form_value(value: Any) -> str:
    """Encode one policy form value the way a browser ``FormData`` would."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class UploadPolicy:
    """A signed, short-lived authorisation to upload directly to storage.

    Attributes
    ----------
    upload_url:
        Storage endpoint the file is POSTed to.
    form_fields:
        Opaque fields that must be echoed back verbatim, in order, in the
        multipart upload body.
    asset_id:
        Identifier of the asset on GitHub, or ``None`` when the response
        did not include one.
    """

    upload_url: str
    form_fields: dict[str, str] = field(default_factory=dict)
    asset_id: str | None = None

    @classmethod
    def from_response(cls, payload: Mapping[str, Any]) -> UploadPolicy:
        """Build a policy from the decoded JSON policy response.

        Raises
        ------
        KeyError
            If ``upload_url`` is missing or empty.
        ValueError
            If ``upload_url`` is not an absolute http(s) URL, or ``form`` is
            present but not an object.
        """
        upload_url = payload.get("upload_url")
        if not upload_url:
            raise KeyError("upload_url")
        _check_upload_url(str(upload_url))

        raw_form = payload.get("form") or {}
        if not isinstance(raw_form, Mapping):
            raise ValueError(f"form must be an object, got {type(raw_form).__name__}")
        form_fields = {str(key): _form_value(value) for key, value in raw_form.items()}

        asset = payload.get("asset")
        asset_id: str | None = None
        if isinstance(asset, Mapping) and asset.get("id") is not None:
            asset_id = str(asset["id"])

        return cls(upload_url=str(upload_url), form_fields=form_fields, asset_id=asset_id)


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a successful (or dry-run) upload.

    Attributes
    ----------
    url:
        Permanent asset URL, or a descriptive placeholder in dry-run mode.
    asset_id:
        Asset identifier; always ``None`` for dry runs.
    file_name:
        Base name of the uploaded file.
    file_size:
        Size of the file in bytes.
    mime_type:
        MIME type sent with the file.
    repository:
        ``owner/name`` of the target repository.
    dry_run:
        Whether this result was produced without uploading.
    """

    url: str
    asset_id: str | None
    file_name: str
    file_size: int
    mime_type: str
    repository: str
    dry_run: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
