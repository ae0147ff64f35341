"""Upload policy API.

GitHub attachments are uploaded in two requests:

1. **Request a policy** -- POST the file's name, size, MIME type and
   repository id to ``/upload/policies/assets``.  The response carries the
   storage ``upload_url``, a ``form`` of signed fields and the ``asset``.
2. **Submit the asset** -- POST a multipart body to ``upload_url`` that
   echoes every ``form`` field verbatim followed by the ``file`` part.

Neither request is retried.  A policy that is never used simply expires
on the server.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from gh_upload_image.config import UploadConfig
from gh_upload_image.errors import GhUploadPolicyError, GhUploadTransferError
from gh_upload_image.models import UploadPolicy

from .transport import AsyncUploadTransport


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".rstrip()


def _is_upload_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class AsyncPolicyAPI:
    """Request upload policies and submit files against them.

    Parameters
    ----------
    transport:
        A configured :class:`AsyncUploadTransport`.
    config:
        Supplies the policy URL and ``User-Agent``.
    """

    def __init__(self, transport: AsyncUploadTransport, config: UploadConfig) -> None:
        self._transport = transport
        self._config = config

    async def request_policy(
        self,
        *,
        token: str,
        repository_id: int,
        file_name: str,
        file_size: int,
        mime_type: str,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> UploadPolicy:
        """Request a signed upload policy for one file.

        Returns
        -------
        UploadPolicy
            ``asset_id`` is ``None`` if the response lacked ``asset.id``.

        Raises
        ------
        GhUploadPolicyError
            On transport failure, any non-2xx status, a non-JSON body, or a
            response without ``upload_url``.
        """
        url = self._config.policy_url
        form = {
            "name": file_name,
            "size": str(file_size),
            "content_type": mime_type,
            "repository_id": str(repository_id),
        }
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/x-www-form-urlencoded",
            "Authorization": f"token {token}",
            "User-Agent": self._config.user_agent,
        }

        try:
            response = await self._transport.post(
                url, op="request_policy", token=token, log=log, data=form, headers=headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GhUploadPolicyError(
                message=f"Failed to get upload policy: {exc}",
                context={"url": url, "reason": "network_error"},
                cause=exc,
            ) from exc

        if not response.is_success:
            raise GhUploadPolicyError(
                message=f"Failed to get upload policy: {_status_line(response)}. {response.text}",
                context={
                    "url": url,
                    "status_code": response.status_code,
                    "body": response.text,
                },
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise GhUploadPolicyError(
                message="Failed to get upload policy: response is not valid JSON",
                context={"url": url, "status_code": response.status_code, "reason": "invalid_json"},
                cause=exc,
            ) from exc

        if not isinstance(payload, Mapping):
            raise GhUploadPolicyError(
                message="Failed to get upload policy: response is not a JSON object",
                context={"url": url, "status_code": response.status_code, "reason": "invalid_json"},
            )

        try:
            return UploadPolicy.from_response(payload)
        except (KeyError, ValueError) as exc:
            raise GhUploadPolicyError(
                message=f"Failed to get upload policy: malformed response ({exc})",
                context={"url": url, "status_code": response.status_code, "reason": "malformed"},
                cause=exc,
            ) from exc

    async def upload_asset(
        self,
        policy: UploadPolicy,
        *,
        file_name: str,
        data: bytes,
        mime_type: str,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        """Submit *data* to the storage endpoint named by *policy*.

        The multipart body carries every policy form field, in order, then
        the ``file`` part.  No auth header is sent.

        Raises
        ------
        GhUploadTransferError
            On transport failure, an unusable ``upload_url``, or any status
            outside 200-299.
        """
        try:
            response = await self._transport.post(
                policy.upload_url,
                op="upload_asset",
                log=log,
                data=dict(policy.form_fields),
                files={"file": (file_name, data, mime_type)},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise GhUploadTransferError(
                message=f"Failed to upload file: {exc}",
                context={"upload_url": policy.upload_url},
                cause=exc,
            ) from exc

        if not _is_upload_success(response.status_code):
            raise GhUploadTransferError(
                message=f"Failed to upload file: {_status_line(response)}. {response.text}",
                context={
                    "upload_url": policy.upload_url,
                    "status_code": response.status_code,
                    "body": response.text,
                },
            )
