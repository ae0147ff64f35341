"""Upload orchestration.

:class:`AsyncUploader` runs one upload as a fixed, strictly sequential
pipeline:

1. Validate the inputs locally (arguments, file, extension).
2. Derive metadata: repository owner/name, file name, size, MIME type.
3. In dry-run mode, stop here and return a placeholder result.
4. Get a token from ``gh auth token``.
5. Resolve the numeric repository id with ``gh api``.
6. Request a signed upload policy.
7. Submit the file to the policy's storage URL.
8. Build the permanent asset URL.

The first failure aborts the pipeline and propagates; nothing is retried
and no state is kept between uploads.

Usage::

    import asyncio
    from gh_upload_image import upload

    result = asyncio.run(upload("shot.png", "octo/cat"))
    print(result.url)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import httpx

from gh_upload_image.assets import get_file_size, get_mime_type, validate_upload_input
from gh_upload_image.config import UploadConfig
from gh_upload_image.errors import GhUploadError, GhUploadPolicyError
from gh_upload_image.github import (
    AsyncGhClient,
    AsyncPolicyAPI,
    AsyncUploadTransport,
    CommandRunner,
    SubprocessRunner,
)
from gh_upload_image.models import UploadRequest, UploadResult
from gh_upload_image.observability import NoopMetricsHook, UploadLogAdapter, get_logger
from gh_upload_image.repository import parse_repository
from gh_upload_image.utils.format import format_file_size


class AsyncUploader:
    """Upload local files as GitHub attachments.

    Parameters
    ----------
    config:
        Endpoint, timeout and observability settings.  Defaults to
        ``UploadConfig()``.
    runner:
        Process runner used for ``gh``.  Defaults to a
        :class:`SubprocessRunner` with the configured command timeout.
    http_client:
        Optional :class:`httpx.AsyncClient`; it is not closed by
        :meth:`close`.
    logger:
        Logger for step-by-step debug output.  Defaults to the package's
        structured logger.
    """

    def __init__(
        self,
        config: UploadConfig | None = None,
        *,
        runner: CommandRunner | None = None,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self._config = config or UploadConfig()
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )
        self._logger = logger or get_logger()
        self._gh = AsyncGhClient(
            runner or SubprocessRunner(self._config.command_timeout_seconds),
            gh_path=self._config.gh_path,
        )
        self._transport = AsyncUploadTransport(self._config, client=http_client)
        self._policies = AsyncPolicyAPI(self._transport, self._config)

    async def upload(self, request: UploadRequest) -> UploadResult:
        """Upload the file described by *request*.

        Returns
        -------
        UploadResult
            ``dry_run=True`` results have a placeholder URL and no asset id.

        Raises
        ------
        GhUploadMissingArgumentError, GhUploadFileNotFoundError,
        GhUploadUnsupportedExtensionError, GhUploadInvalidRepositoryError
            From local validation, before any external call.
        GhUploadAuthError, GhUploadRepositoryResolutionError
            From the ``gh`` lookups.
        GhUploadPolicyError, GhUploadTransferError
            From the two HTTP requests.
        """
        try:
            result = await self._run(request)
        except GhUploadError as exc:
            self._metrics.increment(
                "gh_upload.upload_failure_total",
                tags={"code": str(getattr(exc.code, "value", exc.code))},
            )
            raise
        if not result.dry_run:
            self._metrics.increment("gh_upload.upload_success_total")
        return result

    async def _run(self, request: UploadRequest) -> UploadResult:
        validate_upload_input(request.file_path, request.repository)

        repo = parse_repository(request.repository)
        file_path = Path(request.file_path)
        file_name = file_path.name
        file_size = get_file_size(request.file_path)
        mime_type = get_mime_type(request.file_path)

        log = UploadLogAdapter(
            self._logger,
            verbose=request.verbose,
            file_name=file_name,
            repository=repo.full_name,
        )
        log.debug(f"Uploading: {file_name}")
        log.debug(f"File size: {format_file_size(file_size)}")
        log.debug(f"MIME type: {mime_type}")
        log.debug(f"Repository: {repo.full_name}")

        if request.dry_run:
            return UploadResult(
                url=f"[DRY MODE] Would upload {file_name} to {repo.full_name}",
                asset_id=None,
                file_name=file_name,
                file_size=file_size,
                mime_type=mime_type,
                repository=repo.full_name,
                dry_run=True,
            )

        log.debug("Getting GitHub token...")
        token = await self._gh.get_token()

        log.debug(f"Getting repository ID for {repo.full_name}...")
        repository_id = await self._gh.get_repository_id(repo)
        log = log.bind(repository_id=repository_id)
        log.debug(f"Repository ID: {repository_id}")

        log.debug("Requesting upload policy...")
        policy = await self._policies.request_policy(
            token=token,
            repository_id=repository_id,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            log=log,
        )
        log.debug("Upload policy received")
        log.debug(f"Upload URL: {policy.upload_url}")
        log.debug(f"Asset ID: {policy.asset_id}")

        # Without an asset id there is no permanent URL to report.
        if policy.asset_id is None:
            raise GhUploadPolicyError(
                message="Failed to get upload policy: response has no asset.id",
                context={"url": self._config.policy_url, "reason": "missing_asset_id"},
            )

        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, file_path.read_bytes)

        log.debug("Uploading file to storage...")
        await self._policies.upload_asset(
            policy, file_name=file_name, data=data, mime_type=mime_type, log=log,
        )
        log.debug("File uploaded successfully")

        url = self._config.asset_url(policy.asset_id)
        log.debug(f"Asset URL: {url}")

        return UploadResult(
            url=url,
            asset_id=policy.asset_id,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            repository=repo.full_name,
            dry_run=False,
        )

    async def close(self) -> None:
        """Release the HTTP client if the uploader created it."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncUploader:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


async def upload(
    file_path: str,
    repository: str,
    *,
    verbose: bool = False,
    dry_mode: bool = False,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
    config: UploadConfig | None = None,
    runner: CommandRunner | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> UploadResult:
    """Upload one file to GitHub and return its permanent URL.

    Convenience wrapper that builds an :class:`UploadRequest`, runs it on a
    fresh :class:`AsyncUploader` and closes it.

    Parameters
    ----------
    file_path:
        Path to the file.
    repository:
        ``owner/name``, an HTTPS URL, or ``git@host:owner/name.git``.
    verbose:
        Log each step at debug level.
    dry_mode:
        Validate and compute metadata only.
    logger, config, runner, http_client:
        Forwarded to :class:`AsyncUploader`.
    """
    request = UploadRequest(
        file_path=file_path,
        repository=repository,
        dry_run=dry_mode,
        verbose=verbose,
    )
    async with AsyncUploader(
        config, runner=runner, http_client=http_client, logger=logger,
    ) as uploader:
        return await uploader.upload(request)
