"""Tests for the upload policy API and its HTTP transport.

Uses ``httpx.MockTransport`` so every request is inspected in-process.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs

import httpx
import pytest

from gh_upload_image.config import UploadConfig
from gh_upload_image.errors import ErrorCode, GhUploadPolicyError, GhUploadTransferError
from gh_upload_image.github.policies import AsyncPolicyAPI
from gh_upload_image.github.transport import AsyncUploadTransport
from gh_upload_image.models import UploadPolicy

POLICY_BODY = {
    "upload_url": "https://store.example.com/upload",
    "form": {"key": "assets/1", "policy": "p0l1cy", "X-Amz-Signature": "sig"},
    "asset": {"id": "abc123"},
}


def make_api(handler, config: UploadConfig | None = None) -> AsyncPolicyAPI:
    config = config or UploadConfig()
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncPolicyAPI(AsyncUploadTransport(config, client=client), config)


async def request_policy(api: AsyncPolicyAPI) -> UploadPolicy:
    return await api.request_policy(
        token="gho_secret",
        repository_id=42,
        file_name="shot.png",
        file_size=10,
        mime_type="image/png",
    )


# =========================================================================
# request_policy
# =========================================================================


class TestRequestPolicy:
    @pytest.mark.asyncio
    async def test_wire_format(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json=POLICY_BODY)

        policy = await request_policy(make_api(handler))

        assert policy.upload_url == POLICY_BODY["upload_url"]
        assert policy.asset_id == "abc123"

        (request,) = seen
        assert request.method == "POST"
        assert str(request.url) == "https://github.com/upload/policies/assets"
        assert request.headers["Authorization"] == "token gho_secret"
        assert request.headers["Accept"] == "application/json"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.headers["User-Agent"].startswith("gh-upload-image/")
        body = parse_qs(request.content.decode())
        assert body == {
            "name": ["shot.png"],
            "size": ["10"],
            "content_type": ["image/png"],
            "repository_id": ["42"],
        }

    @pytest.mark.asyncio
    async def test_non_2xx_includes_status_and_body(self):
        def handler(request):
            return httpx.Response(422, text="Bad size")

        with pytest.raises(GhUploadPolicyError) as exc_info:
            await request_policy(make_api(handler))
        err = exc_info.value
        assert err.code == ErrorCode.POLICY_REQUEST_FAILED
        assert "422" in err.message
        assert "Bad size" in err.message
        assert err.context["status_code"] == 422
        assert err.context["body"] == "Bad size"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(GhUploadPolicyError, match="not valid JSON"):
            await request_policy(make_api(handler))

    @pytest.mark.asyncio
    async def test_json_array_rejected(self):
        def handler(request):
            return httpx.Response(200, json=[1, 2])

        with pytest.raises(GhUploadPolicyError, match="not a JSON object"):
            await request_policy(make_api(handler))

    @pytest.mark.asyncio
    async def test_missing_upload_url(self):
        def handler(request):
            return httpx.Response(200, json={"asset": {"id": "a"}, "form": {}})

        with pytest.raises(GhUploadPolicyError) as exc_info:
            await request_policy(make_api(handler))
        assert exc_info.value.context["reason"] == "malformed"

    @pytest.mark.asyncio
    async def test_unusable_upload_url(self):
        def handler(request):
            return httpx.Response(
                200, json={"upload_url": "https://a.com:abc/x", "form": {}, "asset": {"id": "a"}},
            )

        with pytest.raises(GhUploadPolicyError) as exc_info:
            await request_policy(make_api(handler))
        assert exc_info.value.context["reason"] == "malformed"
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_missing_asset_id_tolerated(self):
        def handler(request):
            return httpx.Response(200, json={"upload_url": "https://s/x", "form": {}})

        policy = await request_policy(make_api(handler))
        assert policy.asset_id is None

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(GhUploadPolicyError) as exc_info:
            await request_policy(make_api(handler))
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert exc_info.value.context["reason"] == "network_error"

    @pytest.mark.asyncio
    async def test_custom_policy_url(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json=POLICY_BODY)

        config = UploadConfig(policy_url="https://ghe.example.com/upload/policies/assets")
        await request_policy(make_api(handler, config))
        assert seen == ["https://ghe.example.com/upload/policies/assets"]


# =========================================================================
# upload_asset
# =========================================================================


class TestUploadAsset:
    @pytest.mark.asyncio
    async def test_multipart_body(self):
        seen: list[httpx.Request] = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        api = make_api(handler)
        policy = UploadPolicy.from_response(POLICY_BODY)
        await api.upload_asset(policy, file_name="shot.png", data=b"PNGDATA", mime_type="image/png")

        (request,) = seen
        assert str(request.url) == POLICY_BODY["upload_url"]
        assert "authorization" not in request.headers
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        body = request.content.decode("latin-1")
        positions = [body.index(f'name="{key}"') for key in POLICY_BODY["form"]]
        assert positions == sorted(positions)
        file_pos = body.index('name="file"; filename="shot.png"')
        assert file_pos > positions[-1]
        assert "Content-Type: image/png" in body
        assert "PNGDATA" in body
        assert "p0l1cy" in body

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [200, 201, 204, 299])
    async def test_success_statuses(self, status):
        api = make_api(lambda request: httpx.Response(status))
        policy = UploadPolicy(upload_url="https://s/x")
        await api.upload_asset(policy, file_name="a.png", data=b"x", mime_type="image/png")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 400, 403, 500])
    async def test_failure_statuses(self, status):
        api = make_api(lambda request: httpx.Response(status, text="<Error>denied</Error>"))
        policy = UploadPolicy(upload_url="https://s/x")
        with pytest.raises(GhUploadTransferError) as exc_info:
            await api.upload_asset(policy, file_name="a.png", data=b"x", mime_type="image/png")
        err = exc_info.value
        assert err.code == ErrorCode.UPLOAD_FAILED
        assert str(status) in err.message
        assert "denied" in err.message
        assert err.context["status_code"] == status

    @pytest.mark.asyncio
    async def test_network_error_wrapped(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        api = make_api(handler)
        policy = UploadPolicy(upload_url="https://s/x")
        with pytest.raises(GhUploadTransferError) as exc_info:
            await api.upload_asset(policy, file_name="a.png", data=b"x", mime_type="image/png")
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    @pytest.mark.asyncio
    async def test_invalid_url_wrapped(self, forbidden_client):
        config = UploadConfig()
        api = AsyncPolicyAPI(AsyncUploadTransport(config, client=forbidden_client), config)
        policy = UploadPolicy(upload_url="https://a.com:abc/x")
        with pytest.raises(GhUploadTransferError) as exc_info:
            await api.upload_asset(policy, file_name="a.png", data=b"x", mime_type="image/png")
        assert isinstance(exc_info.value.__cause__, httpx.InvalidURL)


# =========================================================================
# Transport
# =========================================================================


class TestTransport:
    @pytest.mark.asyncio
    async def test_metrics_emitted(self):
        metrics = MagicMock()
        config = UploadConfig(metrics=metrics)
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        transport = AsyncUploadTransport(config, client=client)
        await transport.post("https://s/x", op="probe")
        metrics.increment.assert_called_once_with(
            "gh_upload.requests_total", tags={"op": "probe", "status": "200"},
        )
        assert metrics.timing.call_args.args[0] == "gh_upload.request_duration_ms"

    @pytest.mark.asyncio
    async def test_network_error_counted_and_reraised(self):
        metrics = MagicMock()

        def handler(request):
            raise httpx.ConnectError("down", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = AsyncUploadTransport(UploadConfig(metrics=metrics), client=client)
        with pytest.raises(httpx.ConnectError):
            await transport.post("https://s/x", op="probe")
        metrics.increment.assert_called_once_with(
            "gh_upload.requests_total", tags={"op": "probe", "status": "error"},
        )

    @pytest.mark.asyncio
    async def test_network_error_logged_at_debug_on_given_logger(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        log = MagicMock()
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = AsyncUploadTransport(UploadConfig(), client=client)
        with pytest.raises(httpx.ConnectError):
            await transport.post("https://s/x", op="probe", log=log)
        log.debug.assert_called_once()
        log.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_debug_dump_redacts_token(self, capsys):
        config = UploadConfig(debug_dump_payload=True)
        api = make_api(lambda r: httpx.Response(200, json=POLICY_BODY), config)
        await request_policy(api)
        err = capsys.readouterr().err
        assert "gho_secret" not in err
        dump = json.loads(err)
        assert dump["request_headers"]["Authorization"] == "token <redacted:...cret>"
        assert dump["request_body"]["name"] == "shot.png"
        assert dump["response_status"] == 200

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        async with AsyncUploadTransport(UploadConfig(), client=client):
            pass
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        transport = AsyncUploadTransport(UploadConfig())
        await transport.close()
        assert transport._client.is_closed
