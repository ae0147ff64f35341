"""Shared test fixtures for the gh-upload-image test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from gh_upload_image.config import UploadConfig
from gh_upload_image.github.gh import CommandResult


class FakeRunner:
    """CommandRunner double that returns canned results keyed by subcommand.

    ``results`` maps the first argument after the executable (``"auth"`` or
    ``"api"``) to a :class:`CommandResult` or an exception to raise.
    """

    def __init__(self, results: dict[str, CommandResult | Exception] | None = None):
        self.results = results or {}
        self.calls: list[tuple[str, ...]] = []

    async def run(self, *argv: str) -> CommandResult:
        self.calls.append(argv)
        outcome = self.results[argv[1]]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class ForbiddenRunner:
    """CommandRunner double that fails the test if it is ever invoked."""

    async def run(self, *argv: str) -> CommandResult:
        pytest.fail(f"unexpected process call: {argv}")


def _forbidden_handler(request: httpx.Request) -> httpx.Response:
    pytest.fail(f"unexpected HTTP call: {request.method} {request.url}")


@pytest.fixture
def config() -> UploadConfig:
    """Default test configuration."""
    return UploadConfig()


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[..., Path]:
    """Create a file of *size* bytes under ``tmp_path``."""

    def _make(name: str = "shot.png", size: int = 10) -> Path:
        path = tmp_path / name
        path.write_bytes(b"\x89" * size)
        return path

    return _make


@pytest.fixture
def fake_runner() -> Callable[..., FakeRunner]:
    """Factory for :class:`FakeRunner` instances."""
    return FakeRunner


@pytest.fixture
def gh_ok() -> FakeRunner:
    """A runner that authenticates and resolves repository id 42."""
    return FakeRunner({
        "auth": CommandResult(0, "gho_testtoken1234\n", ""),
        "api": CommandResult(0, "42\n", ""),
    })


@pytest.fixture
def forbidden_runner() -> ForbiddenRunner:
    return ForbiddenRunner()


@pytest.fixture
def mock_client() -> Callable[..., httpx.AsyncClient]:
    """Factory for an ``httpx.AsyncClient`` backed by a handler function."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def forbidden_client() -> httpx.AsyncClient:
    """An HTTP client that fails the test on any request."""
    return httpx.AsyncClient(transport=httpx.MockTransport(_forbidden_handler))
