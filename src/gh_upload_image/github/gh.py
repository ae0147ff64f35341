"""GitHub CLI wrappers: credential provider and repository resolver.

Authentication is delegated to ``gh``: the token comes from
``gh auth token`` and the numeric repository id from
``gh api repos/{owner}/{name} --jq .id``.  Processes are spawned through a
:class:`CommandRunner` so the uploader can be tested with fakes.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from gh_upload_image.errors import GhUploadAuthError, GhUploadRepositoryResolutionError
from gh_upload_image.models import ParsedRepository


@dataclass(frozen=True)
class CommandResult:
    """Exit status and decoded output of a finished process."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def error_message(self) -> str:
        return self.stderr.strip() or f"Command failed with exit code {self.returncode}"


@runtime_checkable
class CommandRunner(Protocol):
    """Anything that can run an argv and report its result."""

    async def run(self, *argv: str) -> CommandResult:
        """Run *argv* to completion.

        Raises
        ------
        OSError
            If the process cannot be spawned or does not finish in time
            (``TimeoutError`` is an ``OSError``).
        """
        ...


class SubprocessRunner:
    """Run commands with :func:`asyncio.create_subprocess_exec`.

    Parameters
    ----------
    timeout_seconds:
        Kill the process and raise :class:`TimeoutError` if it runs longer.
        ``None`` waits forever.
    """

    def __init__(self, timeout_seconds: float | None = 30.0) -> None:
        self._timeout = timeout_seconds

    async def run(self, *argv: str) -> CommandResult:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), self._timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise TimeoutError(
                f"{argv[0]} did not finish within {self._timeout} seconds"
            ) from None

        return CommandResult(
            returncode=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )


class AsyncGhClient:
    """Credential and repository lookups through the ``gh`` executable.

    Parameters
    ----------
    runner:
        The process runner.
    gh_path:
        Name or path of the ``gh`` executable.
    """

    def __init__(self, runner: CommandRunner, gh_path: str = "gh") -> None:
        self._runner = runner
        self._gh = gh_path

    async def get_token(self) -> str:
        """Return the token of the logged-in ``gh`` user.

        Raises
        ------
        GhUploadAuthError
            If ``gh`` cannot be spawned, exits non-zero, or prints nothing.
        """
        argv = (self._gh, "auth", "token")
        hint = 'Failed to get GitHub token. Make sure you are logged in with "gh auth login".'
        try:
            result = await self._runner.run(*argv)
        except OSError as exc:
            raise GhUploadAuthError(
                message=f"{hint} {exc}",
                context={"argv": list(argv)},
                cause=exc,
            ) from exc

        if not result.ok:
            raise GhUploadAuthError(
                message=f"{hint} {result.error_message()}",
                context={"argv": list(argv), "returncode": result.returncode},
            )

        token = result.stdout.strip()
        if not token:
            raise GhUploadAuthError(
                message=f"{hint} gh printed an empty token",
                context={"argv": list(argv), "returncode": result.returncode},
            )
        return token

    async def get_repository_id(self, repository: ParsedRepository) -> int:
        """Return the numeric id of *repository*.

        Raises
        ------
        GhUploadRepositoryResolutionError
            If ``gh`` cannot be spawned, exits non-zero, or prints anything
            other than an integer.
        """
        argv = (self._gh, "api", f"repos/{repository.full_name}", "--jq", ".id")
        hint = (
            f"Failed to get repository ID for {repository.full_name}. "
            "Make sure the repository exists and you have access."
        )
        context = {"repository": repository.full_name, "argv": list(argv)}
        try:
            result = await self._runner.run(*argv)
        except OSError as exc:
            raise GhUploadRepositoryResolutionError(
                message=f"{hint} {exc}",
                context=context,
                cause=exc,
            ) from exc

        if not result.ok:
            raise GhUploadRepositoryResolutionError(
                message=f"{hint} {result.error_message()}",
                context={**context, "returncode": result.returncode},
            )

        output = result.stdout.strip()
        if not (output.isascii() and output.isdigit()):
            raise GhUploadRepositoryResolutionError(
                message=f"{hint} Unexpected output: {output[:200]!r}",
                context={**context, "returncode": result.returncode, "output": output[:200]},
            )
        return int(output)
