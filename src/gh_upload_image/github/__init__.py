"""gh_upload_image.github -- GitHub collaborators of the uploader.

This sub-package provides:

* :mod:`.gh` -- ``gh`` CLI wrappers for the token and repository id.
* :mod:`.transport` -- HTTP transport with metrics and debug dumps.
* :mod:`.policies` -- Upload-policy request and asset submission.
"""

from __future__ import annotations

from .gh import AsyncGhClient, CommandResult, CommandRunner, SubprocessRunner
from .policies import AsyncPolicyAPI
from .transport import AsyncUploadTransport

__all__ = [
    "AsyncGhClient",
    "AsyncPolicyAPI",
    "AsyncUploadTransport",
    "CommandResult",
    "CommandRunner",
    "SubprocessRunner",
]
