"""Repository reference parsing.

Accepts the three shapes users paste on the command line and normalises
them to a :class:`ParsedRepository`:

* ``owner/name``
* ``https://github.com/owner/name`` (optionally ending in ``.git``)
* ``git@github.com:owner/name.git``
"""

from __future__ import annotations

import re

from gh_upload_image.errors import GhUploadInvalidRepositoryError
from gh_upload_image.models import ParsedRepository

# [scheme://][user@]host[:port](/|:)owner/name[.git][/...|?...|#...]
# The host must contain a dot so that ``a/b/c`` is not mistaken for one.
# A port is only recognised when a ``/`` follows it, as in
# ``ssh://git@host:22/owner/name``; ``git@host:123/name`` keeps 123 as owner.
_REMOTE_RE = re.compile(
    r"""
    ^(?:[a-z][a-z0-9+.-]*://)?
    (?:[^@/\s]+@)?
    (?P<host>[a-z0-9-]+(?:\.[a-z0-9-]+)+)
    (?::\d+(?=/))?
    [/:]
    (?P<owner>[^/:?#\s]+)
    /
    (?P<name>[^/?#\s]+?)
    (?:\.git)?
    (?:[/?#].*)?$
    """,
    re.IGNORECASE | re.VERBOSE,
)


def parse_repository(reference: str) -> ParsedRepository:
    """Parse a repository reference into owner and name.

    The URL/SSH form is tried first; otherwise the reference must be
    exactly two non-empty ``/``-separated segments.

    Raises
    ------
    GhUploadInvalidRepositoryError
        If *reference* is empty or has any other shape.
    """
    value = (reference or "").strip()
    if value:
        match = _REMOTE_RE.match(value)
        if match:
            return ParsedRepository(owner=match.group("owner"), name=match.group("name"))

        parts = value.split("/")
        if len(parts) == 2 and all(parts):
            return ParsedRepository(owner=parts[0], name=parts[1])

    raise GhUploadInvalidRepositoryError(
        message=f'Invalid repository format: "{reference}". Use "owner/repo" format.',
        context={"repository": reference},
    )
