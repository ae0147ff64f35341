"""Token redaction for safe logging.

Before a request or response is written to logs or debug dumps the
:func:`redact` function must be applied.  It enforces the following rules:

* **Authorization headers** (``token <x>`` and ``Bearer <x>``) are replaced
  with a masked placeholder that shows only the last four characters of
  the token, or a generic marker if the token is unknown.
* **Other sensitive keys** (signatures, secrets, cookies) are replaced with
  ``<redacted>``.
* **Binary values** (``bytes`` and long non-printable strings) are replaced
  with ``<binary:N_bytes>``.
* The full GitHub **token is never present** in the output.
"""

from __future__ import annotations

import copy
import re
from typing import Any

# If any of these appear in a key name (case-insensitive), the value is
# redacted.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "credential",
    "authorization",
    "cookie",
    "signature",
})

_AUTH_SCHEME_RE = re.compile(r"\b(Bearer|token)(\s+)\S+", re.IGNORECASE)

_BINARY_LENGTH_THRESHOLD = 256


def _mask_token(value: str, token: str | None) -> str:
    """Replace token strings with a safe placeholder."""
    if token and token in value:
        suffix = token[-4:] if len(token) > 4 else "****"
        placeholder = f"<redacted:...{suffix}>"
        if token in placeholder:
            placeholder = "<redacted>"
        value = value.replace(token, placeholder)
    return _AUTH_SCHEME_RE.sub(
        lambda m: m.group(0) if m.group(0).endswith(">") else f"{m.group(1)}{m.group(2)}<redacted>",
        value,
    )


def _looks_binary(value: str) -> bool:
    """Heuristic: return True if *value* appears to be raw binary data."""
    if len(value) < _BINARY_LENGTH_THRESHOLD:
        return False
    sample = value[:512]
    non_printable = sum(
        1 for ch in sample if not ch.isprintable() and ch not in ("\n", "\r", "\t")
    )
    return non_printable > len(sample) * 0.1


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, token)
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        if _looks_binary(value):
            return f"<binary:{len(value.encode('utf-8'))}_bytes>"
        if token and token in value:
            value = _mask_token(value, token)
        return value
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    return value


def _redact_dict(d: dict, token: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS):
            if isinstance(value, str):
                masked = _mask_token(value, token)
                result[key] = masked if masked != value else "<redacted>"
            else:
                result[key] = "<redacted>"
        else:
            result[key] = _redact_value(value, token)
    return result


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a deep copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        The dictionary to sanitize (headers, form fields, a response body).
    token:
        The GitHub token.  If supplied, any occurrence of this exact string
        anywhere in the payload is replaced.

    Returns
    -------
    dict
        A new dictionary.  The original *payload* is never mutated.

    Examples
    --------
    >>> redact({"Authorization": "token gho_abc123"})
    {'Authorization': 'token <redacted>'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, token)
