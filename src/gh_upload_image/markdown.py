"""Markdown rendering of upload results."""

from __future__ import annotations

from gh_upload_image.models import UploadResult


def render_markdown(result: UploadResult, alt_text: str | None = None) -> str:
    """Return an image embed ``![alt](url)`` for *result*.

    The alt text is *alt_text* if given, else the file name, else
    ``"image"``.
    """
    alt = alt_text or getattr(result, "file_name", None) or "image"
    return f"![{alt}]({result.url})"
