"""
Content-Type utilities.
Resolve the stored MIME type and build embed snippets from it.
"""

import mimetypes
from typing import Optional

from upload_gateway.storage.config import DEFAULT_CONTENT_TYPE


def detect_content_type(filename: Optional[str], provided_type: Optional[str] = None) -> str:
    """
    Resolve the Content-Type to store for an upload.

    The client-declared type always wins; the filename extension is only
    consulted when nothing was declared.

    Args:
        filename: Original filename (e.g., "document.pdf")
        provided_type: Content-Type declared on the multipart part

    Returns:
        MIME type string

    Examples:
        >>> detect_content_type("photo.jpg")
        'image/jpeg'

        >>> detect_content_type("file.txt", "text/custom")
        'text/custom'

        >>> detect_content_type("unknown.zzz")
        'application/octet-stream'
    """
    if provided_type:
        return provided_type

    if filename:
        guessed_type, _ = mimetypes.guess_type(filename)
        if guessed_type:
            return guessed_type

    return DEFAULT_CONTENT_TYPE


def media_category(content_type: Optional[str]) -> str:
    """Top-level MIME category: 'image', 'video', or 'file'."""
    major = (content_type or "").split("/", 1)[0].strip().lower()
    return major if major in ("image", "video") else "file"


def markup_snippet(url: str, name: str, content_type: Optional[str]) -> str:
    """
    Ready-to-paste markup for an uploaded file.

    Images become Markdown images, videos an HTML <video> tag, anything
    else a Markdown link.
    """
    category = media_category(content_type)
    if category == "image":
        return f"![{name}]({url})"
    if category == "video":
        return f'<video src="{url}" controls></video>'
    return f"[{name}]({url})"
