"""
Storage key construction.
Keys have the form {namespace}/{date}/{identifier}[.{ext}].
"""

import uuid
from datetime import datetime, timezone
from typing import Optional


def new_file_id() -> str:
    """Random 128-bit identifier in canonical hyphenated form (36 chars)."""
    return str(uuid.uuid4())


def utc_date(now: Optional[datetime] = None) -> str:
    """Current UTC calendar date as YYYY-MM-DD."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date().isoformat()


def file_extension(filename: Optional[str]) -> str:
    """
    Extension of the original filename, including the dot.

    Examples:
        >>> file_extension("notes.txt")
        '.txt'
        >>> file_extension("archive.tar.gz")
        '.gz'
        >>> file_extension("README")
        ''
    """
    if not filename or "." not in filename:
        return ""
    return filename[filename.rindex("."):]


def build_storage_key(namespace: str, day: str, filename: str) -> str:
    """Join namespace, date and stored filename into an object key."""
    return f"{namespace}/{day}/{filename}"


def build_upload_key(
    namespace: str,
    file_id: str,
    original_name: Optional[str] = None,
    preserve_extension: bool = True,
    day: Optional[str] = None,
) -> str:
    """
    Compose the key for a new upload.

    Args:
        namespace: Validated namespace
        file_id: Freshly generated identifier
        original_name: Client-supplied filename, used only for its extension
        preserve_extension: Append the original extension to the identifier
        day: Override for the UTC date (defaults to today)

    Returns:
        Object key string
    """
    filename = file_id
    if preserve_extension:
        filename += file_extension(original_name)
    return build_storage_key(namespace, day or utc_date(), filename)

