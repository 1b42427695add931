"""
Upload endpoint schemas.
Field names are camelCase to match the JSON contract clients already consume.
"""

from pydantic import BaseModel

__all__ = ["UploadResult"]


class UploadResult(BaseModel):
    """Response from a successful upload."""
    success: bool = True
    fileId: str
    key: str
    originalName: str
    size: int
    type: str
    url: str
    markup: str
