"""
Common schemas shared across endpoints.
"""

from typing import List, Optional

from pydantic import BaseModel

__all__ = ["ErrorResponse", "HealthCheckResponse"]


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    detail: str
    error_code: Optional[str] = None
    allowed_namespaces: Optional[List[str]] = None


class HealthCheckResponse(BaseModel):
    """Health check response."""
    status: str
    storage_connection: str
    bucket: str
