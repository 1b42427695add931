"""
API schemas for the Upload Gateway.
Provides type-safe contracts for HTTP responses.
"""

from upload_gateway.schemas.common import *  # noqa: F403, F401
from upload_gateway.schemas.upload import *  # noqa: F403, F401
