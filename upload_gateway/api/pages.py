"""
Browser-facing pages.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from upload_gateway.core.config import Settings, get_settings
from upload_gateway.core.namespaces import allowed_namespaces
from upload_gateway.utils.rendering import render_index

router = APIRouter(tags=["pages"])


@router.get("/", response_class=HTMLResponse)
async def index(settings: Settings = Depends(get_settings)):
    """Upload form listing the allowed namespaces."""
    return HTMLResponse(render_index(allowed_namespaces(settings)))
