"""
Upload Gateway - Main Application
FastAPI app that stores authenticated multipart uploads in an S3-compatible bucket.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from upload_gateway import __version__
from upload_gateway.api import files, pages, upload
from upload_gateway.core.config import settings
from upload_gateway.core.errors import InvalidRequest
from upload_gateway.schemas import ErrorResponse, HealthCheckResponse
from upload_gateway.storage.client import BucketClient, close_bucket_client, get_bucket_client
from upload_gateway.utils.rendering import render_error, wants_html

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Runs on startup and shutdown.
    """
    logger.info("Starting Upload Gateway...")

    if settings.ENSURE_BUCKET:
        try:
            get_bucket_client().ensure_bucket_exists()
            logger.info(f"Bucket ready: {settings.BUCKET_NAME}")
        except Exception as e:
            logger.error(f"Failed to initialize bucket {settings.BUCKET_NAME}: {e}")
            # Continue anyway - the bucket may be provisioned out-of-band

    logger.info("Upload Gateway started successfully")

    yield

    logger.info("Shutting down Upload Gateway...")
    close_bucket_client()


app = FastAPI(
    title="Upload Gateway",
    description="Authenticated file uploads into an object-storage bucket, keyed by namespace and date",
    version=__version__,
    lifespan=lifespan
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


app.include_router(pages.router)
app.include_router(upload.router)
app.include_router(files.router)


@app.get("/health", tags=["health"], response_model=HealthCheckResponse)
async def health_check(bucket: BucketClient = Depends(get_bucket_client)):
    """Health check endpoint."""
    try:
        await bucket.check_connection()

        return HealthCheckResponse(
            status="healthy",
            storage_connection="ok",
            bucket=bucket.bucket
        )
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "storage_connection": "failed",
                "bucket": bucket.bucket
            }
        )


def _error_response(request: Request, error: ErrorResponse, status_code: int, headers=None):
    # Browser form posts get an HTML page; everything else gets JSON
    if request.method == "POST" and wants_html(request):
        return HTMLResponse(
            render_error(error.detail, error.allowed_namespaces),
            status_code=status_code,
            headers=headers
        )
    return JSONResponse(
        status_code=status_code,
        content=error.model_dump(exclude_none=True),
        headers=headers
    )


@app.exception_handler(InvalidRequest)
async def invalid_request_handler(request: Request, exc: InvalidRequest):
    """Render typed request errors."""
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.detail}")
    error = ErrorResponse(detail=exc.detail, error_code=exc.error_code, **exc.extra)
    return _error_response(request, error, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors in the standard error shape."""
    error = ErrorResponse(detail=str(exc.detail))
    return _error_response(request, error, exc.status_code, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "detail": "Internal server error"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "upload_gateway.main:app",
        host="0.0.0.0",
        port=8000,
        log_level=settings.LOG_LEVEL.lower(),
    )
