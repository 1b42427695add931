"""
Upload API endpoint.
Writes one multipart file into the bucket under {namespace}/{date}/{id}{ext}.
"""

import logging
import os
import time
from dataclasses import dataclass

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from botocore.exceptions import ClientError
from starlette.datastructures import FormData, UploadFile

from upload_gateway.core.auth import AuthMethod, read_form, verify_upload_access
from upload_gateway.core.config import Settings, get_settings
from upload_gateway.core.errors import InvalidRequest, NamespaceNotAllowed
from upload_gateway.core.keys import build_upload_key, new_file_id
from upload_gateway.core.namespaces import allowed_namespaces, default_namespace, is_valid_namespace
from upload_gateway.schemas import ErrorResponse, UploadResult
from upload_gateway.storage.client import BucketClient, get_bucket_client
from upload_gateway.utils.content_type import detect_content_type, markup_snippet
from upload_gateway.utils.rendering import render_upload_success, wants_html

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@dataclass(frozen=True)
class UploadRequest:
    """Validated upload form."""
    file: UploadFile
    namespace: str

    @classmethod
    def from_form(cls, form: FormData, settings: Settings) -> "UploadRequest":
        """
        Bind and validate the multipart form.

        Raises:
            InvalidRequest: No file part (or an empty file input)
            NamespaceNotAllowed: Namespace outside the allow-list
        """
        file = form.get("file")
        if not isinstance(file, UploadFile) or not file.filename:
            raise InvalidRequest("No file provided")

        namespace = form.get("namespace")
        if namespace is None or (isinstance(namespace, str) and not namespace.strip()):
            namespace = default_namespace(settings)
        elif not isinstance(namespace, str):
            # Sent as a file part
            raise NamespaceNotAllowed(namespace.filename or "", allowed_namespaces(settings))

        if not is_valid_namespace(namespace, settings):
            raise NamespaceNotAllowed(namespace, allowed_namespaces(settings))

        return cls(file=file, namespace=namespace)


def _file_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def retrieval_url(key: str, settings: Settings) -> str:
    """Absolute URL when BASE_URL is configured, else a root-relative path."""
    path = f"/file/{key}"
    if settings.BASE_URL:
        return settings.BASE_URL.rstrip("/") + path
    return path


@router.post(
    "/upload",
    response_model=UploadResult,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_file(
    request: Request,
    auth: AuthMethod = Depends(verify_upload_access),
    settings: Settings = Depends(get_settings),
    bucket: BucketClient = Depends(get_bucket_client)
):
    """
    Upload a file into a namespace.

    Multipart fields:
        file: The file (required)
        namespace: Target namespace (defaults to the first allowed one)
        apiKey / token / username + password: Optional form credentials

    Example:
        curl -X POST "http://server/upload" \\
          -H "X-API-Key: KEY" \\
          -F "file=@notes.txt" -F "namespace=uploads"

    Returns:
        UploadResult as JSON, or an HTML page when the client accepts text/html
    """
    start_time = time.time()

    parsed = await read_form(request)
    if not parsed.ok:
        logger.error(f"[UPLOAD] Failed to parse form: {parsed.error}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to parse upload form"
        )

    upload = UploadRequest.from_form(parsed.form, settings)

    try:
        file_id = new_file_id()
        key = build_upload_key(
            upload.namespace,
            file_id,
            original_name=upload.file.filename,
            preserve_extension=settings.PRESERVE_EXTENSION,
        )
        content_type = detect_content_type(upload.file.filename, upload.file.content_type)
        size = _file_size(upload.file)

        logger.info(f"[UPLOAD] Starting: {key} ({size} bytes, {content_type}, auth={auth.value})")
        await bucket.put_object(key, upload.file.file, content_type=content_type)

    except ClientError as e:
        logger.error(f"[UPLOAD] Storage error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to upload file: {str(e)}"
        )
    except Exception as e:
        logger.error(f"[UPLOAD] Unexpected error: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )
    finally:
        await upload.file.close()

    duration = time.time() - start_time
    logger.info(f"[UPLOAD] Completed: {key} in {duration:.2f}s")

    url = retrieval_url(key, settings)
    result = UploadResult(
        fileId=file_id,
        key=key,
        originalName=upload.file.filename,
        size=size,
        type=content_type,
        url=url,
        markup=markup_snippet(url, upload.file.filename, content_type),
    )

    if wants_html(request):
        return HTMLResponse(render_upload_success(result))
    return result
