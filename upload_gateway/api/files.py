"""
Retrieval API endpoint.
Streams a stored object back by its {namespace}/{date}/{file_id} key.
No authentication and no allow-list check are applied to reads.
"""

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse
from botocore.exceptions import ClientError

from upload_gateway.core.keys import build_storage_key
from upload_gateway.schemas import ErrorResponse
from upload_gateway.storage.client import BucketClient, get_bucket_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])


@router.get(
    "/file/{namespace}/{date}/{file_id}",
    response_class=StreamingResponse,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_file(
    namespace: str,
    date: str,
    file_id: str,
    bucket: BucketClient = Depends(get_bucket_client)
):
    """
    Download a stored file.

    Args:
        namespace: Namespace segment of the key
        date: Upload date segment (YYYY-MM-DD)
        file_id: Stored filename (identifier plus optional extension)

    Returns:
        File stream with the Content-Type recorded at upload
    """
    key = build_storage_key(namespace, date, file_id)

    try:
        stored = await bucket.get_object(key)
    except ClientError as e:
        logger.error(f"S3 error during file download: {key} :: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve file"
        )
    except Exception as e:
        logger.error(f"Unexpected error during file download: {key} :: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve file"
        )

    if stored is None:
        logger.info(f"File not found: {key}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )

    # Set Content-Type verbatim; media_type would append a charset to text/* types
    headers = {
        "Content-Type": stored.content_type,
        "Content-Disposition": f"inline; filename*=UTF-8''{quote(file_id, safe='')}",
    }
    if stored.content_length is not None:
        headers["Content-Length"] = str(stored.content_length)

    return StreamingResponse(
        stored.chunks,
        headers=headers
    )
