"""
S3 bucket client wrapper.
Handles object writes, streamed reads, and bucket bootstrap for a single bucket.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import BinaryIO, Iterable, Optional

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.client import Config
from botocore.exceptions import ClientError

from upload_gateway.core.config import Settings, settings
from upload_gateway.storage.config import (
    DEFAULT_CONTENT_TYPE,
    MAX_CONCURRENCY,
    MULTIPART_CHUNKSIZE,
    MULTIPART_THRESHOLD,
    READ_CHUNK_SIZE,
    STORAGE_WORKERS,
)

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


@dataclass(frozen=True)
class StoredObject:
    """An object read back from the bucket."""
    content_type: str
    content_length: Optional[int]
    chunks: Iterable[bytes]


def is_not_found(error: ClientError) -> bool:
    """True if a ClientError means the key (or bucket) does not exist."""
    return error.response.get("Error", {}).get("Code") in NOT_FOUND_CODES


class BucketClient:
    """Wrapper for S3 operations against the configured bucket."""

    def __init__(self, config: Settings, client=None):
        """
        Initialize the boto3 client from settings.

        Args:
            config: Application settings
            client: Pre-built boto3 S3 client (tests inject a stubbed one)
        """
        self.bucket = config.BUCKET_NAME
        self.region = config.S3_REGION

        endpoint_url = config.S3_ENDPOINT or None
        if endpoint_url and not endpoint_url.startswith(("http://", "https://")):
            protocol = "https" if config.S3_SECURE else "http"
            endpoint_url = f"{protocol}://{endpoint_url}"
        self.endpoint_url = endpoint_url

        self.client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=config.S3_ACCESS_KEY or None,
            aws_secret_access_key=config.S3_SECRET_KEY or None,
            config=Config(signature_version="s3v4"),
            region_name=config.S3_REGION,
        )

        self.transfer_config = TransferConfig(
            multipart_threshold=MULTIPART_THRESHOLD,
            multipart_chunksize=MULTIPART_CHUNKSIZE,
            max_concurrency=MAX_CONCURRENCY,
            use_threads=False  # Already running in our executor
        )

        # Blocking boto3 calls run here so the event loop stays free
        self.executor = ThreadPoolExecutor(
            max_workers=STORAGE_WORKERS,
            thread_name_prefix="s3-io"
        )

        logger.info(f"Bucket client initialized: bucket={self.bucket} endpoint={endpoint_url or 'aws-default'}")

    async def _run(self, func, *args):
        return await asyncio.get_event_loop().run_in_executor(self.executor, func, *args)

    async def put_object(
        self,
        key: str,
        file_obj: BinaryIO,
        content_type: Optional[str] = None
    ) -> dict:
        """
        Stream a file-like object into the bucket.

        Args:
            key: Object key
            file_obj: Readable binary file object
            content_type: MIME type stored as the object's ContentType

        Returns:
            Dict with bucket and key

        Raises:
            ClientError: If the write fails
        """
        extra_args = {}
        if content_type:
            extra_args["ContentType"] = content_type

        def _upload():
            self.client.upload_fileobj(
                file_obj,
                self.bucket,
                key,
                ExtraArgs=extra_args,
                Config=self.transfer_config
            )

        try:
            await self._run(_upload)
        except ClientError as e:
            logger.error(f"Failed to upload {self.bucket}/{key}: {e}")
            raise

        logger.info(f"Uploaded object: {self.bucket}/{key}")
        return {"bucket": self.bucket, "key": key}

    async def get_object(self, key: str) -> Optional[StoredObject]:
        """
        Fetch an object for streaming.

        Args:
            key: Object key

        Returns:
            StoredObject, or None if the key does not exist

        Raises:
            ClientError: For any failure other than a missing key
        """
        try:
            response = await self._run(
                lambda: self.client.get_object(Bucket=self.bucket, Key=key)
            )
        except ClientError as e:
            if is_not_found(e):
                return None
            logger.error(f"Failed to read {self.bucket}/{key}: {e}")
            raise

        return StoredObject(
            content_type=response.get("ContentType") or DEFAULT_CONTENT_TYPE,
            content_length=response.get("ContentLength"),
            chunks=response["Body"].iter_chunks(READ_CHUNK_SIZE),
        )

    async def check_connection(self) -> None:
        """
        Verify the bucket is reachable.

        Raises:
            ClientError: If the bucket is missing or unreachable
        """
        await self._run(lambda: self.client.head_bucket(Bucket=self.bucket))

    def ensure_bucket_exists(self) -> None:
        """
        Ensure the bucket exists, create it if it doesn't.

        Raises:
            ClientError: If bucket creation fails
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
            logger.info(f"Bucket exists: {self.bucket}")
        except ClientError as e:
            if not is_not_found(e):
                logger.error(f"Error checking bucket {self.bucket}: {e}")
                raise

            try:
                params = {"Bucket": self.bucket}
                if self.region != "us-east-1":
                    params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
                self.client.create_bucket(**params)
                logger.info(f"Created bucket: {self.bucket}")
            except ClientError as create_error:
                logger.error(f"Failed to create bucket {self.bucket}: {create_error}")
                raise

    def close(self) -> None:
        """Shut down the executor."""
        self.executor.shutdown(wait=False)


_bucket_client: Optional[BucketClient] = None


def get_bucket_client() -> BucketClient:
    """
    Get or create the process-wide bucket client.
    Used as a FastAPI dependency.
    """
    global _bucket_client
    if _bucket_client is None:
        _bucket_client = BucketClient(settings)
    return _bucket_client


def close_bucket_client() -> None:
    """Close the process-wide bucket client."""
    global _bucket_client
    if _bucket_client is not None:
        _bucket_client.close()
        _bucket_client = None
