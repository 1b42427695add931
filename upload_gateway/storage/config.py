"""
Object storage transfer configuration.
Constants for multipart writes and streamed reads.
"""

# Multipart Upload Settings
MULTIPART_THRESHOLD = 8 * 1024 * 1024   # 8MB (S3 minimum part size is 5MB)
MULTIPART_CHUNKSIZE = 8 * 1024 * 1024   # 8MB per part
MAX_CONCURRENCY = 1                      # Serial part uploads (predictable memory usage)

# Streaming Settings
READ_CHUNK_SIZE = 256 * 1024             # 256KB chunks when streaming objects back

# Executor threads for blocking boto3 calls
STORAGE_WORKERS = 4

DEFAULT_CONTENT_TYPE = "application/octet-stream"
