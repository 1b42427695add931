"""
Upload Gateway.
Authenticated multipart uploads into an S3-compatible bucket, keyed by namespace and date.
"""

__version__ = "1.0.0"
