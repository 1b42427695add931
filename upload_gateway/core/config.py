"""
Configuration management for the Upload Gateway.
Loads environment variables into an immutable settings object.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Object storage (any S3-compatible endpoint: AWS, MinIO, R2)
    S3_ENDPOINT: str = ""         # Empty uses the AWS default endpoint
    S3_ACCESS_KEY: str = ""       # Empty falls back to the boto3 credential chain
    S3_SECRET_KEY: str = ""
    S3_SECURE: bool = False       # Scheme used when S3_ENDPOINT has none
    S3_REGION: str = "us-east-1"
    BUCKET_NAME: str = "uploads"

    # Authentication (shared secrets)
    API_KEY: str = ""
    BASIC_AUTH_USERNAME: str = ""
    BASIC_AUTH_PASSWORD: str = ""

    # Upload policy
    ALLOWED_NAMESPACES: str = ""  # Comma-separated, e.g. "uploads,avatars"
    PRESERVE_EXTENSION: bool = True

    # Public URL prefix for retrieval links (e.g. https://files.example.com)
    BASE_URL: str = ""

    # Application
    LOG_LEVEL: str = "INFO"
    ENSURE_BUCKET: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        frozen = True


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the immutable settings object."""
    return settings
