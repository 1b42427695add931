from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from upload_gateway.core.config import Settings, get_settings
from upload_gateway.main import app
from upload_gateway.storage.client import StoredObject, get_bucket_client

API_KEY = "test-api-key"
USERNAME = "admin"
PASSWORD = "hunter2"
NAMESPACES = "uploads, avatars ,docs"


class FakeBucket:
    """In-memory stand-in for BucketClient that records every call."""

    def __init__(self):
        self.bucket = "test-bucket"
        self.objects: Dict[str, Tuple[bytes, Optional[str]]] = {}
        self.puts: List[str] = []
        self.gets: List[str] = []
        self.fail_with: Optional[Exception] = None

    async def put_object(self, key, file_obj, content_type=None):
        self.puts.append(key)
        if self.fail_with:
            raise self.fail_with
        self.objects[key] = (file_obj.read(), content_type)
        return {"bucket": self.bucket, "key": key}

    async def get_object(self, key):
        self.gets.append(key)
        if self.fail_with:
            raise self.fail_with
        if key not in self.objects:
            return None
        data, content_type = self.objects[key]
        return StoredObject(
            content_type=content_type or "application/octet-stream",
            content_length=len(data),
            chunks=iter([data]),
        )

    async def check_connection(self):
        if self.fail_with:
            raise self.fail_with

    @property
    def calls(self) -> int:
        return len(self.puts) + len(self.gets)


def make_settings(**overrides) -> Settings:
    values = dict(
        API_KEY=API_KEY,
        BASIC_AUTH_USERNAME=USERNAME,
        BASIC_AUTH_PASSWORD=PASSWORD,
        ALLOWED_NAMESPACES=NAMESPACES,
        BUCKET_NAME="test-bucket",
        BASE_URL="",
        PRESERVE_EXTENSION=True,
        ENSURE_BUCKET=False,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def bucket():
    return FakeBucket()


@pytest.fixture()
def make_client(bucket):
    """Build a TestClient wired to the fake bucket and the given settings."""

    def _make(test_settings: Settings) -> TestClient:
        app.dependency_overrides[get_settings] = lambda: test_settings
        app.dependency_overrides[get_bucket_client] = lambda: bucket
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture()
def client(make_client, settings):
    return make_client(settings)
