import asyncio
import io
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody
from botocore.stub import Stubber

from tests.conftest import make_settings
from upload_gateway.storage.client import BucketClient


@pytest.fixture()
def s3():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )


@pytest.fixture()
def stubbed(s3):
    bucket_client = BucketClient(make_settings(), client=s3)
    with Stubber(s3) as stubber:
        yield bucket_client, stubber
    bucket_client.close()


def test_endpoint_gets_scheme():
    client = BucketClient(make_settings(S3_ENDPOINT="minio:9000"), client=MagicMock())
    assert client.endpoint_url == "http://minio:9000"

    secure = BucketClient(make_settings(S3_ENDPOINT="minio:9000", S3_SECURE=True), client=MagicMock())
    assert secure.endpoint_url == "https://minio:9000"

    aws = BucketClient(make_settings(S3_ENDPOINT=""), client=MagicMock())
    assert aws.endpoint_url is None


def test_put_object_passes_content_type():
    s3 = MagicMock()
    client = BucketClient(make_settings(), client=s3)
    body = io.BytesIO(b"data")

    result = asyncio.run(client.put_object("uploads/2024-07-16/x.txt", body, content_type="text/plain"))

    assert result == {"bucket": "test-bucket", "key": "uploads/2024-07-16/x.txt"}
    args, kwargs = s3.upload_fileobj.call_args
    assert args == (body, "test-bucket", "uploads/2024-07-16/x.txt")
    assert kwargs["ExtraArgs"] == {"ContentType": "text/plain"}


def test_put_object_propagates_client_error():
    s3 = MagicMock()
    s3.upload_fileobj.side_effect = ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"
    )
    client = BucketClient(make_settings(), client=s3)

    with pytest.raises(ClientError):
        asyncio.run(client.put_object("k", io.BytesIO(b"")))


def test_get_object_returns_stored_object(stubbed):
    client, stubber = stubbed
    stubber.add_response(
        "get_object",
        {
            "Body": StreamingBody(io.BytesIO(b"hello"), 5),
            "ContentType": "text/plain",
            "ContentLength": 5,
        },
    )

    stored = asyncio.run(client.get_object("uploads/2024-07-16/a.txt"))

    assert stored.content_type == "text/plain"
    assert stored.content_length == 5
    assert b"".join(stored.chunks) == b"hello"


def test_get_object_missing_key_returns_none(stubbed):
    client, stubber = stubbed
    stubber.add_client_error(
        "get_object",
        service_error_code="NoSuchKey",
        http_status_code=404,
    )

    assert asyncio.run(client.get_object("missing")) is None


def test_get_object_other_errors_raise(stubbed):
    client, stubber = stubbed
    stubber.add_client_error("get_object", service_error_code="AccessDenied", http_status_code=403)

    with pytest.raises(ClientError):
        asyncio.run(client.get_object("secret"))


def test_ensure_bucket_creates_missing_bucket(stubbed):
    client, stubber = stubbed
    stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
    stubber.add_response("create_bucket", {}, {"Bucket": "test-bucket"})

    client.ensure_bucket_exists()

    stubber.assert_no_pending_responses()


def test_ensure_bucket_existing_bucket(stubbed):
    client, stubber = stubbed
    stubber.add_response("head_bucket", {}, {"Bucket": "test-bucket"})

    client.ensure_bucket_exists()

    stubber.assert_no_pending_responses()


def test_ensure_bucket_sets_location_outside_us_east_1():
    s3 = boto3.client(
        "s3",
        region_name="eu-west-1",
        aws_access_key_id="test",
        aws_secret_access_key="test",
    )
    client = BucketClient(make_settings(S3_REGION="eu-west-1"), client=s3)

    with Stubber(s3) as stubber:
        stubber.add_client_error("head_bucket", service_error_code="404", http_status_code=404)
        stubber.add_response(
            "create_bucket",
            {},
            {
                "Bucket": "test-bucket",
                "CreateBucketConfiguration": {"LocationConstraint": "eu-west-1"},
            },
        )

        client.ensure_bucket_exists()

        stubber.assert_no_pending_responses()
    client.close()
