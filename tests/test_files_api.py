from botocore.exceptions import ClientError

from tests.conftest import API_KEY


def test_round_trip(client, bucket):
    payload = bytes(range(256)) * 4
    upload = client.post(
        "/upload",
        files={"file": ("blob.bin", payload, "application/x-custom")},
        headers={"X-API-Key": API_KEY},
    ).json()

    resp = client.get(upload["url"])

    assert resp.status_code == 200
    assert resp.content == payload
    assert resp.headers["content-type"] == "application/x-custom"
    assert bucket.gets == [upload["key"]]


def test_round_trip_text_keeps_declared_type(client, bucket):
    upload = client.post(
        "/upload",
        files={"file": ("notes.txt", b"0123456789", "text/plain")},
        headers={"X-API-Key": API_KEY},
    ).json()

    resp = client.get(f"/file/{upload['key']}")

    assert resp.content == b"0123456789"
    assert resp.headers["content-type"] == "text/plain"
    assert resp.headers["content-disposition"] == f"inline; filename*=UTF-8''{upload['key'].split('/')[-1]}"


def test_missing_object_returns_404(client, bucket):
    resp = client.get("/file/uploads/2024-07-16/does-not-exist")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "detail": "File not found"}
    assert bucket.gets == ["uploads/2024-07-16/does-not-exist"]


def test_retrieval_needs_no_auth_or_allowed_namespace(client, bucket):
    bucket.objects["legacy/2020-01-01/abc"] = (b"old", None)

    resp = client.get("/file/legacy/2020-01-01/abc")

    assert resp.status_code == 200
    assert resp.content == b"old"
    assert resp.headers["content-type"] == "application/octet-stream"


def test_storage_error_returns_500(client, bucket):
    bucket.fail_with = ClientError(
        {"Error": {"Code": "InternalError", "Message": "boom"}}, "GetObject"
    )

    resp = client.get("/file/uploads/2024-07-16/abc")

    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to retrieve file"


def test_browser_404_stays_json(client, bucket):
    resp = client.get("/file/uploads/2024-07-16/nope", headers={"Accept": "text/html"})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "File not found"


def test_non_latin1_filename_streams(client, bucket):
    bucket.objects["uploads/2024-07-16/résum☃.pdf"] = (b"%PDF", "application/pdf")

    resp = client.get("/file/uploads/2024-07-16/r%C3%A9sum%E2%98%83.pdf")

    assert resp.status_code == 200
    assert resp.content == b"%PDF"
    assert resp.headers["content-disposition"] == "inline; filename*=UTF-8''r%C3%A9sum%E2%98%83.pdf"


def test_quote_in_filename_is_encoded(client, bucket):
    bucket.objects['uploads/2024-07-16/a"b.txt'] = (b"x", "text/plain")

    resp = client.get("/file/uploads/2024-07-16/a%22b.txt")

    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == "inline; filename*=UTF-8''a%22b.txt"
