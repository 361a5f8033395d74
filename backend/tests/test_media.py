"""Tests for media upload validation and storage unavailability."""

import pytest

from petcrush.common.database import db_manager
from tests.conftest import auth_headers


class FakeMinio:
    def __init__(self, fail=False):
        self.fail = fail
        self.objects = {}

    def put_object(self, bucket_name, object_name, data, length, content_type=None):
        if self.fail:
            raise ConnectionError("minio unreachable")
        self.objects[object_name] = (bucket_name, data.read(), content_type)


@pytest.fixture
def minio(monkeypatch):
    fake = FakeMinio()
    monkeypatch.setattr(db_manager, "minio_available", True)
    monkeypatch.setattr(db_manager, "minio_client", fake)
    return fake


class TestMediaUpload:

    @pytest.mark.asyncio
    async def test_upload_image(self, client, alice, minio):
        response = await client.post(
            "/api/media/upload",
            files={"file": ("dog.JPG", b"\xff\xd8\xff fake jpeg", "image/jpeg")},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["url"].endswith(".jpg")
        assert "duration" not in body

        (key, (bucket, data, content_type)), = minio.objects.items()
        assert key.startswith("media/")
        assert data == b"\xff\xd8\xff fake jpeg"
        assert content_type == "image/jpeg"

    @pytest.mark.asyncio
    async def test_upload_video_keeps_duration(self, client, alice, minio):
        response = await client.post(
            "/api/media/upload",
            files={"file": ("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")},
            data={"duration": "7.5"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        assert response.json()["duration"] == 7.5

    @pytest.mark.asyncio
    async def test_rejects_other_types(self, client, alice, minio):
        response = await client.post(
            "/api/media/upload",
            files={"file": ("notes.pdf", b"%PDF-1.4", "application/pdf")},
            headers=auth_headers(alice),
        )
        assert response.status_code == 400
        assert minio.objects == {}

    @pytest.mark.asyncio
    async def test_empty_file(self, client, alice, minio):
        response = await client.post(
            "/api/media/upload",
            files={"file": ("empty.jpg", b"", "image/jpeg")},
            headers=auth_headers(alice),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "No file uploaded"

    @pytest.mark.asyncio
    async def test_storage_disabled_is_503(self, client, alice):
        response = await client.post(
            "/api/media/upload",
            files={"file": ("dog.jpg", b"jpeg", "image/jpeg")},
            headers=auth_headers(alice),
        )
        assert response.status_code == 503
        assert response.json()["code"] == "unavailable"

    @pytest.mark.asyncio
    async def test_storage_failure_is_503(self, client, alice, minio):
        minio.fail = True
        response = await client.post(
            "/api/media/upload",
            files={"file": ("dog.jpg", b"jpeg", "image/jpeg")},
            headers=auth_headers(alice),
        )
        assert response.status_code == 503

    @pytest.mark.asyncio
    async def test_requires_auth(self, client):
        response = await client.post("/api/media/upload", files={"file": ("dog.jpg", b"jpeg", "image/jpeg")})
        assert response.status_code == 401
