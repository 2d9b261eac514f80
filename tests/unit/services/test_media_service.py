"""
Unit Tests for Media Service.

The hosted image API is replaced with httpx.MockTransport, so requests
are built and signed for real without network access.
"""

import hashlib
from urllib.parse import parse_qs

import httpx
import pytest

from notely.core.exceptions import ExternalServiceError
from notely.services.media import MediaService, sign_params


def _media(handler, **overrides) -> MediaService:
    options = {
        "cloud_name": "demo",
        "api_key": "key-123",
        "api_secret": "shh",
        "api_base_url": "https://api.cloudinary.test/v1_1",
        "folder": "notely/avatars",
        "transformation": "c_fill,g_face,h_400,w_400/q_auto,f_auto",
        "transport": httpx.MockTransport(handler),
    }
    options.update(overrides)
    return MediaService(**options)


class TestSignParams:

    def test_sorted_pairs_plus_secret(self):
        expected = hashlib.sha1(b"folder=a&timestamp=10shh").hexdigest()
        assert sign_params({"timestamp": 10, "folder": "a"}, "shh") == expected

    def test_empty_values_skipped(self):
        assert sign_params({"timestamp": 10, "folder": ""}, "shh") == sign_params({"timestamp": 10}, "shh")


class TestUploadImage:

    async def test_posts_signed_multipart_and_returns_url(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(
                200,
                json={
                    "public_id": "notely/avatars/abc",
                    "secure_url": "https://res.cloudinary.com/demo/image/upload/v1/notely/avatars/abc.png",
                },
            )

        media = _media(handler)
        url = await media.upload_image(b"\x89PNG", filename="me.png", content_type="image/png")
        await media.close()

        assert url.endswith("/notely/avatars/abc.png")
        assert seen["url"] == "https://api.cloudinary.test/v1_1/demo/image/upload"
        assert b'name="file"; filename="me.png"' in seen["body"]
        assert b'name="api_key"' in seen["body"]
        assert b'name="signature"' in seen["body"]
        assert b"notely/avatars" in seen["body"]
        assert b"shh" not in seen["body"]

    async def test_error_status_raises(self):
        media = _media(lambda request: httpx.Response(401, json={"error": {"message": "bad key"}}))
        with pytest.raises(ExternalServiceError):
            await media.upload_image(b"img", content_type="image/png")

    async def test_transport_failure_raises(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        with pytest.raises(ExternalServiceError):
            await _media(handler).upload_image(b"img", content_type="image/png")

    async def test_response_without_url_raises(self):
        media = _media(lambda request: httpx.Response(200, json={"public_id": "x"}))
        with pytest.raises(ExternalServiceError):
            await media.upload_image(b"img", content_type="image/png")

    async def test_unconfigured_credentials_raise_without_request(self):
        calls = []
        media = _media(lambda request: calls.append(request) or httpx.Response(200), api_key="", api_secret="")
        with pytest.raises(ExternalServiceError, match="not configured"):
            await media.upload_image(b"img", content_type="image/png")
        assert calls == []


class TestDeleteImage:

    async def test_posts_signed_public_id(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"result": "ok"})

        await _media(handler).delete_image("notely/avatars/old")

        assert seen["url"].endswith("/demo/image/destroy")
        form = seen["form"]
        assert form["public_id"] == ["notely/avatars/old"]
        params = {"public_id": "notely/avatars/old", "timestamp": form["timestamp"][0]}
        assert form["signature"] == [sign_params(params, "shh")]


class TestPublicIdFromUrl:

    @pytest.fixture
    def media(self):
        return _media(lambda request: httpx.Response(200))

    def test_strips_version_and_extension(self, media):
        url = "https://res.cloudinary.com/demo/image/upload/v1700000000/notely/avatars/abc123.jpg"
        assert media.public_id_from_url(url) == "notely/avatars/abc123"

    def test_without_extension(self, media):
        assert media.public_id_from_url("https://example.com/x/abc") == "notely/avatars/abc"

    def test_empty_path(self, media):
        assert media.public_id_from_url("https://example.com/") is None
