"""Tests for attaching and removing ad images."""

import httpx
import pytest

from ads.images import AdImageGateway, image_extension
from ads.router import get_image_gateway
from core.cloudinary import CloudinaryUploader
from core.config import CloudinarySettings
from main import app

from conftest import SECURE_URL, bearer

OWNER = "seller@test.de"
OTHER = "other@test.de"


@pytest.fixture
def owner_ad(ad_repo, token_repo):
    token_repo.put("owner-token", OWNER)
    token_repo.put("other-token", OTHER)
    return ad_repo.add(1, owner_email=OWNER)


def _png(name="photo.png", data=b"\x89PNG\r\n\x1a\nfake", content_type="image/png"):
    return {"file": (name, data, content_type)}


def _use_uploader(token_store, ad_repo, uploader):
    app.dependency_overrides[get_image_gateway] = lambda: AdImageGateway(
        token_store=token_store,
        uploader=uploader,
        ads=ad_repo,
    )


class TestImageExtension:
    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.png", "png"),
            ("photo.PNG", "png"),
            ("archive.tar.JPEG", "jpeg"),
            ("photo", "jpg"),
            ("photo.", "jpg"),
            ("", "jpg"),
            (None, "jpg"),
            ("anim.gif", "gif"),
            (".gif", "gif"),
            (".png", "png"),
            ("uploads/v1.2/photo", "jpg"),
        ],
    )
    def test_extension(self, filename, expected):
        assert image_extension(filename) == expected


class TestUploadImage:
    def test_owner_upload_stores_secure_url(self, client, owner_ad, ad_repo, uploader):
        resp = client.post("/api/ads/1/image", files=_png(), headers=bearer("owner-token"))

        assert resp.status_code == 200
        body = resp.json()
        assert body["id"] == 1
        assert body["image_path"] == SECURE_URL
        assert ad_repo.ads[1]["image_path"] == SECURE_URL
        assert ad_repo.writes == [(1, SECURE_URL)]
        assert uploader.calls == [(b"\x89PNG\r\n\x1a\nfake", "photo.png", "image/png")]

    def test_mixed_case_extension_accepted(self, client, owner_ad, uploader):
        resp = client.post("/api/ads/1/image", files=_png(name="Photo.PNG"), headers=bearer("owner-token"))

        assert resp.status_code == 200
        assert len(uploader.calls) == 1

    def test_missing_extension_treated_as_jpg(self, client, owner_ad):
        resp = client.post(
            "/api/ads/1/image",
            files=_png(name="camera-upload", content_type="image/jpeg"),
            headers=bearer("owner-token"),
        )

        assert resp.status_code == 200

    @pytest.mark.parametrize("name", ["anim.gif", ".gif", "doc.pdf", "image.svg"])
    def test_disallowed_extension_is_400(self, client, owner_ad, ad_repo, uploader, name):
        resp = client.post("/api/ads/1/image", files=_png(name=name), headers=bearer("owner-token"))

        assert resp.status_code == 400
        assert uploader.calls == []
        assert ad_repo.writes == []

    def test_missing_file_is_400(self, client, owner_ad, uploader):
        resp = client.post("/api/ads/1/image", headers=bearer("owner-token"))

        assert resp.status_code == 400
        assert uploader.calls == []

    def test_empty_file_is_400(self, client, owner_ad, uploader):
        resp = client.post("/api/ads/1/image", files=_png(data=b""), headers=bearer("owner-token"))

        assert resp.status_code == 400
        assert uploader.calls == []

    def test_without_token_is_401(self, client, owner_ad, uploader):
        resp = client.post("/api/ads/1/image", files=_png())

        assert resp.status_code == 401
        assert uploader.calls == []

    def test_expired_token_is_401(self, client, owner_ad, token_repo, clock, uploader):
        token_repo.put("stale-token", OWNER, expires_at=clock.now)
        clock.now = clock.now.replace(second=1)

        resp = client.post("/api/ads/1/image", files=_png(), headers=bearer("stale-token"))

        assert resp.status_code == 401
        assert "stale-token" not in token_repo.rows

    def test_unknown_ad_is_404(self, client, owner_ad, uploader):
        resp = client.post("/api/ads/999/image", files=_png(), headers=bearer("owner-token"))

        assert resp.status_code == 404
        assert uploader.calls == []

    def test_non_owner_is_403_and_image_unchanged(self, client, owner_ad, ad_repo, uploader):
        ad_repo.ads[1]["image_path"] = "https://res.cloudinary.com/demo/old.png"

        resp = client.post("/api/ads/1/image", files=_png(), headers=bearer("other-token"))

        assert resp.status_code == 403
        assert ad_repo.ads[1]["image_path"] == "https://res.cloudinary.com/demo/old.png"
        assert uploader.calls == []

    def test_owner_match_ignores_case(self, client, ad_repo, token_repo):
        ad_repo.add(2, owner_email="Seller@Test.DE")
        token_repo.put("owner-token", OWNER)

        resp = client.post("/api/ads/2/image", files=_png(), headers=bearer("owner-token"))

        assert resp.status_code == 200

    def test_oversized_file_is_413(self, client, owner_ad, token_store, ad_repo, uploader):
        app.dependency_overrides[get_image_gateway] = lambda: AdImageGateway(
            token_store=token_store,
            uploader=uploader,
            ads=ad_repo,
            max_upload_bytes=4,
        )

        resp = client.post("/api/ads/1/image", files=_png(data=b"123456"), headers=bearer("owner-token"))

        assert resp.status_code == 413
        assert uploader.calls == []

    def test_missing_cloud_name_is_500_without_outbound_call(self, client, owner_ad, token_store, ad_repo):
        requests = []
        transport = httpx.MockTransport(lambda request: requests.append(request) or httpx.Response(200))
        settings = CloudinarySettings(cloud_name="", upload_preset="ads_unsigned")
        _use_uploader(token_store, ad_repo, CloudinaryUploader(settings, transport=transport))

        resp = client.post("/api/ads/1/image", files=_png(), headers=bearer("owner-token"))

        assert resp.status_code == 500
        assert "CLOUDINARY_CLOUD_NAME" in resp.json()["detail"]
        assert requests == []
        assert ad_repo.writes == []

    def test_upstream_error_is_500_and_image_unchanged(self, client, owner_ad, token_store, ad_repo):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="cloudinary is down"))
        settings = CloudinarySettings(cloud_name="demo", upload_preset="ads_unsigned")
        _use_uploader(token_store, ad_repo, CloudinaryUploader(settings, transport=transport))

        resp = client.post("/api/ads/1/image", files=_png(), headers=bearer("owner-token"))

        assert resp.status_code == 500
        assert resp.json()["detail"] == "Upload failed."
        assert ad_repo.ads[1]["image_path"] is None
        assert ad_repo.writes == []

    def test_end_to_end_with_cloudinary_client(self, client, owner_ad, token_store, ad_repo):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"secure_url": SECURE_URL, "public_id": "ads/photo"})

        settings = CloudinarySettings(cloud_name="demo", upload_preset="ads_unsigned")
        _use_uploader(token_store, ad_repo, CloudinaryUploader(settings, transport=httpx.MockTransport(handler)))

        resp = client.post("/api/ads/1/image", files=_png(), headers=bearer("owner-token"))

        assert resp.status_code == 200
        assert resp.json()["image_path"] == SECURE_URL
        assert len(seen) == 1
        assert str(seen[0].url) == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b'filename="photo.png"' in seen[0].content


class TestDeleteImage:
    def test_owner_clears_image(self, client, owner_ad, ad_repo):
        ad_repo.ads[1]["image_path"] = SECURE_URL

        resp = client.delete("/api/ads/1/image", headers=bearer("owner-token"))

        assert resp.status_code == 200
        assert resp.json()["image_path"] is None
        assert ad_repo.writes == [(1, None)]

    def test_non_owner_is_403(self, client, owner_ad, ad_repo):
        ad_repo.ads[1]["image_path"] = SECURE_URL

        resp = client.delete("/api/ads/1/image", headers=bearer("other-token"))

        assert resp.status_code == 403
        assert ad_repo.ads[1]["image_path"] == SECURE_URL

    def test_without_token_is_401(self, client, owner_ad):
        assert client.delete("/api/ads/1/image").status_code == 401

    def test_unknown_ad_is_404(self, client, owner_ad):
        assert client.delete("/api/ads/5/image", headers=bearer("owner-token")).status_code == 404
