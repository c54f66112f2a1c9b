"""
End-to-End Tests for the processing workflow

Full HTTP round trips: POST /process with the real httpx fetcher (network
replaced by httpx.MockTransport) and the real Pillow transformer, then
GET the artifact URL.
"""

import io
from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest
from PIL import Image

from image_relay.app_factory import create_app
from image_relay.infrastructure.http_image_fetcher import HttpImageFetcher
from tests.conftest import TEST_BASE_URL, TEST_TTL_SECONDS
from tests.fixtures import image_bytes

pytestmark = pytest.mark.e2e

ORIGIN = "https://images.example.com"


def remote_images(request: httpx.Request) -> httpx.Response:
    if request.url.host == "unreachable.invalid":
        raise httpx.ConnectError("Name or service not known", request=request)
    if request.url.path == "/photo.png":
        return httpx.Response(200, content=image_bytes(200, 100), headers={"Content-Type": "image/png"})
    return httpx.Response(404, content=b"not found")


@pytest.fixture
def e2e_app(app_config, scratch_dir, manual_scheduler):
    client = httpx.Client(transport=httpx.MockTransport(remote_images), follow_redirects=True)
    fetcher = HttpImageFetcher(scratch_dir, timeout_seconds=5, client=client)

    app = create_app(app_config, fetcher=fetcher, scheduler=manual_scheduler)
    app.config["TESTING"] = True
    yield app
    app.shutdown_services()
    client.close()


@pytest.fixture
def http(e2e_app):
    return e2e_app.test_client()


class TestProcessWorkflow:
    def test_webp_contain_width_100(self, http, e2e_app, manual_scheduler, scratch_dir):
        response = http.post("/api/v1/images/process", json={
            "imageUrl": f"{ORIGIN}/photo.png",
            "specs": {
                "resize": {"width": 100, "fit": "contain"},
                "compression": {"quality": 75},
                "conversion": {"format": "webp"},
            },
        })

        assert response.status_code == 200
        url = response.get_json()["processedImageUrl"]
        assert url.startswith(f"{TEST_BASE_URL}/artifact/")
        # Only the processed artifact remains; the download is gone
        assert [p.suffix for p in scratch_dir.iterdir()] == [".webp"]

        served = http.get(url[len(TEST_BASE_URL):])

        assert served.status_code == 200
        assert served.headers["Content-Type"] == "image/webp"
        with Image.open(io.BytesIO(served.data)) as img:
            assert img.format == "WEBP"
            assert img.size == (100, 50)

        manual_scheduler.advance(TEST_TTL_SECONDS)
        assert http.get(url[len(TEST_BASE_URL):]).status_code == 404
        assert list(scratch_dir.iterdir()) == []
        assert len(e2e_app.registry) == 0

    def test_unreachable_url_leaves_no_residue(self, http, e2e_app, scratch_dir):
        response = http.post("/api/v1/images/process", json={
            "imageUrl": "https://unreachable.invalid/photo.png",
            "specs": {"conversion": {"format": "png"}},
        })

        body = response.get_json()
        assert response.status_code == 422
        assert body["success"] is False
        assert body["error"]
        assert "processedImageUrl" not in body
        assert list(scratch_dir.iterdir()) == []
        assert len(e2e_app.registry) == 0

    def test_remote_404(self, http, scratch_dir):
        response = http.post("/api/v1/images/process", json={
            "imageUrl": f"{ORIGIN}/missing.png",
            "specs": {"conversion": {"format": "jpeg"}},
        })

        assert response.status_code == 422
        assert "HTTP 404" in response.get_json()["error"]
        assert list(scratch_dir.iterdir()) == []

    def test_concurrent_runs_get_distinct_artifacts(self, e2e_app):
        def run(_):
            with e2e_app.test_client() as c:
                return c.post("/api/v1/images/process", json={
                    "imageUrl": f"{ORIGIN}/photo.png",
                    "specs": {"conversion": {"format": "png"}},
                }).get_json()["processedImageUrl"]

        with ThreadPoolExecutor(max_workers=4) as pool:
            urls = list(pool.map(run, range(8)))

        assert len(set(urls)) == 8
        assert len(e2e_app.registry) == 8
