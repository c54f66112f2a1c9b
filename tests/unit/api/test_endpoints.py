"""
Endpoint Tests

Drive the HTTP surface through the Flask test client. The app runs the real
Pillow transformer against a local-file fetcher; expiry timers run on the
manual scheduler so TTLs can be crossed instantly.
"""

import io
import os

import pytest
from PIL import Image

import image_relay.api.v1.namespaces as namespaces
from image_relay.domain.artifacts.value_objects import ArtifactId
from image_relay.domain.processing.value_objects import OutputFormat
from tests.conftest import SOURCE_URL, TEST_BASE_URL, TEST_TTL_SECONDS
from tests.fixtures import avif_supported

PROCESS_URL = "/api/v1/images/process"

CONTENT_TYPES = {
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "avif": "image/avif",
    "tiff": "image/tiff",
}


def process(client, fmt="png", **extra_specs):
    specs = {"conversion": {"format": fmt}}
    specs.update(extra_specs)
    return client.post(PROCESS_URL, json={"imageUrl": SOURCE_URL, "specs": specs})


def artifact_path(response) -> str:
    url = response.get_json()["processedImageUrl"]
    assert url.startswith(TEST_BASE_URL)
    return url[len(TEST_BASE_URL):]


class TestProcessEndpoint:
    def test_success(self, client, app):
        response = process(client, "webp", resize={"width": 100, "fit": "contain"})

        assert response.status_code == 200
        body = response.get_json()
        assert body["success"] is True
        assert body["processedImageUrl"].startswith(f"{TEST_BASE_URL}/artifact/")
        assert len(app.registry) == 1

    @pytest.mark.parametrize(
        "payload, error",
        [
            ({"specs": {"conversion": {"format": "png"}}}, "Missing required parameter: imageUrl"),
            ({"imageUrl": SOURCE_URL}, "Missing required parameter: specs"),
            ({"imageUrl": SOURCE_URL, "specs": {}}, "Conversion format is required in specs"),
            ({"imageUrl": "ftp://x/y.png", "specs": {"conversion": {"format": "png"}}}, "Invalid image URL provided"),
            ({"imageUrl": "http://[::1", "specs": {"conversion": {"format": "png"}}}, "Invalid image URL provided"),
            ({"imageUrl": "http://example.com:99999999/x.png", "specs": {"conversion": {"format": "png"}}}, "Invalid image URL provided"),
        ],
    )
    def test_invalid_request(self, client, payload, error):
        response = client.post(PROCESS_URL, json=payload)

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "error": error}

    def test_non_json_body(self, client):
        response = client.post(PROCESS_URL, data="imageUrl=x", content_type="text/plain")

        assert response.status_code == 400
        assert response.get_json()["success"] is False

    def test_out_of_range_dimension(self, client, scratch_dir):
        response = process(client, resize={"width": 0})

        assert response.status_code == 400
        assert "resize.width" in response.get_json()["error"]
        assert list(scratch_dir.iterdir()) == []

    def test_fetch_failure(self, client, scratch_dir, app):
        response = client.post(
            PROCESS_URL,
            json={"imageUrl": "https://unreachable.invalid/a.png", "specs": {"conversion": {"format": "png"}}},
        )

        assert response.status_code == 422
        assert response.get_json()["success"] is False
        assert list(scratch_dir.iterdir()) == []
        assert len(app.registry) == 0

    def test_transform_failure(self, client, local_fetcher, tmp_path, scratch_dir):
        bogus = tmp_path / "bogus.html"
        bogus.write_text("<html></html>")
        url = local_fetcher.add("https://images.example.com/page.html", bogus)

        response = client.post(PROCESS_URL, json={"imageUrl": url, "specs": {"conversion": {"format": "png"}}})

        assert response.status_code == 422
        assert response.get_json()["error"].startswith("Error processing image")
        assert list(scratch_dir.iterdir()) == []


class TestArtifactEndpoint:
    @pytest.mark.parametrize(
        "fmt",
        [
            pytest.param(
                fmt.value,
                marks=pytest.mark.skipif(
                    fmt is OutputFormat.AVIF and not avif_supported(),
                    reason="Pillow built without AVIF support",
                ),
            )
            for fmt in OutputFormat
        ],
    )
    def test_serve_then_expire(self, client, manual_scheduler, scratch_dir, fmt):
        path = artifact_path(process(client, fmt))

        first = client.get(path)
        assert first.status_code == 200
        assert first.headers["Content-Type"] == CONTENT_TYPES[fmt]
        assert first.headers["Cache-Control"] == f"public, max-age={TEST_TTL_SECONDS}"
        with Image.open(io.BytesIO(first.data)) as img:
            assert img.size == (200, 100)

        # Still servable inside the window
        manual_scheduler.advance(TEST_TTL_SECONDS - 1)
        assert client.get(path).status_code == 200

        manual_scheduler.advance(1)
        expired = client.get(path)
        assert expired.status_code == 404
        assert expired.get_json()["error"] == "artifact_not_found"
        assert list(scratch_dir.iterdir()) == []

    def test_repeat_serves_do_not_extend_ttl(self, client, manual_scheduler):
        path = artifact_path(process(client))

        client.get(path)
        manual_scheduler.advance(TEST_TTL_SECONDS / 2)
        client.get(path)
        manual_scheduler.advance(TEST_TTL_SECONDS / 2)

        assert client.get(path).status_code == 404

    def test_unserved_artifact_does_not_expire(self, client, manual_scheduler):
        path = artifact_path(process(client))

        manual_scheduler.advance(TEST_TTL_SECONDS * 5)

        assert client.get(path).status_code == 200

    def test_unknown_identifier(self, client):
        response = client.get(f"/artifact/{ArtifactId.generate().value}")

        assert response.status_code == 404
        body = response.get_json()
        assert body["error"] == "artifact_not_found"
        assert set(body) == {"error", "title", "message", "action"}

    def test_malformed_identifier(self, client):
        assert client.get("/artifact/short").status_code == 404

    def test_vanished_file(self, client, app):
        path = artifact_path(process(client))
        identifier = path.rsplit("/", 1)[-1]
        record = app.registry.get_record(identifier)

        os.remove(record.location)

        assert client.get(path).status_code == 404
        assert identifier not in app.registry

    def test_file_lost_between_resolve_and_send(self, client, app, monkeypatch):
        path = artifact_path(process(client))
        identifier = path.rsplit("/", 1)[-1]

        def missing(*args, **kwargs):
            raise FileNotFoundError("gone")

        monkeypatch.setattr(namespaces, "send_file", missing)

        assert client.get(path).status_code == 404
        assert identifier not in app.registry

    def test_unexpected_error_is_500_without_trace(self, client, app, monkeypatch):
        def explode(identifier):
            raise RuntimeError("secret internals")

        monkeypatch.setattr(app.artifact_service, "open_artifact", explode)

        response = client.get(f"/artifact/{ArtifactId.generate().value}")

        assert response.status_code == 500
        assert response.get_json()["error"] == "internal_error"
        assert "secret internals" not in response.get_data(as_text=True)


class TestDiagnostics:
    def test_list_artifacts(self, client):
        first = artifact_path(process(client)).rsplit("/", 1)[-1]
        second = artifact_path(process(client, "jpeg")).rsplit("/", 1)[-1]

        body = client.get("/artifacts").get_json()

        assert body["count"] == 2
        assert set(body["images"]) == {first, second}

    def test_health(self, client):
        process(client)

        response = client.get("/health")

        assert response.status_code == 200
        body = response.get_json()
        assert body["status"] == "ok"
        assert body["artifacts"] == 1
        assert body["janitor"] == "stopped"
        assert body["celery"] == "unavailable"
        assert "timestamp" in body

    def test_tool_descriptor(self, client):
        body = client.get("/api/v1/images/tool").get_json()

        assert body["name"] == "process_image"
        assert "imageUrl" in body["inputSchema"]["properties"]

    def test_swagger_spec(self, client):
        response = client.get("/swagger.json")

        assert response.status_code == 200
        paths = response.get_json()["paths"]
        assert "/api/v1/images/process" in paths
        assert "/artifact/{identifier}" in paths
