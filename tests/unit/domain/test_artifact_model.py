"""
Unit Tests for artifact value objects and entities
"""

from datetime import datetime, timedelta, timezone

import pytest

from image_relay.domain.artifacts.entities import ArtifactRecord
from image_relay.domain.artifacts.value_objects import ArtifactId, ArtifactState
from image_relay.domain.errors import ArtifactNotFoundError


class TestArtifactId:
    def test_generate_is_url_safe(self):
        artifact_id = ArtifactId.generate()

        assert len(artifact_id.value) >= 43
        assert all(c.isalnum() or c in "-_" for c in artifact_id.value)

    def test_ten_thousand_generated_ids_are_distinct(self):
        ids = {ArtifactId.generate().value for _ in range(10000)}
        assert len(ids) == 10000

    @pytest.mark.parametrize(
        "value",
        ["", "short", "a" * 31, "a" * 40 + "/../etc", "a" * 40 + " b", None],
    )
    def test_malformed_ids_read_as_not_found(self, value):
        with pytest.raises(ArtifactNotFoundError):
            ArtifactId(value)

    def test_str_is_value(self):
        artifact_id = ArtifactId("abcdefgh" + "x" * 40)
        assert str(artifact_id) == artifact_id.value


class TestArtifactRecord:
    def _record(self, location="/tmp/x.webp", served_at=None):
        return ArtifactRecord(
            identifier="i" * 43,
            location=location,
            registered_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            served_at=served_at,
            filesize=10,
        )

    def test_unserved_has_no_expiry(self):
        record = self._record()

        assert record.state == ArtifactState.UNSERVED
        assert not record.is_served()
        assert record.expires_at(60) is None

    def test_served_expiry(self):
        served = datetime(2024, 1, 1, 12, tzinfo=timezone.utc)
        record = self._record(served_at=served)

        assert record.state == ArtifactState.SERVED
        assert record.expires_at(90) == served + timedelta(seconds=90)

    def test_file_exists(self, tmp_path):
        path = tmp_path / "a.png"
        record = self._record(location=str(path))
        assert not record.file_exists()

        path.write_bytes(b"x")
        assert record.file_exists()

    def test_extension_lowercase(self):
        assert self._record(location="/tmp/A.JPG").extension == ".jpg"

    def test_snapshot_is_detached(self):
        record = self._record()
        copy = record.snapshot()
        copy.served_at = datetime.now(timezone.utc)

        assert record.served_at is None

    def test_to_dict(self):
        data = self._record().to_dict()

        assert data["state"] == "unserved"
        assert data["served_at"] is None
        assert data["registered_at"] == "2024-01-01T00:00:00+00:00"
        assert data["filesize"] == 10
