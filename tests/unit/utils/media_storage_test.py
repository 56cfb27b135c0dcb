"""Unit tests for stored media helpers."""

from pathlib import Path

import pytest

from sufra.core.config.config import settings
from sufra.utils.media_storage import (
    delete_media,
    is_absolute_url,
    media_available,
    media_url,
)

pytestmark = pytest.mark.unit


class TestMediaUrl:
    """Unit tests for media_url."""

    def test_none_for_missing_reference(self) -> None:
        assert media_url(None) is None
        assert media_url("") is None

    def test_absolute_urls_are_returned_as_is(self) -> None:
        # Arrange
        url = "https://cdn.example.com/kibbeh.jpg"

        # Act & Assert
        assert is_absolute_url(url)
        assert media_url(url) == url

    def test_relative_reference_is_prefixed(self) -> None:
        # Act
        url = media_url("/recipes/kibbeh.jpg")

        # Assert
        assert url == f"{settings.media_base_url}/recipes/kibbeh.jpg"


class TestDeleteMedia:
    """Unit tests for delete_media."""

    def test_deletes_file_under_root(self, tmp_path: Path) -> None:
        """Test that a stored file is removed."""
        # Arrange
        target = tmp_path / "recipes" / "kibbeh.jpg"
        target.parent.mkdir()
        target.write_bytes(b"jpeg")

        # Act
        deleted = delete_media("recipes/kibbeh.jpg", media_root=tmp_path)

        # Assert
        assert deleted is True
        assert not target.exists()

    def test_refuses_paths_outside_root(self, tmp_path: Path) -> None:
        """Test that traversal out of the media root is ignored."""
        # Arrange
        root = tmp_path / "storage"
        root.mkdir()
        outside = tmp_path / "secret.txt"
        outside.write_text("keep me")

        # Act
        deleted = delete_media("../secret.txt", media_root=root)

        # Assert
        assert deleted is False
        assert outside.exists()

    def test_ignores_remote_and_missing_references(self, tmp_path: Path) -> None:
        # Act & Assert
        remote = "https://cdn.example.com/a.jpg"
        assert delete_media(remote, media_root=tmp_path) is False
        assert delete_media("missing.jpg", media_root=tmp_path) is False
        assert delete_media(None, media_root=tmp_path) is False


class TestMediaAvailable:
    """Unit tests for media_available."""

    def test_stored_file_must_exist(self, tmp_path: Path) -> None:
        # Arrange
        (tmp_path / "kibbeh.jpg").write_bytes(b"jpeg")

        # Act & Assert
        assert media_available("kibbeh.jpg", media_root=tmp_path) is True
        assert media_available("fattoush.jpg", media_root=tmp_path) is False

    def test_remote_and_empty_references(self, tmp_path: Path) -> None:
        remote = "https://cdn.example.com/a.jpg"
        assert media_available(remote, media_root=tmp_path) is True
        assert media_available(None, media_root=tmp_path) is False
        assert media_available("../outside.jpg", media_root=tmp_path) is False
