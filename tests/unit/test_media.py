"""
Tests for image download, the media library and thumbnail generation.
"""

from unittest.mock import MagicMock

import pytest
import requests
from PIL import Image

from property_feed_sync.exceptions import ImageError
from property_feed_sync.media import MediaLibrary, download_image, generate_thumbnails, identify_image
from property_feed_sync.media.downloader import filename_from_url, guess_mime_type


def mock_session(status_code=200, content=b"", error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = MagicMock(status_code=status_code, content=content)
    return session


class TestIdentifyImage:

    def test_png(self, png_factory):
        assert identify_image(png_factory()) == (".png", "image/png")

    def test_garbage(self):
        with pytest.raises(ImageError):
            identify_image(b"<html>not an image</html>")


def test_filename_from_url():
    assert filename_from_url("https://cdn.example.com/img/flat%201.JPG?w=800", ".jpg") == "flat 1.jpg"
    assert filename_from_url("https://cdn.example.com/", ".png") == "image.png"


def test_guess_mime_type():
    assert guess_mime_type("flat.jpg") == "image/jpeg"
    assert guess_mime_type("flat.unknownext") == "application/octet-stream"


class TestDownloadImage:

    def test_success(self, png_factory):
        session = mock_session(content=png_factory())
        data, filename, mime_type = download_image("http://x/photos/1.png", session=session, timeout=5)

        assert filename == "1.png"
        assert mime_type == "image/png"
        assert data.startswith(b"\x89PNG")
        assert session.get.call_args.kwargs["timeout"] == 5

    def test_extension_follows_content(self, png_factory):
        session = mock_session(content=png_factory())
        _, filename, _ = download_image("http://x/photos/1.jpg", session=session)
        assert filename == "1.png"

    def test_timeout(self):
        session = mock_session(error=requests.exceptions.Timeout("slow"))
        with pytest.raises(ImageError, match="Timed out"):
            download_image("http://x/1.jpg", session=session, timeout=1)

    def test_connection_error(self):
        session = mock_session(error=requests.exceptions.ConnectionError("refused"))
        with pytest.raises(ImageError, match="Could not download"):
            download_image("http://x/1.jpg", session=session)

    def test_http_error(self):
        with pytest.raises(ImageError, match="404"):
            download_image("http://x/1.jpg", session=mock_session(status_code=404, content=b"x"))

    def test_empty_body(self):
        with pytest.raises(ImageError, match="Empty"):
            download_image("http://x/1.jpg", session=mock_session(content=b""))

    def test_not_an_image(self):
        with pytest.raises(ImageError):
            download_image("http://x/1.jpg", session=mock_session(content=b"<html></html>"))


class TestMediaLibrary:

    def test_save_bytes_unique_names(self, tmp_path):
        library = MediaLibrary(tmp_path)
        first = library.save_bytes(b"a", "flat.jpg")
        second = library.save_bytes(b"b", "flat.jpg")

        assert first != second
        assert second.name == "flat-1.jpg"
        assert first.read_bytes() == b"a"
        assert library.absolute_path(library.relative_path(second)) == second

    def test_relative_path_is_dated(self, tmp_path):
        library = MediaLibrary(tmp_path)
        relative = library.relative_path(library.save_bytes(b"a", "flat.jpg"))
        year, month, name = relative.split("/")
        assert len(year) == 4 and len(month) == 2
        assert name == "flat.jpg"

    def test_copy_missing_file(self, tmp_path):
        with pytest.raises(ImageError, match="not found"):
            MediaLibrary(tmp_path / "media").copy_file(tmp_path / "missing.png")


class TestThumbnails:

    def test_generates_smaller_variants_only(self, tmp_path, png_factory):
        path = tmp_path / "flat.png"
        path.write_bytes(png_factory(400, 200))

        metadata = generate_thumbnails(path, {"thumbnail": (150, 150), "medium": (300, 300), "large": (1024, 1024)})

        assert metadata["width"] == 400
        assert metadata["height"] == 200
        assert metadata["file"] == "flat.png"
        assert set(metadata["sizes"]) == {"thumbnail", "medium"}
        thumbnail = metadata["sizes"]["thumbnail"]
        assert (thumbnail["width"], thumbnail["height"]) == (150, 75)
        assert thumbnail["mime_type"] == "image/png"
        with Image.open(tmp_path / thumbnail["file"]) as img:
            assert img.size == (150, 75)

    def test_jpeg_variant(self, tmp_path):
        path = tmp_path / "photo.jpg"
        Image.new("RGB", (600, 600), "blue").save(path, format="JPEG")

        metadata = generate_thumbnails(path, {"thumbnail": (150, 150)})
        assert metadata["sizes"]["thumbnail"]["mime_type"] == "image/jpeg"

    def test_unreadable_file(self, tmp_path):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"not an image")
        with pytest.raises(ImageError):
            generate_thumbnails(path, {"thumbnail": (150, 150)})
