"""
Tests for asset download (served from file:// URLs).
"""

from pathlib import Path

import pytest

from relpull.core.errors import DownloadError
from relpull.core.services.install.download import download, filename_from_url


class TestFilenameFromUrl:
    def test_last_segment(self):
        url = "https://github.com/o/r/releases/download/v1.0.0/rg-1.0.0.tar.gz"
        assert filename_from_url(url) == "rg-1.0.0.tar.gz"

    def test_percent_decoded(self):
        assert filename_from_url("https://example.com/a/my%20tool.zip") == "my tool.zip"

    def test_trailing_slash(self):
        assert filename_from_url("https://example.com/a/b/") == "b"

    def test_query_ignored(self):
        assert filename_from_url("https://example.com/a/tool.tgz?token=x") == "tool.tgz"

    def test_no_path(self):
        with pytest.raises(DownloadError):
            filename_from_url("https://example.com")


class TestDownload:
    def test_file_url(self, tmp_path: Path):
        src = tmp_path / "src" / "tool.tar.gz"
        src.parent.mkdir()
        src.write_bytes(b"x" * 200_000)

        dest = download(src.as_uri(), tmp_path / "dl")
        assert dest == tmp_path / "dl" / "tool.tar.gz"
        assert dest.read_bytes() == src.read_bytes()

    def test_small_chunks(self, tmp_path: Path):
        src = tmp_path / "payload.bin"
        src.write_bytes(b"0123456789")

        dest = download(src.as_uri(), tmp_path / "dl", chunk_size=3)
        assert dest.read_bytes() == b"0123456789"

    def test_missing_source(self, tmp_path: Path):
        url = (tmp_path / "nope.tar.gz").as_uri()
        with pytest.raises(DownloadError) as exc:
            download(url, tmp_path / "dl")
        assert exc.value.url == url
        assert not (tmp_path / "dl" / "nope.tar.gz").exists()

    def test_http_error_status(self, raw_http_server, tmp_path: Path):
        base = raw_http_server(b"HTTP/1.1 404 Not Found\r\nContent-Length: 0\r\nConnection: close\r\n\r\n")
        with pytest.raises(DownloadError) as exc:
            download(f"{base}/tool.tar.gz", tmp_path / "dl")
        assert "HTTP 404" in exc.value.reason
        assert not (tmp_path / "dl" / "tool.tar.gz").exists()

    def test_malformed_status_line(self, raw_http_server, tmp_path: Path):
        base = raw_http_server(b"GARBAGE\r\n")
        with pytest.raises(DownloadError) as exc:
            download(f"{base}/tool.tar.gz", tmp_path / "dl")
        assert "BadStatusLine" in exc.value.reason
        assert not (tmp_path / "dl" / "tool.tar.gz").exists()

    def test_truncated_body(self, raw_http_server, tmp_path: Path):
        base = raw_http_server(
            b"HTTP/1.1 200 OK\r\nContent-Length: 1000\r\nConnection: close\r\n\r\nonly a little"
        )
        with pytest.raises(DownloadError) as exc:
            download(f"{base}/tool.tar.gz", tmp_path / "dl")
        assert "incomplete read" in exc.value.reason
        assert not (tmp_path / "dl" / "tool.tar.gz").exists()
