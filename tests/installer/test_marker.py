"""
Tests for the installation marker.
"""

from cmakekit.installer.marker import (
    MARKER_NAME,
    clear_marker,
    is_up_to_date,
    marker_path,
    read_marker,
    write_marker,
)

URL = "https://x/cmake-3.20.0-linux-x86_64.tar.gz"


class TestMarker:
    def test_missing(self, tmp_path):
        assert read_marker(tmp_path) is None
        assert not is_up_to_date(tmp_path, URL)

    def test_missing_directory(self, tmp_path):
        assert read_marker(tmp_path / "not-installed") is None

    def test_write_and_read(self, tmp_path):
        write_marker(tmp_path, URL)

        assert (tmp_path / MARKER_NAME).read_text(encoding="utf-8") == URL
        assert read_marker(tmp_path) == URL
        assert is_up_to_date(tmp_path, URL)

    def test_other_url_is_stale(self, tmp_path):
        write_marker(tmp_path, URL)

        assert not is_up_to_date(tmp_path, URL.replace("3.20.0", "3.20.1"))

    def test_surrounding_whitespace_is_ignored(self, tmp_path):
        marker_path(tmp_path).write_text(f"{URL}\n", encoding="utf-8")

        assert is_up_to_date(tmp_path, URL)

    def test_empty_marker(self, tmp_path):
        marker_path(tmp_path).write_text("", encoding="utf-8")

        assert read_marker(tmp_path) is None

    def test_unreadable_marker(self, tmp_path):
        marker_path(tmp_path).write_bytes(b"\xff\xfe\xfa")

        assert read_marker(tmp_path) is None

    def test_clear(self, tmp_path):
        write_marker(tmp_path, URL)
        clear_marker(tmp_path)
        clear_marker(tmp_path)

        assert read_marker(tmp_path) is None
