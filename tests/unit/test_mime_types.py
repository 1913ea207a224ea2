"""
Unit tests for extension to Content-Type lookup.
"""

import pytest

from webdispatch.http import mime_types
from webdispatch.http.mime_types import (
    UNKNOWN_CONTENT_TYPE,
    content_type,
    content_type_for,
    register_content_type,
)


@pytest.fixture
def restore_table():
    """Undo registrations made by a test."""
    saved = dict(mime_types.CONTENT_TYPES)
    yield
    mime_types.CONTENT_TYPES.clear()
    mime_types.CONTENT_TYPES.update(saved)


class TestContentType:
    """Tests for content_type()."""

    @pytest.mark.parametrize("extension,expected", [
        ("html", "text/html"),
        ("htm", "text/html"),
        ("css", "text/css"),
        ("js", "text/javascript"),
        ("pdf", "application/pdf"),
        ("txt", "text/plain"),
        ("ico", "image/x-icon"),
        ("rss", "application/rss+xml"),
    ])
    def test_known_extensions(self, extension, expected):
        assert content_type(extension) == expected

    def test_case_insensitive(self):
        """Test that extension case does not matter."""
        assert content_type("HTML") == content_type("html") == "text/html"

    def test_leading_dot_ignored(self):
        assert content_type(".pdf") == "application/pdf"

    def test_unknown_extension(self):
        assert content_type("xyz") == UNKNOWN_CONTENT_TYPE
        assert content_type("") == UNKNOWN_CONTENT_TYPE


class TestContentTypeFor:
    """Tests for content_type_for()."""

    def test_uses_last_extension(self):
        assert content_type_for("/srv/archive.tar.zip") == "application/zip"

    def test_no_extension(self):
        assert content_type_for("/srv/README") == UNKNOWN_CONTENT_TYPE

    def test_uppercase_file_name(self):
        assert content_type_for("INDEX.HTM") == "text/html"


class TestRegister:
    """Tests for register_content_type()."""

    def test_register_new_type(self, restore_table):
        """Test adding extensions at runtime."""
        register_content_type("application/json", ["json", ".MAP"])

        assert content_type("json") == "application/json"
        assert content_type("map") == "application/json"

    def test_register_overrides(self, restore_table):
        """Test replacing an existing mapping."""
        register_content_type("application/javascript", ["js"])

        assert content_type("js") == "application/javascript"
