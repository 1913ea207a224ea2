"""
Unit tests for the command-line entry point.
"""

import pytest

from conftest import make_request
from webdispatch.__main__ import build_app, build_parser, main
from webdispatch.config import ServerConfig


class TestBuildParser:
    """Tests for argument parsing."""

    def test_defaults_come_from_config(self):
        parser = build_parser(ServerConfig(host="127.0.0.1", port=9999, log_level="DEBUG"))

        args = parser.parse_args([])

        assert args.directory == "."
        assert (args.host, args.port, args.log_level) == ("127.0.0.1", 9999, "DEBUG")
        assert args.allow == []

    def test_options(self):
        args = build_parser(ServerConfig()).parse_args(
            ["public", "--port", "3000", "-l", "warning", "--allow", "10.0.0.0/8", "-a", "::1"]
        )

        assert args.directory == "public"
        assert args.port == 3000
        assert args.log_level == "WARNING"
        assert args.allow == ["10.0.0.0/8", "::1"]


class TestBuildApp:
    """Tests for the served application."""

    def test_serves_directory_at_root(self, files_dir):
        app = build_app(files_dir)

        response = app(make_request("/index.html"))

        assert response.status == 200
        assert response.read_body() == b"<h1>home</h1>"

    def test_allow_list(self, files_dir):
        app = build_app(files_dir, allow=["10.0.0.0/8"])

        allowed = app(make_request("/index.html", client_ip="10.0.0.5"))
        denied = app(make_request("/index.html", client_ip="192.168.0.5"))

        assert allowed.status == 200
        allowed.close()
        assert denied.status == 403

    def test_invalid_allow_range(self, files_dir):
        with pytest.raises(ValueError):
            build_app(files_dir, allow=["bogus"])


class TestMain:
    """Tests for main() error paths."""

    def test_missing_directory(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing")]) == 2
        assert "not a directory" in capsys.readouterr().err

    def test_invalid_allow(self, tmp_path, capsys):
        assert main([str(tmp_path), "--port", "0", "--allow", "bogus"]) == 1
        assert "Invalid IP range" in capsys.readouterr().err

    def test_bad_environment(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("HTTP_PORT", "not-a-port")

        assert main([str(tmp_path)]) == 2
        assert "invalid environment setting" in capsys.readouterr().err
