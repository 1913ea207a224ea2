"""
Unit tests for the normalized HTTP request.
"""

from webdispatch.http.request import HTTPRequest


class TestFromTarget:
    """Tests for HTTPRequest.from_target."""

    def test_splits_path_and_query(self):
        """Test parsing a request-target with a query string."""
        request = HTTPRequest.from_target("get", "/search?q=one&q=two&empty=")

        assert request.method == "GET"
        assert request.path == "/search"
        assert request.query_params == {"q": ["one", "two"], "empty": [""]}
        assert request.get_query("q") == "one"
        assert request.get_query("missing", "default") == "default"

    def test_path_is_url_decoded(self):
        request = HTTPRequest.from_target("GET", "/files/a%20b.txt")

        assert request.path == "/files/a b.txt"

    def test_empty_path_becomes_root(self):
        request = HTTPRequest.from_target("GET", "?x=1")

        assert request.path == "/"

    def test_headers_are_lowercased(self):
        """Test case-insensitive header access."""
        request = HTTPRequest.from_target(
            "GET", "/", headers={"Host": "example.com", "User-Agent": "pytest"}
        )

        assert request.headers == {"host": "example.com", "user-agent": "pytest"}
        assert request.get_header("HOST") == "example.com"
        assert request.user_agent == "pytest"

    def test_double_slash_stays_in_path(self):
        """Test that a leading "//" is part of the path, not a host."""
        request = HTTPRequest.from_target("GET", "//files/report.pdf?x=1")

        assert request.path == "//files/report.pdf"
        assert request.query_params == {"x": ["1"]}

    def test_fragment_is_dropped(self):
        request = HTTPRequest.from_target("GET", "/a?x=1#frag")

        assert request.path == "/a"
        assert request.query_params == {"x": ["1"]}

    def test_absolute_form(self):
        """Test a proxy-style target with scheme and host."""
        request = HTTPRequest.from_target("GET", "http://example.com/a?x=1")

        assert request.path == "/a"
        assert request.query_params == {"x": ["1"]}

    def test_client_address_and_environ(self):
        request = HTTPRequest.from_target(
            "POST", "/", body=b"data", client_address=("10.1.2.3", 4000),
            request_version="HTTP/1.1",
        )

        assert request.client_ip == "10.1.2.3"
        assert request.body == b"data"
        assert request.environ == {"request_version": "HTTP/1.1"}


class TestHost:
    """Tests for the host property."""

    def test_host_present(self):
        request = HTTPRequest(headers={"host": "localhost:8080"})

        assert request.host == "localhost:8080"

    def test_mixed_case_header_name(self):
        """Test that headers given directly are matched case-insensitively."""
        request = HTTPRequest(headers={"Host": "a.example", "User-Agent": "pytest"})

        assert request.host == "a.example"
        assert request.headers == {"host": "a.example", "user-agent": "pytest"}
        assert request.get_header("user-agent") == "pytest"

    def test_host_missing(self):
        assert HTTPRequest().host is None

    def test_host_empty(self):
        assert HTTPRequest(headers={"host": ""}).host is None


class TestDefaults:
    """Tests for default field values."""

    def test_defaults(self):
        request = HTTPRequest()

        assert request.method == "GET"
        assert request.path == "/"
        assert request.client_ip == ""
        assert request.get_header("x-missing") == ""
