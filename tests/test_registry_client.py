"""Tests for the registry client and the HTTP helpers under it."""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from common.errors import RegistryFetchError
from common.http_client import get_json, safe_get
from domain.registry import AuthInfo, Registry, RegistryUrl
from registry.client import PackumentFetcher, packument_url, request_headers

PACKUMENT = {
    "name": "com.example.tools",
    "dist-tags": {"latest": "1.0.0"},
    "versions": {"1.0.0": {"name": "com.example.tools", "version": "1.0.0"}},
}


def _response(status_code, body=None):
    res = MagicMock()
    res.status_code = status_code
    res.ok = 200 <= status_code < 300
    res.text = json.dumps(body) if body is not None else ""
    return res


@pytest.fixture
def registry():
    return Registry(url=RegistryUrl.parse("https://package.openupm.com"))


class TestHttpClient:
    """Tests for the HTTP helpers."""

    @patch("common.http_client.requests.get")
    def test_timeout_raises_fetch_error(self, mock_get):
        """Timeouts become RegistryFetchError."""
        mock_get.side_effect = requests.Timeout()
        with pytest.raises(RegistryFetchError) as info:
            safe_get("https://example.com/x", context="test")
        assert info.value.cause == "timeout"

    @patch("common.http_client.requests.get")
    def test_connection_error_raises_fetch_error(self, mock_get):
        """Connection failures become RegistryFetchError."""
        mock_get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(RegistryFetchError):
            safe_get("https://example.com/x", context="test")

    @patch("common.http_client.requests.get")
    def test_connection_error_hides_credentials(self, mock_get, caplog):
        """Credentials echoed in a transport error are masked in the error and the log."""
        mock_get.side_effect = requests.ConnectionError("proxy rejected Authorization: Bearer s3cret")
        with pytest.raises(RegistryFetchError) as info:
            safe_get("https://example.com/x", context="test")
        assert info.value.cause == "proxy rejected Authorization: Bearer [REDACTED]"
        assert "s3cret" not in caplog.text

    @patch("common.http_client.requests.get")
    def test_get_json_skips_body_for_errors(self, mock_get):
        """Non-2xx bodies are not parsed."""
        mock_get.return_value = _response(404, {"error": "not found"})
        assert get_json("https://example.com/x", context="test") == (404, None)

    @patch("common.http_client.requests.get")
    def test_get_json_invalid_body(self, mock_get):
        """An undecodable 2xx body raises RegistryFetchError."""
        res = _response(200)
        res.text = "<html>"
        mock_get.return_value = res
        with pytest.raises(RegistryFetchError):
            get_json("https://example.com/x", context="test")


class TestPackumentFetcher:
    """Tests for PackumentFetcher."""

    def test_url_and_headers(self, registry):
        """Urls append the name and auth adds a header."""
        assert packument_url(registry, "com.example.tools") == "https://package.openupm.com/com.example.tools"
        headers = request_headers(Registry(url=registry.url, auth=AuthInfo(token="t0k")))
        assert headers["Authorization"] == "Bearer t0k"
        assert "application/vnd.npm.install-v1+json" in headers["Accept"]
        assert "Authorization" not in request_headers(registry)

    @patch("common.http_client.requests.get")
    def test_fetches_and_memoizes(self, mock_get, registry):
        """A packument is fetched once per registry and name."""
        mock_get.return_value = _response(200, PACKUMENT)
        fetcher = PackumentFetcher()

        first = fetcher.fetch_packument(registry, "com.example.tools")
        second = fetcher(registry, "com.example.tools")

        assert first.name == "com.example.tools"
        assert second is first
        assert mock_get.call_count == 1

    @patch("common.http_client.requests.get")
    def test_not_found_returns_none(self, mock_get, registry):
        """A 404 gives None and is remembered."""
        mock_get.return_value = _response(404)
        fetcher = PackumentFetcher()
        assert fetcher.fetch_packument(registry, "com.missing") is None
        assert fetcher.is_cached(registry, "com.missing")

    @patch("common.http_client.requests.get")
    def test_server_error_raises_and_is_not_cached(self, mock_get, registry):
        """Server errors raise and are not remembered."""
        mock_get.return_value = _response(503)
        fetcher = PackumentFetcher()
        with pytest.raises(RegistryFetchError) as info:
            fetcher.fetch_packument(registry, "com.example.tools")
        assert info.value.status_code == 503
        assert not fetcher.is_cached(registry, "com.example.tools")

    @patch("common.http_client.requests.get")
    def test_malformed_packument_raises(self, mock_get, registry):
        """A body that is not a packument raises."""
        mock_get.return_value = _response(200, {"versions": {}})
        with pytest.raises(RegistryFetchError):
            PackumentFetcher().fetch_packument(registry, "com.example.tools")

    def test_remember(self, registry):
        """Remembered answers are served without a request."""
        fetcher = PackumentFetcher()
        fetcher.remember(registry, "com.missing", None)
        assert fetcher.fetch_packument(registry, "com.missing") is None
