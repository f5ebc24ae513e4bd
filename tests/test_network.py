"""Tests for cce.integrations.network module."""

import httpx

from cce.integrations.network import validate_endpoint


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


class TestValidateEndpoint:
    """Tests for validate_endpoint."""

    def test_success(self):
        client = _client(lambda request: httpx.Response(200))

        result = validate_endpoint("https://api.example.com", http_client=client)

        assert result.success is True
        assert result.status_code == 200
        assert result.error == ""
        assert result.ssl_valid is True
        assert result.response_time >= 0

    def test_client_error_counts_as_reachable(self):
        client = _client(lambda request: httpx.Response(401))

        result = validate_endpoint("https://api.example.com", http_client=client)

        assert result.success is True
        assert result.status_code == 401

    def test_server_error(self):
        client = _client(lambda request: httpx.Response(503))

        result = validate_endpoint("https://api.example.com", http_client=client)

        assert result.success is False
        assert result.status_code == 503
        assert "server error" in result.error

    def test_plain_http_is_not_tls(self):
        client = _client(lambda request: httpx.Response(200))

        result = validate_endpoint("http://localhost:8080", http_client=client)

        assert result.ssl_valid is False

    def test_connection_error_captured(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = validate_endpoint("https://api.example.com", http_client=_client(handler))

        assert result.success is False
        assert result.status_code == 0
        assert "connection refused" in result.error

    def test_timeout_captured(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = validate_endpoint(
            "https://api.example.com", timeout=2.0, http_client=_client(handler)
        )

        assert result.success is False
        assert result.error == "request timed out after 2s"

    def test_injected_client_left_open(self):
        client = _client(lambda request: httpx.Response(200))

        validate_endpoint("https://api.example.com", http_client=client)

        assert client.is_closed is False
