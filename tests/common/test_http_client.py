"""Tests for nutricrawl/common/http_client.py"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from nutricrawl.common.errors import FetchError, ParseError
from nutricrawl.common.http_client import FetchResult, HttpClient


@pytest.fixture
def client():
    return HttpClient(user_agent="TestCrawler/1.0", accept_language="de-DE", timeout=5)


def _response(status_code=200, content=b"<html></html>", encoding="utf-8",
              content_type="text/html; charset=utf-8", apparent_encoding="utf-8"):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    response.encoding = encoding
    response.headers = {"Content-Type": content_type} if content_type else {}
    response.apparent_encoding = apparent_encoding
    return response


class TestInit:
    def test_session_headers(self, client):
        assert client.session.headers["User-Agent"] == "TestCrawler/1.0"
        assert client.session.headers["Accept-Language"] == "de-DE"

    def test_extra_headers(self):
        c = HttpClient(user_agent="UA", headers={"X-Test": "1"})
        assert c.session.headers["X-Test"] == "1"

    def test_context_manager_closes_session(self):
        session = MagicMock()
        session.headers = {}
        with HttpClient(user_agent="UA", session=session):
            pass
        session.close.assert_called_once()


class TestGet:
    def test_success_returns_result(self, client):
        with patch.object(client.session, "get", return_value=_response(content=b"ok")) as get:
            result = client.get("https://example.org/a", params={"page": 2})

        assert result.status_code == 200
        assert result.text == "ok"
        assert result.url == "https://example.org/a"
        get.assert_called_once_with(
            "https://example.org/a", params={"page": 2}, headers=None, timeout=5
        )

    def test_header_charset_is_used(self, client):
        body = "Rohfaser für".encode("latin-1")
        response = _response(content=body, encoding="ISO-8859-1",
                             content_type="text/html; charset=ISO-8859-1", apparent_encoding="utf-8")
        with patch.object(client.session, "get", return_value=response):
            result = client.get("https://example.org/a")
        assert result.encoding == "ISO-8859-1"
        assert result.text == "Rohfaser für"
        assert result.encoding == "ISO-8859-1"

    def test_missing_charset_uses_detected_encoding(self, client):
        # requests reports ISO-8859-1 for text/html without a charset
        body = "<meta charset=\"utf-8\">Eiweiß: 25 %".encode("utf-8")
        response = _response(content=body, encoding="ISO-8859-1", content_type="text/html")
        with patch.object(client.session, "get", return_value=response):
            result = client.get("https://example.org/a")
        assert result.text.endswith("Eiweiß: 25 %")

    def test_per_request_timeout(self, client):
        with patch.object(client.session, "get", return_value=_response()) as get:
            client.get("https://example.org/", timeout=20)
        assert get.call_args.kwargs["timeout"] == 20

    def test_counts_requests(self, client):
        with patch.object(client.session, "get", return_value=_response()):
            client.get("https://example.org/")
            client.get("https://example.org/")
        assert client.requests_made == 2

    @pytest.mark.parametrize("status", [301, 403, 404, 500, 503])
    def test_non_2xx_raises(self, client, status):
        with patch.object(client.session, "get", return_value=_response(status_code=status)):
            with pytest.raises(FetchError) as exc_info:
                client.get("https://example.org/")
        assert exc_info.value.status_code == status
        assert exc_info.value.reason == "fetch_error"

    def test_timeout_raises_fetch_error(self, client):
        with patch.object(client.session, "get", side_effect=requests.exceptions.Timeout("slow")):
            with pytest.raises(FetchError, match="timed out"):
                client.get("https://example.org/")

    def test_connection_error_raises_fetch_error(self, client):
        with patch.object(client.session, "get",
                          side_effect=requests.exceptions.ConnectionError("refused")):
            with pytest.raises(FetchError) as exc_info:
                client.get("https://example.org/")
        assert isinstance(exc_info.value.cause, requests.exceptions.ConnectionError)


class TestFetchResult:
    def test_decodes_with_encoding(self):
        result = FetchResult(url="u", status_code=200, body="Rohfaser 3 % für".encode("latin-1"),
                             encoding="latin-1")
        assert result.text == "Rohfaser 3 % für"

    def test_defaults_to_utf8(self):
        result = FetchResult(url="u", status_code=200, body="Eiweiß".encode("utf-8"))
        assert result.text == "Eiweiß"

    def test_json(self):
        result = FetchResult(url="u", status_code=200, body=b'{"status": 1}')
        assert result.json() == {"status": 1}

    def test_invalid_json_raises_parse_error(self):
        result = FetchResult(url="u", status_code=200, body=b"<html>")
        with pytest.raises(ParseError):
            result.json()
