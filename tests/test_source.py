import httpx
import pytest

from domain_parser import source
from domain_parser.errors import SourceUnreachable

URL = "https://suffixes.test/list.dat"


def _respond(status, content=b""):
    def fake_get(url, **kwargs):
        return httpx.Response(status, content=content, request=httpx.Request("GET", url))

    return fake_get


def test_fetch_returns_body(monkeypatch):
    monkeypatch.setattr(source.httpx, "get", _respond(200, b"// ===BEGIN ICANN DOMAINS==="))

    assert source.fetch(URL) == b"// ===BEGIN ICANN DOMAINS==="


def test_fetch_http_error_status(monkeypatch):
    monkeypatch.setattr(source.httpx, "get", _respond(503))

    with pytest.raises(SourceUnreachable):
        source.fetch(URL)


def test_fetch_connection_error(monkeypatch):
    def fake_get(url, **kwargs):
        raise httpx.ConnectError("connection refused", request=httpx.Request("GET", url))

    monkeypatch.setattr(source.httpx, "get", fake_get)

    with pytest.raises(SourceUnreachable):
        source.fetch(URL, timeout=1.0)
