"""Tests for the sync and async catalog clients (no network)."""
import asyncio
from unittest.mock import MagicMock

import httpx
import pytest
import requests

from bookshelf.async_client import AsyncOpenLibraryClient
from bookshelf.client import OpenLibraryClient
from bookshelf.exceptions import NotFoundError, TransportError, ValidationError

ISBN = "9780306406157"
PAYLOAD = {f"ISBN:{ISBN}": {"title": "Measurement Theory", "authors": [{"name": "Jane Doe"}]}}


class FakeResponse:
    def __init__(self, status_code, json_data=None):
        self.status_code = status_code
        self._json = json_data

    def json(self):
        if self._json is None:
            raise ValueError("No JSON")
        return self._json


@pytest.fixture
def client():
    with OpenLibraryClient(base_url="https://catalog.test/api/books", timeout=5) as c:
        yield c


def test_lookup_success(client):
    """Test a found ISBN with separators in the input."""
    client.session.get = MagicMock(return_value=FakeResponse(200, PAYLOAD))

    record = client.lookup("978-0-306-40615-7")

    assert record.title == "Measurement Theory"
    assert record.primary_author == "Jane Doe"
    client.session.get.assert_called_once_with(
        "https://catalog.test/api/books",
        params={"bibkeys": f"ISBN:{ISBN}", "format": "json", "jscmd": "data"},
        timeout=5,
    )


def test_lookup_not_found(client):
    """Test the empty object Open Library returns for unknown ISBNs."""
    client.session.get = MagicMock(return_value=FakeResponse(200, {}))
    with pytest.raises(NotFoundError):
        client.lookup(ISBN)

    client.session.get = MagicMock(return_value=FakeResponse(404))
    with pytest.raises(NotFoundError):
        client.lookup(ISBN)


def test_lookup_server_error(client):
    """Test that bad statuses become TransportError."""
    client.session.get = MagicMock(return_value=FakeResponse(503))

    with pytest.raises(TransportError) as exc_info:
        client.lookup(ISBN)
    assert exc_info.value.status_code == 503


def test_lookup_connection_error(client):
    """Test network failures."""
    client.session.get = MagicMock(side_effect=requests.exceptions.ConnectionError("down"))
    with pytest.raises(TransportError):
        client.lookup(ISBN)

    client.session.get = MagicMock(side_effect=requests.exceptions.Timeout())
    with pytest.raises(TransportError):
        client.lookup(ISBN)


def test_lookup_invalid_json(client):
    client.session.get = MagicMock(return_value=FakeResponse(200))
    with pytest.raises(TransportError):
        client.lookup(ISBN)


def test_invalid_isbn_is_not_sent(client):
    """Test that validation happens before any request."""
    client.session.get = MagicMock()

    with pytest.raises(ValidationError):
        client.lookup("123456789")
    client.session.get.assert_not_called()


def _run_async_lookup(handler, isbn=ISBN):
    async def run():
        transport = httpx.MockTransport(handler)
        async with AsyncOpenLibraryClient(base_url="https://catalog.test/api/books",
                                          transport=transport) as client:
            return await client.lookup(isbn)

    return asyncio.run(run())


def test_async_lookup_success():
    """Test the httpx client against a mocked transport."""
    def handler(request):
        assert request.url.params["bibkeys"] == f"ISBN:{ISBN}"
        assert request.url.params["jscmd"] == "data"
        return httpx.Response(200, json=PAYLOAD)

    record = _run_async_lookup(handler, "978-0-306-40615-7")

    assert record.isbn == ISBN
    assert record.title == "Measurement Theory"


def test_async_lookup_not_found():
    with pytest.raises(NotFoundError):
        _run_async_lookup(lambda request: httpx.Response(200, json={}))


def test_async_lookup_errors():
    """Test status and connection failures on the async client."""
    with pytest.raises(TransportError):
        _run_async_lookup(lambda request: httpx.Response(500))

    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        _run_async_lookup(refuse)
