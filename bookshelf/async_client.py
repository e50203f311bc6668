"""Async HTTP client for the Open Library Books API."""
import asyncio
import httpx
from typing import Optional, Dict, Any
import logging

from bookshelf.client import BASE_URL, build_params, prepare_isbn, record_from_response
from bookshelf.exceptions import TransportError
from bookshelf.models import BibliographicRecord

logger = logging.getLogger(__name__)


class AsyncOpenLibraryClient:
    """Async client for ISBN lookups."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: int = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            base_url: Books API endpoint
            timeout: Request timeout
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self.timeout = timeout

        # Create async HTTP client
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def fetch(self, isbn: str) -> Optional[Dict[str, Any]]:
        """
        Request the raw Books API response for an ISBN.

        Returns:
            Response JSON, or None if the service answered 404
        """
        logger.info(f"Async request for ISBN {isbn}")
        try:
            response = await self.client.get(self.base_url, params=build_params(isbn))
        except httpx.TimeoutException as e:
            logger.error(f"Timeout looking up ISBN {isbn}")
            raise TransportError("Catalog service timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Async request failed for ISBN {isbn}: {e}")
            raise TransportError(f"Catalog service unreachable: {e}") from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} for ISBN {isbn}")
            raise TransportError(
                f"Catalog service returned HTTP {response.status_code}",
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError("Catalog service returned invalid JSON") from e

    async def lookup(self, isbn: str) -> BibliographicRecord:
        """Resolve an ISBN to its bibliographic record."""
        isbn = prepare_isbn(isbn)
        return record_from_response(isbn, await self.fetch(isbn))

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()


def lookup_blocking(isbn: str, base_url: str = BASE_URL, timeout: int = 10) -> BibliographicRecord:
    """
    Run one async lookup to completion from synchronous code.

    The interactive loop waits on the result; nothing else runs meanwhile.
    """
    async def _run():
        async with AsyncOpenLibraryClient(base_url=base_url, timeout=timeout) as client:
            return await client.lookup(isbn)

    return asyncio.run(_run())
