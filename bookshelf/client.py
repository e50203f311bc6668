"""HTTP client for the Open Library Books API."""
import requests
from typing import Optional, Dict, Any
import logging

from bookshelf.exceptions import NotFoundError, TransportError, ValidationError
from bookshelf.models import BibliographicRecord
from bookshelf.parse import parse_books_response
from bookshelf.validators import is_valid_isbn, normalize_isbn

logger = logging.getLogger(__name__)

BASE_URL = "https://openlibrary.org/api/books"


def build_params(isbn: str) -> Dict[str, str]:
    """Query parameters asking for the ``data`` view of one ISBN."""
    return {
        "bibkeys": f"ISBN:{isbn}",
        "format": "json",
        "jscmd": "data",
    }


def prepare_isbn(isbn: str) -> str:
    """Validate and normalize an ISBN before it is sent to the service."""
    if not is_valid_isbn(isbn):
        raise ValidationError(f"Invalid ISBN {isbn}")
    return normalize_isbn(isbn)


def record_from_response(isbn: str, payload: Optional[Dict[str, Any]]) -> BibliographicRecord:
    """Turn a decoded response into a record or raise NotFoundError."""
    record = parse_books_response(isbn, payload) if payload else None
    if record is None:
        raise NotFoundError(f"Book not found for ISBN {isbn}")
    return record


class OpenLibraryClient:
    """Client for the Open Library Books API."""

    def __init__(self, base_url: str = BASE_URL, timeout: int = 10):
        """
        Initialize Open Library client.

        Args:
            base_url: Books API endpoint
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

        # Create session for connection pooling
        self.session = requests.Session()

    def fetch(self, isbn: str) -> Optional[Dict[str, Any]]:
        """
        Request the raw Books API response for an ISBN.

        Args:
            isbn: Normalized ISBN

        Returns:
            Response JSON, or None if the service answered 404

        Raises:
            TransportError: On connection errors, timeouts and other bad statuses
        """
        logger.info(f"Requesting {self.base_url} for ISBN {isbn}")
        try:
            response = self.session.get(
                self.base_url,
                params=build_params(isbn),
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout looking up ISBN {isbn}")
            raise TransportError("Catalog service timed out") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed for ISBN {isbn}: {e}")
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

    def lookup(self, isbn: str) -> BibliographicRecord:
        """
        Resolve an ISBN to its bibliographic record.

        Raises:
            ValidationError: If the ISBN is invalid
            NotFoundError: If the catalog has no record for it
            TransportError: If the service could not be reached
        """
        isbn = prepare_isbn(isbn)
        return record_from_response(isbn, self.fetch(isbn))

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
