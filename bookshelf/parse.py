"""Parse and normalize Open Library Books API responses."""
from typing import Dict, Any, List, Optional
import logging

from bookshelf.models import (
    Author,
    BibliographicRecord,
    Cover,
    Publisher,
    Subject,
    WorkLink,
)

logger = logging.getLogger(__name__)


def _named(items: Any, cls) -> List:
    """Build ``cls(name=...)`` objects from a list of ``{"name": ...}`` dicts."""
    if not isinstance(items, list):
        return []
    return [
        cls(name=item["name"])
        for item in items
        if isinstance(item, dict) and isinstance(item.get("name"), str) and item["name"]
    ]


def _parse_cover(data: Any) -> Optional[Cover]:
    if not isinstance(data, dict):
        return None
    cover = Cover(
        small=data.get("small"),
        medium=data.get("medium"),
        large=data.get("large"),
    )
    if not (cover.small or cover.medium or cover.large):
        return None
    return cover


def _parse_pages(value: Any) -> Optional[int]:
    try:
        pages = int(value)
    except (TypeError, ValueError):
        return None
    return pages if pages > 0 else None


def parse_record(isbn: str, data: Dict[str, Any]) -> Optional[BibliographicRecord]:
    """
    Parse a single ``jscmd=data`` entry from the Open Library Books API.

    Args:
        isbn: Normalized ISBN the entry was requested for
        data: Value stored under the ``ISBN:<isbn>`` key

    Returns:
        BibliographicRecord, or None if the entry has no title
    """
    if not isinstance(data, dict):
        return None

    title = data.get("title")
    if not title:
        logger.warning(f"Catalog entry for {isbn} has no title")
        return None

    works = [
        WorkLink(key=item["key"])
        for item in data.get("works") or []
        if isinstance(item, dict) and item.get("key")
    ]

    return BibliographicRecord(
        isbn=isbn,
        title=title,
        authors=_named(data.get("authors"), Author),
        publish_date=data.get("publish_date"),
        number_of_pages=_parse_pages(data.get("number_of_pages")),
        cover=_parse_cover(data.get("cover")),
        works=works,
        subjects=_named(data.get("subjects"), Subject),
        publishers=_named(data.get("publishers"), Publisher),
    )


def parse_books_response(isbn: str, response_json: Dict[str, Any]) -> Optional[BibliographicRecord]:
    """
    Pick the entry for one ISBN out of a full Books API response.

    Args:
        isbn: Normalized ISBN that was requested
        response_json: Complete API response JSON

    Returns:
        BibliographicRecord or None if the ISBN is not in the response
    """
    if not isinstance(response_json, dict):
        return None
    return parse_record(isbn, response_json.get(f"ISBN:{isbn}"))
