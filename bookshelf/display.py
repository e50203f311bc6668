"""Text rendering of books and catalog records."""
import json
from dataclasses import asdict
from typing import List

from tabulate import tabulate

from bookshelf.models import BibliographicRecord, Book

NOT_AVAILABLE = "Not available"


def _clip(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


def format_books(books: List[Book], format_type: str = "table") -> str:
    """
    Render a user's books.

    Args:
        books: Books to show
        format_type: "table" for a grid, "compact" for one line per book

    Returns:
        Printable text
    """
    if not books:
        return "No books in your collection."

    if format_type == "compact":
        return "\n".join(
            f"{book.book_id}. {book.title} - {book.primary_author}" for book in books
        )

    headers = ["ID", "Title", "Author", "ISBN"]
    rows = [
        [book.book_id, _clip(book.title, 50), _clip(book.primary_author, 30), book.isbn]
        for book in books
    ]
    return tabulate(rows, headers=headers, tablefmt="grid")


def format_record(record: BibliographicRecord) -> str:
    """Render every field of a catalog record."""
    lines = [
        f"ISBN: {record.isbn}",
        f"Title: {record.title}",
        f"Author(s): {record.authors_str}",
        f"Publish Date: {record.publish_date or NOT_AVAILABLE}",
        f"Number of Pages: {record.number_of_pages or NOT_AVAILABLE}",
    ]

    if record.cover is not None:
        lines.append("Cover URLs:")
        for size in ("small", "medium", "large"):
            url = record.cover_by_size(size)
            if url:
                lines.append(f"  {size.capitalize()}: {url}")
    else:
        lines.append(f"Cover URLs: {NOT_AVAILABLE}")

    lines.append(f"Subjects: {record.subjects_str}")
    lines.append(f"Publishers: {record.publishers_str}")
    return "\n".join(lines)


def record_to_json(record: BibliographicRecord) -> str:
    return json.dumps(asdict(record), indent=2)
