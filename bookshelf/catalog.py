"""Book catalog and per-user library membership."""
import logging
import sqlite3
from typing import List, Optional

from bookshelf.database import Database
from bookshelf.exceptions import ConflictError, StoreError, ValidationError
from bookshelf.models import BibliographicRecord, Book
from bookshelf.validators import is_valid_isbn, normalize_isbn

logger = logging.getLogger(__name__)

_BOOK_COLUMNS = "b.book_id, b.title, b.author, b.isbn"


def _row_to_book(row) -> Book:
    return Book(
        book_id=row["book_id"],
        title=row["title"],
        primary_author=row["author"],
        isbn=row["isbn"],
    )


class BookCatalog:
    """Canonical book rows plus the user/book membership table."""

    def __init__(self, db: Database):
        self.db = db

    def add_to_library(self, user_id: int, isbn: str, record: BibliographicRecord) -> int:
        """
        Add a book to a user's library.

        An existing book with the same ISBN is reused; otherwise a new book
        row is created from the record's title and first author. The book
        and membership writes share one transaction.

        Args:
            user_id: Owner of the library
            isbn: ISBN as entered (separators allowed)
            record: Metadata returned by the catalog service

        Returns:
            book_id of the (new or reused) book

        Raises:
            ValidationError: If the ISBN is invalid
            ConflictError: If the book is already in this user's library
        """
        if not is_valid_isbn(isbn):
            raise ValidationError(f"Invalid ISBN {isbn}")
        isbn = normalize_isbn(isbn)

        try:
            with self.db.transaction() as cur:
                cur.execute(
                    "SELECT book_id FROM books WHERE isbn = ? ORDER BY book_id LIMIT 1",
                    (isbn,),
                )
                row = cur.fetchone()
                if row is not None:
                    book_id = row["book_id"]
                else:
                    cur.execute(
                        "INSERT INTO books (title, author, isbn) VALUES (?, ?, ?)",
                        (record.title, record.primary_author, isbn),
                    )
                    book_id = cur.lastrowid
                cur.execute(
                    "INSERT INTO libraries (user_id, book_id) VALUES (?, ?)",
                    (user_id, book_id),
                )
        except sqlite3.IntegrityError as e:
            if "unique" not in str(e).lower():
                raise StoreError(f"Could not add book {isbn}: {e}") from e
            raise ConflictError(f"Book {isbn} is already in your collection") from e

        logger.info(f"Added book {book_id} (ISBN {isbn}) to library of user {user_id}")
        return book_id

    def list_for_user(self, user_id: int) -> List[Book]:
        """Return the books in a user's library, oldest addition first."""
        rows = self.db.query_all(
            f"""
            SELECT {_BOOK_COLUMNS}
            FROM libraries l
            JOIN books b ON b.book_id = l.book_id
            WHERE l.user_id = ?
            ORDER BY l.rowid
            """,
            (user_id,),
        )
        return [_row_to_book(row) for row in rows]

    def remove_from_library(self, user_id: int, book_id: int) -> bool:
        """
        Remove a book from one user's library.

        Only the membership is deleted; the book row and other users'
        memberships are kept.

        Returns:
            True if a membership was removed
        """
        with self.db.transaction() as cur:
            cur.execute(
                "DELETE FROM libraries WHERE user_id = ? AND book_id = ?",
                (user_id, book_id),
            )
            removed = cur.rowcount > 0

        if removed:
            logger.info(f"Removed book {book_id} from library of user {user_id}")
        else:
            logger.info(f"User {user_id} has no book {book_id} to remove")
        return removed

    def exists(self, book_id: int) -> bool:
        """Check whether any book with this ID exists in the catalog."""
        row = self.db.query_one(
            "SELECT EXISTS(SELECT 1 FROM books WHERE book_id = ?)", (book_id,)
        )
        return bool(row[0])

    def has_membership(self, user_id: int, book_id: int) -> bool:
        """Check whether the book is in this user's library."""
        row = self.db.query_one(
            "SELECT EXISTS(SELECT 1 FROM libraries WHERE user_id = ? AND book_id = ?)",
            (user_id, book_id),
        )
        return bool(row[0])

    def find_by_isbn(self, isbn: str) -> Optional[Book]:
        row = self.db.query_one(
            f"SELECT {_BOOK_COLUMNS} FROM books b WHERE b.isbn = ? ORDER BY b.book_id LIMIT 1",
            (normalize_isbn(isbn),),
        )
        return _row_to_book(row) if row else None
