"""SQLite storage for users, credentials and book collections."""
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import logging

from bookshelf.exceptions import StoreError

logger = logging.getLogger(__name__)

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS users (
        user_id INTEGER PRIMARY KEY,
        email TEXT NOT NULL UNIQUE COLLATE NOCASE,
        firstname TEXT NOT NULL,
        lastname TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS passwords (
        user_id INTEGER UNIQUE,
        password TEXT NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(user_id)
        ON DELETE CASCADE
        ON UPDATE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS salts (
        user_id INTEGER UNIQUE,
        salt TEXT NOT NULL,
        FOREIGN KEY (user_id) REFERENCES users(user_id)
        ON DELETE CASCADE
        ON UPDATE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS admins (
        user_id INTEGER UNIQUE,
        FOREIGN KEY (user_id) REFERENCES users(user_id)
        ON DELETE CASCADE
        ON UPDATE CASCADE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS books (
        book_id INTEGER PRIMARY KEY,
        title TEXT NOT NULL,
        author TEXT NOT NULL,
        isbn TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS libraries (
        user_id INTEGER NOT NULL,
        book_id INTEGER NOT NULL,
        UNIQUE (user_id, book_id),
        FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
        FOREIGN KEY (book_id) REFERENCES books(book_id) ON DELETE CASCADE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_books_isbn ON books (isbn)",
    "CREATE INDEX IF NOT EXISTS idx_libraries_user ON libraries (user_id)",
)


class Database:
    """Single-connection SQLite datastore."""

    def __init__(self, path: str):
        """
        Open the database file.

        Args:
            path: SQLite file path, or ":memory:"
        """
        self.path = path
        try:
            self.connection = sqlite3.connect(path)
            self.connection.row_factory = sqlite3.Row
            self.connection.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            raise StoreError(f"Could not open database {path}: {e}") from e
        logger.info(f"Opened database {path}")

    def init_schema(self):
        """Create database tables if they don't exist."""
        with self.transaction() as cur:
            for statement in SCHEMA:
                cur.execute(statement)
        logger.info("Database schema initialized successfully")

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """
        Run a block of statements atomically.

        Commits when the block finishes and rolls back if it raises.
        Integrity violations are re-raised unchanged so callers can map
        them to domain errors; every other sqlite3 error becomes StoreError.
        """
        cur = self.connection.cursor()
        try:
            yield cur
            self.connection.commit()
        except sqlite3.IntegrityError:
            self.connection.rollback()
            raise
        except sqlite3.Error as e:
            self.connection.rollback()
            logger.error(f"Transaction failed: {e}")
            raise StoreError(f"Database operation failed: {e}") from e
        except BaseException:
            self.connection.rollback()
            raise
        finally:
            cur.close()

    def query_one(self, sql: str, params=()) -> sqlite3.Row:
        """Fetch a single row (or None) outside of a write transaction."""
        try:
            return self.connection.execute(sql, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Database query failed: {e}") from e

    def query_all(self, sql: str, params=()) -> list:
        try:
            return self.connection.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Database query failed: {e}") from e

    def close(self):
        """Close the connection."""
        self.connection.close()
        logger.info("Database connection closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
