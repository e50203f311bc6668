"""Collection operations driven from the user menu."""
import logging
from dataclasses import dataclass
from typing import Callable

from bookshelf import prompts
from bookshelf.catalog import BookCatalog
from bookshelf.console import Console
from bookshelf.display import format_books, format_record
from bookshelf.exceptions import ConflictError, NotFoundError, TransportError
from bookshelf.models import BibliographicRecord, User

logger = logging.getLogger(__name__)

Lookup = Callable[[str], BibliographicRecord]


@dataclass
class Session:
    """The logged-in user, passed to every collection operation."""
    user: User


class CatalogService:
    """Adds, lists and removes books in the current user's collection."""

    def __init__(self, catalog: BookCatalog, lookup: Lookup, console: Console):
        """
        Args:
            catalog: Book catalog storage
            lookup: Resolves an ISBN to a record (sync or async client)
            console: Terminal used for prompts and messages
        """
        self.catalog = catalog
        self.lookup = lookup
        self.console = console

    def show_collection(self, session: Session):
        books = self.catalog.list_for_user(session.user.user_id)
        self.console.write(format_books(books))

    def add_new_book_to_collection(self, session: Session) -> bool:
        """
        Ask for an ISBN, fetch its record and add it to the collection.

        Lookup and duplicate errors are reported and leave the collection
        unchanged.

        Returns:
            True if the book was added
        """
        self.console.clear()
        self.console.write("## Add Book to Collection ##")
        isbn = prompts.ask_isbn(self.console)

        try:
            record = self.lookup(isbn)
        except (NotFoundError, TransportError) as e:
            logger.warning(f"Lookup failed for ISBN {isbn}: {e}")
            self.console.write(f"Error fetching book information: {e}")
            return False

        self.console.write(format_record(record))

        try:
            book_id = self.catalog.add_to_library(session.user.user_id, isbn, record)
        except ConflictError as e:
            self.console.write(str(e))
            return False

        self.console.write(f"Added '{record.title}' to your collection (ID {book_id}).")
        return True

    def delete_book_from_collection(self, session: Session) -> bool:
        """
        Ask for a book ID and remove it from the collection after confirmation.

        An empty answer or 'q' cancels.

        Returns:
            True if a book was removed
        """
        user_id = session.user.user_id
        self.console.clear()
        self.console.write("## Delete Book from Collection ##")
        if prompts.ask_yes_no(self.console, "List your books first?"):
            self.show_collection(session)

        while True:
            answer = self.console.read("Enter the ID of the book to delete (or 'q' to cancel):")
            if answer.lower() in ("", "q"):
                self.console.write("Deletion cancelled.")
                return False

            try:
                book_id = int(answer)
            except ValueError:
                self.console.write("Invalid input. Please enter a numeric book ID.")
                continue

            if not self.catalog.exists(book_id):
                self.console.write(f"No book with ID {book_id} exists.")
                continue
            if not self.catalog.has_membership(user_id, book_id):
                self.console.write(f"Book {book_id} is not in your collection.")
                continue

            if not prompts.ask_yes_no(self.console, f"Delete book {book_id} from your collection?"):
                continue

            if self.catalog.remove_from_library(user_id, book_id):
                self.console.write(f"Book {book_id} removed from your collection.")
                return True
            self.console.write(f"Book {book_id} is not in your collection.")
