"""Shared fixtures: in-memory database, fast hashing, scripted terminal."""
import pytest

from bookshelf.catalog import BookCatalog
from bookshelf.database import Database
from bookshelf.directory import UserDirectory
from bookshelf.models import Author, BibliographicRecord

# Meets the strength policy: upper, lower, digit, symbol, 8+ chars
PASSWORD = "Secret#123"

# Lowest work factor bcrypt accepts, keeps the suite fast
FAST_ROUNDS = 4


class ScriptedConsole:
    """Console replacement that answers prompts from a list."""

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.output = []

    def read(self, prompt):
        self.output.append(prompt)
        if not self.answers:
            raise EOFError(f"No scripted answer for: {prompt}")
        return self.answers.pop(0)

    read_secret = read

    def write(self, message=""):
        self.output.append(message)

    def clear(self):
        pass

    @property
    def text(self):
        return "\n".join(self.output)


def make_record(isbn="9780306406157", title="Measurement Theory", authors=("Jane Doe",)):
    return BibliographicRecord(
        isbn=isbn,
        title=title,
        authors=[Author(name=name) for name in authors],
        publish_date="1990",
    )


@pytest.fixture
def db():
    database = Database(":memory:")
    database.init_schema()
    yield database
    database.close()


@pytest.fixture
def directory(db):
    return UserDirectory(db, rounds=FAST_ROUNDS)


@pytest.fixture
def catalog(db):
    return BookCatalog(db)


@pytest.fixture
def alice(directory):
    """Registered user id."""
    return directory.register("alice@example.com", "Alice", "Smith", PASSWORD)


@pytest.fixture
def bob(directory):
    return directory.register("bob@example.com", "Bob", "Jones", PASSWORD)
