"""Data models for users, books and catalog records."""
from dataclasses import dataclass, field
from typing import Optional, List

UNKNOWN_AUTHOR = "Unknown Author"


@dataclass
class User:
    """Authenticated user profile."""
    user_id: int
    email: str
    firstname: str
    lastname: str
    is_admin: bool = False


@dataclass
class Book:
    """Book row as stored in the local catalog."""
    book_id: int
    title: str
    primary_author: str
    isbn: str


@dataclass
class Author:
    name: str


@dataclass
class Subject:
    name: str


@dataclass
class Publisher:
    name: str


@dataclass
class WorkLink:
    key: str


@dataclass
class Cover:
    small: Optional[str] = None
    medium: Optional[str] = None
    large: Optional[str] = None


@dataclass
class BibliographicRecord:
    """Book metadata returned by the catalog service."""
    isbn: str
    title: str
    authors: List[Author] = field(default_factory=list)
    publish_date: Optional[str] = None
    number_of_pages: Optional[int] = None
    cover: Optional[Cover] = None
    works: List[WorkLink] = field(default_factory=list)
    subjects: List[Subject] = field(default_factory=list)
    publishers: List[Publisher] = field(default_factory=list)

    @property
    def primary_author(self) -> str:
        """First listed author, the one persisted with the book."""
        return self.authors[0].name if self.authors else UNKNOWN_AUTHOR

    @property
    def authors_str(self) -> str:
        """Format authors as comma-separated string."""
        return ", ".join(a.name for a in self.authors) if self.authors else "Not available"

    @property
    def subjects_str(self) -> str:
        return ", ".join(s.name for s in self.subjects) if self.subjects else "Not available"

    @property
    def publishers_str(self) -> str:
        return ", ".join(p.name for p in self.publishers) if self.publishers else "Not available"

    def cover_by_size(self, size: str) -> Optional[str]:
        """Return the cover URL for 'small', 'medium' or 'large'."""
        if self.cover is None:
            return None
        return {
            "small": self.cover.small,
            "medium": self.cover.medium,
            "large": self.cover.large,
        }.get(size.lower())
