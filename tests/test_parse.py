"""Tests for parsing functions."""
from bookshelf.parse import parse_record, parse_books_response

ISBN = "9780306406157"


def test_parse_record_complete():
    """Test parsing a record with all fields present."""
    data = {
        "title": "Measurement Theory",
        "authors": [{"name": "Jane Doe", "url": "https://openlibrary.org/authors/OL1A"},
                    {"name": "John Roe"}],
        "publish_date": "1990",
        "number_of_pages": 544,
        "cover": {
            "small": "https://covers.openlibrary.org/b/id/1-S.jpg",
            "medium": "https://covers.openlibrary.org/b/id/1-M.jpg",
            "large": "https://covers.openlibrary.org/b/id/1-L.jpg"
        },
        "works": [{"key": "/works/OL1W"}],
        "subjects": [{"name": "Physics"}, {"name": "Measurement"}],
        "publishers": [{"name": "Plenum"}]
    }

    record = parse_record(ISBN, data)

    assert record is not None
    assert record.isbn == ISBN
    assert record.title == "Measurement Theory"
    assert [a.name for a in record.authors] == ["Jane Doe", "John Roe"]
    assert record.primary_author == "Jane Doe"
    assert record.number_of_pages == 544
    assert record.cover_by_size("large").endswith("1-L.jpg")
    assert record.works[0].key == "/works/OL1W"
    assert record.subjects_str == "Physics, Measurement"
    assert record.publishers_str == "Plenum"


def test_parse_record_missing_fields():
    """Test parsing a record with missing optional fields."""
    record = parse_record(ISBN, {"title": "Mystery Book"})

    assert record is not None
    assert record.title == "Mystery Book"
    assert record.authors == []
    assert record.primary_author == "Unknown Author"
    assert record.publish_date is None
    assert record.number_of_pages is None
    assert record.cover is None
    assert record.works == []
    assert record.cover_by_size("small") is None


def test_parse_record_tolerates_bad_shapes():
    """Test that malformed optional fields are ignored."""
    data = {
        "title": "Odd Book",
        "authors": ["Jane Doe", {"url": "x"}, {"name": "Real Author"}],
        "number_of_pages": "n/a",
        "cover": "not-a-dict",
        "subjects": None,
    }

    record = parse_record(ISBN, data)

    assert [a.name for a in record.authors] == ["Real Author"]
    assert record.number_of_pages is None
    assert record.cover is None
    assert record.subjects == []


def test_parse_record_no_title():
    """Test that an entry without a title returns None."""
    assert parse_record(ISBN, {"authors": [{"name": "Someone"}]}) is None
    assert parse_record(ISBN, None) is None


def test_parse_books_response():
    """Test picking the requested ISBN out of a full response."""
    response = {f"ISBN:{ISBN}": {"title": "Book 1"}}

    record = parse_books_response(ISBN, response)

    assert record.title == "Book 1"
    assert parse_books_response("0306406152", response) is None
    assert parse_books_response(ISBN, {}) is None
