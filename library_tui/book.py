from __future__ import annotations

from enum import Enum


class Genre(str, Enum):
    """Closed set of genres. Values are the tags written to the catalog file."""

    FICTION = "Fiction"
    NON_FICTION = "NonFiction"
    SCIENCE_FICTION = "ScienceFiction"
    MYSTERY = "Mystery"

    @property
    def label(self) -> str:
        return _GENRE_LABELS[self]


class Status(str, Enum):
    """Availability of a single copy."""

    AVAILABLE = "Available"
    CHECKED_OUT = "CheckedOut"
    LOST = "Lost"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_GENRE_LABELS = {
    Genre.FICTION: "Fiction",
    Genre.NON_FICTION: "Non-Fiction",
    Genre.SCIENCE_FICTION: "Science Fiction",
    Genre.MYSTERY: "Mystery",
}

_STATUS_LABELS = {
    Status.AVAILABLE: "Available",
    Status.CHECKED_OUT: "Checked Out",
    Status.LOST: "Lost",
}


class Book:
    """Represents a single book item in the library."""

    def __init__(self, title: str, author: str, isbn: str, publication_year: int,
                 genre: Genre, status: Status = Status.AVAILABLE) -> None:
        self.title = title
        self.author = author
        self.isbn = isbn
        self.publication_year = publication_year
        self.genre = genre
        self.status = status

    def __repr__(self) -> str:
        return f"Book(title={self.title!r}, isbn={self.isbn!r}, status={self.status.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @property
    def is_available(self) -> bool:
        return self.status is Status.AVAILABLE

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "publication_year": self.publication_year,
            "genre": self.genre.value,
            "status": self.status.value,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Enum tags are the symbolic variant names ("NonFiction", "CheckedOut")
        return Book(
            title=data["title"],
            author=data["author"],
            isbn=data["isbn"],
            publication_year=int(data["publication_year"]),
            genre=Genre(data["genre"]),
            status=Status(data.get("status", Status.AVAILABLE.value)),
        )
