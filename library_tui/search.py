from __future__ import annotations

from enum import Enum

from library_tui.book import Book


class SearchCriteria(Enum):
    """Field a catalog search is performed against."""

    TITLE = "Title"
    AUTHOR = "Author"
    ISBN = "ISBN"

    def __str__(self) -> str:
        return self.value


def matches(criteria: SearchCriteria, book: Book, query: str) -> bool:
    """Return True if ``book`` matches ``query`` on the given field.

    - Title / Author: case-insensitive substring
    - ISBN: exact, case-sensitive equality (no normalization)
    """
    if criteria is SearchCriteria.TITLE:
        return query.lower() in book.title.lower()
    if criteria is SearchCriteria.AUTHOR:
        return query.lower() in book.author.lower()
    if criteria is SearchCriteria.ISBN:
        return book.isbn == query
    raise ValueError(f"Unknown search criteria: {criteria!r}")
