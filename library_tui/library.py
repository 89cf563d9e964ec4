import logging
from typing import List, Optional

from library_tui.book import Book, Genre, Status
from library_tui.search import SearchCriteria, matches

logger = logging.getLogger(__name__)


class Library:
    """Manages the in-memory collection of books and its owner."""

    def __init__(self, owner: str, books: Optional[List[Book]] = None) -> None:
        self._owner = owner
        self.books: List[Book] = list(books or [])

    @property
    def owner(self) -> str:
        return self._owner

    # ------------------------- Core operations ------------------------- #
    def add_book(self, book: Book) -> None:
        """Append a pre-constructed Book. ISBN uniqueness is not enforced."""
        self.books.append(book)

    def list_books(self) -> List[Book]:
        return list(self.books)

    def find_book(self, isbn: str) -> Optional[Book]:
        for book in self.books:
            if book.isbn == isbn:
                return book
        return None

    def search(self, criteria: SearchCriteria, query: str) -> Optional[Book]:
        """Return the first book, in catalog order, matching ``query`` on ``criteria``."""
        if not query:
            return None
        for book in self.books:
            if matches(criteria, book, query):
                return book
        return None

    def checkout(self, isbn: str) -> None:
        """Mark the book with ``isbn`` as checked out.

        Raises CheckoutNotFound if no book has this ISBN and CheckoutUnavailable
        if the book is not Available. The catalog is left untouched on failure.
        """
        book = self.find_book(isbn)
        if book is None:
            logger.info("Checkout failed, ISBN %s not found", isbn)
            raise CheckoutNotFound("Book not found!")
        if not book.is_available:
            logger.info("Checkout failed, %s is %s", isbn, book.status.value)
            raise CheckoutUnavailable("Book is not available!")
        book.status = Status.CHECKED_OUT
        logger.info("Checked out %s (%s)", book.title, isbn)

    @classmethod
    def initialize_demo(cls, owner: str) -> "Library":
        """Seed a fresh library with the three demo books."""
        library = cls(owner)
        library.add_book(Book("The Great Gatsby", "F. Scott Fitzgerald", "9780743273565", 1925, Genre.FICTION))
        library.add_book(Book("To Kill a Mockingbird", "Harper Lee", "9780061120084", 1960, Genre.FICTION))
        library.add_book(Book("1984", "George Orwell", "9780451524935", 1949, Genre.SCIENCE_FICTION))
        logger.info("Seeded demo library for owner %r", owner)
        return library

    # ------------------------- Serialization ------------------------- #
    def to_dict(self) -> dict:
        return {"books": [b.to_dict() for b in self.books], "owner": self._owner}

    @staticmethod
    def from_dict(data: dict) -> "Library":
        return Library(owner=data["owner"], books=[Book.from_dict(b) for b in data["books"]])


class CheckoutError(Exception):
    """A checkout could not be performed."""


class CheckoutNotFound(CheckoutError):
    pass


class CheckoutUnavailable(CheckoutError):
    pass
